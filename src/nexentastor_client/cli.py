"""Command-line interface for interacting with NexentaStor appliances."""
from __future__ import annotations

import json
import os
from collections.abc import Mapping, Sequence
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any

import typer

try:  # pragma: no cover - exercised in runtime environments
    from rich import box
    from rich.console import Console
    from rich.table import Table
except ImportError as exc:  # pragma: no cover - optional dependency guard
    raise RuntimeError(
        "The CLI requires Rich for table rendering. Install the CLI extras via "
        "'pip install nexentastor-client[cli]' to enable this command."
    ) from exc

from . import NexentaStorClient
from .auth.login import LoginAuth
from .auth.token import TokenAuth
from .cli_schema import CLI_TABLE_VIEWS, TableView
from .exceptions import NexentaStorError

app = typer.Typer(help="NexentaStor storage management CLI.", no_args_is_help=True)

filesystems_app = typer.Typer(help="Filesystem operations.")
volumes_app = typer.Typer(help="Volume operations.")
snapshots_app = typer.Typer(help="Snapshot operations.")
mappings_app = typer.Typer(help="LUN mapping operations.")
system_app = typer.Typer(help="Appliance-wide operations.")
app.add_typer(filesystems_app, name="filesystems")
app.add_typer(volumes_app, name="volumes")
app.add_typer(snapshots_app, name="snapshots")
app.add_typer(mappings_app, name="mappings")
app.add_typer(system_app, name="system")


def _build_client(
    base_url: str,
    username: str | None,
    password: str | None,
    token: str | None,
    verify_ssl: bool,
    cert_path: Path | None,
    timeout: float,
) -> NexentaStorClient:
    if token:
        strategy: TokenAuth | LoginAuth = TokenAuth(token=token)
    else:
        if not username or not password:
            raise typer.BadParameter("--username and --password are required without --token.")
        strategy = LoginAuth(username=username, password=password)

    verify_target: bool | str
    if cert_path:
        expanded_cert = cert_path.expanduser()
        if not expanded_cert.exists():
            raise typer.BadParameter("Certificate file not found for --cert option.")
        if not verify_ssl:
            raise typer.BadParameter("Cannot combine --cert with --no-verify.")
        verify_target = str(expanded_cert)
    else:
        verify_target = verify_ssl

    client = NexentaStorClient(
        base_url=base_url,
        auth_strategy=strategy,
        verify_ssl=verify_target,
        timeout=timeout,
    )
    if isinstance(strategy, LoginAuth):
        try:
            client.login()
        except NexentaStorError as exc:
            client.close()
            _handle_error(exc)
    return client


def _to_rows(payload: Any) -> Any:
    if is_dataclass(payload) and not isinstance(payload, type):
        return asdict(payload)
    if isinstance(payload, (list, tuple)):
        return [_to_rows(item) for item in payload]
    return payload


def _echo_json(payload: Any) -> None:
    typer.echo(json.dumps(_to_rows(payload), indent=2))


console = Console(force_terminal=False, color_system=None)


def _render_rich_table(view: TableView, rows: Sequence[Mapping[str, Any]]) -> None:
    table = Table(
        title=view.title,
        box=box.SIMPLE,
        show_lines=False,
        header_style="bold cyan",
    )
    for column in view.columns:
        table.add_column(column.header, justify=column.justify)
    ordered_rows = list(rows)
    if view.sort_key:
        ordered_rows.sort(key=view.sort_key)
    for row in ordered_rows:
        table.add_row(*(column.render(row) for column in view.columns))
    console.print(table)


def _present_output(payload: Any, *, view_id: str | None, json_output: bool) -> None:
    rows_payload = _to_rows(payload)
    if json_output or view_id is None:
        _echo_json(rows_payload)
        return
    view = CLI_TABLE_VIEWS.get(view_id)
    if not view or not isinstance(rows_payload, list):
        _echo_json(rows_payload)
        return
    rows = [item for item in rows_payload if isinstance(item, Mapping)]
    if not rows:
        _echo_json(rows_payload)
        return
    _render_rich_table(view, rows)


def _handle_error(exc: NexentaStorError) -> None:
    if exc.status_code is not None:
        message = f"Request failed (status {exc.status_code}): {exc}"
    else:
        message = f"Request failed: {exc}"
    if exc.details and isinstance(exc.details, str):
        message += f"\nDetails: {exc.details}"
    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _echo_next_token(next_token: str) -> None:
    if next_token:
        typer.echo(f"Next token: {next_token}", err=True)


def _shared_options() -> dict[str, Any]:  # pragma: no cover - helper indirection
    # Respect NEXENTASTOR_VERIFY_SSL when present (1/0, true/false, yes/no).
    env_verify = os.getenv("NEXENTASTOR_VERIFY_SSL")
    if env_verify is None:
        default_verify = True
    else:
        default_verify = env_verify.strip().lower() not in {"0", "false", "no", "off"}

    return {
        "base_url": typer.Option(
            ...,
            "--base-url",
            envvar="NEXENTASTOR_BASE_URL",
            help="NexentaStor API address (https://host:8443 or host[:port]).",
        ),
        "username": typer.Option(
            None,
            "--username",
            "-u",
            envvar="NEXENTASTOR_USERNAME",
            help="Appliance username used to log in.",
        ),
        "password": typer.Option(
            None,
            "--password",
            "-p",
            envvar="NEXENTASTOR_PASSWORD",
            help="Appliance password used to log in.",
            hide_input=True,
        ),
        "token": typer.Option(
            None,
            "--token",
            envvar="NEXENTASTOR_TOKEN",
            help="Already issued bearer token (skips login).",
        ),
        "verify_ssl": typer.Option(
            default_verify,
            "--verify/--no-verify",
            envvar="NEXENTASTOR_VERIFY_SSL",
            help="Enable or disable TLS certificate verification.",
            show_default=True,
        ),
        "cert_path": typer.Option(
            None,
            "--cert",
            envvar="NEXENTASTOR_CA_CERT",
            help="Path to a custom CA bundle for TLS verification.",
        ),
        "timeout": typer.Option(30.0, help="Request timeout (seconds).", show_default=True),
        "output_json": typer.Option(
            False,
            "--json",
            "-j",
            help="Return raw JSON instead of rendering a table.",
        ),
        "starting_token": typer.Option(
            "",
            "--starting-token",
            help="Path of the last item already seen; listing resumes after it.",
        ),
        "limit": typer.Option(
            0,
            "--limit",
            min=0,
            help="Maximum number of items to return (0 lists everything).",
        ),
        "destroy_snapshots": typer.Option(
            False,
            "--snapshots/--no-snapshots",
            help="Destroy the resource's snapshots as well.",
            show_default=True,
        ),
        "promote_clone": typer.Option(
            False,
            "--promote-clone/--no-promote-clone",
            help="Promote the most recent clone if clones block the destroy.",
            show_default=True,
        ),
    }


_SHARED_OPTIONS = _shared_options()


@filesystems_app.command("list")
def filesystems_list(
    parent: str = typer.Argument(..., help="Parent filesystem path, e.g. pool/dataset."),
    base_url: str = _SHARED_OPTIONS["base_url"],
    username: str | None = _SHARED_OPTIONS["username"],
    password: str | None = _SHARED_OPTIONS["password"],
    token: str | None = _SHARED_OPTIONS["token"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    starting_token: str = _SHARED_OPTIONS["starting_token"],
    limit: int = _SHARED_OPTIONS["limit"],
    output_json: bool = _SHARED_OPTIONS["output_json"],
) -> None:
    """List the child filesystems of PARENT."""

    with _build_client(
        base_url=base_url,
        username=username,
        password=password,
        token=token,
        verify_ssl=verify_ssl,
        cert_path=cert_path,
        timeout=timeout,
    ) as client:
        try:
            filesystems, next_token = client.filesystems.list_with_starting_token(
                parent, starting_token, limit
            )
        except NexentaStorError as exc:
            _handle_error(exc)
            return
    _present_output(filesystems, view_id="filesystems.list", json_output=output_json)
    _echo_next_token(next_token)


@filesystems_app.command("destroy")
def filesystems_destroy(
    path: str = typer.Argument(..., help="Filesystem path, e.g. pool/dataset/fs."),
    base_url: str = _SHARED_OPTIONS["base_url"],
    username: str | None = _SHARED_OPTIONS["username"],
    password: str | None = _SHARED_OPTIONS["password"],
    token: str | None = _SHARED_OPTIONS["token"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    destroy_snapshots: bool = _SHARED_OPTIONS["destroy_snapshots"],
    promote_clone: bool = _SHARED_OPTIONS["promote_clone"],
) -> None:
    """Destroy the filesystem at PATH."""

    with _build_client(
        base_url=base_url,
        username=username,
        password=password,
        token=token,
        verify_ssl=verify_ssl,
        cert_path=cert_path,
        timeout=timeout,
    ) as client:
        try:
            client.filesystems.destroy(
                path,
                destroy_snapshots=destroy_snapshots,
                promote_most_recent_clone=promote_clone,
            )
        except NexentaStorError as exc:
            _handle_error(exc)
            return
    typer.secho(f"Filesystem '{path}' destroyed.", fg=typer.colors.GREEN)


@volumes_app.command("list")
def volumes_list(
    parent: str = typer.Argument(..., help="Parent volume group path, e.g. pool/vg."),
    base_url: str = _SHARED_OPTIONS["base_url"],
    username: str | None = _SHARED_OPTIONS["username"],
    password: str | None = _SHARED_OPTIONS["password"],
    token: str | None = _SHARED_OPTIONS["token"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    starting_token: str = _SHARED_OPTIONS["starting_token"],
    limit: int = _SHARED_OPTIONS["limit"],
    output_json: bool = _SHARED_OPTIONS["output_json"],
) -> None:
    """List the volumes of volume group PARENT."""

    with _build_client(
        base_url=base_url,
        username=username,
        password=password,
        token=token,
        verify_ssl=verify_ssl,
        cert_path=cert_path,
        timeout=timeout,
    ) as client:
        try:
            volumes, next_token = client.volumes.list_with_starting_token(
                parent, starting_token, limit
            )
        except NexentaStorError as exc:
            _handle_error(exc)
            return
    _present_output(volumes, view_id="volumes.list", json_output=output_json)
    _echo_next_token(next_token)


@volumes_app.command("destroy")
def volumes_destroy(
    path: str = typer.Argument(..., help="Volume path, e.g. pool/vg/vol."),
    base_url: str = _SHARED_OPTIONS["base_url"],
    username: str | None = _SHARED_OPTIONS["username"],
    password: str | None = _SHARED_OPTIONS["password"],
    token: str | None = _SHARED_OPTIONS["token"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    destroy_snapshots: bool = _SHARED_OPTIONS["destroy_snapshots"],
    promote_clone: bool = _SHARED_OPTIONS["promote_clone"],
) -> None:
    """Destroy the volume at PATH."""

    with _build_client(
        base_url=base_url,
        username=username,
        password=password,
        token=token,
        verify_ssl=verify_ssl,
        cert_path=cert_path,
        timeout=timeout,
    ) as client:
        try:
            client.volumes.destroy(
                path,
                destroy_snapshots=destroy_snapshots,
                promote_most_recent_clone=promote_clone,
            )
        except NexentaStorError as exc:
            _handle_error(exc)
            return
    typer.secho(f"Volume '{path}' destroyed.", fg=typer.colors.GREEN)


@snapshots_app.command("list")
def snapshots_list(
    parent: str = typer.Argument(..., help="Filesystem or volume path."),
    recursive: bool = typer.Option(False, "--recursive/--no-recursive", show_default=True),
    base_url: str = _SHARED_OPTIONS["base_url"],
    username: str | None = _SHARED_OPTIONS["username"],
    password: str | None = _SHARED_OPTIONS["password"],
    token: str | None = _SHARED_OPTIONS["token"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    output_json: bool = _SHARED_OPTIONS["output_json"],
) -> None:
    """List the snapshots of PARENT."""

    with _build_client(
        base_url=base_url,
        username=username,
        password=password,
        token=token,
        verify_ssl=verify_ssl,
        cert_path=cert_path,
        timeout=timeout,
    ) as client:
        try:
            snapshots = client.snapshots.list(parent, recursive=recursive)
        except NexentaStorError as exc:
            _handle_error(exc)
            return
    _present_output(snapshots, view_id="snapshots.list", json_output=output_json)


@mappings_app.command("list")
def mappings_list(
    base_url: str = _SHARED_OPTIONS["base_url"],
    username: str | None = _SHARED_OPTIONS["username"],
    password: str | None = _SHARED_OPTIONS["password"],
    token: str | None = _SHARED_OPTIONS["token"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    output_json: bool = _SHARED_OPTIONS["output_json"],
) -> None:
    """List every LUN mapping on the appliance."""

    with _build_client(
        base_url=base_url,
        username=username,
        password=password,
        token=token,
        verify_ssl=verify_ssl,
        cert_path=cert_path,
        timeout=timeout,
    ) as client:
        try:
            mappings = client.lun_mappings.list_all()
        except NexentaStorError as exc:
            _handle_error(exc)
            return
    _present_output(mappings, view_id="mappings.list", json_output=output_json)


@system_app.command("license")
def system_license(
    base_url: str = _SHARED_OPTIONS["base_url"],
    username: str | None = _SHARED_OPTIONS["username"],
    password: str | None = _SHARED_OPTIONS["password"],
    token: str | None = _SHARED_OPTIONS["token"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
) -> None:
    """Display the appliance license."""

    with _build_client(
        base_url=base_url,
        username=username,
        password=password,
        token=token,
        verify_ssl=verify_ssl,
        cert_path=cert_path,
        timeout=timeout,
    ) as client:
        try:
            license_info = client.system.license()
        except NexentaStorError as exc:
            _handle_error(exc)
            return
    _echo_json(license_info)


@system_app.command("pools")
def system_pools(
    base_url: str = _SHARED_OPTIONS["base_url"],
    username: str | None = _SHARED_OPTIONS["username"],
    password: str | None = _SHARED_OPTIONS["password"],
    token: str | None = _SHARED_OPTIONS["token"],
    verify_ssl: bool = _SHARED_OPTIONS["verify_ssl"],
    cert_path: Path | None = _SHARED_OPTIONS["cert_path"],
    timeout: float = _SHARED_OPTIONS["timeout"],
    output_json: bool = _SHARED_OPTIONS["output_json"],
) -> None:
    """List storage pools."""

    with _build_client(
        base_url=base_url,
        username=username,
        password=password,
        token=token,
        verify_ssl=verify_ssl,
        cert_path=cert_path,
        timeout=timeout,
    ) as client:
        try:
            pools = client.system.pools()
        except NexentaStorError as exc:
            _handle_error(exc)
            return
    _present_output(pools, view_id="system.pools", json_output=output_json)


def main() -> None:  # pragma: no cover - console entrypoint
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
