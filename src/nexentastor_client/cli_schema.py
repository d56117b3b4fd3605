"""Schema describing important fields for CLI table rendering."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

Row = Mapping[str, Any]
ValueExtractor = Callable[[Row], Any]
ValueFormatter = Callable[[Any], str]
SortKey = Callable[[Row], Any]


@dataclass(frozen=True)
class Column:
    """Describe how to pull and format a column for Rich tables."""

    header: str
    keys: tuple[str, ...] = ()
    extractor: ValueExtractor | None = None
    formatter: ValueFormatter | None = None
    justify: str = "left"

    def render(self, row: Row) -> str:
        value: Any | None = None
        if self.keys:
            for key in self.keys:
                if key in row:
                    value = row.get(key)
                    if value is not None:
                        break
        if value is None and self.extractor:
            value = self.extractor(row)
        if value is None:
            return ""
        if self.formatter:
            formatted = self.formatter(value)
            return "" if formatted is None else str(formatted)
        return str(value)


@dataclass(frozen=True)
class TableView:
    """Describe a Rich table for a CLI command.

    Rows are kept in the order the appliance returned them unless a
    ``sort_key`` is given.
    """

    title: str
    columns: tuple[Column, ...]
    sort_key: SortKey | None = None


def _coerce_number(value: Any) -> float | None:
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _bytes_formatter(*, precision: int = 2) -> ValueFormatter:
    def _formatter(value: Any) -> str:
        number = _coerce_number(value)
        if number is None:
            return ""
        gib_value = number / (1024**3)
        return f"{gib_value:.{precision}f}"

    return _formatter


def _bool_formatter(value: Any) -> str:
    if value is None:
        return ""
    return "Yes" if bool(value) else "No"


def _list_formatter(*, max_chars: int = 32, sep: str = ", ") -> ValueFormatter:
    def _formatter(value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            s = sep.join(str(v) for v in value)
        else:
            s = str(value)
        return s if len(s) <= max_chars else s[: max_chars - 1] + "…"

    return _formatter


def _total_bytes(row: Row) -> Any:
    available = _coerce_number(row.get("bytes_available"))
    used = _coerce_number(row.get("bytes_used"))
    if available is None or used is None:
        return None
    return available + used


CLI_TABLE_VIEWS: dict[str, TableView] = {
    "filesystems.list": TableView(
        title="Filesystems",
        columns=(
            Column("Path", keys=("path",)),
            Column("Mount Point", keys=("mount_point",)),
            Column(
                "Used (GiB)",
                keys=("bytes_used",),
                formatter=_bytes_formatter(precision=2),
                justify="right",
            ),
            Column(
                "Quota (GiB)",
                extractor=_total_bytes,
                formatter=_bytes_formatter(precision=2),
                justify="right",
            ),
            Column("NFS", keys=("shared_over_nfs",), formatter=_bool_formatter, justify="center"),
            Column("SMB", keys=("shared_over_smb",), formatter=_bool_formatter, justify="center"),
        ),
    ),
    "volumes.list": TableView(
        title="Volumes",
        columns=(
            Column("Path", keys=("path",)),
            Column(
                "Size (GiB)",
                keys=("volume_size",),
                formatter=_bytes_formatter(precision=2),
                justify="right",
            ),
            Column(
                "Used (GiB)",
                keys=("bytes_used",),
                formatter=_bytes_formatter(precision=2),
                justify="right",
            ),
        ),
    ),
    "snapshots.list": TableView(
        title="Snapshots",
        columns=(
            Column("Path", keys=("path",)),
            Column("Parent", keys=("parent",)),
            Column("Created", keys=("creation_time",)),
        ),
    ),
    "mappings.list": TableView(
        title="LUN Mappings",
        columns=(
            Column("Id", keys=("id",)),
            Column("Volume", keys=("volume",)),
            Column("Host Group", keys=("host_group",)),
            Column("Target Group", keys=("target_group",)),
            Column("LUN", keys=("lun",), justify="right"),
        ),
        sort_key=lambda row: (str(row.get("volume") or ""), row.get("lun") or 0),
    ),
    "system.pools": TableView(
        title="Pools",
        columns=(
            Column("Pool", keys=("name",)),
            Column("Health", keys=("health",)),
            Column("Status", keys=("status",), formatter=_list_formatter()),
        ),
        sort_key=lambda row: str(row.get("name") or "").lower(),
    ),
}
