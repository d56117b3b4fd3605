from typer.testing import CliRunner

from nexentastor_client.cli import app

runner = CliRunner()


def test_cli_respects_env_cert_and_verify_true(monkeypatch, tmp_path):
    cert = tmp_path / "ca.pem"
    cert.write_text("dummy", encoding="utf-8")
    captured: dict[str, object] = {}

    class DummyClient:
        def __init__(self, **kwargs):
            captured.update(kwargs)
            self.system = type("S", (), {"pools": lambda self: []})()

        def login(self):
            captured["logged_in"] = True

        def close(self):  # pragma: no cover - helper
            pass

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

    monkeypatch.setattr("nexentastor_client.cli.NexentaStorClient", DummyClient)

    result = runner.invoke(
        app,
        ["system", "pools"],
        env={
            "NEXENTASTOR_BASE_URL": "https://nef:8443",
            "NEXENTASTOR_USERNAME": "admin",
            "NEXENTASTOR_PASSWORD": "secret",
            "NEXENTASTOR_CA_CERT": str(cert),
            "NEXENTASTOR_VERIFY_SSL": "1",
        },
    )

    assert result.exit_code == 0
    assert captured["verify_ssl"] == str(cert)
    assert captured["base_url"] == "https://nef:8443"
    assert captured["logged_in"] is True


def test_cli_env_cert_with_no_verify_rejected(tmp_path):
    cert = tmp_path / "ca.pem"
    cert.write_text("dummy", encoding="utf-8")

    result = runner.invoke(
        app,
        ["system", "pools", "--base-url", "https://nef:8443", "--token", "abc"],
        env={"NEXENTASTOR_CA_CERT": str(cert), "NEXENTASTOR_VERIFY_SSL": "0"},
    )

    assert result.exit_code != 0
    assert "Cannot combine --cert with --no-verify" in result.stderr
