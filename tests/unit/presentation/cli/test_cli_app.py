"""Tests for the mindwell command line."""

from unittest.mock import patch

from typer.testing import CliRunner

from mindwell.presentation.cli.app import app

runner = CliRunner()


class TestSecretsGenerate:
    def test_prints_fresh_secrets(self):
        first = runner.invoke(app, ["secrets", "generate"])
        second = runner.invoke(app, ["secrets", "generate"])

        assert first.exit_code == 0
        assert "JWT_SECRET_KEY=" in first.output
        assert "POSTGRES_PASSWORD=" in first.output
        assert first.output != second.output


class TestServe:
    def test_runs_app_factory_with_configured_address(self, monkeypatch):
        monkeypatch.setenv("JWT_SECRET_KEY", "cli-test-secret")
        monkeypatch.setenv("API_PORT", "9100")

        with patch("mindwell.presentation.cli.app.uvicorn.run") as run:
            result = runner.invoke(app, ["serve", "--host", "127.0.0.1"])

        assert result.exit_code == 0
        args, kwargs = run.call_args
        assert args == ("mindwell.presentation.api.app:create_app",)
        assert kwargs["factory"] is True
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9100

    def test_missing_secret_exits_with_error(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)

        with patch("mindwell.presentation.cli.app.uvicorn.run") as run:
            result = runner.invoke(app, ["serve"])

        assert result.exit_code == 1
        run.assert_not_called()
