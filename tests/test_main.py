"""Tests for the CLI entry point."""

import pytest
from click.testing import CliRunner

from github_webhooks import main
from github_webhooks.config import Settings
from github_webhooks.context import Context
from github_webhooks.events import IssueCommentEvent


@pytest.fixture
def captured(monkeypatch):
    runs = []

    async def fake_run(settings):
        runs.append(settings)

    monkeypatch.setattr(main, "run", fake_run)
    monkeypatch.setattr(main, "setup_logging", lambda **kwargs: None)
    for name in ("APP_ID", "APP_SECRET", "APP_PRIVATE_KEY", "GITHUB_WEBHOOKS_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    return runs


class TestCli:
    def test_generates_secret_when_absent(self, captured):
        result = CliRunner().invoke(main.cli, ["--port", "9001", "--path", "/hooks"])

        assert result.exit_code == 0, result.output
        settings = captured[0]
        assert len(settings.app_secret) == 32
        assert f"Secret: {settings.app_secret}" in result.output
        assert settings.server.port == 9001
        assert settings.server.path == "/hooks"

    def test_keeps_configured_secret(self, captured, monkeypatch):
        monkeypatch.setenv("APP_SECRET", "from-env")

        result = CliRunner().invoke(main.cli, [])

        assert result.exit_code == 0, result.output
        assert captured[0].app_secret == "from-env"
        assert "Secret:" not in result.output


class TestBuildDispatcher:
    def test_uses_settings(self):
        settings = Settings(app_id="1", app_secret="s", github_url="http://ghe", handler_timeout=1.0)
        dispatcher = main.build_dispatcher(settings)
        assert dispatcher.config.app_id == "1"
        assert dispatcher.config.secret == "s"
        assert dispatcher.handlers == ()

    def test_issue_comment_handler_returns_nothing(self):
        event = IssueCommentEvent.model_validate({
            "action": "created",
            "issue": {"number": 3},
            "comment": {"body": "hi", "user": {"login": "octocat"}},
        })
        assert main.log_issue_comment(event, Context()) is None
