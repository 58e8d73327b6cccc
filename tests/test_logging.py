"""Tests for logging setup and redaction."""

import logging

import pytest
import structlog

from github_webhooks.utils.logging import _filter_sensitive, setup_logging


def _filter(**event_dict):
    return _filter_sensitive(None, "info", event_dict)


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSetupLogging:
    def test_debug_notice_names_token_details(self, capsys, restore_logging):
        setup_logging(level="DEBUG")
        err = capsys.readouterr().err
        assert "DEBUG logging is enabled" in err
        assert "token expiry" in err
        assert "payload" not in err.lower()

    def test_no_notice_at_info(self, capsys, restore_logging):
        setup_logging(level="INFO")
        assert capsys.readouterr().err == ""
        assert logging.getLogger().level == logging.INFO
        assert logging.getLogger("httpx").level == logging.WARNING


class TestFilterSensitive:
    def test_sensitive_keys_redacted(self):
        result = _filter(event="token_exchanged", token="ghs_abc", secret="s3cret")
        assert result["token"] == "***REDACTED***"
        assert result["secret"] == "***REDACTED***"
        assert result["event"] == "token_exchanged"

    def test_bearer_in_message(self):
        result = _filter(event="request", error="Authorization: Bearer eyJhbGciOi.abc.def")
        assert "eyJhbGciOi" not in result["error"]

    def test_inline_secret(self):
        result = _filter(event="x", detail="secret=hunter2 rejected")
        assert "hunter2" not in result["detail"]

    def test_other_values_untouched(self):
        result = _filter(event="webhook_done", status=200, duration_ms=1.5, installation_id=42)
        assert result == {"event": "webhook_done", "status": 200, "duration_ms": 1.5, "installation_id": 42}

    def test_empty_token_kept(self):
        assert _filter(event="x", token=None)["token"] is None
