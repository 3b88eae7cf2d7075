"""Tests for structured logging configuration."""

from __future__ import annotations

import json
import logging

import structlog

from faqdesk.logging_config import redact_sensitive, setup_logging


def test_level_filtering():
    setup_logging(level="error")
    assert logging.getLogger().level == logging.ERROR


def test_unknown_level_defaults_to_warning():
    setup_logging(level="chatty")
    assert logging.getLogger().level == logging.WARNING


def test_json_mode_writes_parseable_lines(capsys):
    setup_logging(json_mode=True, level="INFO")
    structlog.get_logger("faqdesk.test").info("records_replaced", count=3)

    line = capsys.readouterr().err.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["event"] == "records_replaced"
    assert payload["count"] == 3
    assert payload["level"] == "info"


def test_below_level_is_dropped(capsys):
    setup_logging(json_mode=True, level="WARNING")
    structlog.get_logger("faqdesk.test").info("quiet")
    assert capsys.readouterr().err == ""


def test_redact_sensitive_masks_keys():
    event = {
        "event": "persist_failed",
        "error": "api_key=abcdefghijklmnop rejected",
        "detail": "token AIzaSyA1234567890abcdefghijklmnop",
        "count": 2,
    }
    result = redact_sensitive(None, None, event)
    assert "abcdefghijklmnop" not in result["error"]
    assert "REDACTED" in result["error"]
    assert "REDACTED" in result["detail"]
    assert result["count"] == 2


def test_third_party_loggers_stay_quiet():
    setup_logging(level="DEBUG")
    assert logging.getLogger("LiteLLM").level == logging.WARNING
    setup_logging(level="ERROR")
    assert logging.getLogger("httpx").level == logging.ERROR
