"""
Tests for the structlog setup.
"""
import structlog

from fepro.middleware import structlog_config


def test_color_message_is_dropped():
    event = {"event": "Started server process", "color_message": "\x1b[1mStarted\x1b[0m"}
    assert structlog_config._drop_color_message_key(None, "info", event) == {
        "event": "Started server process"
    }


def test_renderer_follows_log_format():
    assert isinstance(structlog_config._renderer("json"), structlog.processors.JSONRenderer)
    assert isinstance(structlog_config._renderer("console"), structlog.dev.ConsoleRenderer)
