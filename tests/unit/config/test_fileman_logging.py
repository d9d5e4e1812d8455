"""Unit tests for structlog configuration."""

import json
import logging

import pytest
import structlog

from fileman.config.logging import add_app_context, configure_logging, resolve_level


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()
    logging.getLogger().setLevel(logging.WARNING)


class TestResolveLevel:
    @pytest.mark.parametrize(
        "verbosity,default,expected",
        [
            (0, "WARNING", "WARNING"),
            (0, "error", "ERROR"),
            (1, "WARNING", "INFO"),
            (2, "WARNING", "DEBUG"),
            (5, "ERROR", "DEBUG"),
        ],
    )
    def test_levels(self, verbosity, default, expected):
        assert resolve_level(verbosity, default=default) == expected


class TestAppContext:
    def test_adds_app_and_pid(self):
        event = add_app_context(None, "info", {"event": "x"})

        assert event["app"] == "fileman"
        assert isinstance(event["pid"], int)


class TestConfigureLogging:
    def test_json_records_on_stderr(self, capsys):
        configure_logging(level="INFO", json_format=True)
        logger = structlog.get_logger("fileman.test")

        logger.info("dedupe_started", root_dir="/data")

        captured = capsys.readouterr()
        assert captured.out == ""
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "dedupe_started"
        assert record["root_dir"] == "/data"
        assert record["level"] == "info"
        assert record["app"] == "fileman"

    def test_level_filters(self, capsys):
        configure_logging(level="WARNING", json_format=True)
        logger = structlog.get_logger("fileman.test")

        logger.info("hidden_event")

        assert "hidden_event" not in capsys.readouterr().err
