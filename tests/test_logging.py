"""Tests for structured logging configuration."""

from __future__ import annotations

import io
import json

from phpunit_events.logging import configure_logging, get_logger, run_context


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output(self):
        """JSON format writes one object per event with its level."""
        stream = io.StringIO()
        configure_logging(log_level="INFO", json_format=True, stream=stream)

        get_logger("tests").info("decoded", records=3)

        event = json.loads(stream.getvalue())
        assert event["event"] == "decoded"
        assert event["records"] == 3
        assert event["level"] == "info"
        assert "timestamp" in event

    def test_level_filtering(self):
        """Events below the configured level are dropped."""
        stream = io.StringIO()
        configure_logging(log_level="WARNING", json_format=True, stream=stream)
        logger = get_logger("tests")

        logger.info("hidden")
        logger.warning("shown")

        lines = stream.getvalue().splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["shown"]

    def test_run_id_from_context(self):
        """The current run id is attached only inside run_context."""
        stream = io.StringIO()
        configure_logging(json_format=True, stream=stream)
        logger = get_logger("tests")

        with run_context("abc123"):
            logger.warning("inside")
        logger.warning("outside")

        inside, outside = (json.loads(line) for line in stream.getvalue().splitlines())
        assert inside["run_id"] == "abc123"
        assert inside["logger_name"] == "tests"
        assert "run_id" not in outside

    def test_logger_follows_later_configuration(self):
        """A module-level logger created before configuration still uses it."""
        logger = get_logger("early")
        stream = io.StringIO()
        configure_logging(json_format=True, stream=stream)

        logger.warning("configured_late", outcome="testFailed")

        event = json.loads(stream.getvalue())
        assert event["event"] == "configured_late"
        assert event["outcome"] == "testFailed"

    def test_unknown_level_falls_back_to_warning(self):
        """An unknown level name filters like WARNING."""
        stream = io.StringIO()
        configure_logging(log_level="chatty", json_format=True, stream=stream)
        logger = get_logger("tests")

        logger.info("hidden")
        logger.warning("shown")

        assert [json.loads(line)["event"] for line in stream.getvalue().splitlines()] == ["shown"]

    def test_console_format(self):
        """Console format renders the event name as plain text."""
        stream = io.StringIO()
        configure_logging(stream=stream)

        get_logger("tests").warning("malformed_line", reason="missing event name")

        output = stream.getvalue()
        assert "malformed_line" in output
        assert "reason" in output
        assert not output.startswith("{")
