"""Tests for logging utilities."""

import logging
import time

import pytest

from hostini.logging import (
    TRACE,
    StructuredLogger,
    configure_logging,
    get_level_from_name,
    get_level_from_verbosity,
    get_logger,
)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_default(self):
        """Test default logging configuration."""
        configure_logging()
        assert logging.root.level == logging.WARNING

    def test_configure_custom_level(self):
        """Test custom log level."""
        configure_logging(level=logging.DEBUG)
        assert logging.root.level == logging.DEBUG

    def test_configure_replaces_handlers(self):
        """Test that repeated configuration does not stack handlers."""
        configure_logging()
        configure_logging()
        assert len(logging.root.handlers) == 1

    def test_configure_log_file(self, tmp_path):
        """Test file logging with a separate, lower file level."""
        log_file = tmp_path / "logs" / "hostini.log"
        configure_logging(level=logging.WARNING, log_file=log_file, file_level=logging.DEBUG)

        logging.getLogger("hostini.test").debug("written to file only")
        for handler in logging.root.handlers:
            handler.flush()

        assert logging.root.level == logging.DEBUG
        assert "written to file only" in log_file.read_text()


class TestLevels:
    """Tests for verbosity and level name mapping."""

    def test_verbosity_levels(self):
        assert get_level_from_verbosity(0) == logging.WARNING
        assert get_level_from_verbosity(1) == logging.INFO
        assert get_level_from_verbosity(2) == logging.DEBUG
        assert get_level_from_verbosity(3) == TRACE
        assert get_level_from_verbosity(7) == TRACE

    def test_level_names(self):
        assert get_level_from_name("trace") == TRACE
        assert get_level_from_name("DEBUG") == logging.DEBUG
        assert get_level_from_name("Error") == logging.ERROR

    def test_invalid_level_name(self):
        with pytest.raises(ValueError, match="Invalid log level: loud"):
            get_level_from_name("loud")

    def test_trace_level_name(self):
        assert logging.getLevelName(TRACE) == "TRACE"


class TestStructuredLogger:
    """Tests for StructuredLogger class."""

    def test_create_logger_with_context(self):
        """Test creating logger with initial context."""
        logger = StructuredLogger("test", source="hosts")
        assert logger.logger.name == "test"
        assert logger.context == {"source": "hosts"}

    def test_add_context(self):
        logger = StructuredLogger("test")
        logger.add_context(group="web", line=3)
        assert logger.context == {"group": "web", "line": 3}

    def test_log_with_context(self, caplog):
        """Test logging with default and per-call context."""
        caplog.set_level(logging.INFO, logger="test.context")
        logger = StructuredLogger("test.context", source="hosts")

        logger.info("Opened group", group="web")

        assert "Opened group (source=hosts, group=web)" in caplog.text

    def test_log_without_context(self, caplog):
        caplog.set_level(logging.WARNING, logger="test.plain")
        get_logger("test.plain").warning("Plain message")
        assert caplog.records[-1].getMessage() == "Plain message"

    def test_trace_suppressed_below_level(self, caplog):
        """Test that trace messages are dropped unless TRACE is enabled."""
        caplog.set_level(logging.DEBUG, logger="test.trace")
        logger = get_logger("test.trace")

        logger.trace("hidden")
        assert "hidden" not in caplog.text

        caplog.set_level(TRACE, logger="test.trace")
        logger.trace("shown")
        assert "shown" in caplog.text


class TestPerformance:
    """Tests for StructuredLogger.performance."""

    def test_performance_basic(self, caplog):
        caplog.set_level(logging.INFO, logger="test.perf")
        logger = get_logger("test.perf")

        with logger.performance("Parsing", items=100):
            time.sleep(0.01)

        assert "Parsing completed in 0." in caplog.text
        assert "items=100" in caplog.text

    def test_performance_results(self, caplog):
        """Test that values stored in the yielded dict are logged."""
        caplog.set_level(logging.DEBUG, logger="test.perf.results")
        logger = get_logger("test.perf.results")

        with logger.performance("Parsing", level=logging.DEBUG) as stats:
            stats["groups"] = 3

        assert "groups=3" in caplog.text

    def test_performance_threshold(self, caplog):
        caplog.set_level(logging.INFO, logger="test.perf.threshold")
        logger = get_logger("test.perf.threshold")

        with logger.performance("Fast operation", threshold=10.0):
            pass

        assert "Fast operation" not in caplog.text

    def test_performance_exception(self, caplog):
        """Test that duration is still logged when the operation fails."""
        caplog.set_level(logging.INFO, logger="test.perf.exception")
        logger = get_logger("test.perf.exception")

        with pytest.raises(ValueError):
            with logger.performance("Failing operation"):
                raise ValueError("test error")

        assert "Failing operation completed" in caplog.text
