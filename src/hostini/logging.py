"""Logging utilities for hostini.

Wraps the standard logging module with:
- A TRACE level below DEBUG for per-line parser output
- Verbosity (-v, -vv, -vvv) and level-name mapping for the CLI
- Context-carrying loggers that append ``(key=value, ...)`` to messages
- Timing of operations
"""

import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

DEFAULT_FORMAT = "%(levelname)s [%(name)s] %(message)s"
DEBUG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(funcName)s:%(lineno)d] %(message)s"

# Custom TRACE level (more detailed than DEBUG)
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

VERBOSITY_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
    3: TRACE,  # -vvv: every classified inventory line
}

LEVEL_NAMES = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def get_level_from_verbosity(verbosity: int) -> int:
    """Convert a count of -v flags to a logging level."""
    return VERBOSITY_LEVELS.get(min(verbosity, 3), TRACE)


def get_level_from_name(level_name: str) -> int:
    """Convert a level name to a logging level.

    Args:
        level_name: One of trace, debug, info, warning, error, critical

    Returns:
        Logging level constant

    Raises:
        ValueError: If level name is invalid
    """
    try:
        return LEVEL_NAMES[level_name.lower()]
    except KeyError:
        valid = ", ".join(LEVEL_NAMES)
        raise ValueError(f"Invalid log level: {level_name}. Valid levels: {valid}") from None


def configure_logging(
    level: int = logging.WARNING,
    format_string: str | None = None,
    debug: bool = False,
    log_file: str | Path | None = None,
    file_level: int | None = None,
) -> None:
    """Configure root logging for hostini.

    Args:
        level: Console logging level
        format_string: Custom format string (chosen from level if None)
        debug: Use the detailed format with timestamps and line numbers
        log_file: Optional path to also write logs to
        file_level: Separate level for the file handler (defaults to level)

    Example:
        >>> configure_logging(level=logging.INFO)
        >>> configure_logging(level=logging.WARNING, log_file="/tmp/hostini.log", file_level=logging.DEBUG)
    """
    if format_string is None:
        format_string = DEBUG_FORMAT if debug or level <= logging.DEBUG else DEFAULT_FORMAT

    root_logger = logging.getLogger()
    root_logger.setLevel(min(level, file_level or level))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(format_string))
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(file_level or level)
        file_handler.setFormatter(logging.Formatter(DEBUG_FORMAT))
        root_logger.addHandler(file_handler)


class StructuredLogger:
    """Logger that appends structured context to every message.

    Example:
        >>> logger = StructuredLogger("hostini.ini", source="hosts.ini")
        >>> logger.debug("Opened group", group="web")
        DEBUG [hostini.ini] Opened group (source=hosts.ini, group=web)
    """

    def __init__(self, name: str, **context: Any) -> None:
        self.logger = logging.getLogger(name)
        self.context: dict[str, Any] = context.copy()

    def add_context(self, **context: Any) -> None:
        """Add context included in all future messages."""
        self.context.update(context)

    def _format_message(self, message: str, **extra: Any) -> str:
        combined = {**self.context, **extra}
        if not combined:
            return message
        context_str = ", ".join(f"{k}={v}" for k, v in combined.items())
        return f"{message} ({context_str})"

    def log(self, level: int, message: str, **extra: Any) -> None:
        # Skip formatting for the per-line TRACE calls when disabled
        if self.logger.isEnabledFor(level):
            self.logger.log(level, self._format_message(message, **extra))

    def trace(self, message: str, **extra: Any) -> None:
        self.log(TRACE, message, **extra)

    def debug(self, message: str, **extra: Any) -> None:
        self.log(logging.DEBUG, message, **extra)

    def info(self, message: str, **extra: Any) -> None:
        self.log(logging.INFO, message, **extra)

    def warning(self, message: str, **extra: Any) -> None:
        self.log(logging.WARNING, message, **extra)

    def error(self, message: str, **extra: Any) -> None:
        self.log(logging.ERROR, message, **extra)

    @contextmanager
    def performance(
        self,
        operation: str,
        level: int = logging.INFO,
        threshold: float | None = None,
        **context: Any,
    ) -> Generator[dict[str, Any], None, None]:
        """Time an operation and log its duration on exit.

        The yielded dict may be filled with results that are appended to
        the completion message.

        Args:
            operation: Operation description
            level: Log level
            threshold: Only log if duration exceeds threshold (seconds)
            **context: Additional context for this operation

        Example:
            >>> with logger.performance("Parsed inventory", level=logging.DEBUG) as stats:
            ...     stats["groups"] = 3
            DEBUG [hostini.ini] Parsed inventory completed in 0.001s (groups=3)
        """
        start_time = time.perf_counter()
        results: dict[str, Any] = {}
        try:
            yield results
        finally:
            duration = time.perf_counter() - start_time
            if threshold is None or duration >= threshold:
                self.log(
                    level,
                    f"{operation} completed in {duration:.3f}s",
                    **{**context, **results},
                )


def get_logger(name: str, **context: Any) -> StructuredLogger:
    """Get a structured logger.

    Args:
        name: Logger name (typically __name__)
        **context: Initial context

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name, **context)
