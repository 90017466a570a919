"""
htmlforge Logger
================

Structured logging with pluggable formatters and handlers.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, Dict, List, Optional, TextIO

import orjson


class LogLevel(IntEnum):
    """Log levels."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL

    @classmethod
    def parse(cls, value: Any) -> "LogLevel":
        """Resolve a level from a name ("warning") or a number."""
        if isinstance(value, LogLevel):
            return value
        if isinstance(value, int):
            return cls(value)
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {value!r}") from None


@dataclass
class LogRecord:
    """
    Structured log record.

    Attributes:
        level: Log level
        message: Log message
        timestamp: Record timestamp
        context: Additional context
    """

    level: LogLevel
    message: str
    timestamp: datetime = field(default_factory=datetime.now)
    context: Dict[str, Any] = field(default_factory=dict)
    logger_name: str = "htmlforge"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data: Dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.name,
            "message": self.message,
            "logger": self.logger_name,
        }

        if self.context:
            data["context"] = {k: str(v) for k, v in self.context.items()}

        return data

    def to_json(self) -> str:
        """Convert to JSON string."""
        return orjson.dumps(self.to_dict()).decode("utf-8")


class LogFormatter:
    """Base log formatter."""

    def format(self, record: LogRecord) -> str:
        """Format log record."""
        raise NotImplementedError


class TextFormatter(LogFormatter):
    """
    Plain text formatter.

    Example output:
        2024-01-15 10:30:45 [WARNING] undefined attribute self.title file=/index.html
    """

    def __init__(
        self,
        format_string: Optional[str] = None,
        date_format: str = "%Y-%m-%d %H:%M:%S",
        colors: bool = True,
        stream: Optional[TextIO] = None,
    ):
        """Initialize formatter."""
        self.format_string = format_string or "{timestamp} [{level}] {message}"
        self.date_format = date_format
        stream = stream or sys.stdout
        self.colors = colors and hasattr(stream, "isatty") and stream.isatty()

        self._colors = {
            LogLevel.DEBUG: "\033[36m",    # Cyan
            LogLevel.INFO: "\033[32m",     # Green
            LogLevel.WARNING: "\033[33m",  # Yellow
            LogLevel.ERROR: "\033[31m",    # Red
            LogLevel.CRITICAL: "\033[35m", # Magenta
        }
        self._reset = "\033[0m"

    def format(self, record: LogRecord) -> str:
        """Format as text."""
        timestamp = record.timestamp.strftime(self.date_format)
        level = record.level.name

        if self.colors:
            color = self._colors.get(record.level, "")
            level = f"{color}{level}{self._reset}"

        message = record.message

        # Context as key=value pairs
        if record.context:
            context_str = " ".join(
                f"{k}={v}" for k, v in record.context.items()
            )
            message = f"{message} {context_str}"

        output = self.format_string.format(
            timestamp=timestamp,
            level=level,
            message=message,
            logger=record.logger_name,
        )

        return output


class JsonFormatter(LogFormatter):
    """
    JSON formatter for structured logging.

    Example output:
        {"timestamp":"2024-01-15T10:30:45","level":"INFO","message":"Rendered page"}
    """

    def __init__(self, pretty: bool = False):
        """Initialize formatter."""
        self.pretty = pretty

    def format(self, record: LogRecord) -> str:
        """Format as JSON."""
        if self.pretty:
            return orjson.dumps(record.to_dict(), option=orjson.OPT_INDENT_2).decode("utf-8")
        return record.to_json()


class LogHandler:
    """Base log handler."""

    def __init__(
        self,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        """Initialize handler."""
        self.formatter = formatter or TextFormatter()
        self.level = level

    def handle(self, record: LogRecord) -> None:
        """Handle log record."""
        if record.level >= self.level:
            self.emit(record)

    def emit(self, record: LogRecord) -> None:
        """Emit formatted record."""
        raise NotImplementedError


class StreamHandler(LogHandler):
    """Stream output handler (stdout unless told otherwise)."""

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        formatter: Optional[LogFormatter] = None,
        level: LogLevel = LogLevel.DEBUG,
    ):
        """Initialize stream handler."""
        super().__init__(formatter, level)
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Looked up on use so a replaced sys.stdout is honoured
        return self._stream or sys.stdout

    def emit(self, record: LogRecord) -> None:
        """Write to stream."""
        message = self.formatter.format(record)
        self.stream.write(message + "\n")
        self.stream.flush()


class CollectingHandler(LogHandler):
    """Keeps records in memory, for tests and build summaries."""

    def __init__(self, level: LogLevel = LogLevel.DEBUG):
        super().__init__(level=level)
        self.records: List[LogRecord] = []

    def emit(self, record: LogRecord) -> None:
        self.records.append(record)

    def messages(self, level: Optional[LogLevel] = None) -> List[str]:
        """Messages of the collected records, optionally for one level."""
        return [
            r.message for r in self.records
            if level is None or r.level == level
        ]

    def clear(self) -> None:
        self.records.clear()


class Logger:
    """
    Structured logger.

    Example:
        logger = Logger("htmlforge")

        logger.info("Rendered page", file="/index.html")

        # With context
        logger = logger.with_context(file="/blog/index.html")
        logger.warning("undefined attribute self.title")
    """

    def __init__(
        self,
        name: str = "htmlforge",
        level: LogLevel = LogLevel.DEBUG,
        handlers: Optional[List[LogHandler]] = None,
    ):
        """
        Initialize logger.

        Args:
            name: Logger name
            level: Minimum log level
            handlers: Log handlers
        """
        self.name = name
        self.level = level
        self._handlers = handlers if handlers is not None else []
        self._context: Dict[str, Any] = {}

    def add_handler(self, handler: LogHandler) -> "Logger":
        """Add log handler."""
        self._handlers.append(handler)
        return self

    def with_context(self, **context: Any) -> "Logger":
        """
        Create logger with additional context.

        The new logger shares handlers with this one.

        Args:
            **context: Context key-values

        Returns:
            New logger with context
        """
        new_logger = Logger(
            name=self.name,
            level=self.level,
            handlers=self._handlers,
        )
        new_logger._context = {**self._context, **context}
        return new_logger

    def _log(
        self,
        level: LogLevel,
        message: str,
        **context: Any,
    ) -> None:
        """Internal log method."""
        if level < self.level:
            return

        record = LogRecord(
            level=level,
            message=message,
            context={**self._context, **context},
            logger_name=self.name,
        )

        for handler in self._handlers:
            handler.handle(record)

    def debug(self, message: str, **context: Any) -> None:
        """Log debug message."""
        self._log(LogLevel.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        """Log info message."""
        self._log(LogLevel.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        """Log warning message."""
        self._log(LogLevel.WARNING, message, **context)

    def error(self, message: str, **context: Any) -> None:
        """Log error message."""
        self._log(LogLevel.ERROR, message, **context)


# Global logger registry
_loggers: Dict[str, Logger] = {}


def get_logger(
    name: str = "htmlforge",
    level: Optional[LogLevel] = None,
) -> Logger:
    """
    Get or create logger.

    Args:
        name: Logger name
        level: Log level

    Returns:
        Logger instance
    """
    if name not in _loggers:
        _loggers[name] = Logger(name=name, level=level or LogLevel.INFO)
        _loggers[name].add_handler(StreamHandler())

    return _loggers[name]


def configure_logging(
    level: LogLevel = LogLevel.INFO,
    format: str = "text",
    stream: Optional[TextIO] = None,
    colors: bool = True,
) -> Logger:
    """
    Configure the default "htmlforge" logger.

    Args:
        level: Log level
        format: Output format ("text" or "json")
        stream: Output stream (stdout by default)
        colors: Enable colored output on terminals

    Returns:
        Configured logger
    """
    if format == "json":
        formatter: LogFormatter = JsonFormatter()
    elif format == "text":
        formatter = TextFormatter(
            format_string="[{level}] {message}",
            colors=colors,
            stream=stream,
        )
    else:
        raise ValueError(f"Unknown log format: {format!r}")

    handlers: List[LogHandler] = [
        StreamHandler(stream=stream, formatter=formatter, level=level),
    ]

    logger = Logger(name="htmlforge", level=level, handlers=handlers)
    _loggers["htmlforge"] = logger

    return logger
