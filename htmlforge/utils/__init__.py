"""
htmlforge Utils Package
=======================

Logging utilities shared by the engine and the CLI.
"""

from __future__ import annotations

from htmlforge.utils.logger import (
    CollectingHandler,
    JsonFormatter,
    Logger,
    LogLevel,
    StreamHandler,
    TextFormatter,
    configure_logging,
    get_logger,
)

__all__ = [
    "CollectingHandler",
    "JsonFormatter",
    "Logger",
    "LogLevel",
    "StreamHandler",
    "TextFormatter",
    "configure_logging",
    "get_logger",
]
