import io

import orjson
import pytest

from htmlforge.utils.logger import (
    CollectingHandler,
    JsonFormatter,
    Logger,
    LogLevel,
    LogRecord,
    StreamHandler,
    TextFormatter,
    configure_logging,
    get_logger,
)


def test_level_parse():
    assert LogLevel.parse("warning") is LogLevel.WARNING
    assert LogLevel.parse(" Debug ") is LogLevel.DEBUG
    assert LogLevel.parse(40) is LogLevel.ERROR
    assert LogLevel.parse(LogLevel.INFO) is LogLevel.INFO
    with pytest.raises(ValueError):
        LogLevel.parse("loud")


def test_levels_are_filtered():
    collector = CollectingHandler()
    logger = Logger("test", level=LogLevel.WARNING, handlers=[collector])

    logger.debug("hidden")
    logger.info("hidden")
    logger.warning("shown")
    logger.error("also shown")

    assert collector.messages() == ["shown", "also shown"]
    assert collector.messages(LogLevel.ERROR) == ["also shown"]

    collector.clear()
    assert collector.records == []


def test_context_is_carried():
    collector = CollectingHandler()
    logger = Logger("test", handlers=[collector]).with_context(file="/index.html")

    logger.warning("undefined attribute", tag="card")

    assert collector.records[0].context == {"file": "/index.html", "tag": "card"}


def test_text_formatter():
    stream = io.StringIO()
    logger = Logger("test", handlers=[
        StreamHandler(stream, TextFormatter("[{level}] {message}", stream=stream)),
    ])

    logger.info("Rendered /index.html", passes=2)

    assert stream.getvalue() == "[INFO] Rendered /index.html passes=2\n"


def test_json_formatter():
    record = LogRecord(LogLevel.WARNING, "missing", context={"file": "/a.html"}, logger_name="x")

    data = orjson.loads(JsonFormatter().format(record))

    assert data["level"] == "WARNING"
    assert data["message"] == "missing"
    assert data["logger"] == "x"
    assert data["context"] == {"file": "/a.html"}
    assert "\n" in JsonFormatter(pretty=True).format(record)


def test_get_logger_is_cached():
    assert get_logger() is get_logger("htmlforge")
    assert get_logger("other") is not get_logger()


def test_configure_logging_replaces_default_logger():
    stream = io.StringIO()

    logger = configure_logging(level=LogLevel.WARNING, stream=stream)
    assert get_logger() is logger

    get_logger().info("quiet")
    get_logger().warning("loud")
    assert stream.getvalue() == "[WARNING] loud\n"

    with pytest.raises(ValueError):
        configure_logging(format="xml")
