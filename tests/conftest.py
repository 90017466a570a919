import pathlib

import pytest

from htmlforge.core.config import reset_config
from htmlforge.engine.diagnostics import Diagnostics
from htmlforge.engine.document import render_document
from htmlforge.engine.library import ComponentLibrary
from htmlforge.utils import logger as logger_module
from htmlforge.utils.logger import CollectingHandler, Logger


@pytest.fixture(autouse=True)
def _fresh_globals():
    logger_module._loggers.clear()
    reset_config()
    yield
    logger_module._loggers.clear()
    reset_config()


@pytest.fixture
def collector():
    return CollectingHandler()


@pytest.fixture
def diagnostics(collector):
    return Diagnostics(Logger("test", handlers=[collector]))


@pytest.fixture
def render(diagnostics):
    """render(components, page, **options) -> html, warnings go to `diagnostics`."""

    def _render(components, page, **options):
        library = ComponentLibrary.from_strings(components)
        return render_document(page, library, diagnostics=diagnostics, **options)

    return _render


def write_tree(base: pathlib.Path, files: dict) -> pathlib.Path:
    """Create {relative path: str or bytes} under `base`."""
    base.mkdir(parents=True, exist_ok=True)
    for relative, content in files.items():
        path = base.joinpath(*relative.split("/"))
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return base
