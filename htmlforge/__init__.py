"""
htmlforge - Build-Time HTML Components
======================================

Expands a folder of HTML pages by replacing custom tags with reusable
component definitions, producing plain, self-contained HTML.

Features:
---------
- One file per component, the file name is the tag name
- ``<self.ATTR>``, ``<self.inner>`` and ``${self.ATTR}`` substitution
- ``<foreachchild.VAR>`` loops over the caller's child elements
- ``<if self.ATTR="pattern">`` conditionals with ``<then>``/``<else>``
- Nested and recursive components, expanded to a fixed point
- Comment stripping and whitespace minification

Quick Start:
    $ htmlforge pages/ components/ public/
"""

from __future__ import annotations

__version__ = "0.3.0"
__license__ = "MIT"

from htmlforge.core.config import Config
from htmlforge.engine import (
    ComponentLibrary,
    DocumentGenerator,
    render_document,
)
from htmlforge.errors import ConfigurationError, HtmlForgeError

__all__ = [
    "__version__",
    "Config",
    "ComponentLibrary",
    "DocumentGenerator",
    "render_document",
    "ConfigurationError",
    "HtmlForgeError",
]
