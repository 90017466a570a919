"""
htmlforge Errors
================

Exception hierarchy for fatal build errors.

Advisory problems (unresolved expressions, missing attributes, malformed
``<if>`` nodes) are not exceptions; they are reported as diagnostics and the
build carries on.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class HtmlForgeError(Exception):
    """Base exception for htmlforge errors."""
    pass


class ConfigurationError(HtmlForgeError):
    """
    Raised for author mistakes that cannot be worked around.

    Attributes:
        path: File the error was found in, if known
    """

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            message = f"{self.path}: {message}"
        super().__init__(message)


class DuplicateComponentError(ConfigurationError):
    """Raised when two component files map to the same tag name."""
    pass


class ComponentStructureError(ConfigurationError):
    """Raised when a component file or loop construct is malformed."""
    pass


class PatternError(ConfigurationError):
    """Raised when an ``<if>`` pattern is not a valid regular expression."""
    pass


class SitePathError(ConfigurationError):
    """Raised when a source, component or destination path has the wrong type."""
    pass


class ExpansionLimitError(ConfigurationError):
    """Raised when expansion does not converge (runaway component recursion)."""
    pass
