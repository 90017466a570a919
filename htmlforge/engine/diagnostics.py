"""
htmlforge Diagnostics
=====================

Advisory warnings raised while expanding a document. They never stop a
build; each one is kept as a structured record and forwarded to the logger.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional

from htmlforge.utils.logger import Logger, get_logger

UNRESOLVED_EXPRESSION = "unresolved-expression"
MISSING_ATTRIBUTE = "missing-attribute"
MALFORMED_IF = "malformed-if"


@dataclass(frozen=True)
class Diagnostic:
    """
    One advisory warning.

    Attributes:
        kind: One of the module-level kind constants
        message: Human-readable description
        file: Site-relative path of the document being generated
        tag: Tag name of the invocation the warning was raised for
    """
    kind: str
    message: str
    file: Optional[str] = None
    tag: Optional[str] = None

    def __str__(self) -> str:
        where = f" in <{self.tag}>" if self.tag else ""
        return f"{self.message}{where}"


class Diagnostics:
    """
    Collects diagnostics for a run and logs each one as a warning.

    Example:
        diagnostics = Diagnostics()
        diagnostics.report(MISSING_ATTRIBUTE, "undefined attribute self.title")
        assert diagnostics.kinds() == ["missing-attribute"]
    """

    def __init__(self, logger: Optional[Logger] = None) -> None:
        self._logger = logger
        self._records: List[Diagnostic] = []

    @property
    def logger(self) -> Logger:
        # Resolved lazily so a CLI reconfiguring logging is picked up.
        return self._logger or get_logger()

    def report(
        self,
        kind: str,
        message: str,
        file: Optional[str] = None,
        tag: Optional[str] = None,
    ) -> Diagnostic:
        """Record a diagnostic and log it."""
        diagnostic = Diagnostic(kind=kind, message=message, file=file, tag=tag)
        self._records.append(diagnostic)

        context = {}
        if file:
            context["file"] = file
        self.logger.warning(str(diagnostic), **context)
        return diagnostic

    @property
    def records(self) -> List[Diagnostic]:
        return list(self._records)

    def kinds(self) -> List[str]:
        return [d.kind for d in self._records]

    def for_file(self, file: str) -> List[Diagnostic]:
        return [d for d in self._records if d.file == file]

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._records))
