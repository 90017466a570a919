"""
htmlforge Expression Evaluator
==============================

Resolves ``${...}`` placeholders and ``<if>`` match expressions against an
invocation context (the calling tag of a component).

Grammar, in precedence order:
    self.filepath     site-relative path of the page being generated
    A||B              A if it evaluates to a non-empty string, else B
    self.<attr>       attribute <attr> of the invocation ("" if absent)

Anything else evaluates to "" and produces a diagnostic. Placeholders are
expanded in a single pass: a substituted value is never scanned again.

Example:
    file = ExpansionContext("/blog/index.html")
    expand_string("${self.title||self.name}", invocation, file)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Pattern

from bs4 import Tag

from htmlforge.engine.diagnostics import (
    MISSING_ATTRIBUTE,
    UNRESOLVED_EXPRESSION,
    Diagnostics,
)
from htmlforge.errors import PatternError

PLACEHOLDER_PATTERN = re.compile(r"\$\{([^}]*)\}")
DEFAULT_PATTERN = re.compile(r"^([A-Za-z0-9_.-]+)\|\|([A-Za-z0-9_.-]+)$")
SELF_ATTRIBUTE_PATTERN = re.compile(r"^self\.(.+)$")

FILEPATH_EXPRESSION = "self.filepath"


@dataclass
class ExpansionContext:
    """
    Per-file expansion state.

    Attributes:
        filepath: Site-relative path of the document, with a leading "/"
        diagnostics: Reporter for advisory warnings
        source: Path of the source file, used in error messages
    """
    filepath: str = "/"
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    source: Optional[Path] = None
    placeholder_re: Pattern[str] = PLACEHOLDER_PATTERN
    default_re: Pattern[str] = DEFAULT_PATTERN
    self_attribute_re: Pattern[str] = SELF_ATTRIBUTE_PATTERN

    def __post_init__(self) -> None:
        if not self.filepath.startswith("/"):
            self.filepath = "/" + self.filepath

    def warn(self, kind: str, message: str, tag: Optional[str] = None) -> None:
        self.diagnostics.report(kind, message, file=self.filepath, tag=tag)


def evaluate(expr: str, ctx: Tag, file: ExpansionContext) -> str:
    """
    Evaluate one expression against the invocation `ctx`.

    Never raises; unresolvable expressions yield "" and a warning.
    """
    expr = expr.strip()

    if expr == FILEPATH_EXPRESSION:
        return file.filepath

    match = file.default_re.match(expr)
    if match:
        value = evaluate(match.group(1), ctx, file)
        if value:
            return value
        return evaluate(match.group(2), ctx, file)

    match = file.self_attribute_re.match(expr)
    if match:
        name = match.group(1)
        # The parser lower-cases attribute names
        value = ctx.get(name.lower())
        if value is None:
            file.warn(
                MISSING_ATTRIBUTE,
                f"undefined attribute self.{name}",
                tag=ctx.name,
            )
            return ""
        return str(value)

    file.warn(
        UNRESOLVED_EXPRESSION,
        f"unrecognized expression ${{{expr}}}",
        tag=ctx.name,
    )
    return ""


def expand_string(s: str, ctx: Tag, file: ExpansionContext) -> str:
    """Replace every ``${expr}`` in `s` with its value (single pass)."""
    if "${" not in s:
        return s
    return file.placeholder_re.sub(
        lambda match: evaluate(match.group(1), ctx, file),
        s,
    )


def matches_pattern(
    expr: str,
    pattern: str,
    ctx: Tag,
    file: ExpansionContext,
) -> bool:
    """
    Test whether `expr` fully matches the regular expression `pattern`.

    The pattern may itself contain placeholders; it is expanded first and
    anchored at both ends.

    Raises:
        PatternError: If the expanded pattern is not a valid regex
    """
    value = evaluate(expr, ctx, file)
    expanded = expand_string(pattern, ctx, file)

    try:
        compiled = re.compile(rf"\A(?:{expanded})\Z")
    except re.error as e:
        raise PatternError(
            f"invalid pattern {expanded!r} in <if {expr}> "
            f"(page {file.filepath}): {e}",
            path=file.source,
        ) from e

    return compiled.match(value) is not None
