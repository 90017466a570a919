"""
htmlforge Engine Module
=======================

The component expansion engine.

Components:
- Tree: parsing, cloning, splicing and serializing documents (BeautifulSoup)
- Expressions: ``${...}`` placeholders and ``<if>`` match expressions
- Library: component definitions loaded from a folder
- Substitution: fixed-point expansion of component tags
- Minify: comment removal and whitespace squeezing
- Document: per-page and per-site generation
"""

from htmlforge.engine.diagnostics import Diagnostic, Diagnostics
from htmlforge.engine.document import (
    DocumentGenerator,
    GenerationReport,
    render_document,
    site_path,
)
from htmlforge.engine.expressions import (
    ExpansionContext,
    evaluate,
    expand_string,
    matches_pattern,
)
from htmlforge.engine.library import ComponentDefinition, ComponentLibrary
from htmlforge.engine.minify import minify
from htmlforge.engine.substitution import SubstitutionEngine, expand, substitute
from htmlforge.engine.tree import parse_html, serialize

__all__ = [
    "Diagnostic",
    "Diagnostics",
    "DocumentGenerator",
    "GenerationReport",
    "render_document",
    "site_path",
    "ExpansionContext",
    "evaluate",
    "expand_string",
    "matches_pattern",
    "ComponentDefinition",
    "ComponentLibrary",
    "minify",
    "SubstitutionEngine",
    "expand",
    "substitute",
    "parse_html",
    "serialize",
]
