"""
htmlforge Document Tree
=======================

Thin layer over BeautifulSoup used by the engine: parsing, node
discrimination, cloning, splicing and serialization.

Nodes are plain bs4 objects:
- Tag: element with an ordered attribute dict and ordered children
- NavigableString: text
- Comment: comment

Doctypes, CDATA sections and processing instructions are bs4
PreformattedString subclasses; they are neither text nor comments here and
pass through the engine untouched.
"""

from __future__ import annotations

import copy
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup, Comment, NavigableString, Tag
from bs4.dammit import EntitySubstitution
from bs4.element import PageElement, PreformattedString
from bs4.formatter import HTMLFormatter

# html.parser keeps unknown tags (<self.inner>, <foreachchild.item>, <if>)
# exactly where the author wrote them.
PARSER = "html.parser"

# HTML5 void elements (<br>, not <br/>); only &, < and > are escaped.
HTML5_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)


def parse_html(source: str) -> BeautifulSoup:
    """
    Parse markup into a mutable tree.

    Tag and attribute names are lower-cased by the parser. Attribute values
    are always kept as plain strings, including class and rel.
    """
    return BeautifulSoup(source, PARSER, multi_valued_attributes=None)


def serialize(root: Tag) -> str:
    """Serialize a tree as HTML5 (void elements without a closing slash)."""
    return root.decode(formatter=HTML5_FORMATTER)


def is_element(node: Optional[PageElement]) -> bool:
    return isinstance(node, Tag)


def is_text(node: Optional[PageElement]) -> bool:
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def is_comment(node: Optional[PageElement]) -> bool:
    return isinstance(node, Comment)


def is_blank(node: PageElement) -> bool:
    """True for text nodes made only of whitespace."""
    return is_text(node) and not str(node).strip()


def children(node: Tag) -> List[PageElement]:
    """Snapshot of the child list, safe to iterate while the tree changes."""
    return list(node.contents)


def element_children(node: Tag) -> List[Tag]:
    return [child for child in node.contents if isinstance(child, Tag)]


def clone(node: PageElement) -> PageElement:
    """Deep copy of a node and everything below it, detached from any tree."""
    return copy.copy(node)


def new_text(value: str) -> NavigableString:
    return NavigableString(value)


def new_container(name: str = "template") -> Tag:
    """Detached element used to hold a list of sibling nodes."""
    return Tag(name=name)


def splice(node: PageElement, replacements: Iterable[PageElement]) -> List[PageElement]:
    """
    Put `replacements` where `node` is and detach `node`.

    Replacement nodes are moved out of whatever tree they are in.

    Returns:
        The inserted nodes, in document order
    """
    inserted: List[PageElement] = []
    for replacement in list(replacements):
        node.insert_before(replacement)
        inserted.append(replacement)
    node.extract()
    return inserted


def remove(node: PageElement) -> None:
    """Detach a node from its parent."""
    node.extract()
