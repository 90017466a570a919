"""
htmlforge Minifier
==================

Post-expansion normalization: drops comments and squeezes whitespace.

Whitespace at the edge of a text node is kept (as one space) only when the
neighbouring node on that side is inline content, so that words in
``<b>bold</b> text`` are not glued together. Text inside whitespace-sensitive
elements (pre, textarea, script, style) is left as written.
"""

from __future__ import annotations

import re

from bs4 import Tag
from bs4.element import PageElement

from htmlforge.engine import tree

WHITESPACE = re.compile(r"\s+")

PRESERVE_WHITESPACE = frozenset({"pre", "textarea", "script", "style"})

INLINE_ELEMENTS = frozenset({
    "a", "abbr", "b", "bdi", "bdo", "br", "button", "cite", "code", "data",
    "del", "dfn", "em", "i", "img", "input", "ins", "kbd", "label", "mark",
    "meter", "object", "output", "picture", "progress", "q", "ruby", "s",
    "samp", "select", "small", "span", "strong", "sub", "sup", "svg",
    "textarea", "time", "u", "var", "video", "audio", "wbr",
})


def is_inline(node: PageElement) -> bool:
    """Text and inline elements; comments are gone by the time this is asked."""
    if tree.is_text(node):
        return True
    return tree.is_element(node) and node.name in INLINE_ELEMENTS


def minify(root: Tag) -> Tag:
    """
    Normalize `root` in place and return it.

    Comments are removed everywhere, adjacent text nodes are merged, then
    each text node is collapsed and trimmed against its siblings.
    """
    for comment in root.find_all(string=tree.is_comment):
        tree.remove(comment)

    root.smooth()
    _collapse(root)
    return root


def _collapse(node: Tag) -> None:
    if node.name in PRESERVE_WHITESPACE:
        return

    # Decide every node against the unmodified siblings before changing any
    plan = []
    for child in tree.children(node):
        if tree.is_text(child):
            plan.append((child, _collapsed_text(child)))
        elif tree.is_element(child):
            _collapse(child)

    for child, text in plan:
        if text:
            child.replace_with(tree.new_text(text))
        else:
            tree.remove(child)


def _collapsed_text(node: PageElement) -> str:
    text = WHITESPACE.sub(" ", str(node))
    previous = node.previous_sibling
    following = node.next_sibling

    keep_leading = previous is not None and is_inline(previous)
    keep_trailing = following is not None and is_inline(following)

    if text == " ":
        return " " if keep_leading and keep_trailing else ""

    if not keep_leading:
        text = text.lstrip(" ")
    if not keep_trailing:
        text = text.rstrip(" ")
    return text
