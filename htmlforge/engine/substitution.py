"""
htmlforge Substitution Engine
=============================

Rewrites a document tree until no component tag is left.

Two levels of rewriting are involved:

1. The engine walks the document. Children are expanded before their
   parent; when an element's tag name is a library component, the
   component is instantiated with that element as invocation context, its
   nodes are spliced in place of the element, and the spliced nodes are
   expanded again (components may emit other components, or themselves).
   Whole-document passes repeat until one pass changes nothing.

2. Inside one instantiation the cloned component body is rewritten against
   the invocation context. First every ``${...}`` placeholder in attribute
   values and text is expanded (``class="${self.variant}"``), then these
   constructs are replaced, innermost first:

       <foreachchild.VAR>   one copy of its content (a single element, after
                            rewriting) per element child of the invocation;
                            <self.VAR> (or <VAR>) inside the copy becomes
                            that child
       <if EXPR="PATTERN">  children of <then> or <else>
       <self.inner>         copies of the invocation's children
       <self.ATTR>          the invocation's ATTR value as text

Runaway recursion is stopped by a nesting ceiling (``max_depth``) and a
pass ceiling (``max_passes``); either raises ExpansionLimitError.

Example:
    library = ComponentLibrary.from_strings({
        "greeting": "<p>Hello, <self.name/>!</p>",
    })
    document = parse_html('<greeting name="World"></greeting>')
    expand(document, library, ExpansionContext("/index.html"))
"""

from __future__ import annotations

from typing import Collection, List, Optional

from bs4 import Tag
from bs4.element import PageElement

from htmlforge.engine import tree
from htmlforge.engine.diagnostics import MALFORMED_IF, MISSING_ATTRIBUTE
from htmlforge.engine.expressions import (
    ExpansionContext,
    expand_string,
    matches_pattern,
)
from htmlforge.engine.library import ComponentDefinition, ComponentLibrary
from htmlforge.errors import ComponentStructureError, ExpansionLimitError

FOREACH_TAG = "foreachchild"
FOREACH_PREFIX = FOREACH_TAG + "."
IF_TAG = "if"
THEN_TAG = "then"
ELSE_TAG = "else"
SELF_PREFIX = "self."
INNER_ATTRIBUTE = "inner"

DEFAULT_MAX_DEPTH = 64
DEFAULT_MAX_PASSES = 32


def loop_variable_tags(variable: str) -> List[str]:
    """Tag names that stand for the loop variable inside a loop body."""
    return [SELF_PREFIX + variable, variable]


class Instantiation:
    """
    One expansion of a component for one invocation.

    The invocation element is only read, never modified; the body is a
    fresh clone of the definition.
    """

    def __init__(
        self,
        definition: ComponentDefinition,
        invocation: Tag,
        file: ExpansionContext,
    ) -> None:
        self.definition = definition
        self.invocation = invocation
        self.file = file
        self.body = definition.instantiate()
        # Loop variable tags of the enclosing loops, innermost last
        self._bound: List[str] = []

    def run(self) -> List[PageElement]:
        """Rewrite the body and return its top-level nodes."""
        self.expand_placeholders()
        for child in tree.children(self.body):
            self.substitute(child)
        return tree.children(self.body)

    def expand_placeholders(self) -> None:
        """Expand ``${...}`` in every attribute value and text node of the body."""
        for node in list(self.body.descendants):
            if tree.is_element(node):
                # <if> patterns are expanded by matches_pattern, exactly once
                if node.name == IF_TAG:
                    continue
                node.attrs = {
                    name: expand_string(value, self.invocation, self.file)
                    if isinstance(value, str) else value
                    for name, value in node.attrs.items()
                }
            elif tree.is_text(node) and "${" in node:
                expanded = expand_string(str(node), self.invocation, self.file)
                if expanded:
                    node.replace_with(type(node)(expanded))
                else:
                    tree.remove(node)

    def substitute(self, node: PageElement) -> None:
        if not tree.is_element(node):
            return

        name = node.name
        if name in self._bound:
            # Left for the enclosing loop to replace
            return

        if name == FOREACH_TAG or name.startswith(FOREACH_PREFIX):
            self._foreach(node)
            return

        for child in tree.children(node):
            self.substitute(child)

        if name == IF_TAG:
            self._if(node)
        elif name.startswith(SELF_PREFIX):
            self._self(node)

    def _structure_error(self, message: str) -> ComponentStructureError:
        return ComponentStructureError(
            f"{message} (component <{self.definition.tag_name}>)",
            path=self.definition.source or self.file.source,
        )

    def _foreach(self, node: Tag) -> None:
        variable = node.name[len(FOREACH_PREFIX):]
        if node.name == FOREACH_TAG or not variable:
            raise self._structure_error(
                f"<{node.name}> has no loop variable, write <{FOREACH_PREFIX}NAME>"
            )

        templates = tree.element_children(node)
        if len(templates) != 1:
            raise self._structure_error(
                f"<{node.name}> must contain exactly one element, found {len(templates)}"
            )

        names = loop_variable_tags(variable)
        self._bound.extend(names)
        try:
            self.substitute(templates[0])
        finally:
            del self._bound[-len(names):]

        # The rewrite may have turned the template into any number of nodes
        body = tree.children(node)
        iterations = [
            substitute_tag(tree.clone(part), names, item)
            for item in tree.element_children(self.invocation)
            for part in body
        ]
        tree.splice(node, iterations)

    def _if(self, node: Tag) -> None:
        attributes = list(node.attrs.items())
        if len(attributes) != 1:
            self.file.warn(
                MALFORMED_IF,
                f"<if> needs exactly one attribute, found {len(attributes)}",
                tag=self.invocation.name,
            )
            tree.remove(node)
            return

        expr, pattern = attributes[0]
        then_branch = _first_child(node, THEN_TAG)
        else_branch = _first_child(node, ELSE_TAG)
        if then_branch is None and else_branch is None:
            self.file.warn(
                MALFORMED_IF,
                f"<if {expr}> has neither <then> nor <else>",
                tag=self.invocation.name,
            )

        if matches_pattern(expr, pattern or "", self.invocation, self.file):
            branch = then_branch
        else:
            branch = else_branch

        tree.splice(node, tree.children(branch) if branch is not None else [])

    def _self(self, node: Tag) -> None:
        attribute = node.name[len(SELF_PREFIX):]

        if attribute == INNER_ATTRIBUTE:
            tree.splice(node, [tree.clone(child) for child in self.invocation.contents])
            return

        value = self.invocation.get(attribute)
        if value is None:
            available = ", ".join(self.invocation.attrs) or "(none)"
            self.file.warn(
                MISSING_ATTRIBUTE,
                f"undefined attribute self.{attribute}; "
                f"available attributes: {available}",
                tag=self.invocation.name,
            )
            tree.remove(node)
        elif not value:
            tree.remove(node)
        else:
            tree.splice(node, [tree.new_text(str(value))])


def _first_child(node: Tag, name: str) -> Optional[Tag]:
    for child in tree.element_children(node):
        if child.name == name:
            return child
    return None


def substitute_tag(
    node: PageElement,
    tag_names: Collection[str],
    replacement: Tag,
) -> PageElement:
    """
    Replace every element named in `tag_names` inside `node` (including
    `node` itself) with a copy of `replacement`.

    Attributes written on the replaced occurrence are copied onto the copy,
    overriding its own. Replacement copies are not searched again.

    Returns:
        `node`, or its replacement when `node` itself matched
    """
    if not tree.is_element(node):
        return node

    if node.name in tag_names:
        copy = tree.clone(replacement)
        for name, value in node.attrs.items():
            copy[name] = value
        if node.parent is not None:
            node.replace_with(copy)
        return copy

    for child in tree.children(node):
        substitute_tag(child, tag_names, replacement)
    return node


class SubstitutionEngine:
    """
    Expands component tags against a library until a fixed point.

    Example:
        engine = SubstitutionEngine(library)
        passes = engine.expand(document, ExpansionContext("/index.html"))
    """

    def __init__(
        self,
        library: ComponentLibrary,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_passes: int = DEFAULT_MAX_PASSES,
    ) -> None:
        self.library = library
        self.max_depth = max_depth
        self.max_passes = max_passes
        # Tag of the innermost expansion in progress, for error messages
        self._expanding: Optional[str] = None

    def expand(self, root: Tag, file: ExpansionContext) -> int:
        """
        Expand every top-level node of `root` until nothing changes.

        Returns:
            Number of passes made, including the final unchanged one

        Raises:
            ExpansionLimitError: If no fixed point is reached in max_passes,
                or expansion nests deeper than the interpreter allows
        """
        self._expanding = None
        for passes in range(1, self.max_passes + 1):
            changed = False
            for node in tree.children(root):
                try:
                    if self.substitute(node, file):
                        changed = True
                except RecursionError:
                    raise ExpansionLimitError(
                        f"expansion of <{self._expanding}> in page {file.filepath} "
                        f"nests too deep to finish; "
                        f"is a component invoking itself without end?",
                        path=file.source,
                    ) from None
            if not changed:
                return passes

        raise ExpansionLimitError(
            f"page {file.filepath} still changing after {self.max_passes} passes",
            path=file.source,
        )

    def substitute(self, node: PageElement, file: ExpansionContext, depth: int = 0) -> bool:
        """
        Expand components in and at `node`.

        `depth` counts the component expansions enclosing `node`.

        Returns:
            Whether anything was expanded
        """
        if not tree.is_element(node):
            return False

        changed = False
        for child in tree.children(node):
            if self.substitute(child, file, depth):
                changed = True

        definition = self.library.get(node.name)
        if definition is None:
            return changed

        if depth >= self.max_depth:
            raise ExpansionLimitError(
                f"components nested more than {self.max_depth} deep at "
                f"<{node.name}> in page {file.filepath}; "
                f"is a component invoking itself without end?",
                path=file.source,
            )

        self._expanding = node.name
        nodes = tree.splice(node, Instantiation(definition, node, file).run())
        for spliced in nodes:
            self.substitute(spliced, file, depth + 1)
        return True


def substitute(
    node: PageElement,
    library: ComponentLibrary,
    file: ExpansionContext,
) -> bool:
    """Expand components in and at `node` once; see SubstitutionEngine.substitute."""
    return SubstitutionEngine(library).substitute(node, file)


def expand(
    root: Tag,
    library: ComponentLibrary,
    file: ExpansionContext,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_passes: int = DEFAULT_MAX_PASSES,
) -> int:
    """Expand `root` to a fixed point; see SubstitutionEngine.expand."""
    return SubstitutionEngine(library, max_depth, max_passes).expand(root, file)
