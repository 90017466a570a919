"""
htmlforge Component Library
===========================

Loads component definitions from a flat folder. Each file holds one
component; the file stem is the tag name that invokes it:

    components/
        card.html        -> <card ...>...</card>
        nav-link.html    -> <nav-link href="/">Home</nav-link>

The library is built once per run and is read-only afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Mapping, Optional, Union

from bs4 import Tag

from htmlforge.engine import tree
from htmlforge.errors import (
    ComponentStructureError,
    DuplicateComponentError,
    SitePathError,
)
from htmlforge.utils.logger import get_logger


@dataclass(frozen=True)
class ComponentDefinition:
    """
    A named, reusable markup fragment.

    Attributes:
        tag_name: Lower-cased tag name that invokes the component
        body: Detached container whose children are the file's top-level
            nodes; never mutated, always cloned before use
        source: File the definition was loaded from
    """
    tag_name: str
    body: Tag
    source: Optional[Path] = None

    @classmethod
    def from_string(
        cls,
        tag_name: str,
        markup: str,
        source: Optional[Path] = None,
    ) -> "ComponentDefinition":
        """
        Parse component markup.

        Raises:
            ComponentStructureError: Unless the markup has exactly one root
                element (surrounding whitespace and comments are allowed)
        """
        document = tree.parse_html(markup)
        nodes = tree.children(document)

        roots = [node for node in nodes if tree.is_element(node)]
        stray_text = [
            node for node in nodes
            if tree.is_text(node) and not tree.is_blank(node)
        ]
        if len(roots) != 1 or stray_text:
            raise ComponentStructureError(
                f"component <{tag_name}> must have exactly one root element, "
                f"found {len(roots)} element(s) and {len(stray_text)} text node(s)",
                path=source,
            )

        body = tree.new_container()
        for node in nodes:
            if tree.is_blank(node):
                continue
            body.append(node.extract())

        return cls(tag_name=tag_name.lower(), body=body, source=source)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ComponentDefinition":
        """Load a definition; the file stem becomes the tag name."""
        path = Path(path)
        source_text = path.read_text(encoding="utf-8")
        return cls.from_string(path.stem, source_text, source=path)

    def instantiate(self) -> Tag:
        """Fresh deep copy of the body, safe to rewrite."""
        return tree.clone(self.body)


class ComponentLibrary:
    """
    Mapping from tag name to component definition.

    Example:
        library = ComponentLibrary.load("components")
        card = library.get("card")
    """

    def __init__(self, definitions: Optional[Mapping[str, ComponentDefinition]] = None) -> None:
        self._definitions: Dict[str, ComponentDefinition] = {}
        for definition in (definitions or {}).values():
            self._add(definition)

    def _add(self, definition: ComponentDefinition) -> None:
        previous = self._definitions.get(definition.tag_name)
        if previous is not None:
            raise DuplicateComponentError(
                f"component <{definition.tag_name}> is defined twice: "
                f"{previous.source} and {definition.source}",
                path=definition.source,
            )
        self._definitions[definition.tag_name] = definition

    @classmethod
    def load(
        cls,
        folder: Union[str, Path],
        suffix: str = ".html",
    ) -> "ComponentLibrary":
        """
        Load every component file directly inside `folder`.

        Subdirectories and files with another suffix are ignored.

        Raises:
            SitePathError: If `folder` is not a directory
            DuplicateComponentError: If two files give the same tag name
            ComponentStructureError: If a file is not a single root element
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise SitePathError(f"components path must be a directory: {folder}")

        logger = get_logger()
        library = cls()
        for entry in sorted(folder.iterdir()):
            if not entry.is_file() or entry.suffix.lower() != suffix.lower():
                continue
            library._add(ComponentDefinition.from_file(entry))
            logger.debug(f"Loaded component <{entry.stem.lower()}>", path=str(entry))

        logger.info(f"Loaded {len(library)} component(s)", folder=str(folder))
        return library

    @classmethod
    def from_strings(cls, components: Mapping[str, str]) -> "ComponentLibrary":
        """Build a library from {tag_name: markup}."""
        library = cls()
        for tag_name, markup in components.items():
            library._add(ComponentDefinition.from_string(tag_name, markup))
        return library

    def get(self, tag_name: str) -> Optional[ComponentDefinition]:
        return self._definitions.get(tag_name)

    def names(self) -> List[str]:
        return sorted(self._definitions)

    def __contains__(self, tag_name: object) -> bool:
        return tag_name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())
