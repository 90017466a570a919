"""
htmlforge CLI Generate Command
==============================

Generate a site from a source folder and a component folder.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from htmlforge.core.config import Config, get_config
from htmlforge.engine.document import DocumentGenerator
from htmlforge.engine.library import ComponentLibrary
from htmlforge.errors import SitePathError


def generate_site(
    source: Union[str, Path],
    components: Union[str, Path],
    destination: Union[str, Path],
    config: Optional[Config] = None,
) -> int:
    """
    Generate `destination` from `source` using the components folder.

    Args:
        source: Folder of pages
        components: Folder of component files
        destination: Output folder

    Returns:
        Exit code
    """
    config = config or get_config()
    source = Path(source)
    components = Path(components)
    destination = Path(destination)

    print(f"Generating {destination}/ from {source}/ ...")

    _check_components_location(components, destination)

    library = ComponentLibrary.load(
        components,
        suffix=config.get_str("build.component_suffix", ".html"),
    )
    generator = DocumentGenerator(library, config=config)
    report = generator.generate_site(source, destination)

    print()
    print(
        f"✓ Generated {len(report.pages)} page(s) and copied "
        f"{len(report.copied)} file(s) into {destination}/"
    )
    if report.warnings:
        print(f"  {report.warnings} warning(s), see above")
    print()

    return 0


def _check_components_location(components: Path, destination: Path) -> None:
    """The destination is emptied before generation; it must not hold the components."""
    components = components.resolve()
    destination = destination.resolve()
    if components == destination or destination in components.parents:
        raise SitePathError(
            f"components folder {components} must not be inside destination {destination}"
        )
