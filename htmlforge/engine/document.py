"""
htmlforge Document Driver
=========================

Generates a destination tree from a source tree:

- ``*.html`` files are parsed, expanded against the component library,
  minified and serialized
- every other file is copied byte for byte
- the directory layout is mirrored

Files are processed one at a time, depth first, in name order.

Example:
    library = ComponentLibrary.load("components")
    generator = DocumentGenerator(library)
    report = generator.generate_site("pages", "public")
    print(f"{len(report.pages)} pages, {len(report.copied)} files copied")
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import List, Optional, Union

from htmlforge.core.config import Config, get_config
from htmlforge.engine import tree
from htmlforge.engine.diagnostics import Diagnostic, Diagnostics
from htmlforge.engine.expressions import ExpansionContext
from htmlforge.engine.library import ComponentLibrary
from htmlforge.engine.minify import minify as minify_tree
from htmlforge.engine.substitution import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_PASSES,
    SubstitutionEngine,
)
from htmlforge.errors import SitePathError
from htmlforge.utils.logger import Logger, get_logger


@dataclass
class GenerationReport:
    """What one generation run produced."""
    pages: List[str] = field(default_factory=list)
    copied: List[str] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def warnings(self) -> int:
        return len(self.diagnostics)


def site_path(relative: Union[str, Path, PurePosixPath]) -> str:
    """Site-relative path with a leading "/" and forward slashes."""
    return "/" + PurePosixPath(relative).as_posix().lstrip("/")


def render_document(
    source: str,
    library: ComponentLibrary,
    filepath: str = "/index.html",
    minify: bool = True,
    diagnostics: Optional[Diagnostics] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_passes: int = DEFAULT_MAX_PASSES,
) -> str:
    """
    Expand one HTML document held in memory.

    Args:
        source: Page markup
        library: Component library
        filepath: Site-relative path exposed as ``self.filepath``
        minify: Whether to strip comments and squeeze whitespace
        diagnostics: Reporter for warnings (a fresh one if None)

    Returns:
        Serialized HTML
    """
    document = tree.parse_html(source)
    if diagnostics is None:
        diagnostics = Diagnostics()
    context = ExpansionContext(filepath, diagnostics)
    SubstitutionEngine(library, max_depth, max_passes).expand(document, context)
    if minify:
        minify_tree(document)
    return tree.serialize(document)


class DocumentGenerator:
    """
    Walks a source folder and writes the generated site.

    Settings come from the configuration (``build.*`` and ``engine.*``
    keys); see htmlforge.core.config.
    """

    def __init__(
        self,
        library: ComponentLibrary,
        config: Optional[Config] = None,
        diagnostics: Optional[Diagnostics] = None,
        logger: Optional[Logger] = None,
    ) -> None:
        self.library = library
        self.config = config or get_config()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics(logger)
        self.logger = logger or get_logger()

        self.template_suffix = self.config.get_str("build.template_suffix", ".html")
        self.minify = self.config.get_bool("build.minify", True)
        self.engine = SubstitutionEngine(
            library,
            max_depth=self.config.get_int("engine.max_depth", DEFAULT_MAX_DEPTH),
            max_passes=self.config.get_int("engine.max_passes", DEFAULT_MAX_PASSES),
        )
        self._report = GenerationReport()

    def generate_site(
        self,
        source: Union[str, Path],
        destination: Union[str, Path],
    ) -> GenerationReport:
        """
        Generate `destination` from `source`.

        The destination is created if needed and emptied (hidden entries
        excepted) before anything is written. A failure part way leaves a
        partially generated destination behind.

        Raises:
            SitePathError: If a path has the wrong type, or one folder
                contains the other
        """
        source = Path(source)
        destination = Path(destination)

        if not source.is_dir():
            raise SitePathError(f"source path must be a directory: {source}")
        _check_disjoint(source, destination)

        self._report = GenerationReport()
        first_diagnostic = len(self.diagnostics)

        self.prepare_destination(destination)
        self.generate_folder(source, destination, source)

        self._report.diagnostics = self.diagnostics.records[first_diagnostic:]
        return self._report

    def prepare_destination(self, destination: Union[str, Path]) -> None:
        """Create `destination`, or empty it keeping hidden entries."""
        destination = Path(destination)

        if not destination.exists():
            destination.mkdir(parents=True)
            return
        if not destination.is_dir():
            raise SitePathError(f"destination path must be a directory: {destination}")

        for entry in destination.iterdir():
            if entry.name.startswith("."):
                continue
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()

    def generate_folder(
        self,
        source: Path,
        destination: Path,
        root: Path,
    ) -> None:
        """Mirror one source folder into `destination`, recursively."""
        if not source.is_dir():
            raise SitePathError(f"source path must be a directory: {source}")

        destination.mkdir(exist_ok=True)

        for entry in sorted(source.iterdir()):
            target = destination / entry.name
            if entry.is_dir():
                self.generate_folder(entry, target, root)
            elif entry.is_file():
                relative = site_path(entry.relative_to(root))
                if entry.suffix == self.template_suffix:
                    self.generate_file(entry, target, relative)
                else:
                    shutil.copy2(entry, target)
                    self._report.copied.append(relative)
                    self.logger.with_context(file=relative).debug("Copied file")

    def generate_file(
        self,
        source: Path,
        destination: Path,
        filepath: Optional[str] = None,
    ) -> str:
        """
        Expand one page and write it.

        Args:
            source: Page file
            destination: Output file
            filepath: Site-relative path exposed as ``self.filepath``
                (defaults to "/" + the file name)

        Returns:
            The generated HTML
        """
        if not source.is_file():
            raise SitePathError(f"source path must be a file: {source}")

        filepath = filepath or site_path(source.name)
        document = tree.parse_html(source.read_text(encoding="utf-8"))
        context = ExpansionContext(filepath, self.diagnostics, source=source)

        passes = self.engine.expand(document, context)
        if self.minify:
            minify_tree(document)

        generated = tree.serialize(document)
        destination.write_text(generated, encoding="utf-8")

        self._report.pages.append(filepath)
        self.logger.with_context(file=filepath).info("Rendered page", passes=passes)
        return generated


def _check_disjoint(source: Path, destination: Path) -> None:
    source = source.resolve()
    destination = destination.resolve()

    if destination == source or _is_within(destination, source):
        raise SitePathError(
            f"destination {destination} must not be inside source {source}"
        )
    if _is_within(source, destination):
        raise SitePathError(
            f"source {source} must not be inside destination {destination}"
        )


def _is_within(path: Path, folder: Path) -> bool:
    try:
        path.relative_to(folder)
    except ValueError:
        return False
    return True
