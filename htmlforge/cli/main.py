"""
htmlforge CLI Main Module
=========================

Main CLI entry point.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from htmlforge import __version__
from htmlforge.core.config import Config
from htmlforge.errors import HtmlForgeError
from htmlforge.utils.logger import LogLevel, configure_logging


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="htmlforge",
        description="Expand HTML pages by substituting component tags.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  htmlforge pages components public    Generate public/ from pages/

Environment:
  HTMLFORGE_BUILD__MINIFY=false         Keep comments and whitespace
  HTMLFORGE_ENGINE__MAX_DEPTH=16        Lower the component nesting ceiling
  HTMLFORGE_LOG__LEVEL=warning          Only print warnings and errors
        """,
    )

    parser.add_argument(
        "-v", "--version",
        action="version",
        version=f"htmlforge {__version__}",
    )
    parser.add_argument(
        "source",
        help="Folder of pages; *.html files are expanded, others copied",
    )
    parser.add_argument(
        "components",
        help="Folder of component files, one per tag",
    )
    parser.add_argument(
        "destination",
        help="Output folder (created, or emptied of non-hidden entries)",
    )

    return parser


def cli(args: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    from htmlforge.cli.commands.generate import generate_site

    try:
        config = Config.from_env()
        configure_logging(
            level=LogLevel.parse(config.get_str("log.level", "INFO")),
            format=config.get_str("log.format", "text"),
        )
        return generate_site(
            parsed.source,
            parsed.components,
            parsed.destination,
            config=config,
        )
    except KeyboardInterrupt:
        print("\nAborted.")
        return 130
    except (HtmlForgeError, OSError, RecursionError, UnicodeDecodeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main() -> None:
    """Main entry point."""
    sys.exit(cli())


if __name__ == "__main__":
    main()
