"""
htmlforge CLI
=============

Command-line interface: htmlforge SOURCE COMPONENTS DESTINATION
"""

from htmlforge.cli.main import main, cli

__all__ = ["main", "cli"]
