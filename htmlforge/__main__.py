"""
htmlforge CLI Entry Point
=========================

Allows running htmlforge as a module: python -m htmlforge
"""

from htmlforge.cli.main import main

if __name__ == "__main__":
    main()
