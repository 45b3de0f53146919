"""
Package entry point.

Allows running the application via:

    python -m zutplan

This simply forwards execution to zutplan.cli.main().
"""

from zutplan.cli import main

if __name__ == "__main__":
    main()
