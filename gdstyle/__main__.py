"""Entry point for ``python -m gdstyle``."""

from gdstyle.cli import main

main()
