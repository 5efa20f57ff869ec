"""Entry point for ``python -m langref``."""

import sys

from langref.cli import main

if __name__ == "__main__":
    sys.exit(main())
