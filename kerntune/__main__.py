"""
Entry point for running kerntune as a module.

Usage:
    python -m kerntune suggest
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
