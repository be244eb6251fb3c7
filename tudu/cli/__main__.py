"""
Main entry point for the tudu CLI when run as a module.

This allows the CLI to be executed using:
    python -m tudu.cli

or the equivalent console script entry point.
"""

import sys

from . import main

if __name__ == '__main__':
    sys.exit(main())
