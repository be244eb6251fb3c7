"""
CLI command modules.

Each module implements one tudu subcommand.
"""

from .languages import cmd_languages
from .scan import cmd_scan, scan_files

__all__ = ["cmd_languages", "cmd_scan", "scan_files"]
