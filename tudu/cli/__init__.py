"""
tudu CLI entry point.

Dispatches to the command modules in ``tudu.cli.commands``.
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from tudu import __version__
from tudu.config import OUTPUT_FORMATS, load_workspace_config
from tudu.errors import TuduError

from .commands import cmd_languages, cmd_scan
from .errors import CLIConfigError, CLIError, handle_cli_exception

COMMANDS = {'scan', 'languages'}


def _configure_logging(args) -> None:
    """Configure the level of the tudu logger from CLI args or environment."""
    log_level = (
        getattr(args, 'log_level', None) or
        os.getenv('TUDU_LOG_LEVEL', 'warn')
    ).lower()

    level_map = {
        'debug': logging.DEBUG,
        'info': logging.INFO,
        'warn': logging.WARNING,
        'warning': logging.WARNING,
        'error': logging.ERROR,
    }
    numeric_level = level_map.get(log_level, logging.WARNING)

    tudu_logger = logging.getLogger('tudu')
    tudu_logger.setLevel(numeric_level)

    if not tudu_logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        handler.setFormatter(formatter)
        tudu_logger.addHandler(handler)
        # Keep records away from the root logger to avoid duplicate messages
        tudu_logger.propagate = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="tudu – find TODO and FIXME markers in source files",
        prog="tudu"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        '--config',
        default=None,
        help='Path to a tudu.toml configuration file'
    )
    parser.add_argument(
        '--workspace',
        default=None,
        help='Workspace root directory (defaults to current working directory)'
    )
    parser.add_argument(
        '--log-level',
        choices=['debug', 'info', 'warn', 'error'],
        default=None,
        help='Set logging level (or set TUDU_LOG_LEVEL)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    scan_parser = subparsers.add_parser(
        'scan',
        help='Scan files for TODO/FIXME markers'
    )
    scan_parser.add_argument('files', nargs='+', metavar='FILE', help='Files to scan')
    scan_parser.add_argument(
        '-v', '--verbose', action='store_true',
        help='Show the source line next to each line number'
    )
    scan_parser.add_argument(
        '--format',
        choices=list(OUTPUT_FORMATS),
        default=None,
        help='Output format (overrides the workspace configuration)'
    )
    scan_parser.add_argument(
        '--language',
        default=None,
        help='Comment syntax to use instead of guessing from the file extension'
    )
    scan_parser.add_argument(
        '--strict', action='store_true',
        help='Exit with status 2 when any warning is reported'
    )
    scan_parser.set_defaults(func=cmd_scan)

    languages_parser = subparsers.add_parser(
        'languages',
        help='List known comment syntaxes and their file extensions'
    )
    languages_parser.set_defaults(func=cmd_languages)

    return parser


def main(argv: Optional[list] = None) -> int:
    """
    Main CLI entrypoint with subcommand support.

    Args:
        argv: Command-line arguments (None uses sys.argv[1:])

    Examples:
        Scan a file:
        >>> main(['scan', 'app.js'])  # doctest: +SKIP

        Legacy invocation, same as above:
        >>> main(['app.js'])  # doctest: +SKIP
    """
    if argv is None:
        argv = sys.argv[1:]

    # Legacy invocation support: a bare file path means 'scan'
    if (
        len(argv) > 0
        and not argv[0].startswith('-')
        and argv[0] not in COMMANDS
        and Path(argv[0]).exists()
    ):
        print(
            "Note: Using legacy invocation. Consider using 'tudu scan' instead.",
            file=sys.stderr
        )
        argv = ['scan'] + list(argv)

    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)

    if not getattr(args, 'func', None):
        parser.print_help()
        return 1

    try:
        workspace_root = Path(args.workspace) if args.workspace else Path.cwd()
        config_path = Path(args.config) if args.config else None
        try:
            args.workspace_config = load_workspace_config(workspace_root, config_path)
        except TuduError as exc:
            raise CLIConfigError(exc.format()) from exc
        return args.func(args)
    except (CLIError, TuduError) as exc:
        handle_cli_exception(exc)
        return 1


__all__ = ["main", "build_parser"]
