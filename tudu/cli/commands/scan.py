"""
Scan command implementation.

Reads each file named on the command line, picks its comment syntax and
reports the markers found in it.
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from tudu.config import WorkspaceConfig
from tudu.scanner import Scanner

from ..errors import CLIFileNotFoundError, CLIValidationError
from ..output import FileReport, print_json, print_standard, print_warnings

logger = logging.getLogger(__name__)

EXIT_WARNINGS = 2


def _read_source(path: Path) -> str:
    if not path.exists():
        raise CLIFileNotFoundError(
            f"Path '{path}' does not exist.",
            context={"path": str(path)},
        )
    if path.is_dir():
        raise CLIValidationError(
            f"'{path}' is a directory.",
            hint="Pass the files to scan explicitly, e.g. tudu scan src/*.js",
        )
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise CLIValidationError(
            f"'{path}' is not valid UTF-8 text.",
            context={"path": str(path), "position": exc.start},
        ) from exc
    except PermissionError as exc:
        raise CLIFileNotFoundError(
            f"Permission denied reading '{path}'.",
            code="CLI_PERMISSION_DENIED",
        ) from exc


def scan_files(workspace: WorkspaceConfig, files: List[str], language: Optional[str] = None) -> List[FileReport]:
    reports: List[FileReport] = []
    for name in files:
        path = Path(name)
        text = _read_source(path)
        syntax = workspace.syntax_for(path, language)
        result = Scanner(syntax).scan(text)
        logger.info(
            "Scanned %s: %d record(s), %d warning(s)",
            path, len(result.records), len(result.warnings),
        )
        reports.append(FileReport(path=str(path), result=result, source=text))
    return reports


def cmd_scan(args: argparse.Namespace) -> int:
    """
    Handle the 'scan' subcommand.

    Args:
        args: Parsed command-line arguments containing:
            - files: Files to scan
            - language: Optional language name overriding the file extension
            - format: Optional output format overriding the workspace setting
            - verbose: Show the source line next to each line number
            - strict: Exit with status 2 when any warning was produced
            - workspace_config: Loaded WorkspaceConfig

    Returns:
        Process exit code

    Examples:
        >>> args = argparse.Namespace(files=['app.js'], language=None, format=None,
        ...                           verbose=False, strict=False, workspace_config=config)
        >>> cmd_scan(args)  # doctest: +SKIP
    """
    workspace: WorkspaceConfig = args.workspace_config
    reports = scan_files(workspace, args.files, getattr(args, "language", None))

    output_format = getattr(args, "format", None) or workspace.output.format
    verbose = getattr(args, "verbose", False) or workspace.output.verbose
    if output_format == "json":
        print_json(reports)
    else:
        print_standard(reports, verbose=verbose)
        print_warnings(reports)

    if getattr(args, "strict", False) and any(report.result.warnings for report in reports):
        return EXIT_WARNINGS
    return 0
