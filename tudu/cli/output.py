"""
Output formatting for CLI operations.

Two reporters are available: the human-readable ``standard`` layout,
rendered with rich, and machine-readable ``json``.
"""

import json
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from tudu.scanner import ScanResult
from tudu.syntax import LanguageRegistry


@dataclass
class FileReport:
    """Scan outcome for one file named on the command line."""

    path: str
    result: ScanResult
    source: str = ""

    def line_content(self, line: int) -> str:
        """Trimmed text of the 1-based source ``line``."""
        lines = self.source.split("\n")
        if 0 < line <= len(lines):
            return lines[line - 1].strip()
        return ""


def _console(stderr: bool = False) -> Console:
    return Console(stderr=stderr, markup=False, highlight=False, soft_wrap=True)


def print_standard(
    reports: Sequence[FileReport],
    verbose: bool = False,
    console: Optional[Console] = None,
) -> None:
    """
    Print records grouped by file.

    Examples:
        >>> print_standard(reports)  # doctest: +SKIP

        Found 2 TODOs:
        📁 src/app.js:
          Line 4
          Line 9

        Total: 2 TODOs across 1 file(s)
    """
    console = console or _console()
    total = sum(len(report.result.records) for report in reports)
    if total == 0:
        console.print("No TODOs found.")
        return

    console.print(f"\nFound {total} TODOs:")
    with_records = sorted(
        (report for report in reports if report.result.records),
        key=lambda report: report.path,
    )
    for report in with_records:
        console.print(f"📁 {report.path}:")
        for record in report.result.records:
            if verbose:
                console.print(f"  Line {record.location.line}: {report.line_content(record.location.line)}")
            else:
                console.print(f"  Line {record.location.line}")
        console.print()

    console.print(f"Total: {total} TODOs across {len(with_records)} file(s)")


def print_warnings(reports: Sequence[FileReport], console: Optional[Console] = None) -> None:
    console = console or _console(stderr=True)
    for report in reports:
        for warning in report.result.warnings:
            console.print(warning.format(report.path), style="yellow")


def build_json_payload(reports: Sequence[FileReport]) -> Dict[str, List[dict]]:
    records: List[dict] = []
    warnings: List[dict] = []
    for report in reports:
        for record in report.result.records:
            records.append({"path": report.path, **record.to_dict()})
        for warning in report.result.warnings:
            warnings.append({"path": report.path, **warning.to_dict()})
    return {"records": records, "warnings": warnings}


def print_json(reports: Sequence[FileReport]) -> None:
    print(json.dumps(build_json_payload(reports), indent=2, ensure_ascii=False))


def print_languages(registry: LanguageRegistry, console: Optional[Console] = None) -> None:
    console = console or _console()
    table = Table(title="Comment syntaxes")
    table.add_column("Language")
    table.add_column("Extensions")
    table.add_column("Line comments")
    table.add_column("Block comments")
    for name in sorted(registry.languages):
        syntax = registry.languages[name]
        table.add_row(
            name,
            " ".join(registry.extensions_for(name)) or "-",
            " ".join(syntax.line_comment_prefixes) or "-",
            " ".join(f"{block.start} {block.end}" for block in syntax.block_comment_delimiters) or "-",
        )
    console.print(table)


__all__ = [
    "FileReport",
    "print_standard",
    "print_warnings",
    "build_json_payload",
    "print_json",
    "print_languages",
]
