"""Scan pipeline: locator -> recognizer -> attribute parser -> records."""

from __future__ import annotations

import logging
from typing import List, NamedTuple, Optional, Tuple

from tudu.errors import ScanWarning, WarningKind
from tudu.scanner.attributes import parse_attribute_section
from tudu.scanner.locator import CommentLocator, LineIndex
from tudu.scanner.records import (
    AttributeSet,
    MarkerID,
    MarkerKind,
    RawMarker,
    SourceLocation,
    TodoRecord,
)
from tudu.scanner.recognizer import MarkerForm, MarkerRecognizer, classify
from tudu.syntax import C_STYLE, CommentSyntaxConfig


class ScanResult(NamedTuple):
    records: Tuple[TodoRecord, ...]
    warnings: Tuple[ScanWarning, ...]


class Scanner:
    """Scans already-read source text for TODO/FIXME markers.

    The configuration is validated once, up front; a scan itself never
    raises for malformed markers and reports them as warnings instead.
    """

    def __init__(self, config: Optional[CommentSyntaxConfig] = None):
        self.config = config or C_STYLE
        self.config.validate()
        self.logger = logging.getLogger(__name__)

    def scan(self, text: str) -> ScanResult:
        line_index = LineIndex(text)
        locator = CommentLocator(text, self.config, line_index)
        recognizer = MarkerRecognizer(text, self.config)

        records: List[TodoRecord] = []
        warnings: List[ScanWarning] = []
        for span in locator:
            for raw in recognizer.markers(span):
                record = build_record(raw, line_index)
                records.append(record)
                warnings.extend(record.warnings)

        warnings.extend(locator.warnings)
        warnings.sort(key=lambda warning: warning.offset)
        self.logger.debug(
            "Scan produced %d record(s) and %d warning(s)", len(records), len(warnings)
        )
        return ScanResult(records=tuple(records), warnings=tuple(warnings))


def build_record(raw: RawMarker, line_index: LineIndex) -> TodoRecord:
    """Classify ``raw``, parse its attributes and attach any warnings."""
    shape = classify(raw)
    problems = list(shape.problems)
    marker_id: Optional[MarkerID] = None
    attributes = AttributeSet()
    kind = MarkerKind.UNTRACKED

    if shape.form is MarkerForm.PARENTHESIZED:
        parsed = parse_attribute_section(shape.section or "")
        marker_id = parsed.id
        attributes = parsed.attributes
        problems.extend(parsed.problems)
        if marker_id is not None:
            kind = MarkerKind.TRACKED
    elif shape.form is MarkerForm.LEGACY:
        marker_id = shape.legacy_id
        kind = MarkerKind.LEGACY

    line, column = line_index.position(raw.position)
    marker = str(marker_id) if marker_id else None
    warnings: List[ScanWarning] = []
    if problems:
        warnings.append(
            ScanWarning(
                kind=WarningKind.MALFORMED_ATTRIBUTE_SECTION,
                message=f"Malformed attribute section on {raw.keyword}: {'; '.join(problems)}",
                offset=raw.position,
                line=line,
                column=column,
                marker=marker,
            )
        )
    for key in attributes.duplicates():
        warnings.append(
            ScanWarning(
                kind=WarningKind.DUPLICATE_ATTRIBUTE_KEY,
                message=f"Attribute '{key}' appears more than once on {raw.keyword}",
                offset=raw.position,
                line=line,
                column=column,
                marker=marker,
            )
        )

    return TodoRecord(
        keyword=raw.keyword,
        id=marker_id,
        attributes=attributes,
        description=shape.description,
        location=SourceLocation(
            offset=raw.position,
            line=line,
            column=column,
            comment=raw.comment,
        ),
        kind=kind,
        warnings=tuple(warnings),
    )


def scan(text: str, config: Optional[CommentSyntaxConfig] = None) -> ScanResult:
    """Scan ``text`` with ``config`` (C-style comments by default)."""
    return Scanner(config).scan(text)


__all__ = ["ScanResult", "Scanner", "build_record", "scan"]
