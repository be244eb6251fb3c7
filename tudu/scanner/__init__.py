"""Comment-marker scanner: locator, recognizer and attribute parser."""

from __future__ import annotations

from .attributes import (
    AttributeParseResult,
    interpret_attributes,
    parse_attribute_section,
)
from .locator import CommentLocator, LexState, LineIndex, locate_comments
from .recognizer import MarkerForm, MarkerRecognizer, MarkerShape, classify
from .records import (
    Attribute,
    AttributeKind,
    AttributeSet,
    CommentSpan,
    CommentStyle,
    MarkerID,
    MarkerKind,
    RawMarker,
    SourceLocation,
    TodoRecord,
)
from .render import render_comment, render_marker
from .scan import Scanner, ScanResult, build_record, scan

__all__ = [
    "Attribute",
    "AttributeKind",
    "AttributeParseResult",
    "AttributeSet",
    "CommentLocator",
    "CommentSpan",
    "CommentStyle",
    "LexState",
    "LineIndex",
    "MarkerForm",
    "MarkerID",
    "MarkerKind",
    "MarkerRecognizer",
    "MarkerShape",
    "RawMarker",
    "ScanResult",
    "Scanner",
    "SourceLocation",
    "TodoRecord",
    "build_record",
    "classify",
    "interpret_attributes",
    "locate_comments",
    "parse_attribute_section",
    "render_comment",
    "render_marker",
    "scan",
]
