"""Render records back into marker text."""

from __future__ import annotations

import re

from tudu.scanner.records import Attribute, MarkerKind, TodoRecord

# Values that would be re-split or re-read differently if written bare.
_NEEDS_QUOTES = re.compile(r"[=()]|,\s|,,|^,|,$")


def render_value(value: str) -> str:
    if value != value.strip() or _NEEDS_QUOTES.search(value):
        return f'"{value}"'
    return value


def render_attribute(attribute: Attribute) -> str:
    if attribute.is_flag:
        return attribute.key
    return f"{attribute.key}={render_value(str(attribute.value))}"


def render_marker(record: TodoRecord) -> str:
    """Marker text that scans back to an equivalent record."""
    if record.kind is MarkerKind.LEGACY and record.id is not None:
        head = f"{record.keyword} {record.id}"
    else:
        tokens = [str(record.id)] if record.id is not None else []
        tokens.extend(render_attribute(attribute) for attribute in record.attributes)
        head = f"{record.keyword}({', '.join(tokens)})" if tokens else record.keyword
    if record.description:
        return f"{head}: {record.description}"
    return f"{head}:"


def render_comment(record: TodoRecord, prefix: str = "//") -> str:
    return f"{prefix} {render_marker(record)}"


__all__ = ["render_value", "render_attribute", "render_marker", "render_comment"]
