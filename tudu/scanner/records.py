"""Data model produced by the scanner."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple, Union

from tudu.errors import ScanWarning

MARKER_ID_PATTERN = re.compile(r"([A-Z][A-Z0-9]*)-([0-9]+)")


class CommentStyle(Enum):
    LINE = "line"
    BLOCK = "block"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CommentSpan:
    """Offsets of one comment in the scanned text.

    ``start``/``end`` cover the whole comment including its delimiters,
    ``body_start``/``body_end`` only the text between them.
    """

    start: int
    end: int
    style: CommentStyle
    body_start: int
    body_end: int

    def text(self, source: str) -> str:
        return source[self.start:self.end]

    def body(self, source: str) -> str:
        return source[self.body_start:self.body_end]


@dataclass(frozen=True)
class MarkerID:
    """Issue reference such as ``TASK-123``."""

    prefix: str
    number: str

    @classmethod
    def parse(cls, token: str) -> Optional["MarkerID"]:
        match = MARKER_ID_PATTERN.fullmatch(token)
        if match is None:
            return None
        return cls(prefix=match.group(1), number=match.group(2))

    def __str__(self) -> str:
        return f"{self.prefix}-{self.number}"


@dataclass(frozen=True)
class RawMarker:
    """A keyword occurrence before classification.

    ``trailing_text`` is everything after the keyword that belongs to this
    marker, with continuation lines of a block comment joined by newlines.
    """

    keyword: str
    position: int
    comment: CommentSpan
    trailing_text: str


class AttributeKind(Enum):
    FLAG = "flag"
    KEY_VALUE = "keyValue"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Attribute:
    kind: AttributeKind
    key: str
    value: Union[bool, str] = True

    @property
    def is_flag(self) -> bool:
        return self.kind is AttributeKind.FLAG

    @property
    def values(self) -> List[str]:
        """Raw value re-split on commas; flags yield an empty list."""
        if self.is_flag:
            return []
        return [part.strip() for part in str(self.value).split(",") if part.strip()]

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "key": self.key, "value": self.value}


@dataclass(frozen=True)
class AttributeSet:
    """Ordered attributes of one marker; duplicates are kept in source order."""

    items: Tuple[Attribute, ...] = ()

    def __iter__(self) -> Iterator[Attribute]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __bool__(self) -> bool:
        return bool(self.items)

    def __getitem__(self, index: int) -> Attribute:
        return self.items[index]

    def get(self, key: str, default: Any = None) -> Any:
        for item in self.items:
            if item.key == key:
                return item.value
        return default

    def get_all(self, key: str) -> List[Union[bool, str]]:
        return [item.value for item in self.items if item.key == key]

    def keys(self) -> List[str]:
        return [item.key for item in self.items]

    @property
    def flags(self) -> Set[str]:
        return {item.key for item in self.items if item.is_flag}

    def as_dict(self) -> Dict[str, str]:
        """Key/value attributes as an ordered mapping; the first entry of a duplicated key wins."""
        values: Dict[str, str] = {}
        for item in self.items:
            if not item.is_flag and item.key not in values:
                values[item.key] = str(item.value)
        return values

    def duplicates(self) -> List[str]:
        seen: Set[str] = set()
        repeated: List[str] = []
        for item in self.items:
            if item.key in seen and item.key not in repeated:
                repeated.append(item.key)
            seen.add(item.key)
        return repeated


class MarkerKind(Enum):
    UNTRACKED = "untracked"
    TRACKED = "tracked"
    LEGACY = "legacy"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SourceLocation:
    """Where a marker keyword starts; line and column are 1-based."""

    offset: int
    line: int
    column: int
    comment: CommentSpan

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


@dataclass(frozen=True)
class TodoRecord:
    keyword: str
    id: Optional[MarkerID]
    attributes: AttributeSet
    description: str
    location: SourceLocation
    kind: MarkerKind = MarkerKind.UNTRACKED
    warnings: Tuple[ScanWarning, ...] = field(default_factory=tuple)

    @property
    def is_tracked(self) -> bool:
        return self.id is not None

    @property
    def is_new(self) -> bool:
        return bool(self.attributes) and self.attributes[0].key == "new"

    @property
    def new_title(self) -> Optional[str]:
        if not self.is_new:
            return None
        value = self.attributes[0].value
        return None if value is True else str(value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "keyword": self.keyword,
            "id": str(self.id) if self.id else None,
            "kind": self.kind.value,
            "attributes": [item.to_dict() for item in self.attributes],
            "description": self.description,
            "offset": self.location.offset,
            "line": self.location.line,
            "column": self.location.column,
            "comment_style": self.location.comment.style.value,
            "warnings": [warning.to_dict() for warning in self.warnings],
        }


__all__ = [
    "MARKER_ID_PATTERN",
    "CommentStyle",
    "CommentSpan",
    "MarkerID",
    "RawMarker",
    "AttributeKind",
    "Attribute",
    "AttributeSet",
    "MarkerKind",
    "SourceLocation",
    "TodoRecord",
]
