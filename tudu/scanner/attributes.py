"""Attribute parser for parenthesized markers.

``TODO(TASK-100, bidir, labels=api,rest, status=In Progress)`` carries the
section ``TASK-100, bidir, labels=api,rest, status=In Progress``. It is split
on top-level commas; the first token is the marker id when it matches the id
grammar, every other token is either a flag (``bidir``) or a ``key=value``
pair split on the first ``=``. Keys are never checked against a schema.

A comma that directly follows a ``key=value`` token without whitespace, and
whose next segment has no ``=``, continues that value. This keeps
``labels=urgent,backend`` as a single attribute while ``labels=a, bidir``
yields a label and a flag.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from tudu.scanner.records import Attribute, AttributeKind, AttributeSet, MarkerID

DEFAULT_LIST_KEYS: FrozenSet[str] = frozenset({"labels"})

BOOLEAN_VALUES = {"true", "false"}


@dataclass(frozen=True)
class AttributeParseResult:
    id: Optional[MarkerID]
    attributes: AttributeSet
    problems: Tuple[str, ...] = ()

    @property
    def duplicates(self) -> List[str]:
        return self.attributes.duplicates()


def _split_top_level(content: str) -> Tuple[List[str], List[str]]:
    segments: List[str] = []
    problems: List[str] = []
    current: List[str] = []
    in_quote = False
    nested = False
    for char in content:
        if char == '"':
            in_quote = not in_quote
        elif not in_quote:
            if char == ",":
                segments.append("".join(current))
                current = []
                continue
            if char in "()":
                nested = True
        current.append(char)
    segments.append("".join(current))
    if in_quote:
        problems.append("unterminated quoted value in attribute section")
    if nested:
        problems.append("nested parentheses in attribute section")
    return segments, problems


def _merge_list_values(segments: List[str]) -> List[str]:
    tokens: List[str] = []
    for index, segment in enumerate(segments):
        continues_value = (
            index > 0
            and "=" in tokens[-1]
            and segment != ""
            and not segment[0].isspace()
            and "=" not in segment
        )
        if continues_value:
            tokens[-1] = f"{tokens[-1]},{segment}"
        else:
            tokens.append(segment)
    return tokens


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def parse_attribute_token(text: str) -> Tuple[Optional[Attribute], Optional[str]]:
    """Parse one stripped, non-empty token into an attribute.

    Returns the attribute, or ``None`` plus a problem description.
    """
    key, separator, value = text.partition("=")
    if not separator:
        return Attribute(AttributeKind.FLAG, text, True), None
    key = key.strip()
    if not key:
        return None, f"attribute value without a key: '{text}'"
    value = _unquote(value.strip())
    if value.lower() in BOOLEAN_VALUES:
        value = value.lower()
    return Attribute(AttributeKind.KEY_VALUE, key, value), None


def parse_attribute_section(content: str) -> AttributeParseResult:
    """Parse the text between a marker's parentheses."""
    if not content.strip():
        return AttributeParseResult(id=None, attributes=AttributeSet())

    segments, problems = _split_top_level(content)
    tokens = _merge_list_values(segments)

    marker_id = MarkerID.parse(tokens[0].strip())
    start = 1 if marker_id is not None else 0
    last = len(tokens) - 1

    items: List[Attribute] = []
    for position in range(start, len(tokens)):
        text = tokens[position].strip()
        if not text:
            if position == last and position > 0:
                problems.append("trailing comma in attribute section")
            else:
                problems.append("empty attribute between commas")
            continue
        attribute, problem = parse_attribute_token(text)
        if problem:
            problems.append(problem)
        if attribute is not None:
            items.append(attribute)

    return AttributeParseResult(
        id=marker_id,
        attributes=AttributeSet(tuple(items)),
        problems=tuple(problems),
    )


AttributeValue = Union[bool, str, List[str]]


def interpret_attributes(
    attributes: Iterable[Attribute],
    list_keys: Optional[Iterable[str]] = None,
) -> Dict[str, AttributeValue]:
    """Typed view of an attribute set.

    Flags map to ``True``; values of ``list_keys`` and any value holding a
    comma become lists; everything else stays a string. The first
    occurrence of a duplicated key wins.
    """
    list_keys = DEFAULT_LIST_KEYS if list_keys is None else frozenset(list_keys)
    typed: Dict[str, AttributeValue] = {}
    for attribute in attributes:
        if attribute.key in typed:
            continue
        if attribute.is_flag:
            typed[attribute.key] = True
        elif attribute.key in list_keys or "," in str(attribute.value):
            typed[attribute.key] = attribute.values
        else:
            typed[attribute.key] = str(attribute.value)
    return typed


__all__ = [
    "DEFAULT_LIST_KEYS",
    "AttributeParseResult",
    "parse_attribute_token",
    "parse_attribute_section",
    "interpret_attributes",
]
