"""Marker recognizer.

Finds marker keywords at the start of comment lines and classifies what
follows them: a parenthesized attribute section, the legacy ``KEYWORD ID:``
form, or a plain description.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from tudu.scanner.records import CommentSpan, CommentStyle, MarkerID, RawMarker
from tudu.syntax import CommentSyntaxConfig

LEGACY_PATTERN = re.compile(r"[ \t]+([A-Z][A-Z0-9]*-[0-9]+):")


class MarkerForm(Enum):
    PLAIN = "plain"
    LEGACY = "legacy"
    PARENTHESIZED = "parenthesized"


@dataclass(frozen=True)
class MarkerShape:
    """Outcome of classifying one raw marker.

    ``section`` is the text between the parentheses for the parenthesized
    form and ``None`` otherwise.
    """

    form: MarkerForm
    description: str
    section: Optional[str] = None
    legacy_id: Optional[MarkerID] = None
    problems: Tuple[str, ...] = ()


class MarkerRecognizer:
    """Extracts raw markers from the comment spans of one source text."""

    def __init__(self, source: str, syntax: CommentSyntaxConfig):
        self.source = source
        self.syntax = syntax
        keywords = sorted(syntax.keywords, key=len, reverse=True)
        flags = re.IGNORECASE if syntax.match_case_insensitive else 0
        alternatives = "|".join(re.escape(keyword) for keyword in keywords)
        self._keyword = re.compile(rf"(?:{alternatives})(?![A-Za-z0-9_])", flags)
        self._canonical = {keyword.lower(): keyword for keyword in syntax.keywords}

    def _content_start(self, line: str) -> int:
        index = 0
        length = len(line)
        while index < length and line[index].isspace():
            index += 1
        while index < length and line[index] in self.syntax.decoration:
            index += 1
        while index < length and line[index].isspace():
            index += 1
        return index

    def _keyword_at(self, line: str) -> Tuple[Optional[re.Match], int]:
        start = self._content_start(line)
        return self._keyword.match(line, start), start

    def _canonical_keyword(self, matched: str) -> str:
        if matched in self.syntax.keywords:
            return matched
        return self._canonical.get(matched.lower(), matched)

    def markers(self, span: CommentSpan) -> Iterator[RawMarker]:
        body = span.body(self.source)
        lines: List[Tuple[int, str]] = []
        offset = span.body_start
        for line in body.split("\n"):
            lines.append((offset, line.rstrip("\r")))
            offset += len(line) + 1

        for index, (line_offset, line) in enumerate(lines):
            match, start = self._keyword_at(line)
            if match is None:
                continue
            pieces = [line[match.end():]]
            if span.style is CommentStyle.BLOCK:
                pieces.extend(self._continuation(lines[index + 1:]))
            yield RawMarker(
                keyword=self._canonical_keyword(match.group(0)),
                position=line_offset + start,
                comment=span,
                trailing_text="\n".join(pieces),
            )

    def _continuation(self, following: List[Tuple[int, str]]) -> List[str]:
        pieces: List[str] = []
        for _, line in following:
            match, start = self._keyword_at(line)
            text = line[start:].rstrip()
            if match is not None or not text:
                break
            pieces.append(text)
        return pieces


def _find_closing(text: str) -> int:
    """Index of the ``)`` balancing ``text[0]``, or -1."""
    depth = 0
    in_quote = False
    for index, char in enumerate(text):
        if char == '"':
            in_quote = not in_quote
        elif in_quote:
            continue
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    return -1


def _first_unquoted_close(text: str) -> int:
    """Index of the first ``)`` outside double quotes on the first line, or -1."""
    in_quote = False
    for index, char in enumerate(text):
        if char == "\n":
            break
        if char == '"':
            in_quote = not in_quote
        elif char == ")" and not in_quote:
            return index
    return -1


def _description(text: str) -> str:
    text = text.lstrip()
    if text.startswith(":"):
        text = text[1:]
    return " ".join(part.strip() for part in text.split("\n") if part.strip())


def classify(raw: RawMarker) -> MarkerShape:
    """Decide which marker form ``raw`` uses and split off its description."""
    text = raw.trailing_text
    if text.startswith("("):
        close = _find_closing(text)
        if close == -1:
            # An unbalanced "(" inside the section; the attribute parser
            # reports it as nested parentheses.
            close = _first_unquoted_close(text)
        if close == -1:
            section = text[1:].split("\n", 1)[0]
            return MarkerShape(
                form=MarkerForm.PARENTHESIZED,
                description="",
                section=section,
                problems=("missing closing parenthesis",),
            )
        return MarkerShape(
            form=MarkerForm.PARENTHESIZED,
            description=_description(text[close + 1:]),
            section=text[1:close],
        )

    legacy = LEGACY_PATTERN.match(text)
    if legacy is not None:
        return MarkerShape(
            form=MarkerForm.LEGACY,
            description=_description(text[legacy.end():]),
            legacy_id=MarkerID.parse(legacy.group(1)),
        )

    return MarkerShape(form=MarkerForm.PLAIN, description=_description(text))


__all__ = ["MarkerForm", "MarkerShape", "MarkerRecognizer", "classify"]
