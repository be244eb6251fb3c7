"""Comment locator.

Walks source text with a small lexical state machine and yields the
comment spans it finds. String literals are skipped as a whole so comment
openers (and marker keywords) inside them never produce a span.
"""

from __future__ import annotations

import logging
import re
from bisect import bisect_right
from enum import Enum, auto
from typing import Iterator, List, Optional, Tuple, Union

from tudu.errors import ScanWarning, WarningKind
from tudu.scanner.records import CommentSpan, CommentStyle
from tudu.syntax import BlockDelimiter, CommentSyntaxConfig, StringDelimiter

logger = logging.getLogger(__name__)


class LexState(Enum):
    CODE = auto()
    IN_LINE_COMMENT = auto()
    IN_BLOCK_COMMENT = auto()
    IN_STRING_LITERAL = auto()


Opener = Union[str, BlockDelimiter, StringDelimiter]


class LineIndex:
    """Maps offsets to 1-based (line, column) pairs."""

    def __init__(self, source: str):
        self._starts = [0]
        self._starts.extend(match.end() for match in re.finditer("\n", source))

    def position(self, offset: int) -> Tuple[int, int]:
        line = bisect_right(self._starts, offset)
        return line, offset - self._starts[line - 1] + 1


class CommentLocator:
    """Lazy, single-pass comment finder for one source text."""

    def __init__(self, source: str, syntax: CommentSyntaxConfig, line_index: Optional[LineIndex] = None):
        self.source = source
        self.syntax = syntax
        self.line_index = line_index or LineIndex(source)
        self.state = LexState.CODE
        self.warnings: List[ScanWarning] = []

        openers: List[Tuple[str, Opener]] = []
        openers.extend((string.quote, string) for string in syntax.string_delimiters)
        openers.extend((block.start, block) for block in syntax.block_comment_delimiters)
        openers.extend((prefix, prefix) for prefix in syntax.line_comment_prefixes)
        # Longest opener first so '"""' wins over '"' and '///' over '//'.
        openers.sort(key=lambda item: len(item[0]), reverse=True)
        self._openers = openers
        first_chars = sorted({token[0] for token, _ in openers})
        self._candidate = re.compile("|".join(re.escape(char) for char in first_chars)) if first_chars else None

    def __iter__(self) -> Iterator[CommentSpan]:
        return self.spans()

    def spans(self) -> Iterator[CommentSpan]:
        source = self.source
        length = len(source)
        pos = 0
        count = 0
        while pos < length and self._candidate is not None:
            self.state = LexState.CODE
            match = self._candidate.search(source, pos)
            if match is None:
                break
            pos = match.start()
            opener = self._match_opener(pos)
            if opener is None:
                pos += 1
                continue
            if isinstance(opener, StringDelimiter):
                self.state = LexState.IN_STRING_LITERAL
                pos = self._skip_string(pos, opener)
                continue
            if isinstance(opener, BlockDelimiter):
                self.state = LexState.IN_BLOCK_COMMENT
                span = self._read_block(pos, opener)
            else:
                self.state = LexState.IN_LINE_COMMENT
                span = self._read_line(pos, opener)
            count += 1
            pos = span.end
            yield span
        self.state = LexState.CODE
        logger.debug("Located %d comment(s) in %d characters", count, length)

    def _match_opener(self, pos: int) -> Optional[Opener]:
        for token, opener in self._openers:
            if self.source.startswith(token, pos):
                return opener
        return None

    def _skip_string(self, pos: int, string: StringDelimiter) -> int:
        """Return the offset just past the string literal starting at ``pos``."""
        source = self.source
        length = len(source)
        index = pos + len(string.quote)
        while index < length:
            if string.escape and source.startswith(string.escape, index):
                index += len(string.escape) + 1
                continue
            if source.startswith(string.quote, index):
                return index + len(string.quote)
            if source[index] == "\n" and not string.multiline:
                return index
            index += 1
        return length

    def _read_line(self, pos: int, prefix: str) -> CommentSpan:
        end = self.source.find("\n", pos)
        if end == -1:
            end = len(self.source)
        if end > pos and self.source[end - 1] == "\r":
            end -= 1
        return CommentSpan(
            start=pos,
            end=end,
            style=CommentStyle.LINE,
            body_start=pos + len(prefix),
            body_end=end,
        )

    def _read_block(self, pos: int, block: BlockDelimiter) -> CommentSpan:
        body_start = pos + len(block.start)
        close = self.source.find(block.end, body_start)
        if close == -1:
            end = len(self.source)
            line, column = self.line_index.position(pos)
            self.warnings.append(
                ScanWarning(
                    kind=WarningKind.UNTERMINATED_COMMENT,
                    message=f"Block comment opened with '{block.start}' is never closed",
                    offset=pos,
                    line=line,
                    column=column,
                )
            )
            logger.debug("Unterminated block comment at offset %d", pos)
            return CommentSpan(pos, end, CommentStyle.BLOCK, body_start, end)
        return CommentSpan(
            start=pos,
            end=close + len(block.end),
            style=CommentStyle.BLOCK,
            body_start=body_start,
            body_end=close,
        )


def locate_comments(source: str, syntax: CommentSyntaxConfig) -> Iterator[CommentSpan]:
    """Yield the comment spans of ``source`` in order."""
    return iter(CommentLocator(source, syntax))


__all__ = ["LexState", "LineIndex", "CommentLocator", "locate_comments"]
