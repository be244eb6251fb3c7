"""Comment syntax descriptors and built-in language presets."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from tudu.errors import ConfigurationError

DEFAULT_KEYWORDS: Tuple[str, ...] = ("TODO", "FIXME")

# Characters stripped after a comment opener before looking for a keyword,
# e.g. the leading "*" of a javadoc continuation line or the third "/" of "///".
DEFAULT_DECORATION = "*/#!"

KEYWORD_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class BlockDelimiter:
    """Opening and closing token pair of a block comment."""

    start: str
    end: str


@dataclass(frozen=True)
class StringDelimiter:
    """Quote token of a string literal.

    Single-line strings end at the next newline even when unterminated so a
    stray quote cannot hide the comments on the following lines.
    """

    quote: str
    multiline: bool = False
    escape: Optional[str] = "\\"


BlockLike = Union[BlockDelimiter, Tuple[str, str], List[str]]
StringLike = Union[StringDelimiter, str]


def _coerce_blocks(values: Iterable[BlockLike]) -> Tuple[BlockDelimiter, ...]:
    blocks: List[BlockDelimiter] = []
    for value in values:
        if isinstance(value, BlockDelimiter):
            blocks.append(value)
            continue
        items = list(value)
        if len(items) != 2:
            raise ConfigurationError(
                f"Block comment delimiters must be (start, end) pairs, got {value!r}",
            )
        blocks.append(BlockDelimiter(str(items[0]), str(items[1])))
    return tuple(blocks)


def _coerce_strings(values: Iterable[StringLike]) -> Tuple[StringDelimiter, ...]:
    return tuple(
        value if isinstance(value, StringDelimiter) else StringDelimiter(str(value))
        for value in values
    )


def _ordered_unique(values: Iterable[str]) -> Tuple[str, ...]:
    seen: List[str] = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return tuple(seen)


@dataclass(frozen=True)
class CommentSyntaxConfig:
    """Everything the scanner needs to know about one language.

    Sets are accepted for the collection fields but are stored as tuples in
    a stable order so that two scans of the same text always agree.
    """

    line_comment_prefixes: Tuple[str, ...] = ("//",)
    block_comment_delimiters: Tuple[BlockDelimiter, ...] = (BlockDelimiter("/*", "*/"),)
    keywords: Tuple[str, ...] = DEFAULT_KEYWORDS
    string_delimiters: Tuple[StringDelimiter, ...] = (
        StringDelimiter('"'),
        StringDelimiter("'"),
    )
    match_case_insensitive: bool = False
    decoration: str = DEFAULT_DECORATION
    name: str = "custom"

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "line_comment_prefixes",
            _ordered_unique(
                sorted(self.line_comment_prefixes)
                if isinstance(self.line_comment_prefixes, (set, frozenset))
                else self.line_comment_prefixes
            ),
        )
        blocks = _coerce_blocks(self.block_comment_delimiters)
        if isinstance(self.block_comment_delimiters, (set, frozenset)):
            blocks = tuple(sorted(blocks, key=lambda block: (block.start, block.end)))
        object.__setattr__(self, "block_comment_delimiters", blocks)
        keywords = self.keywords
        if isinstance(keywords, str):
            keywords = (keywords,)
        elif isinstance(keywords, (set, frozenset)):
            keywords = sorted(keywords)
        object.__setattr__(self, "keywords", _ordered_unique(keywords))
        object.__setattr__(self, "string_delimiters", _coerce_strings(self.string_delimiters))

    def validate(self) -> None:
        """Raise ConfigurationError when the descriptor cannot drive a scan."""
        if not self.keywords:
            raise ConfigurationError(
                "At least one marker keyword is required",
                hint="Use the default keywords TODO and FIXME",
            )
        for keyword in self.keywords:
            if not KEYWORD_PATTERN.match(keyword):
                raise ConfigurationError(f"Invalid marker keyword: {keyword!r}")
        if not self.line_comment_prefixes and not self.block_comment_delimiters:
            raise ConfigurationError(
                f"Language '{self.name}' declares no comment syntax",
            )
        for prefix in self.line_comment_prefixes:
            if not prefix or prefix.isspace():
                raise ConfigurationError("Line comment prefixes must not be empty")
        for block in self.block_comment_delimiters:
            if not block.start or not block.end:
                raise ConfigurationError(
                    f"Block comment delimiters must not be empty: {block!r}",
                )
        for string in self.string_delimiters:
            if not string.quote:
                raise ConfigurationError("String delimiters must not be empty")

    def with_keywords(
        self,
        keywords: Iterable[str],
        *,
        match_case_insensitive: Optional[bool] = None,
    ) -> "CommentSyntaxConfig":
        updated = replace(self, keywords=tuple(keywords))
        if match_case_insensitive is not None:
            updated = replace(updated, match_case_insensitive=match_case_insensitive)
        return updated


C_STYLE = CommentSyntaxConfig(
    name="c",
    line_comment_prefixes=("//",),
    block_comment_delimiters=(BlockDelimiter("/*", "*/"),),
    string_delimiters=(
        StringDelimiter('"'),
        StringDelimiter("'"),
        StringDelimiter("`", multiline=True),
    ),
)

# Rust lifetimes and Go runes make "'" unreliable as a string quote.
DOUBLE_QUOTED_C_STYLE = replace(
    C_STYLE,
    name="rust",
    string_delimiters=(StringDelimiter('"'), StringDelimiter("`", multiline=True)),
)

PYTHON = CommentSyntaxConfig(
    name="python",
    line_comment_prefixes=("#",),
    block_comment_delimiters=(),
    string_delimiters=(
        StringDelimiter('"""', multiline=True),
        StringDelimiter("'''", multiline=True),
        StringDelimiter('"'),
        StringDelimiter("'"),
    ),
)

SHELL = CommentSyntaxConfig(
    name="shell",
    line_comment_prefixes=("#",),
    block_comment_delimiters=(),
    string_delimiters=(
        StringDelimiter('"', multiline=True),
        StringDelimiter("'", multiline=True, escape=None),
    ),
)

RUBY = CommentSyntaxConfig(
    name="ruby",
    line_comment_prefixes=("#",),
    block_comment_delimiters=(BlockDelimiter("=begin", "=end"),),
)

PHP = CommentSyntaxConfig(
    name="php",
    line_comment_prefixes=("//", "#"),
    block_comment_delimiters=(BlockDelimiter("/*", "*/"),),
)

CSS = CommentSyntaxConfig(
    name="css",
    line_comment_prefixes=(),
    block_comment_delimiters=(BlockDelimiter("/*", "*/"),),
)

SCSS = replace(CSS, name="scss", line_comment_prefixes=("//",))

MARKUP = CommentSyntaxConfig(
    name="markup",
    line_comment_prefixes=(),
    block_comment_delimiters=(BlockDelimiter("<!--", "-->"),),
    string_delimiters=(),
)

CONFIG = CommentSyntaxConfig(
    name="config",
    line_comment_prefixes=("#",),
    block_comment_delimiters=(),
)

PRESETS: Dict[str, CommentSyntaxConfig] = {
    "c": C_STYLE,
    "go": replace(DOUBLE_QUOTED_C_STYLE, name="go"),
    "rust": DOUBLE_QUOTED_C_STYLE,
    "python": PYTHON,
    "shell": SHELL,
    "ruby": RUBY,
    "php": PHP,
    "css": CSS,
    "scss": SCSS,
    "markup": MARKUP,
    "config": CONFIG,
}

EXTENSIONS: Dict[str, str] = {
    "js": "c",
    "ts": "c",
    "java": "c",
    "cpp": "c",
    "c": "c",
    "h": "c",
    "swift": "c",
    "kt": "c",
    "scala": "c",
    "cs": "c",
    "rs": "rust",
    "go": "go",
    "py": "python",
    "sh": "shell",
    "bash": "shell",
    "zsh": "shell",
    "rb": "ruby",
    "php": "php",
    "css": "css",
    "scss": "scss",
    "less": "scss",
    "html": "markup",
    "md": "markup",
    "yaml": "config",
    "yml": "config",
    "toml": "config",
}


@dataclass
class LanguageRegistry:
    """Name and file-extension lookup for comment syntaxes."""

    languages: Dict[str, CommentSyntaxConfig] = field(default_factory=lambda: dict(PRESETS))
    extensions: Dict[str, str] = field(default_factory=lambda: dict(EXTENSIONS))

    def register(
        self,
        name: str,
        syntax: CommentSyntaxConfig,
        extensions: Iterable[str] = (),
    ) -> None:
        syntax.validate()
        self.languages[name] = syntax
        for extension in extensions:
            self.extensions[extension.lower().lstrip(".")] = name

    def for_language(self, name: str) -> CommentSyntaxConfig:
        try:
            return self.languages[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown language '{name}'",
                hint=f"Known languages: {', '.join(sorted(self.languages))}",
            ) from None

    def for_path(self, path: Union[str, Path]) -> Optional[CommentSyntaxConfig]:
        suffix = Path(path).suffix.lower().lstrip(".")
        name = self.extensions.get(suffix)
        if name is None:
            return None
        return self.for_language(name)

    def extensions_for(self, name: str) -> List[str]:
        return sorted(ext for ext, language in self.extensions.items() if language == name)


_DEFAULT_REGISTRY = LanguageRegistry()


def syntax_for_language(name: str) -> CommentSyntaxConfig:
    return _DEFAULT_REGISTRY.for_language(name)


def syntax_for_path(path: Union[str, Path]) -> Optional[CommentSyntaxConfig]:
    return _DEFAULT_REGISTRY.for_path(path)


__all__ = [
    "DEFAULT_KEYWORDS",
    "BlockDelimiter",
    "StringDelimiter",
    "CommentSyntaxConfig",
    "LanguageRegistry",
    "PRESETS",
    "EXTENSIONS",
    "C_STYLE",
    "PYTHON",
    "syntax_for_language",
    "syntax_for_path",
]
