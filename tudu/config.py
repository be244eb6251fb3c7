"""Workspace configuration support for the tudu CLI."""

from __future__ import annotations

import json
import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from tudu.errors import ConfigurationError
from tudu.syntax import (
    DEFAULT_KEYWORDS,
    BlockDelimiter,
    CommentSyntaxConfig,
    LanguageRegistry,
    StringDelimiter,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("tudu.toml", ".tudurc")
OUTPUT_FORMATS = ("standard", "json")


@dataclass
class ScanSettings:
    """Marker keywords applied on top of every language syntax."""

    keywords: List[str] = field(default_factory=lambda: list(DEFAULT_KEYWORDS))
    match_case_insensitive: bool = False


@dataclass
class OutputSettings:
    format: str = "standard"
    verbose: bool = False


@dataclass
class WorkspaceConfig:
    """Resolved workspace configuration."""

    root: Path
    scan: ScanSettings = field(default_factory=ScanSettings)
    output: OutputSettings = field(default_factory=OutputSettings)
    languages: LanguageRegistry = field(default_factory=LanguageRegistry)
    path: Optional[Path] = None

    def syntax_for(
        self,
        file_path: Union[str, Path],
        language: Optional[str] = None,
    ) -> CommentSyntaxConfig:
        """Comment syntax for ``file_path`` with the workspace keywords applied."""
        if language:
            base = self.languages.for_language(language)
        else:
            base = self.languages.for_path(file_path)
        if base is None:
            raise ConfigurationError(
                f"No comment syntax known for '{file_path}'",
                path=str(file_path),
                hint="Pass --language or add a [languages.<name>] section to tudu.toml",
            )
        syntax = base.with_keywords(
            self.scan.keywords,
            match_case_insensitive=self.scan.match_case_insensitive,
        )
        syntax.validate()
        return syntax


def _read_json_config(path: Path) -> Dict[str, Any]:
    content = path.read_text(encoding="utf-8")
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            f"Invalid JSON configuration: {exc.msg}",
            path=str(path),
            line=exc.lineno,
            column=exc.colno,
        ) from exc


def _read_toml_config(path: Path) -> Dict[str, Any]:
    with path.open("rb") as handle:
        try:
            return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigurationError(f"Invalid TOML configuration: {exc}", path=str(path)) from exc


def _string_list(value: Any, name: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    raise ConfigurationError(f"'{name}' must be a string or a list of strings")


def _bool_value(value: Any, name: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise ConfigurationError(f"'{name}' must be true or false, got {value!r}")


def _parse_scan(data: Dict[str, Any]) -> ScanSettings:
    section = data.get("scan") or {}
    raw_keywords = section.get("keywords")
    if raw_keywords is None:
        keywords = list(DEFAULT_KEYWORDS)
    else:
        keywords = _string_list(raw_keywords, "scan.keywords")
        if not keywords:
            raise ConfigurationError(
                "'scan.keywords' must name at least one marker keyword",
                hint="Remove the key to use the default keywords TODO and FIXME",
            )
    return ScanSettings(
        keywords=keywords,
        match_case_insensitive=_bool_value(
            section.get("match_case_insensitive"), "scan.match_case_insensitive"
        ),
    )


def _parse_output(data: Dict[str, Any]) -> OutputSettings:
    section = data.get("output") or {}
    output_format = str(section.get("format") or OutputSettings.format)
    if output_format not in OUTPUT_FORMATS:
        raise ConfigurationError(
            f"Unknown output format '{output_format}'",
            hint=f"Use one of: {', '.join(OUTPUT_FORMATS)}",
        )
    return OutputSettings(format=output_format, verbose=_bool_value(section.get("verbose"), "output.verbose"))


def _parse_languages(data: Dict[str, Any]) -> LanguageRegistry:
    registry = LanguageRegistry()
    languages_section = data.get("languages") or {}
    for name, raw in languages_section.items():
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Language '{name}' must be a table")
        blocks = raw.get("block_comments") or []
        if not isinstance(blocks, (list, tuple)):
            raise ConfigurationError(f"'languages.{name}.block_comments' must be a list of pairs")
        strings = [StringDelimiter(quote) for quote in _string_list(raw.get("strings"), f"languages.{name}.strings")]
        strings.extend(
            StringDelimiter(quote, multiline=True)
            for quote in _string_list(raw.get("multiline_strings"), f"languages.{name}.multiline_strings")
        )
        syntax = CommentSyntaxConfig(
            name=name,
            line_comment_prefixes=tuple(_string_list(raw.get("line_comments"), f"languages.{name}.line_comments")),
            block_comment_delimiters=tuple(
                BlockDelimiter(str(pair[0]), str(pair[1]))
                for pair in blocks
                if isinstance(pair, (list, tuple)) and len(pair) == 2
            ),
            string_delimiters=tuple(strings),
        )
        if len(syntax.block_comment_delimiters) != len(blocks):
            raise ConfigurationError(f"'languages.{name}.block_comments' must be a list of [start, end] pairs")
        registry.register(
            name,
            syntax,
            _string_list(raw.get("extensions"), f"languages.{name}.extensions"),
        )
        logger.debug("Registered language '%s' from workspace configuration", name)
    return registry


def locate_config_file(root: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    if explicit is not None:
        if not explicit.exists():
            raise ConfigurationError(f"Configuration file not found: {explicit}", path=str(explicit))
        return explicit
    for candidate in CONFIG_FILENAMES:
        path = root / candidate
        if path.exists():
            return path
    return None


def load_workspace_config(root: Path, explicit: Optional[Path] = None) -> WorkspaceConfig:
    root = root.resolve()
    config_path = locate_config_file(root, explicit)
    if config_path is None:
        return WorkspaceConfig(root=root)

    if config_path.suffix == ".toml":
        data = _read_toml_config(config_path)
    else:
        data = _read_json_config(config_path)
    logger.debug("Loaded workspace configuration from %s", config_path)

    return WorkspaceConfig(
        root=root,
        scan=_parse_scan(data),
        output=_parse_output(data),
        languages=_parse_languages(data),
        path=config_path,
    )


__all__ = [
    "CONFIG_FILENAMES",
    "OUTPUT_FORMATS",
    "ScanSettings",
    "OutputSettings",
    "WorkspaceConfig",
    "locate_config_file",
    "load_workspace_config",
]
