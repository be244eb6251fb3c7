"""
tudu: TODO/FIXME marker scanner.

tudu reads source text that a caller has already loaded, finds the
comments in it and extracts ``TODO``/``FIXME`` markers from them. Three
marker shapes are understood:

* untracked markers – ``TODO: add error handling``
* tracked markers – ``TODO(TASK-123): implement caching``, optionally with
  attributes such as ``TODO(BUG-200, bidir, labels=urgent,backend): ...``
* the legacy form – ``TODO TASK-567: old style``

The package is organised as follows:

* ``scanner`` – comment locator, marker recognizer and attribute parser,
  tied together by :func:`tudu.scanner.scan`.
* ``syntax`` – comment syntax descriptors and per-language presets.
* ``config`` – ``tudu.toml`` workspace configuration.
* ``cli`` – the ``tudu`` command line interface.
"""

from __future__ import annotations

__version__ = "0.2.0"

from tudu.errors import ConfigurationError, ScanWarning, TuduError, WarningKind
from tudu.scanner import (
    Attribute,
    AttributeKind,
    AttributeSet,
    CommentSpan,
    CommentStyle,
    MarkerID,
    MarkerKind,
    ScanResult,
    Scanner,
    SourceLocation,
    TodoRecord,
    interpret_attributes,
    render_marker,
    scan,
)
from tudu.syntax import (
    BlockDelimiter,
    CommentSyntaxConfig,
    StringDelimiter,
    syntax_for_language,
    syntax_for_path,
)

__all__ = [
    "__version__",
    "Attribute",
    "AttributeKind",
    "AttributeSet",
    "BlockDelimiter",
    "CommentSpan",
    "CommentStyle",
    "CommentSyntaxConfig",
    "ConfigurationError",
    "MarkerID",
    "MarkerKind",
    "ScanResult",
    "ScanWarning",
    "Scanner",
    "SourceLocation",
    "StringDelimiter",
    "TodoRecord",
    "TuduError",
    "WarningKind",
    "interpret_attributes",
    "render_marker",
    "scan",
    "syntax_for_language",
    "syntax_for_path",
]
