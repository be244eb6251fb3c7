"""Shared pytest fixtures for the tudu test suite."""

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def dummy_js_path() -> Path:
    """JavaScript file exercising every marker shape and the false positives."""
    return FIXTURES_DIR / "dummy.js"


@pytest.fixture
def dummy_js(dummy_js_path: Path) -> str:
    return dummy_js_path.read_text(encoding="utf-8")


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep CLI environment flags from the developer shell out of tests."""
    for name in ("TUDU_VERBOSE", "TUDU_DEBUG", "TUDU_RERAISE", "TUDU_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
