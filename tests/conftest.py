"""Shared pytest fixtures for pfmt tests."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import sys

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from pfmt.config import (  # noqa: E402
    MAX_NESTING_DEPTH_ENV,
    MAX_PRECISION_ENV,
    MAX_WIDTH_ENV,
    STRICT_LEAVES_ENV,
)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast tests of a single module")
    config.addinivalue_line("markers", "integration: tests across the feature, CLI and API layers")


@pytest.fixture(autouse=True)
def _clean_pfmt_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv(MAX_NESTING_DEPTH_ENV, raising=False)
    monkeypatch.delenv(STRICT_LEAVES_ENV, raising=False)
    monkeypatch.delenv(MAX_WIDTH_ENV, raising=False)
    monkeypatch.delenv(MAX_PRECISION_ENV, raising=False)
    yield


@dataclass
class Point:
    x: int
    y: int


@dataclass
class Line:
    start: Point
    end: Point


@pytest.fixture
def sample_values() -> dict:
    return {
        "i": 10,
        "j": 12,
        "s": "a_really_long_string",
        "b": True,
        "f": 1234567.891,
        "point": Point(1, 2),
        "line": Line(Point(0, 0), Point(3, 4)),
    }
