"""Test setup for roundtrip_ini."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from roundtrip_ini import Document, parse  # noqa: E402


@pytest.fixture
def parse_text():
    """Parse INI text with a fixed source label."""

    def _parse(text: str) -> Document:
        return parse("test.ini", text)

    return _parse
