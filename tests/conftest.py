from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


SAMPLE_TEXT = (
    "Line one of paragraph one.\n"
    "Line two same paragraph.\n"
    "\n"
    "Second paragraph here."
)


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture
def sample_file(tmp_path) -> Path:
    path = tmp_path / "page1Demo.txt"
    path.write_text(SAMPLE_TEXT, encoding="utf-8")
    return path
