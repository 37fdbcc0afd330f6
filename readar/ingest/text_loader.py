"""Plain-text ingestion for bundled demo pages and exported text."""

from __future__ import annotations

import logging
from pathlib import Path
import re
from typing import List

from . import Page

LOGGER = logging.getLogger(__name__)

PAGE_BREAK = "\f"


def _natural_key(path: Path) -> list:
    return [int(part) if part.isdigit() else part.lower() for part in re.split(r"(\d+)", path.name)]


class TextLoader:
    """Load pages from a ``.txt`` file or a directory of ``.txt`` files.

    A single file is split into pages on form feeds. A directory contributes
    one page per file, ordered so that ``page2Demo.txt`` sorts before
    ``page10Demo.txt``.
    """

    def load(self, path: str | Path) -> List[Page]:
        path = Path(path)
        if path.is_dir():
            files = sorted(path.glob("*.txt"), key=_natural_key)
            if not files:
                LOGGER.warning("No .txt files found in %s", path)
            pages = [
                Page(index=index, text=self._read(file), source=str(file), title=file.stem)
                for index, file in enumerate(files)
            ]
        else:
            chunks = self._read(path).split(PAGE_BREAK)
            pages = [
                Page(index=index, text=chunk, source=str(path))
                for index, chunk in enumerate(chunks)
            ]
        LOGGER.info("Loaded %d pages from %s", len(pages), path)
        return pages

    def _read(self, path: Path) -> str:
        try:
            return path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            LOGGER.warning("Failed to decode %s as UTF-8; attempting latin-1", path)
            return path.read_text(encoding="latin-1")


__all__ = ["TextLoader"]
