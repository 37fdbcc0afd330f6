"""Content ingestion helpers for ReadAR."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class PositionedWord:
    """A word and its origin in a top-down page coordinate space (points)."""

    text: str
    left: float
    top: float


@dataclass
class Page:
    """Representation of a single page of extracted text."""

    index: int
    text: str
    words: List[PositionedWord] = field(default_factory=list)
    source: str = ""
    title: Optional[str] = None


__all__ = ["Page", "PositionedWord"]
