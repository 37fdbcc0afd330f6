"""Paragraph segmentation for extracted page text.

Raw text coming out of a PDF or a text fixture is split into display
paragraphs:

* all line endings are normalized to ``\\n``;
* a blank (or whitespace-only) line separates paragraphs;
* single newlines inside a paragraph are soft wraps and become spaces;
* whitespace runs are collapsed and each paragraph is trimmed.

When a page carries no usable text but does carry positioned words, the
paragraphs are rebuilt from word geometry instead.
"""

from __future__ import annotations

from dataclasses import dataclass
import hashlib
import logging
import re
from typing import Iterable, List, Sequence

from ..ingest import Page, PositionedWord

LOGGER = logging.getLogger(__name__)

PARAGRAPH_BREAK = re.compile(r"\n[^\S\n]*\n+")
WHITESPACE_RUN = re.compile(r"\s+")

DEFAULT_LINE_GAP = 6.0
DEFAULT_PARAGRAPH_GAP = 18.0


@dataclass(frozen=True)
class Paragraph:
    """A normalized paragraph and its position on the page."""

    index: int
    text: str
    page_index: int = 0
    id: str = ""


def paragraph_id(source: str, page_index: int, index: int) -> str:
    """Return a stable identifier for the paragraph at *index* on a page."""

    fingerprint = f"{source}|page-{page_index}|para-{index}"
    return hashlib.sha1(fingerprint.encode("utf-8")).hexdigest()[:16]


def _clean_block(block: str) -> str:
    joined = block.replace("\n", " ")
    return WHITESPACE_RUN.sub(" ", joined).strip()


def segment_into_paragraphs(raw_text: str) -> List[str]:
    """Split *raw_text* into normalized, non-empty paragraph strings."""

    normalized = raw_text.replace("\r\n", "\n").replace("\r", "\n")
    blocks = PARAGRAPH_BREAK.split(normalized)
    return [cleaned for cleaned in (_clean_block(block) for block in blocks) if cleaned]


def _as_paragraphs(texts: Iterable[str], page_index: int, source: str) -> List[Paragraph]:
    return [
        Paragraph(
            index=index,
            text=text,
            page_index=page_index,
            id=paragraph_id(source, page_index, index),
        )
        for index, text in enumerate(texts)
    ]


def segment_text(raw_text: str, *, page_index: int = 0, source: str = "") -> List[Paragraph]:
    """Segment *raw_text* and wrap the result in :class:`Paragraph` objects."""

    return _as_paragraphs(segment_into_paragraphs(raw_text), page_index, source)


def segment_words_into_paragraphs(
    words: Sequence[PositionedWord],
    *,
    line_gap: float = DEFAULT_LINE_GAP,
    paragraph_gap: float = DEFAULT_PARAGRAPH_GAP,
) -> List[str]:
    """Rebuild paragraphs from positioned words.

    Words are read top to bottom, left to right. A word sitting more than
    *line_gap* below the first word of the current line starts a new line;
    a line sitting more than *paragraph_gap* below the previous line starts a
    new paragraph.
    """

    ordered = sorted(words, key=lambda word: (word.top, word.left))
    lines: List[List[PositionedWord]] = []
    for word in ordered:
        if lines and word.top - lines[-1][0].top <= line_gap:
            lines[-1].append(word)
        else:
            lines.append([word])

    paragraphs: List[List[List[PositionedWord]]] = []
    for line in lines:
        if paragraphs and line[0].top - paragraphs[-1][-1][0].top <= paragraph_gap:
            paragraphs[-1].append(line)
        else:
            paragraphs.append([line])

    texts = []
    for paragraph in paragraphs:
        text = " ".join(" ".join(word.text for word in line) for line in paragraph)
        text = WHITESPACE_RUN.sub(" ", text).strip()
        if text:
            texts.append(text)
    return texts


def segment_page(page: Page) -> List[Paragraph]:
    """Segment a loaded page, falling back to word geometry for blank text."""

    if page.text.strip():
        texts = segment_into_paragraphs(page.text)
    elif page.words:
        LOGGER.debug("Page %d has no text layer; using %d positioned words", page.index, len(page.words))
        texts = segment_words_into_paragraphs(page.words)
    else:
        texts = []
    LOGGER.debug("Segmented page %d into %d paragraphs", page.index, len(texts))
    return _as_paragraphs(texts, page.index, page.source)


__all__ = [
    "Paragraph",
    "paragraph_id",
    "segment_into_paragraphs",
    "segment_page",
    "segment_text",
    "segment_words_into_paragraphs",
]
