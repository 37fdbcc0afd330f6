"""Shared planning logic used by the CLI and by embedding applications.

A reading plan takes a document from disk to timed highlight lines: pages are
loaded, cleaned, segmented into paragraphs (or taken from a hand-made override
file), wrapped into lines and paced at the requested reading speed.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence
import time

from .ingest import Page
from .ingest.loader import load_document
from .pacing import (
    DEFAULT_ADVANCE_DELAY,
    LineTiming,
    PacingOptions,
    ReadingSchedule,
    build_schedule,
)
from .text.layout import DEFAULT_LINE_WIDTH, wrap_lines
from .text.normalize import LEVELS, Normalizer, options_for_level
from .text.readability import ReadabilityReport, readability_metrics
from .text.segmentation import Paragraph, paragraph_id, segment_into_paragraphs, segment_page

__all__ = [
    "PagePlan",
    "ParagraphPlan",
    "ReadingOptions",
    "ReadingPlan",
    "ReadingPlanner",
    "load_paragraph_overrides",
]

logger = logging.getLogger(__name__)


@dataclass
class ReadingOptions:
    """Options that control how a document is turned into a reading plan."""

    input_path: Optional[Path] = None
    words_per_minute: float = 120.0
    line_width: int = DEFAULT_LINE_WIDTH
    normalize: str = "standard"  # none|light|standard|strong
    layout: str = "text"  # text|geometry
    pages: Optional[Sequence[int]] = None
    paragraph_file: Optional[Path] = None
    advance_delay: float = DEFAULT_ADVANCE_DELAY
    pacing: PacingOptions = field(default_factory=PacingOptions)

    def __post_init__(self) -> None:
        if not math.isfinite(self.words_per_minute) or self.words_per_minute <= 0:
            raise ValueError("words_per_minute must be a positive number")
        if self.line_width <= 0:
            raise ValueError("line_width must be positive")
        if self.advance_delay < 0:
            raise ValueError("advance_delay must not be negative")
        if self.normalize not in LEVELS:
            raise ValueError(f"Unsupported normalization level: {self.normalize}")
        if self.layout not in {"text", "geometry"}:
            raise ValueError(f"Unsupported layout: {self.layout}")
        if self.pages is not None and any(index < 0 for index in self.pages):
            raise ValueError("page indices must not be negative")


@dataclass
class ParagraphPlan:
    paragraph: Paragraph
    lines: List[LineTiming]
    readability: ReadabilityReport

    @property
    def durations(self) -> List[float]:
        return [timing.duration for timing in self.lines]


@dataclass
class PagePlan:
    index: int
    title: Optional[str]
    paragraphs: List[ParagraphPlan]


@dataclass
class ReadingPlan:
    """Outcome returned after planning a document."""

    source: str
    words_per_minute: float
    pages: List[PagePlan]
    schedule: ReadingSchedule
    elapsed_seconds: float

    @property
    def total_seconds(self) -> float:
        return self.schedule.total_seconds

    @property
    def paragraphs(self) -> List[ParagraphPlan]:
        return [paragraph for page in self.pages for paragraph in page.paragraphs]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "words_per_minute": self.words_per_minute,
            "total_seconds": round(self.total_seconds, 3),
            "pages": [
                {
                    "index": page.index,
                    "title": page.title,
                    "paragraphs": [
                        {
                            "id": plan.paragraph.id,
                            "index": plan.paragraph.index,
                            "text": plan.paragraph.text,
                            "readability": plan.readability.to_dict(),
                            "lines": [
                                {
                                    "text": timing.text,
                                    "start": round(timing.start, 3),
                                    "duration": round(timing.duration, 3),
                                }
                                for timing in plan.lines
                            ],
                        }
                        for plan in page.paragraphs
                    ],
                }
                for page in self.pages
            ],
        }


def load_paragraph_overrides(path: Path) -> Dict[int, List[str]]:
    """Read a JSON object mapping page indices to hand-made paragraph splits."""

    if not path.exists():
        raise FileNotFoundError(f"Paragraph file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Paragraph file {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Paragraph file {path} must contain a JSON object")

    overrides: Dict[int, List[str]] = {}
    for key, paragraphs in data.items():
        try:
            index = int(key)
        except ValueError:
            raise ValueError(f"Invalid page index in {path}: {key!r}") from None
        if not isinstance(paragraphs, list) or not all(isinstance(p, str) for p in paragraphs):
            raise ValueError(f"Page {key} in {path} must map to a list of strings")
        overrides[index] = paragraphs
    logger.debug("Loaded paragraph overrides for %d pages from %s", len(overrides), path)
    return overrides


class ReadingPlanner:
    """High level orchestrator behind the reader view and the CLI."""

    # Public API -----------------------------------------------------------------
    def plan(self, options: ReadingOptions) -> ReadingPlan:
        if options.input_path is None:
            raise ValueError("input_path is required to plan a document")
        start_time = time.perf_counter()
        logger.debug("Planning with options: %s", options)

        pages = load_document(options.input_path, layout=options.layout)
        return self._plan_pages(pages, str(options.input_path), options, start_time)

    def plan_text(self, text: str, options: ReadingOptions, *, source: str = "") -> ReadingPlan:
        """Plan already-extracted text as a single page."""

        start_time = time.perf_counter()
        page = Page(index=0, text=text, source=source)
        return self._plan_pages([page], source, options, start_time)

    # Pipeline ------------------------------------------------------------------
    def _plan_pages(
        self,
        pages: Iterable[Page],
        source: str,
        options: ReadingOptions,
        start_time: float,
    ) -> ReadingPlan:
        overrides = (
            load_paragraph_overrides(options.paragraph_file) if options.paragraph_file else {}
        )
        normalizer = Normalizer(options_for_level(options.normalize))
        selected = self._select_pages(list(pages), options.pages)

        paragraphs_by_page: List[List[Paragraph]] = []
        for page in selected:
            if page.index in overrides:
                logger.debug("Using paragraph override for page %d", page.index)
                paragraphs = self._override_paragraphs(page, overrides[page.index])
            else:
                paragraphs = segment_page(replace(page, text=normalizer.normalize(page.text)))
            paragraphs_by_page.append(paragraphs)
        logger.info(
            "Prepared %d paragraphs across %d pages",
            sum(len(paragraphs) for paragraphs in paragraphs_by_page),
            len(selected),
        )

        flat = [paragraph for paragraphs in paragraphs_by_page for paragraph in paragraphs]
        wrapped = [wrap_lines(paragraph.text, options.line_width) for paragraph in flat]
        schedule = build_schedule(
            wrapped,
            options.words_per_minute,
            options=options.pacing,
            advance_delay=options.advance_delay,
        )

        timings_by_paragraph: Dict[int, List[LineTiming]] = {}
        for timing in schedule.timings:
            timings_by_paragraph.setdefault(timing.paragraph_index, []).append(timing)
        plans = iter(
            ParagraphPlan(
                paragraph=paragraph,
                lines=timings_by_paragraph.get(position, []),
                readability=readability_metrics(paragraph.text),
            )
            for position, paragraph in enumerate(flat)
        )
        page_plans = [
            PagePlan(
                index=page.index,
                title=page.title,
                paragraphs=[next(plans) for _ in paragraphs],
            )
            for page, paragraphs in zip(selected, paragraphs_by_page)
        ]

        elapsed = time.perf_counter() - start_time
        logger.info(
            "Planned %d lines (%.1fs of reading) in %.2fs",
            len(schedule.timings),
            schedule.total_seconds,
            elapsed,
        )
        return ReadingPlan(
            source=source,
            words_per_minute=options.words_per_minute,
            pages=page_plans,
            schedule=schedule,
            elapsed_seconds=elapsed,
        )

    def _select_pages(self, pages: List[Page], wanted: Optional[Sequence[int]]) -> List[Page]:
        if wanted is None:
            return pages
        by_index = {page.index: page for page in pages}
        missing = sorted(set(wanted) - set(by_index))
        if missing:
            logger.warning("Requested pages not in document: %s", ", ".join(map(str, missing)))
        return [by_index[index] for index in sorted(set(wanted)) if index in by_index]

    def _override_paragraphs(self, page: Page, texts: Sequence[str]) -> List[Paragraph]:
        cleaned = [" ".join(segment_into_paragraphs(text)) for text in texts]
        return [
            Paragraph(
                index=index,
                text=text,
                page_index=page.index,
                id=paragraph_id(page.source, page.index, index),
            )
            for index, text in enumerate(t for t in cleaned if t)
        ]
