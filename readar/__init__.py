"""ReadAR reading core: paragraph segmentation and highlight pacing."""

from __future__ import annotations

from .pacing import PacingOptions, build_schedule, estimate_line_durations
from .reader import ReadingOptions, ReadingPlan, ReadingPlanner
from .text.segmentation import Paragraph, segment_into_paragraphs, segment_text

__all__ = [
    "PacingOptions",
    "Paragraph",
    "ReadingOptions",
    "ReadingPlan",
    "ReadingPlanner",
    "build_schedule",
    "estimate_line_durations",
    "segment_into_paragraphs",
    "segment_text",
]

__version__ = "0.1.0"
