"""Reading-highlight pacing.

Given the visual lines of a paragraph and a words-per-minute target, every
line gets a display duration. Durations are clamped so short lines do not
flicker past and dense lines do not stall, then lines ending a clause or
sentence get a short extra pause. The pause is applied after the clamp, so a
dense punctuated line may run slightly past the upper bound.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import bisect
import logging
from typing import Iterable, List, Optional, Sequence

LOGGER = logging.getLogger(__name__)

MIN_WORDS_PER_MINUTE = 1.0
MIN_WORDS_PER_SECOND = 0.01
DEFAULT_ADVANCE_DELAY = 0.15


@dataclass(frozen=True)
class PacingOptions:
    """Bounds and punctuation pause used when timing lines."""

    min_seconds: float = 0.75
    max_seconds: float = 4.0
    pause_multiplier: float = 1.15
    pause_characters: str = ".?!:;"

    def __post_init__(self) -> None:
        if self.min_seconds <= 0:
            raise ValueError("min_seconds must be positive")
        if self.max_seconds < self.min_seconds:
            raise ValueError("max_seconds must not be below min_seconds")
        if self.pause_multiplier < 1.0:
            raise ValueError("pause_multiplier must be at least 1.0")


DEFAULT_PACING = PacingOptions()


def count_words(line: str) -> int:
    """Number of whitespace-separated words in *line*, never less than one."""

    return max(1, len(line.split()))


def _line_duration(line: str, words_per_second: float, options: PacingOptions) -> float:
    duration = count_words(line) / max(words_per_second, MIN_WORDS_PER_SECOND)
    duration = min(max(duration, options.min_seconds), options.max_seconds)
    stripped = line.strip()
    if stripped and stripped[-1] in options.pause_characters:
        duration *= options.pause_multiplier
    return duration


def estimate_line_durations(
    lines: Sequence[str],
    words_per_minute: float,
    *,
    options: Optional[PacingOptions] = None,
) -> List[float]:
    """Return one highlight duration in seconds per entry of *lines*."""

    options = options or DEFAULT_PACING
    words_per_second = max(MIN_WORDS_PER_MINUTE, words_per_minute) / 60.0
    return [_line_duration(line, words_per_second, options) for line in lines]


@dataclass(frozen=True)
class LineTiming:
    """When a line starts being highlighted and for how long."""

    paragraph_index: int
    line_index: int
    text: str
    start: float
    duration: float

    @property
    def end(self) -> float:
        return self.start + self.duration


@dataclass(frozen=True)
class HighlightPosition:
    paragraph_index: int
    line_index: int
    progress: float
    finished: bool = False


@dataclass
class ReadingSchedule:
    """Back-to-back line timings across consecutive paragraphs."""

    timings: List[LineTiming] = field(default_factory=list)
    advance_delay: float = DEFAULT_ADVANCE_DELAY

    @property
    def total_seconds(self) -> float:
        return self.timings[-1].end if self.timings else 0.0

    def for_paragraph(self, paragraph_index: int) -> List[LineTiming]:
        return [timing for timing in self.timings if timing.paragraph_index == paragraph_index]

    def locate(self, elapsed: float) -> Optional[HighlightPosition]:
        """Line under the highlight after *elapsed* seconds of playback.

        Between two lines (the advance delay) the finished line is reported
        with full progress.
        """

        if not self.timings:
            return None
        elapsed = max(0.0, elapsed)
        last = self.timings[-1]
        if elapsed >= last.end:
            return HighlightPosition(last.paragraph_index, last.line_index, 1.0, finished=True)

        starts = [timing.start for timing in self.timings]
        timing = self.timings[max(0, bisect.bisect_right(starts, elapsed) - 1)]
        progress = min(1.0, (elapsed - timing.start) / timing.duration)
        return HighlightPosition(timing.paragraph_index, timing.line_index, progress)


def build_schedule(
    paragraph_lines: Iterable[Sequence[str]],
    words_per_minute: float,
    *,
    options: Optional[PacingOptions] = None,
    advance_delay: float = DEFAULT_ADVANCE_DELAY,
) -> ReadingSchedule:
    """Time every line of every paragraph in reading order.

    Paragraphs without lines are skipped but keep their index.
    """

    if advance_delay < 0:
        raise ValueError("advance_delay must not be negative")

    schedule = ReadingSchedule(advance_delay=advance_delay)
    cursor = 0.0
    for paragraph_index, lines in enumerate(paragraph_lines):
        durations = estimate_line_durations(lines, words_per_minute, options=options)
        for line_index, (line, duration) in enumerate(zip(lines, durations)):
            if schedule.timings:
                cursor += advance_delay
            schedule.timings.append(
                LineTiming(
                    paragraph_index=paragraph_index,
                    line_index=line_index,
                    text=line,
                    start=cursor,
                    duration=duration,
                )
            )
            cursor += duration
    LOGGER.debug(
        "Scheduled %d lines over %.2fs at %.0f WPM",
        len(schedule.timings),
        schedule.total_seconds,
        words_per_minute,
    )
    return schedule


__all__ = [
    "DEFAULT_ADVANCE_DELAY",
    "HighlightPosition",
    "LineTiming",
    "PacingOptions",
    "ReadingSchedule",
    "build_schedule",
    "count_words",
    "estimate_line_durations",
]
