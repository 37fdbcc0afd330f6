"""Tests for line pacing and the reading schedule."""

from __future__ import annotations

import dataclasses
import math

import pytest

from readar.pacing import (
    PacingOptions,
    build_schedule,
    count_words,
    estimate_line_durations,
)


def test_end_to_end_durations():
    lines = ["Line one of paragraph one.", "Line two same paragraph."]
    assert estimate_line_durations(lines, 120) == pytest.approx([2.875, 2.3])


def test_output_matches_input_length_and_order():
    lines = ["one", "one two three four", "one two."]
    durations = estimate_line_durations(lines, 60)
    assert len(durations) == 3
    assert durations == pytest.approx([1.0, 4.0, 2.3])


def test_empty_line_list():
    assert estimate_line_durations([], 120) == []


@pytest.mark.parametrize("line", ["", "   ", "\n"])
def test_blank_line_counts_as_one_word(line):
    assert count_words(line) == 1
    assert estimate_line_durations([line], 120) == pytest.approx([0.75])


@pytest.mark.parametrize("mark", list(".?!:;"))
def test_terminal_punctuation_adds_pause(mark):
    plain, punctuated = estimate_line_durations(["one two three", f"one two three{mark}"], 60)
    assert punctuated == pytest.approx(plain * 1.15)


def test_trailing_whitespace_is_ignored_for_pause():
    plain, punctuated = estimate_line_durations(["a b c", "a b c.   \n"], 60)
    assert punctuated == pytest.approx(plain * 1.15)


def test_comma_does_not_pause():
    plain, comma = estimate_line_durations(["a b c", "a b c,"], 60)
    assert comma == plain


def test_more_words_never_shorter():
    lines = [" ".join(["word"] * count) for count in range(1, 12)]
    durations = estimate_line_durations(lines, 120)
    assert durations == sorted(durations)


@pytest.mark.parametrize("wpm", [1, 30, 120, 200, 1000, 100000])
@pytest.mark.parametrize("words", [1, 2, 5, 9, 40])
def test_duration_before_pause_is_clamped(wpm, words):
    line = " ".join(["word"] * words) + "."
    options = PacingOptions(pause_multiplier=1.0)
    (duration,) = estimate_line_durations([line], wpm, options=options)
    assert 0.75 <= duration <= 4.0


def test_pause_is_applied_after_clamp():
    dense = " ".join(["word"] * 50) + "."
    assert estimate_line_durations([dense], 60) == pytest.approx([4.6])


@pytest.mark.parametrize("wpm", [0, -50, 0.5, float("nan")])
def test_low_wpm_is_floored_to_one(wpm):
    assert estimate_line_durations(["word"], wpm) == pytest.approx([4.0])


def test_nan_wpm_yields_finite_durations():
    durations = estimate_line_durations(["one two three.", "four"], float("nan"))
    assert all(math.isfinite(duration) for duration in durations)
    assert durations == pytest.approx([4.6, 4.0])
    schedule = build_schedule([["one two three."]], float("nan"))
    assert math.isfinite(schedule.total_seconds)


def test_very_fast_reading_hits_lower_bound():
    assert estimate_line_durations(["a b c"], 10000) == pytest.approx([0.75])


def test_custom_pacing_options():
    options = PacingOptions(min_seconds=0.5, max_seconds=2.0, pause_multiplier=1.5, pause_characters=",")
    durations = estimate_line_durations(["a", "a b c d e,", "a."], 120, options=options)
    assert durations == pytest.approx([0.5, 3.0, 0.5])


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_seconds": 0},
        {"min_seconds": 2.0, "max_seconds": 1.0},
        {"pause_multiplier": 0.9},
    ],
)
def test_invalid_pacing_options(kwargs):
    with pytest.raises(ValueError):
        PacingOptions(**kwargs)


def test_pacing_options_are_immutable():
    options = PacingOptions()
    with pytest.raises(dataclasses.FrozenInstanceError):
        options.max_seconds = 60.0
    assert estimate_line_durations(["word"], 1) == pytest.approx([4.0])


def test_pacing_options_can_be_derived_with_replace():
    options = dataclasses.replace(PacingOptions(), max_seconds=10.0)
    assert estimate_line_durations(["word"], 1, options=options) == pytest.approx([10.0])
    assert PacingOptions().max_seconds == 4.0


def _schedule():
    return build_schedule([["a b", "c d."], ["e"]], 120)


def test_schedule_lays_lines_out_back_to_back():
    schedule = _schedule()
    starts = [timing.start for timing in schedule.timings]
    durations = [timing.duration for timing in schedule.timings]

    assert [(t.paragraph_index, t.line_index) for t in schedule.timings] == [(0, 0), (0, 1), (1, 0)]
    assert durations == pytest.approx([1.0, 1.15, 0.75])
    assert starts == pytest.approx([0.0, 1.15, 2.45])
    assert schedule.total_seconds == pytest.approx(3.2)
    assert [t.text for t in schedule.for_paragraph(0)] == ["a b", "c d."]


def test_schedule_without_advance_delay():
    schedule = build_schedule([["a b", "c d."]], 120, advance_delay=0)
    assert schedule.timings[1].start == pytest.approx(schedule.timings[0].end)


def test_schedule_skips_empty_paragraphs_but_keeps_indices():
    schedule = build_schedule([["x"], [], ["y"]], 120)
    assert [t.paragraph_index for t in schedule.timings] == [0, 2]


def test_schedule_rejects_negative_delay():
    with pytest.raises(ValueError):
        build_schedule([["x"]], 120, advance_delay=-0.1)


def test_locate_within_line():
    position = _schedule().locate(0.5)
    assert (position.paragraph_index, position.line_index) == (0, 0)
    assert position.progress == pytest.approx(0.5)
    assert not position.finished


def test_locate_during_advance_gap_reports_full_line():
    position = _schedule().locate(1.05)
    assert (position.paragraph_index, position.line_index) == (0, 0)
    assert position.progress == 1.0


def test_locate_moves_to_next_paragraph():
    position = _schedule().locate(2.6)
    assert (position.paragraph_index, position.line_index) == (1, 0)
    assert position.progress == pytest.approx(0.2)


def test_locate_clamps_negative_and_past_end():
    schedule = _schedule()
    start = schedule.locate(-3)
    assert (start.paragraph_index, start.line_index, start.progress) == (0, 0, 0.0)

    end = schedule.locate(100)
    assert end.finished
    assert (end.paragraph_index, end.line_index, end.progress) == (1, 0, 1.0)


def test_locate_on_empty_schedule():
    assert build_schedule([], 120).locate(1.0) is None
    assert build_schedule([], 120).total_seconds == 0.0
