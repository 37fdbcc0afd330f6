"""Word wrapping used in place of a host text-layout engine."""

from __future__ import annotations

import textwrap
from typing import List

DEFAULT_LINE_WIDTH = 60


def wrap_lines(text: str, width: int = DEFAULT_LINE_WIDTH) -> List[str]:
    """Wrap *text* into lines of at most *width* characters.

    Words and hyphenated compounds are never split, so a single long word may
    produce a line wider than *width*.
    """

    if width <= 0:
        raise ValueError("width must be positive")
    return textwrap.wrap(
        text,
        width=width,
        break_long_words=False,
        break_on_hyphens=False,
    )


__all__ = ["DEFAULT_LINE_WIDTH", "wrap_lines"]
