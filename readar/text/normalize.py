"""Clean-up of extracted page text before segmentation.

Every step keeps blank lines intact, since those are the paragraph
boundaries the segmenter relies on.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import re
from typing import Mapping, MutableMapping

DEFAULT_LIGATURES = {
    "ﬀ": "ff",
    "ﬁ": "fi",
    "ﬂ": "fl",
    "ﬃ": "ffi",
    "ﬄ": "ffl",
    "ﬅ": "st",
    "ﬆ": "st",
}

SMART_QUOTES = {
    "“": '"',
    "”": '"',
    "„": '"',
    "‘": "'",
    "’": "'",
    "—": "-",
    "–": "-",
}

LEVELS = ("none", "light", "standard", "strong")

# "read-\ning" split across a soft wrap; capitalised continuations are left alone.
_LINE_END_HYPHEN = re.compile(r"(?<=[A-Za-z])-[ \t]*\n[ \t]*(?=[a-z])")
_PAGE_NUMBER_LINE = re.compile(r"[ \t]*(?:\d+|-[ \t]*\d+[ \t]*-)[ \t]*")


@dataclass
class NormalizationOptions:
    """Configuration toggles for text normalization."""

    fix_hyphenation: bool = True
    normalize_quotes: bool = True
    replace_ligatures: bool = True
    strip_page_numbers: bool = True
    collapse_whitespace: bool = True
    custom_replacements: MutableMapping[str, str] = field(default_factory=dict)


def options_for_level(level: str) -> NormalizationOptions:
    """Map a ``--normalize`` level to concrete options."""

    if level not in LEVELS:
        raise ValueError(f"Unsupported normalization level: {level}")
    if level == "none":
        return NormalizationOptions(
            fix_hyphenation=False,
            normalize_quotes=False,
            replace_ligatures=False,
            strip_page_numbers=False,
            collapse_whitespace=False,
        )
    if level == "light":
        return NormalizationOptions(fix_hyphenation=False, strip_page_numbers=False)
    if level == "standard":
        return NormalizationOptions(strip_page_numbers=False)
    return NormalizationOptions()


class Normalizer:
    """Normalize page text according to configured options."""

    def __init__(self, options: NormalizationOptions | None = None) -> None:
        self.options = options or NormalizationOptions()

    def normalize(self, text: str) -> str:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        if self.options.replace_ligatures:
            text = self._apply_mapping(text, DEFAULT_LIGATURES)
        # Rejoin before quote mapping turns dashes into hyphens.
        if self.options.fix_hyphenation:
            text = _LINE_END_HYPHEN.sub("", text)
        if self.options.normalize_quotes:
            text = self._apply_mapping(text, SMART_QUOTES)
        if self.options.strip_page_numbers:
            text = self._strip_page_numbers(text)
        if self.options.custom_replacements:
            text = self._apply_mapping(text, self.options.custom_replacements)
        if self.options.collapse_whitespace:
            text = self._collapse_whitespace(text)
        return text

    def _apply_mapping(self, text: str, mapping: Mapping[str, str]) -> str:
        pattern = re.compile("|".join(re.escape(k) for k in sorted(mapping, key=len, reverse=True)))
        return pattern.sub(lambda match: mapping[match.group(0)], text)

    def _strip_page_numbers(self, text: str) -> str:
        lines = text.split("\n")
        kept = [line for line in lines if not (line.strip() and _PAGE_NUMBER_LINE.fullmatch(line))]
        return "\n".join(kept)

    def _collapse_whitespace(self, text: str) -> str:
        text = re.sub(r"[^\S\n]+", " ", text)
        text = re.sub(r" ?\n ?", "\n", text)
        return re.sub(r"\n{3,}", "\n\n", text)


__all__ = ["LEVELS", "Normalizer", "NormalizationOptions", "options_for_level"]
