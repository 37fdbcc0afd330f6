"""Heuristic syllable splitting and Flesch readability scores."""

from __future__ import annotations

from dataclasses import asdict, dataclass
import re
from typing import Dict, List, Tuple

TOKEN_PATTERN = re.compile(r"[A-Za-z]+(?:'[A-Za-z]+)?|[0-9]+|[^\w\s]")
SYLLABLE_PATTERN = re.compile(r"[^aeiouyAEIOUY]*[aeiouyAEIOUY]+(?:[^aeiouyAEIOUY]|$)")
SENTENCE_END = re.compile(r"[.!?]+")
ALPHA_WORD = re.compile(r"[A-Za-z]+")


@dataclass
class ReadabilityReport:
    flesch_kincaid_grade: float
    flesch_reading_ease: float
    total_words: int
    total_sentences: int
    total_syllables: int

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def split_tokens(text: str) -> List[str]:
    return TOKEN_PATTERN.findall(text)


def syllabify_word(word: str) -> List[str]:
    """Split *word* before vowel groups, keeping one trailing consonant.

    Crude, offline and English-centric; a word with no vowels is one syllable.
    """

    parts = [part for part in SYLLABLE_PATTERN.findall(word) if part.strip()]
    return parts or [word]


def syllabify(text: str) -> List[Tuple[str, List[str]]]:
    """Pair every token of *text* with its syllables."""

    result = []
    for token in split_tokens(text):
        if ALPHA_WORD.fullmatch(token):
            result.append((token, syllabify_word(token)))
        else:
            result.append((token, [token]))
    return result


def readability_metrics(text: str) -> ReadabilityReport:
    sentences = max(1, len(SENTENCE_END.findall(text)))
    words = [token for token in split_tokens(text) if ALPHA_WORD.fullmatch(token)]
    total_words = max(1, len(words))
    total_syllables = sum(max(1, len(syllabify_word(word))) for word in words)

    words_per_sentence = total_words / sentences
    syllables_per_word = total_syllables / total_words
    reading_ease = 206.835 - 1.015 * words_per_sentence - 84.6 * syllables_per_word
    grade = 0.39 * words_per_sentence + 11.8 * syllables_per_word - 15.59

    return ReadabilityReport(
        flesch_kincaid_grade=round(grade, 2),
        flesch_reading_ease=round(reading_ease, 2),
        total_words=total_words,
        total_sentences=sentences,
        total_syllables=total_syllables,
    )


__all__ = [
    "ReadabilityReport",
    "readability_metrics",
    "split_tokens",
    "syllabify",
    "syllabify_word",
]
