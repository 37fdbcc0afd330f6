"""PDF ingestion utilities."""

from __future__ import annotations

import collections
import logging
from typing import Dict, List, Sequence

from pypdf import PdfReader
from pypdf.errors import PdfReadError

from . import Page, PositionedWord

LOGGER = logging.getLogger(__name__)

LAYOUTS = ("text", "geometry")


class PdfLoader:
    """Extract per-page text (or positioned words) from a PDF."""

    def __init__(
        self,
        *,
        layout: str = "text",
        strip_repeated: bool = True,
        common_threshold: float = 0.6,
    ) -> None:
        if layout not in LAYOUTS:
            raise ValueError(f"Unsupported PDF layout: {layout}")
        self.layout = layout
        self.strip_repeated = strip_repeated
        self.common_threshold = common_threshold

    def load(self, path: str) -> List[Page]:
        try:
            reader = PdfReader(path)
        except PdfReadError as exc:
            raise RuntimeError(f"Unable to read PDF {path}: {exc}") from exc

        if self.layout == "geometry":
            pages = [
                Page(index=index, text="", words=self._collect_words(page), source=str(path))
                for index, page in enumerate(reader.pages)
            ]
        else:
            page_texts = [page.extract_text() or "" for page in reader.pages]
            if self.strip_repeated and len(page_texts) > 1:
                repeated = self._detect_repeated_lines(page_texts)
                if repeated:
                    LOGGER.debug("Stripping %d running header/footer lines", len(repeated))
                page_texts = [self._strip_lines(text, repeated) for text in page_texts]
            pages = [
                Page(index=index, text=text, source=str(path))
                for index, text in enumerate(page_texts)
            ]

        if not any(page.text.strip() or page.words for page in pages):
            LOGGER.warning("No extractable text found in %s", path)
        LOGGER.info("Loaded %d pages from %s", len(pages), path)
        return pages

    def _collect_words(self, page) -> List[PositionedWord]:
        height = float(page.mediabox.height)
        words: List[PositionedWord] = []

        def visitor(text, cm, tm, font_dict, font_size) -> None:
            if not text or not text.strip():
                return
            # Text space origin mapped through the text matrix, then the CTM.
            x = tm[4] * cm[0] + tm[5] * cm[2] + cm[4]
            y = tm[4] * cm[1] + tm[5] * cm[3] + cm[5]
            top = height - y
            for offset, token in enumerate(text.split()):
                # Fragments share one origin; nudge x so reading order survives sorting.
                words.append(PositionedWord(text=token, left=x + offset * 1e-3, top=top))

        page.extract_text(visitor_text=visitor)
        return words

    def _detect_repeated_lines(self, pages: Sequence[str]) -> Dict[str, int]:
        counts: Dict[str, int] = collections.Counter()
        for text in pages:
            lines = [line.strip() for line in text.splitlines() if line.strip()]
            if not lines:
                continue
            counts[lines[0]] += 1
            if len(lines) > 1:
                counts[lines[-1]] += 1
        threshold = max(2, int(len(pages) * self.common_threshold))
        return {line: count for line, count in counts.items() if count >= threshold}

    def _strip_lines(self, text: str, repeated: Dict[str, int]) -> str:
        if not repeated:
            return text
        lines = text.splitlines()
        content = [index for index, line in enumerate(lines) if line.strip()]
        if not content:
            return text
        # Only the first and last non-blank lines can be running headers/footers.
        drop = {index for index in (content[0], content[-1]) if lines[index].strip() in repeated}
        return "\n".join(line for index, line in enumerate(lines) if index not in drop)


__all__ = ["PdfLoader"]
