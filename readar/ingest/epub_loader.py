"""EPUB ingestion utilities."""

from __future__ import annotations

from dataclasses import dataclass
import html
import logging
import re
from typing import Iterable, List
import zipfile

import ebooklib
from ebooklib import epub

from . import Page

LOGGER = logging.getLogger(__name__)

BLOCK_END = re.compile(r"</(?:p|div|h[1-6]|li|blockquote|section)\s*>", re.I)


@dataclass
class TocEntry:
    title: str
    href: str


class EpubLoader:
    """Extract one page per table-of-contents entry from an EPUB."""

    def __init__(self, *, strip_empty: bool = True) -> None:
        self.strip_empty = strip_empty

    def load(self, path: str) -> List[Page]:
        """Load pages from the EPUB at *path*."""

        try:
            book = epub.read_epub(path)
        except (epub.EpubException, zipfile.BadZipFile, KeyError) as exc:
            raise RuntimeError(f"Unable to read EPUB {path}: {exc}") from exc

        toc_entries = list(self._flatten_toc(book.toc))
        if not toc_entries:
            LOGGER.warning("EPUB has no explicit TOC, falling back to spine order.")
            toc_entries = self._spine_entries(book)

        pages: List[Page] = []
        seen = set()
        for entry in toc_entries:
            href = entry.href.split("#", 1)[0]
            if href in seen:
                continue
            seen.add(href)
            item = book.get_item_with_href(href)
            if item is None:
                LOGGER.debug("Skipping TOC entry without document: %s", entry)
                continue
            text = self._html_to_text(item.get_content().decode("utf-8", errors="ignore"))
            if self.strip_empty and not text.strip():
                LOGGER.debug("Skipping empty document: %s", entry.title)
                continue
            pages.append(
                Page(
                    index=len(pages),
                    text=text,
                    source=str(path),
                    title=entry.title or None,
                )
            )
        LOGGER.info("Loaded %d pages from %s", len(pages), path)
        return pages

    def _flatten_toc(self, toc: Iterable) -> Iterable[TocEntry]:
        for node in toc:
            if isinstance(node, (list, tuple)) and node:
                first, *rest = node
                if hasattr(first, "title") and hasattr(first, "href"):
                    yield TocEntry(title=self._safe_title(first.title), href=first.href)
                for child in rest:
                    yield from self._flatten_toc(child if isinstance(child, (list, tuple)) else [child])
            elif hasattr(node, "title") and hasattr(node, "href"):
                yield TocEntry(title=self._safe_title(node.title), href=node.href)

    def _spine_entries(self, book: epub.EpubBook) -> List[TocEntry]:
        return [
            TocEntry(title=item.get_name(), href=item.get_name())
            for item in book.get_items_of_type(ebooklib.ITEM_DOCUMENT)
        ]

    def _safe_title(self, value) -> str:
        if isinstance(value, bytes):
            value = value.decode("utf-8", errors="ignore")
        return re.sub(r"\s+", " ", value or "").strip()

    def _html_to_text(self, markup: str) -> str:
        markup = re.sub(r"<(script|style)[^>]*>.*?</\1>", "", markup, flags=re.S | re.I)
        # Soft breaks stay inside a paragraph, block ends become blank lines.
        markup = re.sub(r"<br[^>]*>", "\n", markup, flags=re.I)
        markup = BLOCK_END.sub("\n\n", markup)
        text = re.sub(r"<[^>]+>", " ", markup)
        text = html.unescape(text)
        text = re.sub(r"[^\S\n]+", " ", text)
        return text.strip()


__all__ = ["EpubLoader"]
