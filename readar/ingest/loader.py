"""Pick a loader for a document based on its path."""

from __future__ import annotations

from pathlib import Path
from typing import List

from . import Page
from .text_loader import TextLoader

SUPPORTED_SUFFIXES = (".pdf", ".epub", ".txt")


def load_document(path: str | Path, *, layout: str = "text") -> List[Page]:
    """Load *path* into pages.

    PDFs honour *layout* (``"text"`` or ``"geometry"``); the other formats
    always produce text pages.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Input does not exist: {path}")
    if path.is_dir():
        return TextLoader().load(path)

    suffix = path.suffix.lower()
    if suffix == ".pdf":
        from .pdf_loader import PdfLoader

        return PdfLoader(layout=layout).load(str(path))
    if suffix == ".epub":
        from .epub_loader import EpubLoader

        return EpubLoader().load(str(path))
    if suffix == ".txt":
        return TextLoader().load(path)
    raise ValueError(
        f"Unsupported input format '{suffix or path.name}'. Supported: {', '.join(SUPPORTED_SUFFIXES)}"
    )


__all__ = ["SUPPORTED_SUFFIXES", "load_document"]
