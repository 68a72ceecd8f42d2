from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import Protocol

import pdfplumber

from pdf_extract import chars_to_fragments
from pdf_models import Fragment

logging.getLogger("pdfminer").setLevel(logging.ERROR)
warnings.filterwarnings("ignore", module="pdfminer")

logger = logging.getLogger(__name__)


class ExtractionError(Exception):
    """The reader could not produce text or fragments for a page.

    *page_number* is None when the document itself could not be read.
    """

    def __init__(self, page_number: int | None, message: str) -> None:
        super().__init__(message if page_number is None else f"page {page_number}: {message}")
        self.page_number = page_number


class DocumentReader(Protocol):
    """What the table parser needs from a document. Pages are numbered from 1."""

    @property
    def num_pages(self) -> int: ...

    def page_text(self, page_number: int) -> str: ...

    def page_fragments(self, page_number: int) -> list[Fragment]: ...


class PlumberReader:
    """DocumentReader over a pdfplumber PDF."""

    def __init__(self, pdf: pdfplumber.PDF, min_gap: float | None = None) -> None:
        self._pdf = pdf
        self._min_gap = min_gap

    @classmethod
    def open(cls, path: str | Path, min_gap: float | None = None) -> PlumberReader:
        try:
            pdf = pdfplumber.open(path)
        except Exception as e:
            raise ExtractionError(None, f"failed to open {path}: {e}") from e
        return cls(pdf, min_gap=min_gap)

    def close(self) -> None:
        self._pdf.close()

    def __enter__(self) -> PlumberReader:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @property
    def _pages(self) -> list:
        try:
            return self._pdf.pages
        except Exception as e:
            raise ExtractionError(None, f"failed to read page list: {e}") from e

    @property
    def num_pages(self) -> int:
        return len(self._pages)

    def _page(self, page_number: int):
        pages = self._pages
        if not 1 <= page_number <= len(pages):
            raise ExtractionError(page_number, f"out of range (1..{len(pages)})")
        return pages[page_number - 1]

    def page_text(self, page_number: int) -> str:
        page = self._page(page_number)
        try:
            return page.extract_text() or ""
        except Exception as e:
            raise ExtractionError(page_number, f"failed to extract text: {e}") from e

    def page_fragments(self, page_number: int) -> list[Fragment]:
        page = self._page(page_number)
        try:
            chars = page.chars
        except Exception as e:
            raise ExtractionError(page_number, f"failed to read characters: {e}") from e

        kwargs = {} if self._min_gap is None else {"min_gap": self._min_gap}
        fragments = chars_to_fragments(chars, page.height, **kwargs)
        logger.debug("page %d: %d chars -> %d fragments", page_number, len(chars), len(fragments))
        return fragments
