"""Shared test helpers: positioned fragments and an in-memory document reader."""

from __future__ import annotations

from pdf_models import Fragment, Rect
from pdf_reader import ExtractionError


def frag(text: str, x: float, y: float, width: float = 20.0, height: float = 10.0) -> Fragment:
    """Build a fragment whose top-left corner is at (x, y), y growing upward."""
    return Fragment(text=text, rect=Rect(x0=x, y0=y - height, x1=x + width, y1=y))


class FakeReader:
    """DocumentReader over a list of pages, each a list of fragments.

    Page text is the fragments' text joined by newlines. Page numbers listed in
    *failing* raise ExtractionError when their fragments are requested.
    """

    def __init__(self, pages: list[list[Fragment]], failing: set[int] | None = None) -> None:
        self.pages = pages
        self.failing = failing or set()
        self.text_requests: list[int] = []

    @property
    def num_pages(self) -> int:
        return len(self.pages)

    def page_text(self, page_number: int) -> str:
        self.text_requests.append(page_number)
        return "\n".join(f.text for f in self.pages[page_number - 1])

    def page_fragments(self, page_number: int) -> list[Fragment]:
        if page_number in self.failing:
            raise ExtractionError(page_number, "broken page")
        return list(self.pages[page_number - 1])
