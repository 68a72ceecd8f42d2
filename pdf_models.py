from __future__ import annotations

import re
from dataclasses import dataclass, field


def _compile(pattern: str | re.Pattern) -> re.Pattern:
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned bounding box in PDF user space (y grows upward)."""

    x0: float
    y0: float
    x1: float
    y1: float

    @property
    def min_x(self) -> float:
        return min(self.x0, self.x1)

    @property
    def max_x(self) -> float:
        return max(self.x0, self.x1)

    @property
    def min_y(self) -> float:
        return min(self.y0, self.y1)

    @property
    def max_y(self) -> float:
        return max(self.y0, self.y1)


@dataclass
class Fragment:
    """A run of text drawn at one position on a page."""

    text: str
    rect: Rect


@dataclass
class ColumnDef:
    """A table column, identified by the text of its header."""

    header: re.Pattern

    def __post_init__(self) -> None:
        self.header = _compile(self.header)

    def matches(self, text: str) -> bool:
        return self.header.search(text) is not None


@dataclass
class TableDef:
    """A table delimited by start/end markers, with its ordered columns.

    The index of a column in ``columns`` is the key of its cell in every row.
    Nothing resolved while parsing a document is stored here, so one
    definition can be reused for any number of documents.
    """

    start: re.Pattern
    end: re.Pattern
    columns: list[ColumnDef] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.start = _compile(self.start)
        self.end = _compile(self.end)
        self.columns = [c if isinstance(c, ColumnDef) else ColumnDef(c) for c in self.columns]

    def header_column(self, text: str) -> int | None:
        """Return the index of the first column whose header matches *text*."""
        stripped = text.strip()
        for i, column in enumerate(self.columns):
            if column.matches(stripped):
                return i
        return None


@dataclass
class TableBounds:
    """Vertical extent of a table: top of the start marker and of the end marker."""

    start_y: float | None = None
    end_y: float | None = None
