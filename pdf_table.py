"""Reconstruct a table from coordinate-aligned text fragments.

Three stages per document:
  1. get_relevant_pages  – the pages matching the start marker, up to and including
                           the first one that also matches the end marker
  2. per page:
       a) find_table_bounds – top of the start/end markers at fragment level
       b) filter_fragments  – drop empty text and text outside the table on the
                              first and last pages
       c) bind_headers      – header fragments fix each column's x anchor
       d) assemble_rows     – data fragments go to the first column whose anchor
                              is within tolerance; a row closes once every
                              anchored column holds a cell
  3. on_row               – called once per non-empty row, in document order
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator

from pdf_extract import find_table_bounds
from pdf_models import Fragment, TableBounds, TableDef
from pdf_reader import DocumentReader

logger = logging.getLogger(__name__)

_COLUMN_TOLERANCE = 1.0


class TableRow:
    """Cells of one row, keyed by column index."""

    def __init__(self) -> None:
        self.cell_by_col: dict[int, str] = {}

    def cell_count(self) -> int:
        return len(self.cell_by_col)

    def add_cell(self, text: str, col: int) -> None:
        self.cell_by_col[col] = text

    def is_empty(self) -> bool:
        return all(not cell.strip() for cell in self.cell_by_col.values())

    def cells(self, width: int) -> list[str]:
        """Return *width* cells in column order; unwritten columns are ''."""
        return [self.cell_by_col.get(i, "") for i in range(width)]


def get_relevant_pages(table: TableDef, reader: DocumentReader) -> list[int]:
    """Return the page numbers holding the table, or [] when it is absent."""
    pages: list[int] = []
    for page_number in range(1, reader.num_pages + 1):
        page_text = reader.page_text(page_number)
        if not table.start.search(page_text):
            continue
        pages.append(page_number)

        if table.end.search(page_text):
            break

    logger.debug("table spans pages %s", pages)
    return pages


def filter_fragments(
    fragments: list[Fragment],
    bounds: TableBounds,
    first: bool,
    last: bool,
) -> list[Fragment]:
    kept: list[Fragment] = []
    for fragment in fragments:
        if not fragment.text:
            continue
        # above the start marker
        if first and bounds.start_y is not None and fragment.rect.min_y > bounds.start_y:
            continue
        # below the end marker
        if last and bounds.end_y is not None and fragment.rect.max_y < bounds.end_y:
            continue
        kept.append(fragment)
    return kept


def bind_headers(
    fragments: list[Fragment],
    table: TableDef,
    anchors: dict[int, float],
) -> list[Fragment]:
    """Record header positions in *anchors* and return the non-header fragments."""
    data: list[Fragment] = []
    for fragment in fragments:
        col = table.header_column(fragment.text)
        if col is None:
            data.append(fragment)
            continue
        anchors[col] = fragment.rect.min_x
        logger.debug("column %d anchored at x=%.2f by %r", col, fragment.rect.min_x, fragment.text)
    return data


def classify(
    fragment: Fragment,
    width: int,
    anchors: dict[int, float],
    tolerance: float = _COLUMN_TOLERANCE,
) -> int | None:
    """Return the first column, in declared order, anchored at the fragment's x."""
    x = fragment.rect.min_x
    for col in range(width):
        anchor = anchors.get(col)
        if anchor is None:
            continue
        if x == anchor or abs(x - anchor) <= tolerance:
            return col
    return None


def assemble_rows(
    fragments: list[Fragment],
    width: int,
    anchors: dict[int, float],
    tolerance: float = _COLUMN_TOLERANCE,
) -> list[list[str]]:
    full = sum(1 for col in range(width) if col in anchors)

    rows: list[TableRow] = []
    current_row = TableRow()
    for fragment in fragments:
        col = classify(fragment, width, anchors, tolerance)
        if col is None:
            logger.debug("dropping unaligned fragment %r at x=%.2f", fragment.text, fragment.rect.min_x)
            continue
        if current_row.cell_count() == full:
            if not current_row.is_empty():
                rows.append(current_row)
            current_row = TableRow()
        current_row.add_cell(fragment.text.strip(), col)

    if not current_row.is_empty():
        rows.append(current_row)

    return [row.cells(width) for row in rows]


def iter_table_rows(
    table: TableDef,
    reader: DocumentReader,
    tolerance: float = _COLUMN_TOLERANCE,
) -> Iterator[list[str]]:
    """Yield the table's rows in document order.

    Column anchors and the table's vertical bounds live only for the duration
    of this call. An ExtractionError from *reader* propagates and ends the
    iteration; rows of earlier pages have already been yielded.
    """
    pages = get_relevant_pages(table, reader)
    if not pages:
        logger.info("table not found")
        return

    width = len(table.columns)
    anchors: dict[int, float] = {}
    bounds = TableBounds()
    count = len(pages)

    for i, page_number in enumerate(pages):
        fragments = reader.page_fragments(page_number)
        find_table_bounds(fragments, table, bounds)

        kept = filter_fragments(fragments, bounds, first=i == 0, last=i == count - 1)
        data = bind_headers(kept, table, anchors)
        rows = assemble_rows(data, width, anchors, tolerance)
        logger.debug("page %d: %d fragments, %d rows", page_number, len(data), len(rows))

        yield from rows


def parse_table(
    table: TableDef,
    reader: DocumentReader,
    on_row: Callable[[list[str]], None],
    tolerance: float = _COLUMN_TOLERANCE,
) -> int:
    """Call *on_row* once per reconstructed row and return how many rows there were."""
    n = 0
    for cells in iter_table_rows(table, reader, tolerance):
        on_row(cells)
        n += 1
    return n
