"""Print a coordinate-aligned table found in a PDF document, one row per line."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pdf_models import ColumnDef, TableDef
from pdf_reader import ExtractionError, PlumberReader
from pdf_table import parse_table

logger = logging.getLogger(__name__)


def extract_table(
    pdf_path: str,
    start: str,
    end: str,
    headers: list[str],
    delimiter: str = "\t",
    min_gap: float | None = None,
) -> int:
    """Print each row of the table in *pdf_path* joined by *delimiter*.

    *headers* are patterns for the column headers, left to right. Returns the
    number of rows printed. Exits with status 1 when the file does not exist.
    """
    path = Path(pdf_path)
    if not path.exists():
        print(f"Error: file not found: {path}", file=sys.stderr)
        sys.exit(1)

    table = TableDef(start=start, end=end, columns=[ColumnDef(h) for h in headers])

    def print_row(cells: list[str]) -> None:
        print(delimiter.join(cells))

    with PlumberReader.open(path, min_gap=min_gap) as reader:
        return parse_table(table, reader, print_row)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract a table laid out by text position from a PDF document.",
    )
    parser.add_argument("pdf", help="Path to the PDF file")
    parser.add_argument(
        "--start",
        required=True, metavar="REGEX",
        help="Pattern matching the text where the table begins",
    )
    parser.add_argument(
        "--end",
        required=True, metavar="REGEX",
        help="Pattern matching the text where the table ends",
    )
    parser.add_argument(
        "-c", "--column",
        action="append", required=True, dest="columns", metavar="REGEX",
        help="Pattern matching a column header; repeat once per column, left to right",
    )
    parser.add_argument(
        "-d", "--delimiter",
        default="\t",
        help="Cell separator in the output (default: tab)",
    )
    parser.add_argument(
        "--min-gap",
        type=float, default=None, metavar="PT",
        help="Smallest horizontal gap, in points, that splits two cells on a line",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log how pages, headers and fragments are handled",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s %(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        n = extract_table(
            args.pdf,
            args.start,
            args.end,
            args.columns,
            delimiter=args.delimiter,
            min_gap=args.min_gap,
        )
    except ExtractionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    logger.info("%d rows extracted from %s", n, args.pdf)
    return 0


if __name__ == "__main__":
    sys.exit(main())
