from __future__ import annotations

from collections import defaultdict

from pdf_models import Fragment, Rect, TableBounds, TableDef

_MIN_FRAGMENT_GAP = 4.0
_GAP_CHAR_WIDTHS = 1.5


def chars_to_fragments(
    chars: list[dict],
    page_height: float,
    min_gap: float = _MIN_FRAGMENT_GAP,
) -> list[Fragment]:
    """Group page.chars into positioned fragments, top-to-bottom then left-to-right.

    Characters sharing a rounded 'top' form a visual line. A line is split into
    separate fragments wherever the horizontal gap between two characters is
    wider than 1.5 average character widths (and at least *min_gap*), or at a
    run of two or more spaces. A single space is kept, so a multi-word cell
    stays one fragment. Fragment rectangles cover the visible characters only.

    pdfplumber measures 'top'/'bottom' from the top of the page; the returned
    rectangles are flipped into PDF user space where y grows upward.
    """
    by_y: dict[int, list[dict]] = defaultdict(list)
    for c in chars:
        by_y[round(c["top"])].append(c)

    fragments: list[Fragment] = []
    for y_key in sorted(by_y.keys()):
        row = sorted(by_y[y_key], key=lambda c: c["x0"])
        run: list[dict] = []

        for c in row:
            is_space = c["text"].isspace()
            if run:
                run_x0 = run[0]["x0"]
                run_x1 = run[-1]["x1"]
                avg_char_width = (run_x1 - run_x0) / len(run)
                gap = c["x0"] - run_x1
                is_gap = gap > max(avg_char_width * _GAP_CHAR_WIDTHS, min_gap)
                if is_gap or (is_space and run[-1]["text"].isspace()):
                    fragments.append(_run_to_fragment(run, page_height))
                    run = []
            if is_space and not run:
                continue
            run.append(c)

        if run:
            fragments.append(_run_to_fragment(run, page_height))

    return fragments


def _run_to_fragment(run: list[dict], page_height: float) -> Fragment:
    visible = [c for c in run if not c["text"].isspace()]
    text = "".join(c["text"] for c in run).strip()
    top = min(c["top"] for c in visible)
    bottom = max(c["bottom"] for c in visible)
    rect = Rect(
        x0=min(c["x0"] for c in visible),
        y0=page_height - bottom,
        x1=max(c["x1"] for c in visible),
        y1=page_height - top,
    )
    return Fragment(text=text, rect=rect)


def find_table_bounds(
    fragments: list[Fragment],
    table: TableDef,
    bounds: TableBounds | None = None,
) -> TableBounds:
    """Locate the table's start/end markers among a page's fragments.

    Walks the fragments once, accumulating their text. The first fragment at
    which the accumulated text matches the end marker gives the end boundary;
    otherwise the first one at which it matches the start marker gives the
    start boundary. Boundaries already set on *bounds* are left alone.
    """
    if bounds is None:
        bounds = TableBounds()

    accum = ""
    for fragment in fragments:
        accum = f"{accum} {fragment.text}" if accum else fragment.text
        if bounds.end_y is None and table.end.search(accum):
            bounds.end_y = fragment.rect.max_y
        elif bounds.start_y is None and table.start.search(accum):
            bounds.start_y = fragment.rect.max_y
        if bounds.start_y is not None and bounds.end_y is not None:
            break

    return bounds
