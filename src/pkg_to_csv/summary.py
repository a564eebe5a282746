"""Console table rendering for runs without an output file."""

from __future__ import annotations

import unicodedata
from collections.abc import Sequence

from .config import Enrichment
from .models import ResultRow
from .report import columns_for

INDEX_HEADER = "(index)"


def _cell(value: str) -> str:
    # Keep each row on one line.
    return value.replace("\r", " ").replace("\n", " ")


def display_width(text: str) -> int:
    """Terminal columns ``text`` occupies.

    Wide and fullwidth East Asian characters (CJK, most emoji) take two
    columns; combining marks and other zero-width characters take none.
    """
    width = 0
    for char in text:
        if unicodedata.category(char) in ("Mn", "Me", "Cf"):
            continue
        width += 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1
    return width


def _pad(value: str, width: int) -> str:
    return value + " " * (width - display_width(value))


def render_table(rows: Sequence[ResultRow], enrichment: Enrichment) -> str:
    """Return a boxed text table with an index column, one line per row."""
    columns = columns_for(enrichment)
    headers = [INDEX_HEADER, *columns]

    body: list[list[str]] = []
    for index, row in enumerate(rows):
        data = row.to_dict()
        body.append([str(index), *(_cell(data.get(column, "")) for column in columns)])

    widths = [display_width(header) for header in headers]
    for line in body:
        for i, value in enumerate(line):
            widths[i] = max(widths[i], display_width(value))

    def border(left: str, middle: str, right: str) -> str:
        return left + middle.join("─" * (w + 2) for w in widths) + right

    def render(values: Sequence[str]) -> str:
        cells = (f" {_pad(value, width)} " for value, width in zip(values, widths))
        return "│" + "│".join(cells) + "│"

    lines = [border("┌", "┬", "┐"), render(headers), border("├", "┼", "┤")]
    lines.extend(render(line) for line in body)
    lines.append(border("└", "┴", "┘"))

    return "\n".join(lines) + "\n"
