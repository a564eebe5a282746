"""CSV report rendering."""

from __future__ import annotations

import csv
import io
from collections.abc import Sequence
from pathlib import Path

import structlog

from .config import Enrichment
from .errors import OutputWriteError
from .models import ResultRow
from .models.result_row import BASE_COLUMNS

logger = structlog.get_logger(__name__)


def columns_for(enrichment: Enrichment) -> list[str]:
    """Return the report columns for a run; every row shares this set."""
    columns = list(BASE_COLUMNS)
    if enrichment.latest:
        columns.append("latestVersion")
    if enrichment.license:
        columns.append("license")
    if enrichment.description:
        columns.append("description")
    if enrichment.npm_link:
        columns.append("npmLink")
    return columns


def render_csv(rows: Sequence[ResultRow], enrichment: Enrichment) -> str:
    """Return CSV text: a header line, then one line per row.

    Lines are separated by a bare line feed, with none after the last row.

    Values containing a comma, a line break or a double quote are quoted with
    inner quotes doubled; all other values are written as-is.
    """
    columns = columns_for(enrichment)
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)
    writer.writerow(columns)
    for row in rows:
        data = row.to_dict()
        writer.writerow([data.get(column, "") for column in columns])
    return buffer.getvalue().removesuffix("\n")


def write_csv(path: Path, rows: Sequence[ResultRow], enrichment: Enrichment) -> Path:
    """Write the CSV report to ``path``.

    Raises:
        OutputWriteError: If the file cannot be written.
    """
    content = render_csv(rows, enrichment)
    try:
        path.write_text(content, encoding="utf-8", newline="")
    except OSError as exc:
        raise OutputWriteError(path, exc.strerror or str(exc)) from exc

    logger.info("csv_written", path=str(path), rows=len(rows))
    return path
