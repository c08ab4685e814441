"""Row parser for delimited time-series text (Giovanni CSV and the offline generator).

Ingestion is tolerant: a malformed row is skipped or kept with an absent value,
never raised.
"""
import csv
import logging
import math
import re
from collections.abc import Iterable, Iterator
from datetime import date, datetime

from climate_engine.models.series import Observation

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"
HEADER_TOKENS = ("time", "date")

_LINE_SPLIT = re.compile(r"\r\n|\r|\n")


def iter_records(text: str, header_tokens: Iterable[str] = HEADER_TOKENS) -> Iterator[list[str]]:
    """Yield the fields of every data line.

    Blank lines, comment lines, lines with fewer than two fields and lines whose
    first field contains a header token are skipped. The header check is a
    substring heuristic, not strict header detection.
    """
    tokens = tuple(t.lower() for t in header_tokens)
    for line in _LINE_SPLIT.split(text.strip()):
        if not line.strip() or line.lstrip().startswith(COMMENT_MARKER):
            continue
        fields = next(csv.reader([line]), [])
        if len(fields) < 2:
            continue
        first = fields[0].strip().lower()
        if any(token in first for token in tokens):
            continue
        yield fields


def parse_date(field: str) -> date | None:
    """Calendar date of an ISO date/datetime string, as written (no tz shift)."""
    field = field.strip()
    if field.endswith("Z"):
        field = field[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(field).date()
    except ValueError:
        return None


def parse_value(field: str) -> float | None:
    try:
        value = float(field.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_rows(text: str) -> list[Observation]:
    """Parse raw delimited text into observations, in source order."""
    rows = []
    skipped = 0
    for fields in iter_records(text):
        d = parse_date(fields[0])
        if d is None:
            skipped += 1
            continue
        rows.append(Observation(date=d, value=parse_value(fields[1])))

    if skipped:
        logger.debug("Skipped %d non-date rows", skipped)
    return rows
