from __future__ import annotations

import csv
import dataclasses
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Sequence

from invoicer.core.errors import (
    InputValidationError,
    WorklogDateError,
    WorklogDurationError,
    WorklogHeaderError,
    WorklogRowError,
)
from invoicer.data.models import InvoiceDocument, WorklogEntry

logger = logging.getLogger(__name__)

WORKLOG_HEADERS = ("Date", "Start", "End", "Worked", "Titles")
DATE_COLUMN = 0
WORKED_COLUMN = 3
TITLES_COLUMN = 4


def _parse_duration(raw: str, line_no: int) -> float:
    """Convert an ``H:MM`` duration into fractional hours."""
    parts = raw.split(":")
    if len(parts) < 2:
        raise WorklogDurationError(f"line {line_no}: duration {raw!r} is not in H:MM form")
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
    except ValueError as exc:
        raise WorklogDurationError(f"line {line_no}: duration {raw!r} is not in H:MM form") from exc
    return hours + minutes / 60.0


def aggregate_worklog(rows: Iterable[Sequence[str]]) -> List[WorklogEntry]:
    """Turn raw worklog rows (header first) into entries, preserving row order.

    Any malformed header, date or duration aborts the whole aggregation.
    """
    entries: List[WorklogEntry] = []
    header_seen = False
    for line_no, row in enumerate(rows, 1):
        if not row:
            continue
        if not header_seen:
            if tuple(row) != WORKLOG_HEADERS:
                raise WorklogHeaderError(
                    f"unexpected worklog headers {list(row)!r}, expected {list(WORKLOG_HEADERS)!r}"
                )
            header_seen = True
            continue

        if len(row) < len(WORKLOG_HEADERS):
            raise WorklogRowError(f"line {line_no}: expected {len(WORKLOG_HEADERS)} fields, got {len(row)}")

        try:
            entry_date = datetime.strptime(row[DATE_COLUMN], "%Y-%m-%d").date()
        except ValueError as exc:
            raise WorklogDateError(f"line {line_no}: invalid date {row[DATE_COLUMN]!r}") from exc

        entries.append(
            WorklogEntry(
                date=entry_date,
                hours=_parse_duration(row[WORKED_COLUMN], line_no),
                description=row[TITLES_COLUMN],
            )
        )
    return entries


def read_worklog_csv(path: Path | str) -> List[WorklogEntry]:
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8", newline="") as f:
            rows = list(csv.reader(f))
    except (OSError, csv.Error) as exc:
        raise InputValidationError(f"could not read worklog {p}: {exc}") from exc
    entries = aggregate_worklog(rows)
    logger.info("Read %s worklog entries from %s", len(entries), p)
    return entries


def apply_worklog(document: InvoiceDocument, entries: Sequence[WorklogEntry]) -> InvoiceDocument:
    """Replace the document's items, quantities and dates with the worklog rows.

    An empty worklog leaves the document untouched.
    """
    if not entries:
        return document
    return dataclasses.replace(
        document,
        items=tuple(e.description for e in entries),
        quantities=tuple(e.hours for e in entries),
        dates=tuple(e.date for e in entries),
    )
