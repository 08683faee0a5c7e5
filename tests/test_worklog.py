from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from invoicer.core.errors import (
    InputValidationError,
    WorklogDateError,
    WorklogDurationError,
    WorklogHeaderError,
    WorklogRowError,
)
from invoicer.core.settings import Settings
from invoicer.data.worklog import aggregate_worklog, apply_worklog, read_worklog_csv

HEADER = ["Date", "Start", "End", "Worked", "Titles"]


def test_rows_become_entries_in_order() -> None:
    rows = [
        HEADER,
        ["2024-03-02", "09:00", "16:30", "7:30", "API design"],
        ["2024-03-01", "10:00", "11:15", "1:15", "Kickoff call"],
        ["2024-03-04", "08:00", "08:20", "0:20", "Standup"],
    ]
    entries = aggregate_worklog(rows)
    assert [e.description for e in entries] == ["API design", "Kickoff call", "Standup"]
    assert [e.date for e in entries] == [date(2024, 3, 2), date(2024, 3, 1), date(2024, 3, 4)]
    assert entries[0].hours == 7.5
    assert entries[1].hours == 1.25
    assert entries[2].hours == pytest.approx(1 / 3)


def test_blank_rows_are_skipped() -> None:
    entries = aggregate_worklog([HEADER, [], ["2024-03-02", "", "", "2:00", "Review"]])
    assert len(entries) == 1


def test_empty_input_has_no_entries() -> None:
    assert aggregate_worklog([]) == []


def test_bad_header_aborts() -> None:
    rows = [["Day", "Start", "End", "Worked", "Titles"], ["2024-03-02", "", "", "1:00", "x"]]
    with pytest.raises(WorklogHeaderError):
        aggregate_worklog(rows)


@pytest.mark.parametrize(
    "row,error",
    [
        (["02/03/2024", "", "", "1:00", "x"], WorklogDateError),
        (["2024-03-02", "", "", "90", "x"], WorklogDurationError),
        (["2024-03-02", "", "", "1:xx", "x"], WorklogDurationError),
        (["2024-03-02", "", "", "1:00"], WorklogRowError),
    ],
)
def test_malformed_rows_abort_with_distinct_errors(row: list, error: type) -> None:
    rows = [HEADER, ["2024-03-01", "", "", "1:00", "fine"], row]
    with pytest.raises(error):
        aggregate_worklog(rows)
    assert issubclass(error, InputValidationError)


def test_read_worklog_csv(tmp_path: Path) -> None:
    p = tmp_path / "worklog.csv"
    p.write_text(
        "Date,Start,End,Worked,Titles\n"
        "2024-05-06,09:00,11:30,2:30,\"Fix login, add tests\"\n",
        encoding="utf-8",
    )
    entries = read_worklog_csv(p)
    assert len(entries) == 1
    assert entries[0].description == "Fix login, add tests"
    assert entries[0].hours == 2.5


def test_missing_worklog_file(tmp_path: Path) -> None:
    with pytest.raises(InputValidationError):
        read_worklog_csv(tmp_path / "nope.csv")


def test_apply_worklog_overrides_items() -> None:
    doc = Settings.defaults(date(2024, 5, 1)).to_document()
    entries = aggregate_worklog([HEADER, ["2024-05-02", "", "", "3:45", "Deploy"]])
    updated = apply_worklog(doc, entries)
    assert updated.items == ("Deploy",)
    assert updated.quantities == (3.75,)
    assert updated.dates == (date(2024, 5, 2),)
    # rates are left alone
    assert updated.rates == doc.rates


def test_apply_empty_worklog_keeps_document() -> None:
    doc = Settings.defaults(date(2024, 5, 1)).to_document()
    assert apply_worklog(doc, []) is doc
