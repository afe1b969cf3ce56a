from __future__ import annotations

import pytest

from college_portal.attendance.aggregator import (
    distinct_dates,
    filter_rows,
    normalize_status,
    summarize_attendance,
)
from college_portal.attendance.model import AttendanceEntry, AttendanceSession
from college_portal.subjects.model import RosterStudent

A = RosterStudent(id="1", roll_no="A", name="Anil")
B = RosterStudent(id="2", roll_no="B", name="Bela")


def _session(session_id: int, day: str, *entries: tuple[str, object]) -> AttendanceSession:
    return AttendanceSession(
        session_id=session_id,
        subject_id=1,
        subject_code="CS101",
        subject_name="Programming",
        date=day,
        records=tuple(AttendanceEntry(roll_no=r, name=r, status=s) for r, s in entries),
    )


def test_cs101_two_sessions():
    sessions = [
        _session(1, "2024-01-01", ("A", "Present"), ("B", "Absent")),
        _session(2, "2024-01-02", ("A", "Absent")),
    ]

    summary = summarize_attendance([A, B], sessions)

    assert summary.dates == ["2024-01-01", "2024-01-02"]
    row_a, row_b = summary.rows
    assert row_a.status_by_date == {"2024-01-01": "Present", "2024-01-02": "Absent"}
    assert (row_a.present, row_a.total, row_a.percentage) == (1, 2, 50)
    assert row_b.status_by_date == {"2024-01-01": "Absent", "2024-01-02": "-"}
    assert (row_b.present, row_b.total, row_b.percentage) == (0, 2, 0)


def test_no_sessions_gives_zero_percent():
    summary = summarize_attendance([A], [])

    assert summary.dates == []
    assert summary.rows[0].total == 0
    assert summary.rows[0].percentage == 0


def test_dates_are_deduplicated_and_sorted_by_calendar_date():
    sessions = [
        _session(1, "2024-02-10", ("A", "Present")),
        _session(2, "2024-01-05", ("A", "Present")),
        _session(3, "2024-02-10", ("A", "Absent")),
    ]

    dates = distinct_dates(sessions)

    assert dates == ["2024-01-05", "2024-02-10"]
    assert len(dates) == len({s.date for s in sessions})


def test_later_session_on_same_date_overrides_listed_students_only():
    sessions = [
        _session(1, "2024-01-01", ("A", "Absent"), ("B", "Present")),
        _session(2, "2024-01-01", ("A", "Present")),
    ]

    summary = summarize_attendance([A, B], sessions)

    assert summary.rows[0].status_by_date == {"2024-01-01": "Present"}
    assert summary.rows[1].status_by_date == {"2024-01-01": "Present"}
    assert summary.rows[0].total == 1


def test_list_status_takes_first_element():
    sessions = [_session(1, "2024-01-01", ("A", ["Leave", "Present"]))]

    summary = summarize_attendance([A], sessions)

    assert summary.rows[0].status_by_date["2024-01-01"] == "Leave"
    assert summary.rows[0].present == 0


@pytest.mark.parametrize(
    "raw, expected",
    [("Present", "Present"), (["Absent"], "Absent"), ([], "-"), (None, "-"), ("", "-")],
)
def test_normalize_status(raw, expected):
    assert normalize_status(raw) == expected


def test_percentage_rounds_half_up_and_stays_in_range():
    sessions = [
        _session(1, "2024-01-01", ("A", "Present")),
        _session(2, "2024-01-02", ("A", "Present")),
        _session(3, "2024-01-03", ("A", "Absent")),
    ]

    row = summarize_attendance([A], sessions).rows[0]

    assert row.percentage == 67
    assert 0 <= row.percentage <= 100


def test_filter_rows_matches_name_or_roll_number():
    rows = summarize_attendance([A, B], []).rows

    assert [r.student.roll_no for r in filter_rows(rows, "bel")] == ["B"]
    assert [r.student.roll_no for r in filter_rows(rows, "a")] == ["A", "B"]
    assert len(filter_rows(rows, "   ")) == 2
