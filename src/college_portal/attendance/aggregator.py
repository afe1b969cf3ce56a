"""Roster join and per-student attendance aggregation.

Everything here is a pure function over already-fetched data: the subject's
embedded roster and every attendance session stored for that subject.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Sequence

from ..common.datetime_utils import as_date
from ..common.math_utils import percent
from ..common.validators import matches_query
from ..core.constants import UNKNOWN_STATUS
from ..core.enums import AttendanceStatus
from ..subjects.model import RosterStudent
from .model import AttendanceEntry, AttendanceSession, AttendanceSummary, StudentAttendance


def normalize_status(status: Any) -> str:
    if isinstance(status, (list, tuple)):
        status = status[0] if status else None
    return str(status) if status else UNKNOWN_STATUS


def distinct_dates(sessions: Iterable[AttendanceSession]) -> list[str]:
    """Deduplicated session dates, oldest first by calendar date."""
    return sorted({s.date for s in sessions}, key=lambda d: (as_date(d), d))


def _find_entry(session: AttendanceSession, roll_no: str) -> Optional[AttendanceEntry]:
    for entry in session.records:
        if entry.roll_no == roll_no:
            return entry
    return None


def summarize_student(
    student: RosterStudent,
    sessions: Sequence[AttendanceSession],
    dates: Sequence[str],
) -> StudentAttendance:
    # "-" means the student was not in that session's list at all.
    status_by_date = {d: UNKNOWN_STATUS for d in dates}
    for session in sessions:
        entry = _find_entry(session, student.roll_no)
        if entry is not None:
            status_by_date[session.date] = normalize_status(entry.status)

    present = sum(1 for s in status_by_date.values() if s == AttendanceStatus.PRESENT.value)
    total = len(dates)
    return StudentAttendance(
        student=student,
        status_by_date=status_by_date,
        present=present,
        total=total,
        percentage=percent(present, total),
    )


def summarize_attendance(
    roster: Sequence[RosterStudent],
    sessions: Sequence[AttendanceSession],
) -> AttendanceSummary:
    dates = distinct_dates(sessions)
    rows = [summarize_student(student, sessions, dates) for student in roster]
    return AttendanceSummary(dates=dates, rows=rows)


def filter_rows(rows: Sequence[StudentAttendance], query: str | None) -> list[StudentAttendance]:
    return [r for r in rows if matches_query(query, r.student.name, r.student.roll_no)]
