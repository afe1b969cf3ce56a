from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..subjects.model import RosterStudent


@dataclass(frozen=True)
class AttendanceEntry:
    """One student's mark inside a session.

    ``status`` is kept as stored: normally a string, occasionally a one-element
    list written by older clients.
    """

    roll_no: str
    name: str
    status: Any


@dataclass(frozen=True)
class AttendanceSession:
    """One attendance-taking event for a subject on a date (YYYY-MM-DD)."""

    session_id: Optional[int]
    subject_id: int
    subject_code: str
    subject_name: str
    date: str
    records: tuple[AttendanceEntry, ...] = ()


@dataclass(frozen=True)
class StudentAttendance:
    """Read-model: one roster student's attendance across all sessions."""

    student: RosterStudent
    status_by_date: dict[str, str]
    present: int
    total: int
    percentage: int

    def to_dict(self) -> dict:
        return {
            "id": self.student.id,
            "roll_no": self.student.roll_no,
            "name": self.student.name,
            "status_by_date": dict(self.status_by_date),
            "present": self.present,
            "total": self.total,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class AttendanceSummary:
    dates: list[str]
    rows: list[StudentAttendance]
