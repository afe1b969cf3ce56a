from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Mapping, Optional

from ..accounts.model import SessionUser
from ..common.datetime_utils import as_date, now_local
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..marks.lookup import exams_in, flatten_marks
from ..marks.repository import MarksRepository
from ..subjects.service import SubjectService, ensure_teaches
from .aggregator import distinct_dates, filter_rows, summarize_attendance, summarize_student
from .model import AttendanceEntry
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_VALID_STATUSES = {s.value for s in AttendanceStatus}


def _checked_statuses(statuses) -> dict[str, Optional[str]]:
    """Roll number to status; a blank status counts as Absent."""
    if not statuses:
        return {}
    if not isinstance(statuses, dict):
        raise ValidationError("Attendance must map roll numbers to statuses")
    for roll_no, status in statuses.items():
        if not isinstance(roll_no, str) or not (status is None or isinstance(status, str)):
            raise ValidationError("Attendance must map roll numbers to statuses")
    return dict(statuses)


class AttendanceService:
    """Use cases: take attendance for a subject and report on it."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        marks: MarksRepository,
        subjects: SubjectService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._marks = marks
        self._subjects = subjects
        self._clock = clock

    def submit_attendance(
        self,
        *,
        teacher: SessionUser,
        subject_id: int,
        statuses: Mapping[str, str],
        on: Optional[str] = None,
    ) -> int:
        """Store one session for the subject.

        ``statuses`` maps roll number to status; roster students left out are
        recorded as Absent.
        """
        subject = self._subjects.get_subject(subject_id)
        ensure_teaches(teacher, subject)
        if not subject.students:
            raise ValidationError("This subject has no students")

        statuses = _checked_statuses(statuses)
        unknown = set(statuses) - {s.roll_no for s in subject.students}
        if unknown:
            raise ValidationError(f"Not on the roster: {', '.join(sorted(unknown))}")

        records = []
        for student in subject.students:
            status = statuses.get(student.roll_no) or AttendanceStatus.ABSENT.value
            if status not in _VALID_STATUSES:
                raise ValidationError(f"Invalid attendance status: {status}")
            records.append(AttendanceEntry(roll_no=student.roll_no, name=student.name, status=status))

        session_date = as_date(on) if on else self._clock().date()
        session_id = self._attendance.create_session(
            subject_id=subject.subject_id,
            subject_code=subject.subject_code,
            subject_name=subject.subject_name,
            session_date=session_date,
            records=records,
        )
        logger.info(
            "Attendance for %s on %s submitted by %s (%d students)",
            subject.subject_code,
            session_date.isoformat(),
            teacher.email,
            len(records),
        )
        return session_id

    def subject_report(self, subject_id: int, *, query: str = "") -> dict:
        subject = self._subjects.get_subject(subject_id)
        sessions = self._attendance.list_for_subject(subject.subject_id)
        summary = summarize_attendance(subject.students, sessions)

        records = self._marks.list_for_subject(subject.subject_id)
        marks = flatten_marks(records)

        rows = []
        for row in filter_rows(summary.rows, query):
            item = row.to_dict()
            item["marks"] = marks.get(row.student.roll_no, {})
            rows.append(item)

        return {
            "subject": subject.to_dict(),
            "dates": summary.dates,
            "exams": exams_in(records),
            "rows": rows,
        }

    def student_overview(self, roll_no: str) -> list[dict]:
        """Attendance and marks of one student in every subject listing them."""
        out = []
        for subject in self._subjects.subjects_for_student(roll_no):
            roster_entry = next(s for s in subject.students if s.roll_no == roll_no)
            sessions = self._attendance.list_for_subject(subject.subject_id)
            row = summarize_student(roster_entry, sessions, distinct_dates(sessions))
            marks = flatten_marks(self._marks.list_for_subject(subject.subject_id))
            out.append(
                {
                    "subject_id": subject.subject_id,
                    "subject_code": subject.subject_code,
                    "subject_name": subject.subject_name,
                    "present": row.present,
                    "total": row.total,
                    "percentage": row.percentage,
                    "marks": marks.get(roll_no, {}),
                }
            )
        return out

    def session_count(self, subject_id: int) -> int:
        return len(self._attendance.list_for_subject(subject_id))
