from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Mapping

from ..accounts.model import SessionUser
from ..common.datetime_utils import now_local, today_iso
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_MAX_MARKS, FINAL_EXAM_ID, FINAL_MAX_MARKS
from ..core.exceptions import ValidationError
from ..subjects.service import SubjectService, ensure_teaches
from .lookup import exams_in, flatten_marks
from .model import MarksRecord
from .repository import MarksRepository

logger = logging.getLogger(__name__)


def max_marks_for(exam_id: str) -> int:
    return FINAL_MAX_MARKS if exam_id == FINAL_EXAM_ID else DEFAULT_MAX_MARKS


def _parse_mark(value, roll_no: str, max_marks: int) -> float:
    if value is None or str(value).strip() == "":
        return 0.0
    try:
        mark = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Marks for {roll_no} must be a number")
    if mark < 0 or mark > max_marks:
        raise ValidationError(f"Marks for {roll_no} must be between 0 and {max_marks}")
    return mark


class MarksService:
    """Use cases: enter exam marks for a subject and read them back."""

    def __init__(
        self,
        marks: MarksRepository,
        subjects: SubjectService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._marks = marks
        self._subjects = subjects
        self._clock = clock

    def submit_marks(
        self,
        *,
        teacher: SessionUser,
        subject_id: int,
        exam_id: str,
        marks: Mapping[str, object],
    ) -> int:
        subject = self._subjects.get_subject(subject_id)
        ensure_teaches(teacher, subject)
        exam_id = require_non_empty(exam_id, "Exam").lower()
        max_marks = max_marks_for(exam_id)

        marks = dict(marks or {})
        roster = {s.roll_no: s for s in subject.students}
        unknown = set(marks) - set(roster)
        if unknown:
            raise ValidationError(f"Not on the roster: {', '.join(sorted(unknown))}")

        entered_on = today_iso(self._clock())
        records = [
            MarksRecord(
                subject_id=subject.subject_id,
                exam_id=exam_id,
                roll_no=roll_no,
                name=roster[roll_no].name,
                marks=_parse_mark(value, roll_no, max_marks),
                max_marks=max_marks,
                date=entered_on,
            )
            for roll_no, value in marks.items()
        ]
        if not records:
            raise ValidationError("No marks to save")

        count = self._marks.add_records(records)
        logger.info("Saved %d %s marks for %s by %s", count, exam_id, subject.subject_code, teacher.email)
        return count

    def marks_for_subject(self, subject_id: int) -> dict:
        subject = self._subjects.get_subject(subject_id)
        records = self._marks.list_for_subject(subject.subject_id)
        return {"exams": exams_in(records), "marks": flatten_marks(records)}

    def marks_for_student(self, roll_no: str) -> list[dict]:
        by_subject: dict[int, list[MarksRecord]] = {}
        for rec in self._marks.list_for_roll_no(roll_no):
            by_subject.setdefault(rec.subject_id, []).append(rec)

        out = []
        for subject in self._subjects.subjects_for_student(roll_no):
            records = by_subject.get(subject.subject_id, [])
            out.append(
                {
                    "subject_id": subject.subject_id,
                    "subject_code": subject.subject_code,
                    "subject_name": subject.subject_name,
                    "marks": flatten_marks(records).get(roll_no, {}),
                }
            )
        return out
