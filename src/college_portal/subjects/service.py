from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..accounts.model import SessionUser
from ..common.validators import natural_key, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..students.repository import StudentRepository
from ..teachers.repository import TeacherRepository
from .model import RosterStudent, Subject, SubjectTeacher
from .repository import SubjectRepository

logger = logging.getLogger(__name__)


def ensure_teaches(actor: SessionUser, subject: Subject) -> None:
    """Admins may act on any subject; teachers only on subjects they are assigned."""
    if actor.has_admin_rights:
        return
    if actor.role != Role.TEACHER or not subject.is_taught_by(str(actor.profile_id)):
        raise AuthorizationError("You are not assigned to this subject")


class SubjectService:
    """Use case: create subjects with an embedded teacher list and student roster."""

    def __init__(
        self,
        subjects: SubjectRepository,
        teachers: TeacherRepository,
        students: StudentRepository,
    ):
        self._subjects = subjects
        self._teachers = teachers
        self._students = students

    def create_subject(
        self,
        *,
        subject_code: str,
        subject_name: str,
        teacher_ids: Iterable[str],
        student_ids: Iterable[int] = (),
    ) -> int:
        subject_code = require_non_empty(subject_code, "Subject code")
        subject_name = require_non_empty(subject_name, "Subject name")
        teacher_ids = [str(t) for t in teacher_ids or [] if str(t).strip()]
        if not teacher_ids:
            raise ValidationError("Assign at least one teacher")

        teachers: list[SubjectTeacher] = []
        for teacher_id in dict.fromkeys(teacher_ids):
            teacher = self._teachers.get_by_id(teacher_id)
            if not teacher:
                raise ValidationError(f"Unknown teacher: {teacher_id}")
            teachers.append(SubjectTeacher(id=teacher.teacher_id, name=teacher.name))

        roster: list[RosterStudent] = []
        for student_id in dict.fromkeys(int(s) for s in student_ids or []):
            student = self._students.get_by_id(student_id)
            if not student:
                raise ValidationError(f"Unknown student: {student_id}")
            roster.append(RosterStudent(id=str(student.student_id), roll_no=student.roll_no, name=student.name))
        roster.sort(key=lambda s: natural_key(s.roll_no))

        subject_id = self._subjects.create_subject(
            subject_code=subject_code,
            subject_name=subject_name,
            teachers=teachers,
            students=roster,
        )
        logger.info("Created subject %s with %d teachers and %d students", subject_code, len(teachers), len(roster))
        return subject_id

    def get_subject(self, subject_id: int) -> Subject:
        subject = self._subjects.get_by_id(int(subject_id))
        if not subject:
            raise NotFoundError("Subject not found")
        return subject

    def list_subjects(self) -> Sequence[Subject]:
        return list(self._subjects.list_all())

    def subjects_for_teacher(self, teacher_id: str) -> list[Subject]:
        return [s for s in self._subjects.list_all() if s.is_taught_by(str(teacher_id))]

    def subjects_for_student(self, roll_no: str) -> list[Subject]:
        return [s for s in self._subjects.list_all() if s.has_student(roll_no)]

    def delete_subject(self, subject_id: int) -> None:
        subject = self.get_subject(subject_id)
        if not self._subjects.delete_by_id(subject.subject_id):
            raise ValidationError("Failed to delete subject")
        logger.info("Deleted subject %s (attendance and marks rows are kept)", subject.subject_code)
