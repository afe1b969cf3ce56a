from __future__ import annotations

import copy
import logging
from typing import Optional, Sequence

from ..accounts.service import AuthService
from ..common.validators import matches_query, natural_key, require_non_empty, require_positive_int
from ..core.constants import DEFAULT_STUDENT_PASSWORD, OPTIONAL_FEES
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


class StudentService:
    """Use case: manage students and their optional-fee choices (admin)."""

    def __init__(self, students: StudentRepository, auth: AuthService):
        self._students = students
        self._auth = auth

    def get_student(self, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def get_by_uid(self, uid: str) -> Student:
        student = self._students.get_by_uid(uid)
        if not student:
            raise NotFoundError("Student record not found")
        return student

    def list_students(
        self,
        *,
        query: Optional[str] = None,
        course: Optional[str] = None,
        semester: Optional[int] = None,
    ) -> Sequence[Student]:
        out = [
            s
            for s in self._students.list_all()
            if matches_query(query, s.name, s.roll_no)
            and (not course or s.course == course)
            and (semester is None or int(s.semester) == int(semester))
        ]
        out.sort(key=lambda s: natural_key(s.roll_no))
        return out

    def add_student(
        self,
        *,
        name: str,
        roll_no: str,
        course: str,
        semester,
        email: str = "",
        phone: str = "",
        password: Optional[str] = DEFAULT_STUDENT_PASSWORD,
    ) -> int:
        name = require_non_empty(name, "Name")
        roll_no = require_non_empty(roll_no, "Roll number")
        course = require_non_empty(course, "Course")
        semester = require_positive_int(semester, "Semester")

        if self._students.get_by_roll_no(roll_no):
            raise ValidationError("Student with this roll number already exists")

        uid = None
        if password:
            uid = self._auth.create_account(
                email=self._auth.student_email(roll_no),
                password=password,
                role=Role.STUDENT,
            )

        student_id = self._students.create_student(
            uid=uid,
            roll_no=roll_no,
            name=name,
            course=course,
            semester=semester,
            email=(email or "").strip(),
            phone=(phone or "").strip(),
        )
        logger.info("Added student %s (%s)", roll_no, name)
        return student_id

    def update_student(
        self,
        student_id: int,
        *,
        name: str,
        roll_no: str,
        course: str,
        semester,
        email: str = "",
        phone: str = "",
    ) -> None:
        current = self.get_student(student_id)
        name = require_non_empty(name, "Name")
        roll_no = require_non_empty(roll_no, "Roll number")
        course = require_non_empty(course, "Course")
        semester = require_positive_int(semester, "Semester")

        if roll_no != current.roll_no:
            clash = self._students.get_by_roll_no(roll_no)
            if clash and clash.student_id != current.student_id:
                raise ValidationError("Student with this roll number already exists")
            if current.uid:
                self._auth.change_login_email(current.uid, email=self._auth.student_email(roll_no))

        self._students.update_student(
            current.student_id,
            roll_no=roll_no,
            name=name,
            course=course,
            semester=semester,
            email=(email or "").strip(),
            phone=(phone or "").strip(),
        )

    def delete_student(self, student_id: int) -> None:
        student = self.get_student(student_id)
        if not self._students.delete_by_id(student.student_id):
            raise ValidationError("Failed to delete student")
        if student.uid:
            self._auth.delete_account(student.uid)
        logger.info("Deleted student %s", student.roll_no)

    def toggle_optional_fee(self, student_id: int, *, fee_type: str, semester) -> bool:
        """Flip one optional fee for one semester; returns the new value."""
        if fee_type not in OPTIONAL_FEES:
            raise ValidationError(f"{fee_type} is not an optional fee")
        semester = require_positive_int(semester, "Semester")
        student = self.get_student(student_id)

        config = copy.deepcopy(student.optional_fees or {})
        semester_config = config.setdefault(str(semester), {})
        new_value = not semester_config.get(fee_type, False)
        semester_config[fee_type] = new_value

        self._students.update_optional_fees(student.student_id, optional_fees=config)
        logger.info("Student %s: optional fee %s for semester %s -> %s", student.roll_no, fee_type, semester, new_value)
        return new_value

    def courses(self) -> list[str]:
        return sorted({s.course for s in self._students.list_all() if s.course})
