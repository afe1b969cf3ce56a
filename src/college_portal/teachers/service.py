from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..accounts.service import AuthService
from ..common.datetime_utils import now_local
from ..common.validators import matches_query, require_non_empty
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from .model import Teacher
from .repository import TeacherRepository

logger = logging.getLogger(__name__)


class TeacherService:
    """Use case: manage teachers, their role flags and salary state (admin)."""

    def __init__(
        self,
        teachers: TeacherRepository,
        auth: AuthService,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._teachers = teachers
        self._auth = auth
        self._clock = clock

    def get_teacher(self, teacher_id: str) -> Teacher:
        teacher = self._teachers.get_by_id(str(teacher_id))
        if not teacher:
            raise NotFoundError("Teacher not found")
        return teacher

    def get_by_uid(self, uid: str) -> Teacher:
        teacher = self._teachers.get_by_uid(uid)
        if not teacher:
            raise NotFoundError("Teacher profile not found")
        return teacher

    def list_teachers(self, *, query: Optional[str] = None) -> Sequence[Teacher]:
        return [t for t in self._teachers.list_all() if matches_query(query, t.name, t.teacher_id)]

    def add_teacher(
        self,
        *,
        teacher_id: str,
        name: str,
        department: str,
        password: Optional[str] = None,
        salary: float = 0,
        account_handler: bool = False,
    ) -> str:
        teacher_id = require_non_empty(teacher_id, "Teacher ID")
        name = require_non_empty(name, "Name")
        department = require_non_empty(department, "Department")

        if self._teachers.get_by_id(teacher_id):
            raise ValidationError("A teacher with this ID already exists")

        uid = None
        email = ""
        if password:
            email = self._auth.teacher_email(teacher_id)
            uid = self._auth.create_account(email=email, password=password, role=Role.TEACHER)

        teacher = Teacher(
            teacher_id=teacher_id,
            uid=uid,
            name=name,
            department=department,
            email=email,
            salary=float(salary or 0),
            account_handler=bool(account_handler),
        )
        self._teachers.create_teacher(teacher)
        logger.info("Added teacher %s (%s)", teacher_id, name)
        return teacher_id

    def update_teacher(
        self,
        teacher_id: str,
        *,
        name: str,
        department: str,
        salary: float = 0,
        account_handler: bool = False,
    ) -> Teacher:
        current = self.get_teacher(teacher_id)
        updated = replace(
            current,
            name=require_non_empty(name, "Name"),
            department=require_non_empty(department, "Department"),
            salary=float(salary or 0),
            account_handler=bool(account_handler),
        )
        self._teachers.update_teacher(
            current.teacher_id,
            name=updated.name,
            department=updated.department,
            salary=updated.salary,
            account_handler=updated.account_handler,
        )
        return updated

    def delete_teacher(self, teacher_id: str) -> None:
        teacher = self.get_teacher(teacher_id)
        if not self._teachers.delete_by_id(teacher.teacher_id):
            raise ValidationError("Failed to delete teacher")
        if teacher.uid:
            self._auth.delete_account(teacher.uid)
        logger.info("Deleted teacher %s", teacher.teacher_id)

    def _set_flag(self, teacher_id: str, flag: str, value: bool) -> Teacher:
        teacher = self.get_teacher(teacher_id)
        self._teachers.set_flag(teacher.teacher_id, flag=flag, value=bool(value))
        logger.info("Teacher %s: %s=%s", teacher.teacher_id, flag, bool(value))
        return replace(teacher, **{flag: bool(value)})

    def set_account_handler(self, teacher_id: str, value: bool) -> Teacher:
        return self._set_flag(teacher_id, "account_handler", value)

    def set_librarian(self, teacher_id: str, value: bool) -> Teacher:
        return self._set_flag(teacher_id, "is_librarian", value)

    def set_admin(self, teacher_id: str, value: bool) -> Teacher:
        return self._set_flag(teacher_id, "is_admin", value)

    def mark_salary_paid(self, teacher_id: str) -> Teacher:
        teacher = self.get_teacher(teacher_id)
        paid_at = self._clock()
        self._teachers.mark_salary_paid(teacher.teacher_id, paid_at=paid_at)
        logger.info("Salary marked paid for teacher %s", teacher.teacher_id)
        return replace(teacher, salary_paid=True, last_salary_paid=paid_at)

    def salary_totals(self) -> dict:
        teachers = self._teachers.list_all()
        return {
            "paid": sum(t.salary for t in teachers if t.salary_paid),
            "pending": sum(t.salary for t in teachers if not t.salary_paid),
            "account_handlers": sum(1 for t in teachers if t.account_handler),
        }
