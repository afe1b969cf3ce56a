from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Teacher


class TeacherRepository(Protocol):
    def get_by_id(self, teacher_id: str) -> Optional[Teacher]:
        raise NotImplementedError

    def get_by_uid(self, uid: str) -> Optional[Teacher]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Teacher]:
        """All teachers ordered by name."""

        raise NotImplementedError

    def create_teacher(self, teacher: Teacher) -> str:
        raise NotImplementedError

    def update_teacher(
        self,
        teacher_id: str,
        *,
        name: str,
        department: str,
        salary: float,
        account_handler: bool,
    ) -> bool:
        raise NotImplementedError

    def set_flag(self, teacher_id: str, *, flag: str, value: bool) -> bool:
        """Set one of the boolean role flags (is_librarian, account_handler, is_admin)."""

        raise NotImplementedError

    def mark_salary_paid(self, teacher_id: str, *, paid_at: datetime) -> bool:
        raise NotImplementedError

    def delete_by_id(self, teacher_id: str) -> bool:
        raise NotImplementedError
