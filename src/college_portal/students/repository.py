from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_uid(self, uid: str) -> Optional[Student]:
        raise NotImplementedError

    def get_by_roll_no(self, roll_no: str) -> Optional[Student]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def create_student(
        self,
        *,
        uid: Optional[str],
        roll_no: str,
        name: str,
        course: str,
        semester: int,
        email: str,
        phone: str,
    ) -> int:
        raise NotImplementedError

    def update_student(
        self,
        student_id: int,
        *,
        roll_no: str,
        name: str,
        course: str,
        semester: int,
        email: str,
        phone: str,
    ) -> bool:
        raise NotImplementedError

    def update_optional_fees(self, student_id: int, *, optional_fees: dict) -> bool:
        raise NotImplementedError

    def update_fee_status(self, student_id: int, *, fee_status: dict) -> bool:
        raise NotImplementedError

    def delete_by_id(self, student_id: int) -> bool:
        raise NotImplementedError
