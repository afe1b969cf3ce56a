from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import RosterStudent, Subject, SubjectTeacher


class SubjectRepository(Protocol):
    def get_by_id(self, subject_id: int) -> Optional[Subject]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Subject]:
        raise NotImplementedError

    def create_subject(
        self,
        *,
        subject_code: str,
        subject_name: str,
        teachers: Sequence[SubjectTeacher],
        students: Sequence[RosterStudent],
    ) -> int:
        raise NotImplementedError

    def delete_by_id(self, subject_id: int) -> bool:
        """Delete the subject only; its attendance and marks rows are left in place."""

        raise NotImplementedError
