from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceEntry, AttendanceSession


class AttendanceRepository(Protocol):
    def list_for_subject(self, subject_id: int) -> Sequence[AttendanceSession]:
        """All sessions of a subject, oldest first (submission order within a date)."""

        raise NotImplementedError

    def create_session(
        self,
        *,
        subject_id: int,
        subject_code: str,
        subject_name: str,
        session_date: date,
        records: Sequence[AttendanceEntry],
    ) -> int:
        raise NotImplementedError
