from __future__ import annotations

from typing import Protocol, Sequence

from .model import MarksRecord


class MarksRepository(Protocol):
    def list_for_subject(self, subject_id: int) -> Sequence[MarksRecord]:
        """Records of every exam of the subject, in entry order."""

        raise NotImplementedError

    def list_for_roll_no(self, roll_no: str) -> Sequence[MarksRecord]:
        raise NotImplementedError

    def add_records(self, records: Sequence[MarksRecord]) -> int:
        raise NotImplementedError
