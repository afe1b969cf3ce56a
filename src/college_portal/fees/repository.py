from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import FeePayment, FeeStructure


class FeeRepository(Protocol):
    def list_structures(self) -> Sequence[FeeStructure]:
        """All fee structures ordered by semester."""

        raise NotImplementedError

    def get_structure(self, fee_structure_id: int) -> Optional[FeeStructure]:
        raise NotImplementedError

    def create_structure(
        self,
        *,
        semester: int,
        fee_type: str,
        amount: float,
        due_date: Optional[datetime],
        description: str = "",
    ) -> int:
        raise NotImplementedError

    def update_structure(
        self,
        fee_structure_id: int,
        *,
        semester: int,
        fee_type: str,
        amount: float,
        due_date: Optional[datetime],
        description: str = "",
    ) -> bool:
        raise NotImplementedError

    def list_payments(self, *, student_id: Optional[int] = None, limit: Optional[int] = None) -> Sequence[FeePayment]:
        """Payment log, newest first."""

        raise NotImplementedError

    def record_payment(self, payment: FeePayment, *, fee_status: dict) -> int:
        """Append ``payment`` to the log and store the student's new running totals.

        Both writes happen in one transaction.
        """

        raise NotImplementedError
