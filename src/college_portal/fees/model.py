from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import FeeState


@dataclass(frozen=True)
class FeeStructure:
    """Expected charge for one (semester, fee type)."""

    fee_structure_id: int
    semester: int
    fee_type: str
    amount: float
    due_date: Optional[datetime] = None
    description: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.fee_structure_id,
            "semester": self.semester,
            "fee_type": self.fee_type,
            "amount": self.amount,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "description": self.description,
        }


@dataclass(frozen=True)
class FeePayment:
    """Append-only payment log entry."""

    payment_id: Optional[int]
    student_id: int
    semester: int
    fee_type: str
    amount: float
    payment_method: str
    transaction_id: str
    payment_date: datetime
    status: str = "paid"
    student_name: str = ""
    student_roll_no: str = ""
    student_course: str = ""
    remarks: str = ""
    processed_by: str = ""

    def to_dict(self) -> dict:
        return {
            "id": self.payment_id,
            "student_id": self.student_id,
            "student_name": self.student_name,
            "student_roll_no": self.student_roll_no,
            "student_course": self.student_course,
            "semester": self.semester,
            "fee_type": self.fee_type,
            "amount": self.amount,
            "payment_method": self.payment_method,
            "transaction_id": self.transaction_id,
            "status": self.status,
            "remarks": self.remarks,
            "processed_by": self.processed_by,
            "payment_date": self.payment_date.isoformat(),
        }


@dataclass(frozen=True)
class FeeLine:
    """Read-model: one applicable fee reconciled against what was paid."""

    fee: FeeStructure
    paid: float
    balance: float
    state: FeeState
    overdue: bool

    @property
    def is_fully_paid(self) -> bool:
        return self.state == FeeState.PAID

    def to_dict(self) -> dict:
        out = self.fee.to_dict()
        out.update(
            {
                "paid": self.paid,
                "balance": self.balance,
                "status": self.state.value,
                "overdue": self.overdue,
            }
        )
        return out


@dataclass(frozen=True)
class SemesterSummary:
    semester: int
    total: float
    paid: float
    pending: float
    percentage: int
    lines: list[FeeLine] = field(default_factory=list)
    is_current: bool = False

    def to_dict(self) -> dict:
        return {
            "semester": self.semester,
            "total": self.total,
            "paid": self.paid,
            "pending": self.pending,
            "percentage": self.percentage,
            "is_current": self.is_current,
            "lines": [line.to_dict() for line in self.lines],
        }


@dataclass(frozen=True)
class LedgerDrift:
    """Mismatch between a student's running total and the payment log."""

    semester: str
    fee_type: str
    recorded: float
    logged: float


@dataclass(frozen=True)
class StudentFeeSummary:
    """All semesters from 1 to the student's current one."""

    semesters: list[SemesterSummary]
    total: float
    paid: float
    pending: float
    percentage: int
    current_semester: int

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "paid": self.paid,
            "pending": self.pending,
            "percentage": self.percentage,
            "current_semester": self.current_semester,
            "semesters": [s.to_dict() for s in self.semesters],
        }
