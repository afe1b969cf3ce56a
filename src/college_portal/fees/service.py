from __future__ import annotations

import copy
import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..accounts.model import SessionUser
from ..common.datetime_utils import as_date, now_local
from ..common.validators import require_amount, require_positive_int
from ..core.constants import DEFAULT_PAYMENT_HISTORY_LIMIT, FEE_TYPES, PAYMENT_METHODS
from ..core.enums import FeeState, Role
from ..core.exceptions import AuthorizationError, NotFoundError, PartialPaymentError, ValidationError
from ..students.model import Student
from ..students.repository import StudentRepository
from . import ledger
from .model import FeePayment, FeeStructure, LedgerDrift, StudentFeeSummary
from .repository import FeeRepository

logger = logging.getLogger(__name__)


def _parse_due_date(value) -> Optional[datetime]:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.combine(as_date(value), datetime.min.time())
    except ValueError:
        raise ValidationError("Due date must be YYYY-MM-DD")


class FeeService:
    """Use cases: fee structures, payments and per-student reconciliation.

    Each payment is two writes: an append to the payment log and an update of
    the student's running totals (``fee_status``). The repository performs both
    in one transaction; ``reconcile_student`` rebuilds the totals from the log
    if they ever disagree.
    """

    def __init__(
        self,
        fees: FeeRepository,
        students: StudentRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._fees = fees
        self._students = students
        self._clock = clock

    # Fee structures

    def list_structures(self) -> Sequence[FeeStructure]:
        return sorted(self._fees.list_structures(), key=lambda f: int(f.semester))

    def _validated_structure(self, semester, fee_type: str, amount, due_date) -> dict:
        if fee_type not in FEE_TYPES:
            raise ValidationError(f"Unknown fee type: {fee_type}")
        return {
            "semester": require_positive_int(semester, "Semester"),
            "fee_type": fee_type,
            "amount": require_amount(amount),
            "due_date": _parse_due_date(due_date),
        }

    def _ensure_unique(self, semester: int, fee_type: str, *, exclude_id: Optional[int] = None) -> None:
        for existing in self._fees.list_structures():
            if existing.fee_structure_id == exclude_id:
                continue
            if int(existing.semester) == semester and existing.fee_type == fee_type:
                raise ValidationError("A fee structure for this semester and fee type already exists")

    def create_structure(self, *, semester, fee_type: str, amount, due_date=None, description: str = "") -> int:
        values = self._validated_structure(semester, fee_type, amount, due_date)
        self._ensure_unique(values["semester"], fee_type)
        structure_id = self._fees.create_structure(description=(description or "").strip(), **values)
        logger.info("Created fee structure %s/%s = %s", values["semester"], fee_type, values["amount"])
        return structure_id

    def update_structure(
        self,
        fee_structure_id: int,
        *,
        semester,
        fee_type: str,
        amount,
        due_date=None,
        description: str = "",
    ) -> None:
        current = self.get_structure(fee_structure_id)
        values = self._validated_structure(semester, fee_type, amount, due_date)
        self._ensure_unique(values["semester"], fee_type, exclude_id=current.fee_structure_id)
        self._fees.update_structure(current.fee_structure_id, description=(description or "").strip(), **values)
        logger.info("Updated fee structure %s", current.fee_structure_id)

    def get_structure(self, fee_structure_id: int) -> FeeStructure:
        fee = self._fees.get_structure(int(fee_structure_id))
        if not fee:
            raise NotFoundError("Fee structure not found")
        return fee

    # Reads

    def list_payments(self, *, student_id: Optional[int] = None, limit: Optional[int] = None) -> Sequence[FeePayment]:
        return self._fees.list_payments(student_id=student_id, limit=limit)

    def _student(self, student_id) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        return student

    def student_fee_summary(self, student_id: int) -> StudentFeeSummary:
        student = self._student(student_id)
        return ledger.all_semester_summary(student, self._fees.list_structures(), self._clock())

    def student_overview(self, student_id: int) -> dict:
        student = self._student(student_id)
        structures = self._fees.list_structures()
        now = self._clock()
        summary = ledger.all_semester_summary(student, structures, now)
        payments = self._fees.list_payments(student_id=student.student_id)
        history = payments[:DEFAULT_PAYMENT_HISTORY_LIMIT]
        return {
            "student": student.to_dict(),
            "summary": summary.to_dict(),
            "pending": [line.to_dict() for line in ledger.pending_fees(student, structures, now)],
            "upcoming": [line.to_dict() for line in ledger.upcoming_fees(student, structures, now)],
            "overdue": [line.to_dict() for line in ledger.overdue_fees(student, structures, now)],
            "payments": [p.to_dict() for p in history],
            "payment_methods": ledger.payment_method_stats(payments),
        }

    def total_collection(self) -> float:
        return ledger.total_collection(self._fees.list_payments())

    # Writes

    def _append_payment(
        self,
        student: Student,
        *,
        semester: int,
        fee_type: str,
        amount: float,
        method: str,
        transaction_id: str,
        remarks: str,
        processed_by: str,
        structures: Sequence[FeeStructure],
    ) -> int:
        due = ledger.structure_amount(structures, semester, fee_type)
        fee_status = copy.deepcopy(student.fee_status or {})
        fee_status.setdefault(str(semester), {})[fee_type] = ledger.next_fee_status(
            student, semester, fee_type, amount, due
        )

        payment = FeePayment(
            payment_id=None,
            student_id=student.student_id,
            student_name=student.name,
            student_roll_no=student.roll_no,
            student_course=student.course,
            semester=semester,
            fee_type=fee_type,
            amount=amount,
            payment_method=method,
            transaction_id=transaction_id,
            status=FeeState.PAID.value,
            remarks=remarks,
            processed_by=processed_by,
            payment_date=self._clock(),
        )
        payment_id = self._fees.record_payment(payment, fee_status=fee_status)
        logger.info(
            "Recorded %s payment of %s for %s (semester %s, %s) by %s",
            method,
            amount,
            student.roll_no,
            semester,
            fee_type,
            processed_by,
        )
        return payment_id

    def record_payment(
        self,
        actor: SessionUser,
        *,
        student_id: int,
        semester,
        fee_type: str,
        amount,
        method: str = "cash",
        transaction_id: str = "",
        remarks: str = "",
    ) -> int:
        """Desk payment entered by an account handler or admin."""
        if not actor.can_handle_accounts:
            raise AuthorizationError("Only account handlers can record payments")

        student = self._student(student_id)
        semester = require_positive_int(semester, "Semester")
        amount = require_amount(amount)
        if fee_type not in FEE_TYPES:
            raise ValidationError(f"Unknown fee type: {fee_type}")
        if method not in PAYMENT_METHODS:
            raise ValidationError(f"Unknown payment method: {method}")
        if not ledger.is_fee_applicable(student, fee_type, semester):
            raise ValidationError("This fee does not apply to the student for that semester")

        return self._append_payment(
            student,
            semester=semester,
            fee_type=fee_type,
            amount=amount,
            method=method,
            transaction_id=(transaction_id or "").strip() or f"CASH-{self._timestamp()}",
            remarks=(remarks or "").strip(),
            processed_by=actor.email,
            structures=self._fees.list_structures(),
        )

    def _timestamp(self) -> int:
        return int(self._clock().timestamp() * 1000)

    def _self_service_student(self, actor: SessionUser) -> Student:
        if actor.role != Role.STUDENT or not actor.profile_id:
            raise AuthorizationError("Only students can pay their own fees")
        return self._student(actor.profile_id)

    def pay_fee(self, actor: SessionUser, fee_structure_id: int) -> int:
        """Online self-payment of the full outstanding balance of one fee."""
        student = self._self_service_student(actor)
        fee = self.get_structure(fee_structure_id)
        if not ledger.is_fee_applicable(student, fee.fee_type, fee.semester):
            raise ValidationError("This fee does not apply to you")

        line = ledger.fee_line(fee, ledger.paid_amount(student, fee.semester, fee.fee_type), self._clock())
        if line.balance <= 0:
            raise ValidationError("This fee is already paid")

        return self._append_payment(
            student,
            semester=int(fee.semester),
            fee_type=fee.fee_type,
            amount=line.balance,
            method="online",
            transaction_id=f"ONLINE-{self._timestamp()}",
            remarks="",
            processed_by=actor.email,
            structures=self._fees.list_structures(),
        )

    def pay_all_pending(self, actor: SessionUser) -> int:
        """Pay every pending fee of the current semester, one fee at a time.

        Fees are paid sequentially; a failure leaves the earlier fees paid and
        raises ``PartialPaymentError`` carrying how many went through.
        """
        student = self._self_service_student(actor)
        structures = self._fees.list_structures()
        pending = ledger.pending_fees(student, structures, self._clock())
        if not pending:
            raise ValidationError("No pending fees")

        paid = 0
        for index, line in enumerate(pending, start=1):
            try:
                self._append_payment(
                    student,
                    semester=int(line.fee.semester),
                    fee_type=line.fee.fee_type,
                    amount=line.balance,
                    method="online",
                    transaction_id=f"ONLINE-{self._timestamp()}-{index}",
                    remarks="",
                    processed_by=actor.email,
                    structures=structures,
                )
            except Exception as exc:
                logger.exception("Payment %d of %d failed for %s", index, len(pending), student.roll_no)
                raise PartialPaymentError(
                    f"Paid {paid} of {len(pending)} fees before a payment failed",
                    paid_count=paid,
                    total_count=len(pending),
                ) from exc
            paid += 1
            student = self._student(student.student_id)
        return paid

    def reconcile_student(self, student_id: int) -> list[LedgerDrift]:
        """Rewrite the student's running totals from the payment log; returns what differed."""
        student = self._student(student_id)
        payments = self._fees.list_payments(student_id=student.student_id)
        drift = ledger.find_ledger_drift(student, payments)
        if drift:
            rebuilt = ledger.rebuild_fee_status(self._fees.list_structures(), payments)
            self._students.update_fee_status(student.student_id, fee_status=rebuilt)
            logger.warning("Rebuilt fee totals for %s (%d mismatches)", student.roll_no, len(drift))
        return drift
