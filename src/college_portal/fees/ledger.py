"""Fee reconciliation.

Pure functions comparing the configured fee structures with what a student has
paid. Paid amounts come from the running totals on the student record unless a
``paid_amounts`` map (same ``{semester: {fee_type: amount}}`` shape, e.g. built
from the payment log) is supplied. Inputs are never mutated.
"""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, time
from typing import Iterable, Mapping, Optional, Sequence

from ..common.math_utils import percent
from ..core.constants import COMPULSORY_FEES
from ..core.enums import FeeState
from ..students.model import Student
from .model import FeeLine, FeePayment, FeeStructure, LedgerDrift, SemesterSummary, StudentFeeSummary

PaidAmounts = Mapping[str, Mapping[str, float]]

_EPSILON = 1e-9


def is_fee_applicable(student: Optional[Student], fee_type: str, semester: int | str) -> bool:
    """Compulsory fees always apply; optional ones only when enabled for that semester."""
    if fee_type in COMPULSORY_FEES:
        return True
    if student is None:
        return False
    semester_config = (student.optional_fees or {}).get(str(semester)) or {}
    return semester_config.get(fee_type) is True


def applicable_fees(
    student: Optional[Student],
    structures: Iterable[FeeStructure],
    semester: int | str,
) -> list[FeeStructure]:
    return [
        fee
        for fee in structures
        if int(fee.semester) == int(semester) and is_fee_applicable(student, fee.fee_type, semester)
    ]


def paid_amount(student: Student, semester: int | str, fee_type: str) -> float:
    status = ((student.fee_status or {}).get(str(semester)) or {}).get(fee_type) or {}
    return float(status.get("amount") or 0)


def _lookup_paid(student: Student, fee: FeeStructure, paid_amounts: Optional[PaidAmounts]) -> float:
    if paid_amounts is None:
        return paid_amount(student, fee.semester, fee.fee_type)
    return float((paid_amounts.get(str(fee.semester)) or {}).get(fee.fee_type) or 0)


def fee_state(amount: float, paid: float) -> FeeState:
    balance = max(amount - paid, 0)
    if balance == 0:
        return FeeState.PAID
    if 0 < paid < amount:
        return FeeState.PARTIAL
    return FeeState.UNPAID


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def is_overdue(fee: FeeStructure, balance: float, now: datetime) -> bool:
    if fee.due_date is None or balance <= 0:
        return False
    return _as_datetime(fee.due_date) < now


def fee_line(fee: FeeStructure, paid: float, now: datetime) -> FeeLine:
    balance = max(float(fee.amount) - paid, 0)
    return FeeLine(
        fee=fee,
        paid=paid,
        balance=balance,
        state=fee_state(float(fee.amount), paid),
        overdue=is_overdue(fee, balance, now),
    )


def semester_summary(
    student: Student,
    structures: Iterable[FeeStructure],
    semester: int | str,
    now: datetime,
    *,
    paid_amounts: Optional[PaidAmounts] = None,
) -> SemesterSummary:
    lines = [
        fee_line(fee, _lookup_paid(student, fee, paid_amounts), now)
        for fee in applicable_fees(student, structures, semester)
    ]
    total = sum(float(line.fee.amount) for line in lines)
    paid = sum(line.paid for line in lines)
    pending = sum(line.balance for line in lines)
    return SemesterSummary(
        semester=int(semester),
        total=total,
        paid=paid,
        pending=pending,
        percentage=percent(min(paid, total), total),
        lines=lines,
        is_current=int(semester) == int(student.semester),
    )


def all_semester_summary(
    student: Student,
    structures: Sequence[FeeStructure],
    now: datetime,
    *,
    paid_amounts: Optional[PaidAmounts] = None,
) -> StudentFeeSummary:
    current = int(student.semester or 1)
    semesters = [
        semester_summary(student, structures, sem, now, paid_amounts=paid_amounts)
        for sem in range(1, current + 1)
    ]
    total = sum(s.total for s in semesters)
    paid = sum(s.paid for s in semesters)
    pending = sum(s.pending for s in semesters)
    return StudentFeeSummary(
        semesters=semesters,
        total=total,
        paid=paid,
        pending=pending,
        percentage=percent(min(paid, total), total),
        current_semester=current,
    )


def _open_lines_up_to_current(
    student: Student,
    structures: Iterable[FeeStructure],
    now: datetime,
    paid_amounts: Optional[PaidAmounts],
) -> list[FeeLine]:
    current = int(student.semester or 1)
    out: list[FeeLine] = []
    for fee in structures:
        if int(fee.semester) > current:
            continue
        if not is_fee_applicable(student, fee.fee_type, fee.semester):
            continue
        line = fee_line(fee, _lookup_paid(student, fee, paid_amounts), now)
        if not line.is_fully_paid:
            out.append(line)
    return out


def upcoming_fees(
    student: Student,
    structures: Iterable[FeeStructure],
    now: datetime,
    *,
    paid_amounts: Optional[PaidAmounts] = None,
) -> list[FeeLine]:
    lines = [
        line
        for line in _open_lines_up_to_current(student, structures, now, paid_amounts)
        if line.fee.due_date is not None and _as_datetime(line.fee.due_date) > now
    ]
    lines.sort(key=lambda line: _as_datetime(line.fee.due_date))
    return lines


def overdue_fees(
    student: Student,
    structures: Iterable[FeeStructure],
    now: datetime,
    *,
    paid_amounts: Optional[PaidAmounts] = None,
) -> list[FeeLine]:
    return [line for line in _open_lines_up_to_current(student, structures, now, paid_amounts) if line.overdue]


def pending_fees(
    student: Student,
    structures: Iterable[FeeStructure],
    now: datetime,
    *,
    semester: int | None = None,
    paid_amounts: Optional[PaidAmounts] = None,
) -> list[FeeLine]:
    """Applicable fees of one semester (default: current) not yet fully paid."""
    target = student.semester if semester is None else semester
    summary = semester_summary(student, structures, target, now, paid_amounts=paid_amounts)
    return [line for line in summary.lines if not line.is_fully_paid]


def structure_amount(structures: Iterable[FeeStructure], semester: int | str, fee_type: str) -> float:
    for fee in structures:
        if int(fee.semester) == int(semester) and fee.fee_type == fee_type:
            return float(fee.amount)
    return 0


def next_fee_status(student: Student, semester: int | str, fee_type: str, payment: float, due: float) -> dict:
    """Running-total entry after adding ``payment`` to what was already paid."""
    new_amount = paid_amount(student, semester, fee_type) + payment
    state = FeeState.PAID if new_amount >= due else FeeState.PARTIAL
    return {"amount": new_amount, "status": state.value}


def payment_method_stats(payments: Iterable[FeePayment]) -> dict[str, int]:
    return dict(Counter(p.payment_method or "online" for p in payments))


def total_collection(payments: Iterable[FeePayment]) -> float:
    return sum(float(p.amount or 0) for p in payments)


def paid_totals_from_log(payments: Iterable[FeePayment]) -> dict[str, dict[str, float]]:
    out: dict[str, dict[str, float]] = {}
    for p in payments:
        if p.status != FeeState.PAID.value:
            continue
        by_type = out.setdefault(str(p.semester), {})
        by_type[p.fee_type] = by_type.get(p.fee_type, 0) + float(p.amount)
    return out


def find_ledger_drift(student: Student, payments: Iterable[FeePayment]) -> list[LedgerDrift]:
    logged = paid_totals_from_log(payments)
    recorded = student.fee_status or {}

    drift: list[LedgerDrift] = []
    for semester in sorted(set(logged) | set(recorded), key=lambda s: int(s)):
        fee_types = set(logged.get(semester, {})) | set(recorded.get(semester) or {})
        for fee_type in sorted(fee_types):
            rec = paid_amount(student, semester, fee_type)
            log = float(logged.get(semester, {}).get(fee_type, 0))
            if abs(rec - log) > _EPSILON:
                drift.append(LedgerDrift(semester=semester, fee_type=fee_type, recorded=rec, logged=log))
    return drift


def rebuild_fee_status(structures: Sequence[FeeStructure], payments: Iterable[FeePayment]) -> dict:
    """Running totals derived from the payment log alone."""
    out: dict[str, dict] = {}
    for semester, by_type in paid_totals_from_log(payments).items():
        for fee_type, amount in by_type.items():
            due = structure_amount(structures, semester, fee_type)
            state = FeeState.PAID if amount >= due else FeeState.PARTIAL
            out.setdefault(semester, {})[fee_type] = {"amount": amount, "status": state.value}
    return out
