from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone
from .model import FeePayment, FeeStructure
from .repository import FeeRepository

_PAYMENT_COLUMNS = """
    payment_id, student_id, student_name, student_roll_no, student_course, semester, fee_type,
    amount, payment_method, transaction_id, status, remarks, processed_by, payment_date
"""


def _to_structure(row: dict) -> FeeStructure:
    return FeeStructure(
        fee_structure_id=int(row["fee_structure_id"]),
        semester=int(row["semester"]),
        fee_type=row["fee_type"],
        amount=float(row["amount"]),
        due_date=row.get("due_date"),
        description=row.get("description") or "",
    )


def _to_payment(row: dict) -> FeePayment:
    return FeePayment(
        payment_id=int(row["payment_id"]),
        student_id=int(row["student_id"]),
        student_name=row.get("student_name") or "",
        student_roll_no=row.get("student_roll_no") or "",
        student_course=row.get("student_course") or "",
        semester=int(row["semester"]),
        fee_type=row["fee_type"],
        amount=float(row["amount"]),
        payment_method=row["payment_method"],
        transaction_id=row["transaction_id"],
        status=row.get("status") or "paid",
        remarks=row.get("remarks") or "",
        processed_by=row.get("processed_by") or "",
        payment_date=row["payment_date"],
    )


class MySQLFeeRepository(FeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_structures(self) -> Sequence[FeeStructure]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT fee_structure_id, semester, fee_type, amount, due_date, description
                FROM fee_structures
                ORDER BY semester, fee_structure_id
                """
            )
            return [_to_structure(r) for r in fetchall(cur)]

    def get_structure(self, fee_structure_id: int) -> Optional[FeeStructure]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT fee_structure_id, semester, fee_type, amount, due_date, description
                FROM fee_structures
                WHERE fee_structure_id=%s
                """,
                (int(fee_structure_id),),
            )
            row = fetchone(cur)
            return _to_structure(row) if row else None

    def create_structure(
        self,
        *,
        semester: int,
        fee_type: str,
        amount: float,
        due_date: Optional[datetime],
        description: str = "",
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO fee_structures(semester, fee_type, amount, due_date, description)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (semester, fee_type, amount, due_date, description),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE fee_structures
                SET semester=%s, fee_type=%s, amount=%s, due_date=%s, description=%s
                WHERE fee_structure_id=%s
                """,
                (semester, fee_type, amount, due_date, description, int(fee_structure_id)),
            )
            return cur.rowcount > 0

    def list_payments(self, *, student_id: Optional[int] = None, limit: Optional[int] = None) -> Sequence[FeePayment]:
        sql = f"SELECT {_PAYMENT_COLUMNS} FROM fee_payments"
        params: list = []
        if student_id is not None:
            sql += " WHERE student_id=%s"
            params.append(int(student_id))
        sql += " ORDER BY payment_date DESC, payment_id DESC"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_payment(r) for r in fetchall(cur)]

    def record_payment(self, payment: FeePayment, *, fee_status: dict) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO fee_payments(student_id, student_name, student_roll_no, student_course, semester,
                                         fee_type, amount, payment_method, transaction_id, status, remarks,
                                         processed_by, payment_date)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    payment.student_id,
                    payment.student_name,
                    payment.student_roll_no,
                    payment.student_course,
                    payment.semester,
                    payment.fee_type,
                    payment.amount,
                    payment.payment_method,
                    payment.transaction_id,
                    payment.status,
                    payment.remarks,
                    payment.processed_by,
                    payment.payment_date,
                ),
            )
            payment_id = int(cur.lastrowid)
            cur.execute(
                "UPDATE students SET fee_status=%s WHERE student_id=%s",
                (dump_json(fee_status), payment.student_id),
            )
            return payment_id
