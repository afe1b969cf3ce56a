from __future__ import annotations

from typing import Sequence

from ..common.datetime_utils import as_date
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import MarksRecord
from .repository import MarksRepository

_COLUMNS = "record_id, subject_id, exam_id, roll_no, name, marks, max_marks, entered_on"


def _to_record(row: dict) -> MarksRecord:
    return MarksRecord(
        record_id=int(row["record_id"]),
        subject_id=int(row["subject_id"]),
        exam_id=row["exam_id"],
        roll_no=str(row["roll_no"]),
        name=row.get("name") or "",
        marks=float(row.get("marks") or 0),
        max_marks=row.get("max_marks"),
        date=as_date(row["entered_on"]).isoformat() if row.get("entered_on") else None,
    )


class MySQLMarksRepository(MarksRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_subject(self, subject_id: int) -> Sequence[MarksRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM marks_records WHERE subject_id=%s ORDER BY record_id",
                (int(subject_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_roll_no(self, roll_no: str) -> Sequence[MarksRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM marks_records WHERE roll_no=%s ORDER BY record_id",
                (roll_no,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def add_records(self, records: Sequence[MarksRecord]) -> int:
        if not records:
            return 0
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO marks_records(subject_id, exam_id, roll_no, name, marks, max_marks, entered_on)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                [
                    (r.subject_id, r.exam_id, r.roll_no, r.name, r.marks, r.max_marks, r.date)
                    for r in records
                ],
            )
            return len(records)
