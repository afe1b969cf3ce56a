from __future__ import annotations

from datetime import date
from typing import Sequence

from ..common.datetime_utils import as_date
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, load_json
from .model import AttendanceEntry, AttendanceSession
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_subject(self, subject_id: int) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT session_id, subject_id, subject_code, subject_name, session_date, records
                FROM attendance_sessions
                WHERE subject_id=%s
                ORDER BY session_date, session_id
                """,
                (int(subject_id),),
            )
            rows = fetchall(cur)
            return [
                AttendanceSession(
                    session_id=int(r["session_id"]),
                    subject_id=int(r["subject_id"]),
                    subject_code=r["subject_code"],
                    subject_name=r["subject_name"],
                    date=as_date(r["session_date"]).isoformat(),
                    records=tuple(
                        AttendanceEntry(
                            roll_no=str(e.get("roll_no") or ""),
                            name=e.get("name") or "",
                            status=e.get("status"),
                        )
                        for e in load_json(r.get("records"), [])
                    ),
                )
                for r in rows
            ]

    def create_session(
        self,
        *,
        subject_id: int,
        subject_code: str,
        subject_name: str,
        session_date: date,
        records: Sequence[AttendanceEntry],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_sessions(subject_id, subject_code, subject_name, session_date, records)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    int(subject_id),
                    subject_code,
                    subject_name,
                    session_date,
                    dump_json([{"roll_no": e.roll_no, "name": e.name, "status": e.status} for e in records]),
                ),
            )
            return int(cur.lastrowid)
