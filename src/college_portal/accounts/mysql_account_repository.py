from __future__ import annotations

import uuid
from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Account
from .repository import AccountRepository


def _to_account(row: dict) -> Account:
    return Account(
        uid=row["uid"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_uid(self, uid: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT uid, email, password_hash, role, is_active FROM accounts WHERE uid=%s",
                (uid,),
            )
            row = fetchone(cur)
            return _to_account(row) if row else None

    def get_by_email(self, email: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT uid, email, password_hash, role, is_active FROM accounts WHERE email=%s",
                (email,),
            )
            row = fetchone(cur)
            return _to_account(row) if row else None

    def create_account(self, *, email: str, password_hash: str, role: Role) -> str:
        uid = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO accounts(uid, email, password_hash, role, is_active)
                VALUES(%s,%s,%s,%s,1)
                """,
                (uid, email, password_hash, role.value),
            )
        return uid

    def update_password(self, uid: str, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE accounts SET password_hash=%s WHERE uid=%s", (password_hash, uid))
            return cur.rowcount > 0

    def update_email(self, uid: str, *, email: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE accounts SET email=%s WHERE uid=%s", (email, uid))
            return cur.rowcount > 0

    def delete_by_uid(self, uid: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM accounts WHERE uid=%s", (uid,))
            return cur.rowcount > 0
