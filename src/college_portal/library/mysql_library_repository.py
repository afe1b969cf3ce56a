from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import IssueStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Book, IssuedBook
from .repository import LibraryRepository

_BOOK_COLUMNS = """
    book_id, title, description, branch, year, semester, price,
    total_quantity, issued_quantity, available_quantity
"""

_ISSUE_COLUMNS = """
    issue_id, book_id, book_title, student_roll_no, student_name, teacher_id, teacher_name,
    issue_date, due_date, return_date, status, fine, renewal_count
"""


def _to_book(row: dict) -> Book:
    return Book(
        book_id=int(row["book_id"]),
        title=row["title"],
        description=row.get("description") or "",
        branch=row["branch"],
        year=row.get("year"),
        semester=row.get("semester"),
        price=float(row.get("price") or 0),
        total_quantity=int(row.get("total_quantity") or 0),
        issued_quantity=int(row.get("issued_quantity") or 0),
        available_quantity=int(row.get("available_quantity") or 0),
    )


def _to_issue(row: dict) -> IssuedBook:
    return IssuedBook(
        issue_id=int(row["issue_id"]),
        book_id=int(row["book_id"]),
        book_title=row["book_title"],
        student_roll_no=str(row["student_roll_no"]),
        student_name=row["student_name"],
        teacher_id=str(row["teacher_id"]),
        teacher_name=row["teacher_name"],
        issue_date=row["issue_date"],
        due_date=row["due_date"],
        return_date=row.get("return_date"),
        status=IssueStatus(row.get("status") or "issued"),
        fine=float(row.get("fine") or 0),
        renewal_count=int(row.get("renewal_count") or 0),
    )


class MySQLLibraryRepository(LibraryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_books(self) -> Sequence[Book]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_BOOK_COLUMNS} FROM books ORDER BY created_at DESC, book_id DESC")
            return [_to_book(r) for r in fetchall(cur)]

    def get_book(self, book_id: int) -> Optional[Book]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_BOOK_COLUMNS} FROM books WHERE book_id=%s", (int(book_id),))
            row = fetchone(cur)
            return _to_book(row) if row else None

    def create_book(
        self,
        *,
        title: str,
        branch: str,
        quantity: int,
        description: str = "",
        year: Optional[int] = None,
        semester: Optional[int] = None,
        price: float = 0,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO books(title, description, branch, year, semester, price,
                                  total_quantity, issued_quantity, available_quantity)
                VALUES(%s,%s,%s,%s,%s,%s,%s,0,%s)
                """,
                (title, description, branch, year, semester, price, quantity, quantity),
            )
            return int(cur.lastrowid)

    def update_book(
        self,
        book_id: int,
        *,
        title: str,
        branch: str,
        quantity: int,
        available_quantity: int,
        description: str = "",
        year: Optional[int] = None,
        semester: Optional[int] = None,
        price: float = 0,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE books
                SET title=%s, description=%s, branch=%s, year=%s, semester=%s, price=%s,
                    total_quantity=%s, available_quantity=%s
                WHERE book_id=%s
                """,
                (title, description, branch, year, semester, price, quantity, available_quantity, int(book_id)),
            )
            return cur.rowcount > 0

    def delete_book(self, book_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM books WHERE book_id=%s", (int(book_id),))
            return cur.rowcount > 0

    def list_issued(
        self,
        *,
        teacher_id: Optional[str] = None,
        roll_no: Optional[str] = None,
        status: Optional[IssueStatus] = None,
    ) -> Sequence[IssuedBook]:
        where: list[str] = []
        params: list = []
        if teacher_id is not None:
            where.append("teacher_id=%s")
            params.append(teacher_id)
        if roll_no is not None:
            where.append("student_roll_no=%s")
            params.append(roll_no)
        if status is not None:
            where.append("status=%s")
            params.append(status.value)

        sql = f"SELECT {_ISSUE_COLUMNS} FROM issued_books"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY issue_date DESC, issue_id DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_issue(r) for r in fetchall(cur)]

    def get_issue(self, issue_id: int) -> Optional[IssuedBook]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ISSUE_COLUMNS} FROM issued_books WHERE issue_id=%s", (int(issue_id),))
            row = fetchone(cur)
            return _to_issue(row) if row else None

    def issue_book(
        self,
        *,
        book: Book,
        student_roll_no: str,
        student_name: str,
        teacher_id: str,
        teacher_name: str,
        issue_date: datetime,
        due_date: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO issued_books(book_id, book_title, student_roll_no, student_name, teacher_id,
                                         teacher_name, issue_date, due_date, status, fine, renewal_count)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,'issued',0,0)
                """,
                (book.book_id, book.title, student_roll_no, student_name, teacher_id, teacher_name, issue_date, due_date),
            )
            issue_id = int(cur.lastrowid)
            cur.execute(
                """
                UPDATE books
                SET issued_quantity=issued_quantity+1, available_quantity=available_quantity-1
                WHERE book_id=%s
                """,
                (book.book_id,),
            )
            return issue_id

    def return_book(self, issue: IssuedBook) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM issued_books WHERE issue_id=%s", (issue.issue_id,))
            if cur.rowcount <= 0:
                return False
            cur.execute(
                """
                UPDATE books
                SET issued_quantity=issued_quantity-1, available_quantity=available_quantity+1
                WHERE book_id=%s
                """,
                (issue.book_id,),
            )
            return True

    def renew(self, issue_id: int, *, due_date: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE issued_books SET due_date=%s, renewal_count=renewal_count+1 WHERE issue_id=%s",
                (due_date, int(issue_id)),
            )
            return cur.rowcount > 0
