from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import IssueStatus
from .model import Book, IssuedBook


class LibraryRepository(Protocol):
    def list_books(self) -> Sequence[Book]:
        """Catalog, newest first."""

        raise NotImplementedError

    def get_book(self, book_id: int) -> Optional[Book]:
        raise NotImplementedError

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
        raise NotImplementedError

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
        raise NotImplementedError

    def delete_book(self, book_id: int) -> bool:
        raise NotImplementedError

    def list_issued(
        self,
        *,
        teacher_id: Optional[str] = None,
        roll_no: Optional[str] = None,
        status: Optional[IssueStatus] = None,
    ) -> Sequence[IssuedBook]:
        raise NotImplementedError

    def get_issue(self, issue_id: int) -> Optional[IssuedBook]:
        raise NotImplementedError

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
        """Create the issue row and move one copy from available to issued."""

        raise NotImplementedError

    def return_book(self, issue: IssuedBook) -> bool:
        """Remove the issue row and move one copy back to available."""

        raise NotImplementedError

    def renew(self, issue_id: int, *, due_date: datetime) -> bool:
        raise NotImplementedError
