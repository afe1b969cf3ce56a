from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable, Optional, Sequence

from ..accounts.model import SessionUser
from ..common.datetime_utils import now_local
from ..common.validators import matches_query, require_non_empty, require_positive_int
from ..core.constants import LOAN_PERIOD_DAYS, MAX_BOOKS_PER_STUDENT
from ..core.enums import IssueStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..students.repository import StudentRepository
from .calculator.base import FineCalculator
from .calculator.per_day_calculator import PerDayFineCalculator
from .model import Book, IssuedBook
from .repository import LibraryRepository

logger = logging.getLogger(__name__)


def _optional_int(value, field_name: str) -> Optional[int]:
    if value in (None, ""):
        return None
    return require_positive_int(value, field_name)


def _price(value) -> float:
    if value in (None, ""):
        return 0
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Price must be a number")
    if price < 0:
        raise ValidationError("Price cannot be negative")
    return price


class LibraryService:
    """Use cases: book catalog plus issue / return / renew run by librarians."""

    def __init__(
        self,
        library: LibraryRepository,
        students: StudentRepository,
        *,
        calculator: Optional[FineCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._library = library
        self._students = students
        self._calculator = calculator or PerDayFineCalculator()
        self._clock = clock

    @staticmethod
    def _ensure_librarian(actor: SessionUser) -> None:
        if not actor.can_run_library:
            raise AuthorizationError("Only librarians can manage the library")

    # Catalog

    def list_books(self, *, query: Optional[str] = None, branch: Optional[str] = None) -> Sequence[Book]:
        return [
            b
            for b in self._library.list_books()
            if matches_query(query, b.title, b.description) and (not branch or b.branch == branch)
        ]

    def get_book(self, book_id: int) -> Book:
        book = self._library.get_book(int(book_id))
        if not book:
            raise NotFoundError("Book not found")
        return book

    def add_book(
        self,
        actor: SessionUser,
        *,
        title: str,
        branch: str,
        quantity,
        description: str = "",
        year=None,
        semester=None,
        price=None,
    ) -> int:
        self._ensure_librarian(actor)
        book_id = self._library.create_book(
            title=require_non_empty(title, "Title"),
            branch=require_non_empty(branch, "Branch"),
            quantity=require_positive_int(quantity, "Quantity"),
            description=(description or "").strip(),
            year=_optional_int(year, "Year"),
            semester=_optional_int(semester, "Semester"),
            price=_price(price),
        )
        logger.info("Added book %s (%s)", book_id, title)
        return book_id

    def update_book(
        self,
        actor: SessionUser,
        book_id: int,
        *,
        title: str,
        branch: str,
        quantity,
        description: str = "",
        year=None,
        semester=None,
        price=None,
    ) -> None:
        self._ensure_librarian(actor)
        book = self.get_book(book_id)
        quantity = require_positive_int(quantity, "Quantity")
        if quantity < book.issued_quantity:
            raise ValidationError(f"{book.issued_quantity} copies are issued; quantity cannot be lower")
        self._library.update_book(
            book.book_id,
            title=require_non_empty(title, "Title"),
            branch=require_non_empty(branch, "Branch"),
            quantity=quantity,
            available_quantity=quantity - book.issued_quantity,
            description=(description or "").strip(),
            year=_optional_int(year, "Year"),
            semester=_optional_int(semester, "Semester"),
            price=_price(price),
        )

    def delete_book(self, actor: SessionUser, book_id: int) -> None:
        self._ensure_librarian(actor)
        book = self.get_book(book_id)
        if book.issued_quantity > 0:
            raise ValidationError("Cannot delete a book with issued copies")
        self._library.delete_book(book.book_id)
        logger.info("Deleted book %s (%s)", book.book_id, book.title)

    # Issues

    def _with_fine(self, issue: IssuedBook, now: datetime) -> IssuedBook:
        return replace(issue, fine=self._calculator.fine_for(issue, now))

    def issued_books(
        self,
        *,
        teacher_id: Optional[str] = None,
        roll_no: Optional[str] = None,
    ) -> list[IssuedBook]:
        now = self._clock()
        return [
            self._with_fine(i, now)
            for i in self._library.list_issued(teacher_id=teacher_id, roll_no=roll_no, status=IssueStatus.ISSUED)
        ]

    def _get_issue(self, issue_id: int) -> IssuedBook:
        issue = self._library.get_issue(int(issue_id))
        if not issue or issue.status != IssueStatus.ISSUED:
            raise NotFoundError("Issue record not found")
        return issue

    def issue_book(self, actor: SessionUser, *, book_id: int, roll_no: str) -> int:
        self._ensure_librarian(actor)
        roll_no = require_non_empty(roll_no, "Roll number")
        book = self.get_book(book_id)
        if book.available_quantity <= 0:
            raise ValidationError("No copies available")

        student = self._students.get_by_roll_no(roll_no)
        if not student:
            raise NotFoundError("Student not found")

        held = self._library.list_issued(roll_no=roll_no, status=IssueStatus.ISSUED)
        if any(i.book_id == book.book_id for i in held):
            raise ValidationError("Student already has this book")
        if len(held) >= MAX_BOOKS_PER_STUDENT:
            raise ValidationError(f"Student cannot hold more than {MAX_BOOKS_PER_STUDENT} books")

        now = self._clock()
        issue_id = self._library.issue_book(
            book=book,
            student_roll_no=student.roll_no,
            student_name=student.name,
            teacher_id=str(actor.profile_id or ""),
            teacher_name=actor.name,
            issue_date=now,
            due_date=now + timedelta(days=LOAN_PERIOD_DAYS),
        )
        logger.info("Issued book %s to %s by %s", book.book_id, student.roll_no, actor.email)
        return issue_id

    def return_book(self, actor: SessionUser, issue_id: int) -> float:
        """Return an issued copy; gives back the fine due at return time."""
        self._ensure_librarian(actor)
        issue = self._get_issue(issue_id)
        fine = self._calculator.fine_for(issue, self._clock())
        self._library.return_book(issue)
        logger.info("Returned book %s from %s (fine %s)", issue.book_id, issue.student_roll_no, fine)
        return fine

    def renew_book(self, actor: SessionUser, issue_id: int) -> datetime:
        self._ensure_librarian(actor)
        issue = self._get_issue(issue_id)
        due_date = issue.due_date + timedelta(days=LOAN_PERIOD_DAYS)
        self._library.renew(issue.issue_id, due_date=due_date)
        logger.info("Renewed issue %s until %s", issue.issue_id, due_date.date().isoformat())
        return due_date
