from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import IssueStatus


@dataclass(frozen=True)
class Book:
    book_id: int
    title: str
    branch: str
    total_quantity: int
    issued_quantity: int = 0
    available_quantity: int = 0
    description: str = ""
    year: Optional[int] = None
    semester: Optional[int] = None
    price: float = 0

    def to_dict(self) -> dict:
        return {
            "id": self.book_id,
            "title": self.title,
            "branch": self.branch,
            "description": self.description,
            "year": self.year,
            "semester": self.semester,
            "price": self.price,
            "total_quantity": self.total_quantity,
            "issued_quantity": self.issued_quantity,
            "available_quantity": self.available_quantity,
        }


@dataclass(frozen=True)
class IssuedBook:
    issue_id: int
    book_id: int
    book_title: str
    student_roll_no: str
    student_name: str
    teacher_id: str
    teacher_name: str
    issue_date: datetime
    due_date: datetime
    status: IssueStatus = IssueStatus.ISSUED
    return_date: Optional[datetime] = None
    fine: float = 0
    renewal_count: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.issue_id,
            "book_id": self.book_id,
            "book_title": self.book_title,
            "student_roll_no": self.student_roll_no,
            "student_name": self.student_name,
            "teacher_id": self.teacher_id,
            "teacher_name": self.teacher_name,
            "issue_date": self.issue_date.isoformat(),
            "due_date": self.due_date.isoformat(),
            "return_date": self.return_date.isoformat() if self.return_date else None,
            "status": self.status.value,
            "fine": self.fine,
            "renewal_count": self.renewal_count,
        }
