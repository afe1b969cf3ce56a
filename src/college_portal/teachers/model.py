from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Teacher:
    """Teacher profile.

    Role flags are plain booleans checked by the operations that need them.
    """

    teacher_id: str
    name: str
    department: str
    uid: Optional[str] = None
    email: str = ""
    salary: float = 0
    salary_paid: bool = False
    last_salary_paid: Optional[datetime] = None
    is_librarian: bool = False
    account_handler: bool = False
    is_admin: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.teacher_id,
            "uid": self.uid,
            "name": self.name,
            "department": self.department,
            "email": self.email,
            "salary": self.salary,
            "salary_paid": self.salary_paid,
            "last_salary_paid": self.last_salary_paid.isoformat() if self.last_salary_paid else None,
            "is_librarian": self.is_librarian,
            "account_handler": self.account_handler,
            "is_admin": self.is_admin,
        }
