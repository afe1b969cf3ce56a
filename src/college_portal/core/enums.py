from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account roles used for access checks."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Status a teacher can mark for a student in one session."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LEAVE = "Leave"


class FeeState(str, Enum):
    PAID = "paid"
    PARTIAL = "partial"
    UNPAID = "unpaid"


class IssueStatus(str, Enum):
    ISSUED = "issued"
    RETURNED = "returned"
