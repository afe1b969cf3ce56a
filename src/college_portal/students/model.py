from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Student profile.

    ``fee_status`` is ``{semester: {fee_type: {"amount": float, "status": str}}}``
    and ``optional_fees`` is ``{semester: {fee_type: bool}}``; semester keys are
    strings, as they come back from the JSON columns.
    """

    student_id: int
    roll_no: str
    name: str
    course: str
    semester: int
    uid: Optional[str] = None
    email: str = ""
    phone: str = ""
    fee_status: dict = field(default_factory=dict)
    optional_fees: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.student_id,
            "uid": self.uid,
            "roll_no": self.roll_no,
            "name": self.name,
            "course": self.course,
            "semester": self.semester,
            "email": self.email,
            "phone": self.phone,
            "fee_status": self.fee_status,
            "optional_fees": self.optional_fees,
        }
