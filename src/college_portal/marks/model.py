from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MarksRecord:
    """Score of one student in one exam of a subject."""

    subject_id: int
    exam_id: str
    roll_no: str
    marks: float
    name: str = ""
    max_marks: Optional[int] = None
    date: Optional[str] = None
    record_id: Optional[int] = None
