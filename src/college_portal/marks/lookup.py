from __future__ import annotations

from typing import Iterable

from .model import MarksRecord


def flatten_marks(records: Iterable[MarksRecord]) -> dict[str, dict[str, float]]:
    """Flatten exam records into ``{roll_no: {exam_id: marks}}``.

    Later records win for the same student and exam.
    """
    out: dict[str, dict[str, float]] = {}
    for rec in records:
        out.setdefault(rec.roll_no, {})[rec.exam_id] = rec.marks
    return out


def exams_in(records: Iterable[MarksRecord]) -> list[str]:
    seen: dict[str, None] = {}
    for rec in records:
        seen.setdefault(rec.exam_id, None)
    return list(seen)
