from __future__ import annotations

from college_portal.marks.lookup import exams_in, flatten_marks
from college_portal.marks.model import MarksRecord


def _rec(exam_id: str, roll_no: str, marks: float) -> MarksRecord:
    return MarksRecord(subject_id=1, exam_id=exam_id, roll_no=roll_no, marks=marks)


def test_flatten_groups_by_student_then_exam():
    records = [_rec("mid1", "A", 20), _rec("mid1", "B", 25), _rec("final", "A", 71)]

    assert flatten_marks(records) == {"A": {"mid1": 20, "final": 71}, "B": {"mid1": 25}}


def test_later_record_wins_for_same_student_and_exam():
    records = [_rec("mid1", "A", 12), _rec("mid1", "A", 18)]

    assert flatten_marks(records) == {"A": {"mid1": 18}}


def test_exams_in_keeps_first_seen_order():
    records = [_rec("mid2", "A", 1), _rec("mid1", "A", 1), _rec("mid2", "B", 1)]

    assert exams_in(records) == ["mid2", "mid1"]


def test_empty_input():
    assert flatten_marks([]) == {}
    assert exams_in([]) == []
