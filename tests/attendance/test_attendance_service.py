from __future__ import annotations

from dataclasses import replace

import pytest

from college_portal.core.exceptions import AuthorizationError, ValidationError


def test_missing_roster_students_are_marked_absent(container, repos, school, clock):
    container.attendance_service.submit_attendance(
        teacher=school.teacher,
        subject_id=school.subject_id,
        statuses={"CS1": "Present", "CS10": "Leave"},
    )

    session = repos.attendance.sessions[0]
    assert session.date == clock.now.date().isoformat()
    assert session.subject_code == "CS101"
    assert [(e.roll_no, e.status) for e in session.records] == [
        ("CS1", "Present"),
        ("CS2", "Absent"),
        ("CS10", "Leave"),
    ]


def test_invalid_status_is_rejected(container, school):
    with pytest.raises(ValidationError, match="Invalid attendance status"):
        container.attendance_service.submit_attendance(
            teacher=school.teacher,
            subject_id=school.subject_id,
            statuses={"CS1": "Late"},
        )


@pytest.mark.parametrize("statuses", [{"CS1": ["Present"]}, ["CS1", "Present"], "Present"])
def test_malformed_statuses_are_rejected(container, repos, school, statuses):
    with pytest.raises(ValidationError, match="map roll numbers to statuses"):
        container.attendance_service.submit_attendance(
            teacher=school.teacher,
            subject_id=school.subject_id,
            statuses=statuses,
        )

    assert repos.attendance.sessions == []


def test_students_not_on_roster_are_rejected(container, school):
    with pytest.raises(ValidationError, match="Not on the roster"):
        container.attendance_service.submit_attendance(
            teacher=school.teacher,
            subject_id=school.subject_id,
            statuses={"ME1": "Present"},
        )


def test_unassigned_teacher_cannot_submit(container, school):
    outsider = replace(school.teacher, profile_id="1002")

    with pytest.raises(AuthorizationError):
        container.attendance_service.submit_attendance(teacher=outsider, subject_id=school.subject_id, statuses={})


def test_subject_report_joins_attendance_and_marks(container, school):
    service = container.attendance_service
    service.submit_attendance(
        teacher=school.teacher,
        subject_id=school.subject_id,
        statuses={"CS1": "Present", "CS2": "Present"},
        on="2024-02-01",
    )
    service.submit_attendance(
        teacher=school.teacher,
        subject_id=school.subject_id,
        statuses={"CS1": "Present"},
        on="2024-02-02",
    )
    container.marks_service.submit_marks(
        teacher=school.teacher,
        subject_id=school.subject_id,
        exam_id="mid1",
        marks={"CS1": 25},
    )

    report = service.subject_report(school.subject_id)

    assert report["dates"] == ["2024-02-01", "2024-02-02"]
    assert report["exams"] == ["mid1"]
    rows = {r["roll_no"]: r for r in report["rows"]}
    assert (rows["CS1"]["present"], rows["CS1"]["percentage"]) == (2, 100)
    assert (rows["CS2"]["present"], rows["CS2"]["percentage"]) == (1, 50)
    assert rows["CS1"]["marks"] == {"mid1": 25}
    assert rows["CS10"]["marks"] == {}

    filtered = service.subject_report(school.subject_id, query="meera")
    assert [r["roll_no"] for r in filtered["rows"]] == ["CS10"]


def test_student_overview(container, school):
    container.attendance_service.submit_attendance(
        teacher=school.teacher,
        subject_id=school.subject_id,
        statuses={"CS2": "Present"},
        on="2024-02-01",
    )

    overview = container.attendance_service.student_overview("CS2")

    assert overview == [
        {
            "subject_id": school.subject_id,
            "subject_code": "CS101",
            "subject_name": "Programming Fundamentals",
            "present": 1,
            "total": 1,
            "percentage": 100,
            "marks": {},
        }
    ]
    assert container.attendance_service.student_overview("NOPE") == []
