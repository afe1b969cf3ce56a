from __future__ import annotations


def test_admin_stats(container, school, admin):
    container.fee_service.create_structure(semester=1, fee_type="exam", amount=1000)
    container.fee_service.record_payment(
        admin,
        student_id=school.student_ids["CS1"],
        semester=1,
        fee_type="exam",
        amount=400,
    )
    container.teacher_service.mark_salary_paid("1002")

    assert container.dashboard_service.admin_stats() == {
        "students": 3,
        "teachers": 2,
        "subjects": 1,
        "fee_collection": 400,
        "salary_paid": 35000,
        "salary_pending": 40000,
        "account_handlers": 0,
    }


def test_teacher_dashboard(container, school):
    container.attendance_service.submit_attendance(teacher=school.teacher, subject_id=school.subject_id, statuses={})

    data = container.dashboard_service.teacher_dashboard("1001")

    assert data["subjects"] == [
        {
            "id": school.subject_id,
            "subject_code": "CS101",
            "subject_name": "Programming Fundamentals",
            "students": 3,
            "sessions": 1,
        }
    ]
    assert data["total_students"] == 3
    assert container.dashboard_service.teacher_dashboard("1002") == {"subjects": [], "total_students": 0}
