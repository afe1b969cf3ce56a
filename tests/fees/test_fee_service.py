from __future__ import annotations

from dataclasses import replace

import pytest

from college_portal.core.exceptions import AuthorizationError, PartialPaymentError, ValidationError


@pytest.fixture()
def billing(container, school, admin):
    fees = container.fee_service
    fees.create_structure(semester=1, fee_type="tuition", amount=5000, due_date="2024-01-01")
    fees.create_structure(semester=1, fee_type="exam", amount=1000, due_date="2024-04-01")
    fees.create_structure(semester=1, fee_type="hostel", amount=3000, due_date="2024-01-15")
    fees.create_structure(semester=2, fee_type="tuition", amount=5000, due_date="2024-07-01")
    student_id = school.student_ids["CS1"]
    student_user = container.auth_service.sign_in("cs1@sgs.com", "123456")
    return school, student_id, student_user


def test_structures_are_validated(container):
    with pytest.raises(ValidationError, match="Unknown fee type"):
        container.fee_service.create_structure(semester=1, fee_type="parking", amount=10)
    with pytest.raises(ValidationError, match="Amount"):
        container.fee_service.create_structure(semester=1, fee_type="exam", amount=0)
    with pytest.raises(ValidationError, match="YYYY-MM-DD"):
        container.fee_service.create_structure(semester=1, fee_type="exam", amount=10, due_date="soon")


def test_duplicate_structure_is_rejected(container, billing):
    with pytest.raises(ValidationError, match="already exists"):
        container.fee_service.create_structure(semester=1, fee_type="tuition", amount=1)


def test_update_structure(container, billing):
    container.fee_service.update_structure(1, semester=1, fee_type="tuition", amount=5500, due_date="2024-01-10")

    assert container.fee_service.get_structure(1).amount == 5500


def test_update_structure_cannot_duplicate_another(container, billing):
    service = container.fee_service

    with pytest.raises(ValidationError, match="already exists"):
        service.update_structure(2, semester=1, fee_type="tuition", amount=1000)

    service.update_structure(2, semester=1, fee_type="exam", amount=1200)
    kinds = [(f.semester, f.fee_type) for f in service.list_structures() if f.semester == 1]
    assert sorted(kinds) == [(1, "exam"), (1, "hostel"), (1, "tuition")]
    assert service.get_structure(2).amount == 1200


def test_record_payment_updates_log_and_running_total(container, repos, billing, admin):
    _, student_id, _ = billing

    container.fee_service.record_payment(
        admin,
        student_id=student_id,
        semester=1,
        fee_type="tuition",
        amount=2000,
        method="cash",
        transaction_id="RCPT-1",
    )

    student = repos.students.get_by_id(student_id)
    assert student.fee_status == {"1": {"tuition": {"amount": 2000, "status": "partial"}}}
    payment = repos.fees.payments[0]
    assert (payment.amount, payment.transaction_id, payment.processed_by) == (2000, "RCPT-1", "admin@sgs.com")

    summary = container.fee_service.student_fee_summary(student_id)
    tuition = summary.semesters[0].lines[0]
    assert (tuition.balance, tuition.state.value, tuition.overdue) == (3000, "partial", True)


def test_record_payment_checks(container, billing, school):
    _, student_id, _ = billing
    service = container.fee_service

    with pytest.raises(AuthorizationError):
        service.record_payment(school.teacher, student_id=student_id, semester=1, fee_type="tuition", amount=10)

    handler = replace(school.teacher, account_handler=True)
    with pytest.raises(ValidationError, match="does not apply"):
        service.record_payment(handler, student_id=student_id, semester=1, fee_type="hostel", amount=10)
    with pytest.raises(ValidationError, match="payment method"):
        service.record_payment(handler, student_id=student_id, semester=1, fee_type="exam", amount=10, method="crypto")
    with pytest.raises(ValidationError, match="Amount"):
        service.record_payment(handler, student_id=student_id, semester=1, fee_type="exam", amount=-5)

    assert service.record_payment(handler, student_id=student_id, semester=1, fee_type="exam", amount=10) == 1


def test_pay_fee_settles_balance_online(container, repos, billing, clock):
    _, student_id, student_user = billing

    container.fee_service.pay_fee(student_user, 1)

    payment = repos.fees.payments[0]
    assert payment.payment_method == "online"
    assert payment.transaction_id == f"ONLINE-{int(clock.now.timestamp() * 1000)}"
    assert payment.amount == 5000
    assert repos.students.get_by_id(student_id).fee_status["1"]["tuition"] == {"amount": 5000, "status": "paid"}

    with pytest.raises(ValidationError, match="already paid"):
        container.fee_service.pay_fee(student_user, 1)


def test_pay_fee_requires_student(container, billing, admin):
    with pytest.raises(AuthorizationError):
        container.fee_service.pay_fee(admin, 1)


def test_pay_all_pending_pays_current_semester_only(container, repos, billing):
    _, student_id, student_user = billing

    paid = container.fee_service.pay_all_pending(student_user)

    assert paid == 2
    assert sorted(p.fee_type for p in repos.fees.payments) == ["exam", "tuition"]
    assert container.fee_service.student_fee_summary(student_id).pending == 0

    with pytest.raises(ValidationError, match="No pending fees"):
        container.fee_service.pay_all_pending(student_user)


def test_pay_all_pending_reports_partial_progress(container, repos, billing):
    _, student_id, student_user = billing
    container.student_service.toggle_optional_fee(student_id, fee_type="hostel", semester=1)
    repos.fees.fail_on_call = 2

    with pytest.raises(PartialPaymentError) as info:
        container.fee_service.pay_all_pending(student_user)

    assert (info.value.paid_count, info.value.total_count) == (1, 3)
    assert len(repos.fees.payments) == 1
    first = repos.fees.payments[0]
    assert repos.students.get_by_id(student_id).fee_status["1"][first.fee_type]["status"] == "paid"


def test_reconcile_rebuilds_running_totals_from_log(container, repos, billing, admin):
    _, student_id, _ = billing
    container.fee_service.record_payment(admin, student_id=student_id, semester=1, fee_type="tuition", amount=5000)
    repos.students.update_fee_status(student_id, fee_status={"1": {"tuition": {"amount": 100, "status": "partial"}}})

    drift = container.fee_service.reconcile_student(student_id)

    assert [(d.fee_type, d.recorded, d.logged) for d in drift] == [("tuition", 100, 5000)]
    assert repos.students.get_by_id(student_id).fee_status == {"1": {"tuition": {"amount": 5000, "status": "paid"}}}
    assert container.fee_service.reconcile_student(student_id) == []


def test_student_overview_lists_history_newest_first(container, billing, admin):
    _, student_id, _ = billing
    container.fee_service.record_payment(admin, student_id=student_id, semester=1, fee_type="tuition", amount=100)
    container.fee_service.record_payment(admin, student_id=student_id, semester=1, fee_type="exam", amount=200)

    overview = container.fee_service.student_overview(student_id)

    assert [p["fee_type"] for p in overview["payments"]] == ["exam", "tuition"]
    assert overview["payment_methods"] == {"cash": 2}
    assert [line["fee_type"] for line in overview["overdue"]] == ["tuition"]
    assert [line["fee_type"] for line in overview["upcoming"]] == ["exam"]
    assert overview["summary"]["current_semester"] == 1
    assert container.fee_service.total_collection() == 300


def test_student_overview_counts_methods_over_full_history(container, billing, admin):
    _, student_id, _ = billing
    service = container.fee_service
    service.record_payment(admin, student_id=student_id, semester=1, fee_type="exam", amount=10, method="cheque")
    for _ in range(11):
        service.record_payment(admin, student_id=student_id, semester=1, fee_type="exam", amount=10)

    overview = service.student_overview(student_id)

    assert len(overview["payments"]) == 10
    assert all(p["payment_method"] == "cash" for p in overview["payments"])
    assert overview["payment_methods"] == {"cash": 11, "cheque": 1}
