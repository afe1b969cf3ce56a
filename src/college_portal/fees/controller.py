from __future__ import annotations

from flask import Flask, request

from ..common.web import (
    account_handler_required,
    admin_required,
    current_user,
    json_body,
    login_required,
    ok,
    student_required,
)
from ..container import Container


def _structure_fields(data: dict) -> dict:
    return {
        "semester": data.get("semester"),
        "fee_type": data.get("fee_type", ""),
        "amount": data.get("amount"),
        "due_date": data.get("due_date"),
        "description": data.get("description", ""),
    }


def register(app: Flask, container: Container) -> None:
    service = container.fee_service

    @app.route("/api/fees/structures", endpoint="list_fee_structures")
    @login_required
    def list_fee_structures():
        return ok(structures=[f.to_dict() for f in service.list_structures()])

    @app.route("/api/fees/structures", methods=["POST"], endpoint="create_fee_structure")
    @admin_required
    def create_fee_structure():
        structure_id = service.create_structure(**_structure_fields(json_body()))
        return ok(status=201, fee_structure_id=structure_id)

    @app.route("/api/fees/structures/<int:fee_structure_id>", methods=["PUT"], endpoint="update_fee_structure")
    @admin_required
    def update_fee_structure(fee_structure_id: int):
        service.update_structure(fee_structure_id, **_structure_fields(json_body()))
        return ok(structure=service.get_structure(fee_structure_id).to_dict())

    @app.route("/api/fees/payments", endpoint="list_fee_payments")
    @account_handler_required
    def list_fee_payments():
        payments = service.list_payments(
            student_id=request.args.get("student_id", type=int),
            limit=request.args.get("limit", type=int),
        )
        return ok(payments=[p.to_dict() for p in payments])

    @app.route("/api/fees/payments", methods=["POST"], endpoint="record_fee_payment")
    @account_handler_required
    def record_fee_payment():
        data = json_body()
        payment_id = service.record_payment(
            current_user(),
            student_id=data.get("student_id"),
            semester=data.get("semester"),
            fee_type=data.get("fee_type", ""),
            amount=data.get("amount"),
            method=data.get("payment_method", "cash"),
            transaction_id=data.get("transaction_id", ""),
            remarks=data.get("remarks", ""),
        )
        return ok(status=201, payment_id=payment_id, message="Payment recorded")

    @app.route("/api/fees/students/<int:student_id>", endpoint="student_fee_overview")
    @account_handler_required
    def student_fee_overview(student_id: int):
        return ok(service.student_overview(student_id))

    @app.route("/api/fees/students/<int:student_id>/reconcile", methods=["POST"], endpoint="reconcile_student_fees")
    @admin_required
    def reconcile_student_fees(student_id: int):
        drift = service.reconcile_student(student_id)
        return ok(
            rebuilt=bool(drift),
            mismatches=[
                {"semester": d.semester, "fee_type": d.fee_type, "recorded": d.recorded, "logged": d.logged}
                for d in drift
            ],
        )

    @app.route("/api/student/fees", endpoint="my_fees")
    @student_required
    def my_fees():
        return ok(service.student_overview(current_user().profile_id))

    @app.route("/api/student/fees/<int:fee_structure_id>/pay", methods=["POST"], endpoint="pay_fee")
    @student_required
    def pay_fee(fee_structure_id: int):
        payment_id = service.pay_fee(current_user(), fee_structure_id)
        return ok(status=201, payment_id=payment_id, message="Payment successful")

    @app.route("/api/student/fees/pay-all", methods=["POST"], endpoint="pay_all_fees")
    @student_required
    def pay_all_fees():
        paid = service.pay_all_pending(current_user())
        return ok(status=201, paid_count=paid, message=f"Paid {paid} fees")
