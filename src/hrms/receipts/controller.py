from __future__ import annotations

from flask import Flask, request

from ..common.web import date_field, json_response, request_data
from ..container import Container
from ..core.constants import COMMON_BANK_ACCOUNTS
from ..core.enums import Role
from ..users.guards import current_user, guarded


def register(app: Flask, container: Container) -> None:
    svc = container.receipt_service

    def _fields(data: dict) -> dict:
        return {
            "kind": data.get("type", ""),
            "account_name": data.get("accountName", ""),
            "bank_name": data.get("bankName") or None,
            "amount": data.get("amount"),
            "day": date_field(data, "date", "Date"),
            "description": data.get("description", ""),
        }

    @app.route("/receipts-payments", methods=["GET"], endpoint="receipts_payments")
    @guarded([Role.ADMIN, Role.HR])
    def receipts_payments():
        svc.ensure_can_read(current_user().role)
        period = request.args.get("period") or None
        return json_response(
            {
                "records": [r for r in svc.all() if period is None or r.period == period],
                "periods": svc.periods(),
                "accounts": list(COMMON_BANK_ACCOUNTS),
                "totalReceipts": svc.total_receipts(period),
                "totalPayments": svc.total_payments(period),
                "balance": svc.balance(period),
            }
        )

    @app.route("/receipts-payments", methods=["POST"], endpoint="add_receipt_payment")
    @guarded([Role.ADMIN])
    def add_receipt_payment():
        user = current_user()
        record = svc.create(current_role=user.role, created_by=user.name, **_fields(request_data()))
        return json_response(record, message="Record Added", status=201)

    @app.route("/receipts-payments/<record_id>/edit", methods=["POST", "PUT"], endpoint="edit_receipt_payment")
    @guarded([Role.ADMIN])
    def edit_receipt_payment(record_id: str):
        record = svc.edit(current_role=current_user().role, record_id=record_id, **_fields(request_data()))
        return json_response(record, message="Record Updated")

    @app.route("/receipts-payments/<record_id>/delete", methods=["POST", "DELETE"], endpoint="delete_receipt_payment")
    @guarded([Role.ADMIN])
    def delete_receipt_payment(record_id: str):
        svc.delete(current_role=current_user().role, record_id=record_id)
        return json_response(message="Record Deleted")
