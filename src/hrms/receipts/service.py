from __future__ import annotations

import dataclasses
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local, period_label, round_2
from ..common.ids import new_id
from ..common.validators import require_non_empty, require_number
from ..core.enums import Role, TransactionType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..data.context import DataContext
from .model import ReceiptPaymentRecord

READ_ROLES = {Role.ADMIN, Role.HR}


def account_label(account_name: str, bank_name: Optional[str] = None) -> str:
    account = require_non_empty(account_name, "Account name")
    bank = (bank_name or "").strip()
    return f"{account} - {bank}" if bank else account


class ReceiptPaymentService:
    def __init__(self, ctx: DataContext, *, clock: Callable[[], datetime] = now_local):
        self._ctx = ctx
        self._clock = clock

    @staticmethod
    def ensure_can_read(current_role: Role) -> None:
        if current_role not in READ_ROLES:
            raise AuthorizationError("You do not have permission to view receipts and payments")

    @staticmethod
    def _ensure_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can modify receipts and payments")

    # Queries

    def all(self) -> list[ReceiptPaymentRecord]:
        return self._ctx.receipt_payments.all()

    def _by(self, kind: TransactionType, period: Optional[str] = None) -> list[ReceiptPaymentRecord]:
        return [r for r in self.all() if r.type == kind and (period is None or r.period == period)]

    def receipts_by_period(self, period: str) -> list[ReceiptPaymentRecord]:
        return self._by(TransactionType.RECEIPT, period)

    def payments_by_period(self, period: str) -> list[ReceiptPaymentRecord]:
        return self._by(TransactionType.PAYMENT, period)

    def total_receipts(self, period: Optional[str] = None) -> float:
        return round_2(sum(r.amount for r in self._by(TransactionType.RECEIPT, period)))

    def total_payments(self, period: Optional[str] = None) -> float:
        return round_2(sum(r.amount for r in self._by(TransactionType.PAYMENT, period)))

    def balance(self, period: Optional[str] = None) -> float:
        return round_2(self.total_receipts(period) - self.total_payments(period))

    def periods(self) -> list[str]:
        seen: dict[str, date] = {}
        for r in self.all():
            seen.setdefault(r.period, r.date)
        return sorted(seen, key=lambda p: seen[p], reverse=True)

    # Mutations

    def _build(
        self,
        *,
        kind: str,
        account_name: str,
        bank_name: Optional[str],
        amount,
        day: date,
        description: str,
    ) -> dict:
        try:
            tx_type = TransactionType(kind)
        except ValueError:
            raise ValidationError("Type must be receipt or payment")
        value = require_number(amount, "Amount")
        if value <= 0:
            raise ValidationError("Amount must be greater than 0")
        if not isinstance(day, date):
            raise ValidationError("Date is required")
        return {
            "type": tx_type,
            "account_name": account_label(account_name, bank_name),
            "amount": round_2(value),
            "date": day,
            "period": period_label(day),
            "description": require_non_empty(description, "Description"),
        }

    def create(
        self,
        *,
        current_role: Role,
        created_by: str,
        kind: str,
        account_name: str,
        amount,
        day: date,
        description: str,
        bank_name: Optional[str] = None,
    ) -> ReceiptPaymentRecord:
        self._ensure_admin(current_role)
        fields = self._build(
            kind=kind,
            account_name=account_name,
            bank_name=bank_name,
            amount=amount,
            day=day,
            description=description,
        )
        record = ReceiptPaymentRecord(
            id=new_id(),
            created_by=require_non_empty(created_by, "Created by"),
            created_at=self._clock().replace(microsecond=0),
            **fields,
        )
        return self._ctx.receipt_payments.add(record)

    def edit(
        self,
        *,
        current_role: Role,
        record_id: str,
        kind: str,
        account_name: str,
        amount,
        day: date,
        description: str,
        bank_name: Optional[str] = None,
    ) -> ReceiptPaymentRecord:
        self._ensure_admin(current_role)
        existing = self._ctx.receipt_payments.get(record_id)
        if not existing:
            raise NotFoundError("Record not found")
        fields = self._build(
            kind=kind,
            account_name=account_name,
            bank_name=bank_name,
            amount=amount,
            day=day,
            description=description,
        )
        return self._ctx.receipt_payments.update(record_id, dataclasses.replace(existing, **fields))

    def delete(self, *, current_role: Role, record_id: str) -> None:
        self._ensure_admin(current_role)
        if not self._ctx.receipt_payments.get(record_id):
            raise NotFoundError("Record not found")
        self._ctx.receipt_payments.delete(record_id)
