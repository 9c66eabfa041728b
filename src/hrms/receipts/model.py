from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..core.enums import TransactionType


@dataclass(frozen=True)
class ReceiptPaymentRecord:
    """Cash book entry. `period` is derived from `date` ("Month Year")."""

    id: str
    type: TransactionType
    account_name: str
    amount: float
    date: date
    period: str
    description: str
    created_by: str
    created_at: datetime
