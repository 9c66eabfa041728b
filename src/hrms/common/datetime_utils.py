from __future__ import annotations

from datetime import date, datetime, time
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_clock_time(value: Optional[str]) -> Optional[time]:
    """Parse HH:MM; empty means "not configured"."""
    v = (value or "").strip()
    if not v:
        return None
    return datetime.strptime(v, "%H:%M").time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def month_name(day: date) -> str:
    return day.strftime("%B")


def period_label(day: date) -> str:
    """"Month Year" label used to group receipts and payments."""
    return f"{month_name(day)} {day.year}"


def hours_between(start: datetime, end: datetime) -> float:
    return round_2((end - start).total_seconds() / 3600)


def round_2(value: float) -> float:
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
