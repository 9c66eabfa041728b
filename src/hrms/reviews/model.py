from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from ..core.enums import GoalStatus


@dataclass(frozen=True)
class Goal:
    id: str
    description: str
    completion_percentage: int
    status: GoalStatus


@dataclass(frozen=True)
class PerformanceReview:
    id: str
    employee_id: str
    review_period_start: date
    review_period_end: date
    rating: int
    goals: tuple[Goal, ...]
    feedback: str
    reviewed_by: str
    review_date: date
    created_at: datetime
