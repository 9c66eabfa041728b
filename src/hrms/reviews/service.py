from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, round_2
from ..common.ids import new_id
from ..common.validators import require_int_in_range, require_non_empty
from ..core.enums import GoalStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..data.context import DataContext
from .model import Goal, PerformanceReview


@dataclass(frozen=True)
class GoalForm:
    description: str
    completion_percentage: object = 0
    status: str = GoalStatus.NOT_STARTED.value


@dataclass(frozen=True)
class ReviewForm:
    employee_id: str
    review_period_start: Optional[date]
    review_period_end: Optional[date]
    rating: object
    goals: Sequence[GoalForm] = ()
    feedback: str = ""
    reviewed_by: str = ""


class PerformanceReviewService:
    def __init__(self, ctx: DataContext, *, clock: Callable[[], datetime] = now_local):
        self._ctx = ctx
        self._clock = clock

    # Queries

    def all(self) -> list[PerformanceReview]:
        return self._ctx.performance_reviews.all()

    def by_employee(self, employee_id: str) -> list[PerformanceReview]:
        return [r for r in self.all() if r.employee_id == employee_id]

    def latest(self, employee_id: str) -> Optional[PerformanceReview]:
        reviews = self.by_employee(employee_id)
        if not reviews:
            return None
        return max(reviews, key=lambda r: r.review_date)

    def average_rating(self) -> float:
        reviews = self.all()
        if not reviews:
            return 0.0
        return round_2(sum(r.rating for r in reviews) / len(reviews))

    def goal_completion_rate(self) -> float:
        goals = [g for r in self.all() for g in r.goals]
        if not goals:
            return 0.0
        return round_2(sum(g.completion_percentage for g in goals) / len(goals))

    # Mutations

    @staticmethod
    def _ensure_reviewer(current_role: Role) -> None:
        if current_role not in {Role.ADMIN, Role.HR}:
            raise AuthorizationError("Only HR and administrators can manage performance reviews")

    def _clean(self, form: ReviewForm) -> dict:
        if not (form.employee_id or "").strip() or not form.review_period_start or not form.review_period_end:
            raise ValidationError("Please fill in all required fields")
        if not self._ctx.employees.get(form.employee_id):
            raise NotFoundError("Employee not found")
        if form.review_period_end < form.review_period_start:
            raise ValidationError("Review period end cannot be before its start")

        goals = []
        for g in form.goals:
            text = (g.description or "").strip()
            if not text:
                continue
            try:
                status = GoalStatus(g.status)
            except ValueError:
                raise ValidationError("Goal status is not valid")
            goals.append(
                Goal(
                    id=str(len(goals) + 1),
                    description=text,
                    completion_percentage=require_int_in_range(g.completion_percentage, "Goal completion", 0, 100),
                    status=status,
                )
            )

        return {
            "employee_id": form.employee_id.strip(),
            "review_period_start": form.review_period_start,
            "review_period_end": form.review_period_end,
            "rating": require_int_in_range(form.rating, "Rating", 1, 5),
            "goals": tuple(goals),
            "feedback": (form.feedback or "").strip(),
            "reviewed_by": (form.reviewed_by or "").strip(),
        }

    def create(self, *, current_role: Role, form: ReviewForm) -> PerformanceReview:
        self._ensure_reviewer(current_role)
        now = self._clock()
        review = PerformanceReview(
            id=new_id(),
            review_date=now.date(),
            created_at=now.replace(microsecond=0),
            **self._clean(form),
        )
        return self._ctx.performance_reviews.add(review)

    def edit(self, *, current_role: Role, review_id: str, form: ReviewForm) -> PerformanceReview:
        self._ensure_reviewer(current_role)
        existing = self._ctx.performance_reviews.get(review_id)
        if not existing:
            raise NotFoundError("Performance review not found")
        updated = dataclasses.replace(existing, review_date=self._clock().date(), **self._clean(form))
        return self._ctx.performance_reviews.update(review_id, updated)

    def delete(self, *, current_role: Role, review_id: str) -> None:
        self._ensure_reviewer(current_role)
        if not self._ctx.performance_reviews.get(review_id):
            raise NotFoundError("Performance review not found")
        self._ctx.performance_reviews.delete(review_id)
