from __future__ import annotations

from flask import Flask, request

from ..common.web import date_field, json_response, request_data
from ..container import Container
from ..core.enums import GoalStatus, Role
from ..users.guards import current_user, guarded
from .service import GoalForm, ReviewForm


def _review_form(data: dict) -> ReviewForm:
    goals = [
        GoalForm(
            description=g.get("description", ""),
            completion_percentage=g.get("completionPercentage", 0),
            status=g.get("status") or GoalStatus.NOT_STARTED.value,
        )
        for g in (data.get("goals") or [])
        if isinstance(g, dict)
    ]
    return ReviewForm(
        employee_id=data.get("employeeId", ""),
        review_period_start=date_field(data, "reviewPeriodStart", "Review period start", required=False),
        review_period_end=date_field(data, "reviewPeriodEnd", "Review period end", required=False),
        rating=data.get("rating", 5),
        goals=goals,
        feedback=data.get("feedback", ""),
        reviewed_by=data.get("reviewedBy", ""),
    )


def register(app: Flask, container: Container) -> None:
    svc = container.review_service

    @app.route("/performance-reviews", methods=["GET"], endpoint="performance_reviews")
    @guarded([Role.ADMIN, Role.HR])
    def performance_reviews():
        employee_id = request.args.get("employeeId")
        rows = svc.by_employee(employee_id) if employee_id else svc.all()
        return json_response(
            {
                "reviews": rows,
                "averageRating": svc.average_rating(),
                "goalCompletionRate": svc.goal_completion_rate(),
            }
        )

    @app.route("/performance-reviews", methods=["POST"], endpoint="add_performance_review")
    @guarded([Role.ADMIN, Role.HR])
    def add_performance_review():
        review = svc.create(current_role=current_user().role, form=_review_form(request_data()))
        return json_response(review, message="Performance review created successfully", status=201)

    @app.route("/performance-reviews/<review_id>/edit", methods=["POST", "PUT"], endpoint="edit_performance_review")
    @guarded([Role.ADMIN, Role.HR])
    def edit_performance_review(review_id: str):
        review = svc.edit(current_role=current_user().role, review_id=review_id, form=_review_form(request_data()))
        return json_response(review, message="Performance review updated successfully")

    @app.route("/performance-reviews/<review_id>/delete", methods=["POST", "DELETE"], endpoint="delete_performance_review")
    @guarded([Role.ADMIN, Role.HR])
    def delete_performance_review(review_id: str):
        svc.delete(current_role=current_user().role, review_id=review_id)
        return json_response(message="Performance review deleted successfully")
