"""HTTP surface of the backend functions, auth, table reads and change feed.

Callers authenticate with `Authorization: Bearer <token>`; tokens come from
`/auth/v1/token` or `/auth/v1/signup`. Errors are JSON with an `error` key.
"""

from __future__ import annotations

import logging
from typing import Optional

from flask import Blueprint, Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..attendance.network import client_ip
from ..common.codec import to_json
from ..common.web import request_data
from ..container import Container
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    NotFoundError,
    RemoteError,
    UnauthorizedLocationError,
    ValidationError,
)
from ..users.model import SessionUser
from .base import RegistrationForm

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}


def _error(message: str, status: int, /, **extra):
    return jsonify({"error": message, **extra}), status


def register(app: Flask, container: Container) -> None:
    bp = Blueprint("backend", __name__)
    auth = container.auth_service
    functions = container.functions

    def bearer_token() -> Optional[str]:
        header = request.headers.get("Authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            return None
        return token.strip()

    def caller() -> Optional[SessionUser]:
        token = bearer_token()
        return auth.resolve_token(token) if token else None

    def session_body(user: SessionUser) -> dict:
        return {"access_token": auth.issue_token(user), "token_type": "bearer", "user": to_json(user)}

    @bp.after_request
    def add_cors(response):
        response.headers.update(CORS_HEADERS)
        return response

    @bp.errorhandler(UnauthorizedLocationError)
    def location_error(e: UnauthorizedLocationError):
        return _error("Unauthorized location", 403, message=e.message, ip=e.ip)

    @bp.errorhandler(DomainError)
    def domain_error(e: DomainError):
        if isinstance(e, AuthenticationError):
            status = 401
        elif isinstance(e, AuthorizationError):
            status = 403
        elif isinstance(e, NotFoundError):
            status = 404
        elif isinstance(e, RemoteError):
            status = e.status
        else:
            status = 400
        return _error(str(e), status)

    @bp.errorhandler(Exception)
    def unexpected_error(e: Exception):
        if isinstance(e, HTTPException):
            return _error(e.description or e.name, e.code or 500)
        logger.exception("backend request failed: %s %s", request.method, request.path)
        return _error("Internal server error", 500)

    # Auth

    @bp.route("/auth/v1/token", methods=["POST"])
    def token():
        data = request_data()
        user = auth.authenticate(data.get("email", ""), data.get("password", ""))
        return jsonify(session_body(user))

    @bp.route("/auth/v1/signup", methods=["POST"])
    def signup():
        data = request_data()
        password = data.get("password", "")
        created = auth.sign_up(name=data.get("name", ""), email=data.get("email", ""), password=password)
        user = auth.authenticate(created.email, password)
        return jsonify(session_body(user)), 201

    @bp.route("/auth/v1/logout", methods=["POST"])
    def logout():
        auth.revoke_token(bearer_token())
        return "", 204

    # Functions

    @bp.route("/functions/v1/attendance-action", methods=["POST"])
    def attendance_action():
        data = request_data()
        result = functions.attendance_action(
            caller=caller(),
            ip=client_ip(request.headers, request.remote_addr),
            action=data.get("action", ""),
            employee_id=data.get("employeeId") or data.get("employee_id") or "",
        )
        return jsonify({"message": result.message, "data": result.data})

    @bp.route("/functions/v1/employee-approval", methods=["POST"])
    def employee_approval():
        data = request_data()
        result = functions.employee_approval(
            caller=caller(),
            employee_id=data.get("employee_id") or data.get("employeeId") or "",
            action=data.get("action", ""),
            salary=data.get("salary"),
        )
        return jsonify({"message": result.message, "data": result.data})

    @bp.route("/functions/v1/employee-register", methods=["POST"])
    def employee_register():
        result = functions.employee_register(caller=caller(), form=RegistrationForm.from_payload(request_data()))
        return jsonify({"message": result.message, "data": result.data}), 201

    # Tables

    @bp.route("/rest/v1/<table>", methods=["GET"])
    def rows(table: str):
        return jsonify(functions.visible_rows(caller(), table))

    @bp.route("/realtime/v1/changes", methods=["GET"])
    def changes():
        if caller() is None:
            raise AuthenticationError("No authorization header")
        since = request.args.get("since", "0")
        if not since.lstrip("-").isdigit():
            raise ValidationError("since must be an integer")
        sequence, tables = container.feed.changes_since(int(since))
        return jsonify({"sequence": sequence, "tables": tables})

    app.register_blueprint(bp)
