from __future__ import annotations

import importlib
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

import httpx
from dotenv import load_dotenv
from flask import Flask, g, jsonify, request, session

from .attendance.controller import register as register_attendance
from .attendance.network import client_ip
from .backend.controller import register as register_backend
from .common.datetime_utils import now_local
from .config import get_settings_module
from .container import build_backend, build_container
from .core.constants import DEFAULT_SESSION_DAYS
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    DuplicateActionError,
    NotFoundError,
    RemoteError,
    ValidationError,
)
from .employees.controller import register as register_employees
from .leave.controller import register as register_leave
from .payroll.controller import register as register_payroll
from .receipts.controller import register as register_receipts
from .reports.controller import register as register_reports
from .reviews.controller import register as register_reviews
from .storage.store import KeyValueStore
from .users.controller import register as register_users
from .users.guards import current_user
from .users.service import AuthContext

logger = logging.getLogger(__name__)

ERROR_STATUS = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (DuplicateActionError, 409),
)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(RemoteError)
    def remote_error(e: RemoteError):
        body = {"error": e.message}
        if e.ip:
            body["ip"] = e.ip
        return jsonify(body), e.status

    @app.errorhandler(DomainError)
    def domain_error(e: DomainError):
        status = next((code for cls, code in ERROR_STATUS if isinstance(e, cls)), 400)
        return jsonify({"error": str(e)}), status


def create_app(
    settings_module: Optional[str] = None,
    *,
    store: Optional[KeyValueStore] = None,
    clock: Callable[[], datetime] = now_local,
    remote_client: Optional[httpx.Client] = None,
) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.permanent_session_lifetime = timedelta(days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)))

    container = build_container(settings, store=store, clock=clock)
    app.extensions["hrms"] = container
    logger.info("settings=%s store=%s", settings_module, type(container.store).__name__)

    backend = build_backend(
        settings,
        container,
        caller=current_user,
        ip=lambda: client_ip(request.headers, request.remote_addr),
        token=lambda: g.auth.token,
        client=remote_client,
    )

    @app.before_request
    def load_request_state():
        container.ctx.sync()
        g.auth = AuthContext(container.auth_service, session)
        g.auth.restore()

    _register_error_handlers(app)

    register_users(app, container)
    register_reports(app, container)
    register_employees(app, container, backend)
    register_attendance(app, container, backend)
    register_leave(app, container)
    register_payroll(app, container)
    register_receipts(app, container)
    register_reviews(app, container)
    register_backend(app, container)

    return app
