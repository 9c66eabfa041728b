from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

import httpx

from .attendance.factory import AttendanceStrategyFactory
from .attendance.network import NetworkPolicy
from .attendance.service import AttendanceService
from .backend.base import HRBackend
from .backend.functions import BackendFunctions
from .backend.local import LocalBackend
from .backend.remote import RemoteBackend
from .common.datetime_utils import now_local, parse_clock_time
from .core.constants import DEFAULT_LATE_GRACE_MINUTES, DEFAULT_SESSION_DAYS
from .data.context import COLLECTION_NAMES, DataContext
from .data.events import ChangeBus, ChangeFeed
from .employees.registration import RegistrationService
from .employees.service import EmployeeService
from .leave.service import LeaveService
from .payroll.service import PayrollService
from .receipts.service import ReceiptPaymentService
from .reports.service import ReportService
from .reviews.service import PerformanceReviewService
from .storage.connection import DBConfig, DatabaseConnection
from .storage.mysql_store import MySQLKeyValueStore
from .storage.store import InMemoryStore, JsonFileStore, KeyValueStore
from .users.repository import StoreUserRepository
from .users.service import AuthService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    store: KeyValueStore
    bus: ChangeBus
    ctx: DataContext
    feed: ChangeFeed

    users_repo: StoreUserRepository
    network_policy: NetworkPolicy

    auth_service: AuthService
    employee_service: EmployeeService
    registration_service: RegistrationService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService
    receipt_service: ReceiptPaymentService
    review_service: PerformanceReviewService
    report_service: ReportService
    functions: BackendFunctions


def build_store(settings) -> KeyValueStore:
    backend = str(getattr(settings, "STORAGE_BACKEND", "json")).lower()
    if backend == "memory":
        return InMemoryStore()
    if backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))
        store = MySQLKeyValueStore(conn)
        store.ensure_schema()
        return store
    if backend == "json":
        return JsonFileStore(getattr(settings, "DATA_FILE", "instance/hrms_data.json"))
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")


def build_container(
    settings,
    *,
    store: Optional[KeyValueStore] = None,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    store = store if store is not None else build_store(settings)
    bus = ChangeBus()
    ctx = DataContext(store, bus=bus, seed_sample_data=bool(getattr(settings, "SEED_SAMPLE_DATA", True)), clock=clock)
    ctx.load()

    feed = ChangeFeed(COLLECTION_NAMES)
    feed.attach(ctx)

    users_repo = StoreUserRepository(store)
    auth_service = AuthService(
        users_repo,
        session_days=int(getattr(settings, "SESSION_DAYS", DEFAULT_SESSION_DAYS)),
        clock=clock,
    )
    auth_service.ensure_default_users()

    network_policy = NetworkPolicy(
        store,
        static_whitelist=getattr(settings, "IP_WHITELIST", ()),
        allow_private_networks=bool(getattr(settings, "ALLOW_PRIVATE_NETWORKS", False)),
    )

    employee_service = EmployeeService(ctx)
    registration_service = RegistrationService(employee_service, auth_service)
    attendance_service = AttendanceService(
        ctx,
        strategy_factory=AttendanceStrategyFactory(),
        office_start=parse_clock_time(getattr(settings, "OFFICE_START_TIME", "")),
        grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES)),
        clock=clock,
    )
    leave_service = LeaveService(ctx, clock=clock)
    payroll_service = PayrollService(ctx, clock=clock)
    receipt_service = ReceiptPaymentService(ctx, clock=clock)
    review_service = PerformanceReviewService(ctx, clock=clock)
    report_service = ReportService(ctx, clock=clock)
    functions = BackendFunctions(ctx, attendance_service, network_policy, registration_service, clock=clock)

    logger.info("container ready (store=%s)", type(store).__name__)
    return Container(
        store=store,
        bus=bus,
        ctx=ctx,
        feed=feed,
        users_repo=users_repo,
        network_policy=network_policy,
        auth_service=auth_service,
        employee_service=employee_service,
        registration_service=registration_service,
        attendance_service=attendance_service,
        leave_service=leave_service,
        payroll_service=payroll_service,
        receipt_service=receipt_service,
        review_service=review_service,
        report_service=report_service,
        functions=functions,
    )


def build_backend(
    settings,
    container: Container,
    *,
    caller: Callable,
    ip: Callable[[], str],
    token: Callable[[], Optional[str]],
    client: Optional[httpx.Client] = None,
) -> HRBackend:
    """Backend the pages call: in-process functions or a remote functions service.

    The remote service must share the store so it can resolve our session tokens.
    """
    kind = str(getattr(settings, "BACKEND", "local")).lower()
    if kind == "local":
        return LocalBackend(container.functions, container.feed, caller=caller, ip=ip)
    if kind == "remote":
        url = getattr(settings, "REMOTE_URL", "")
        if client is None and not url:
            raise ValueError("REMOTE_URL is required when BACKEND=remote")
        logger.info("using remote backend at %s", url or client.base_url)
        return RemoteBackend(url, client=client, token_provider=token, forwarded_for=ip)
    raise ValueError(f"Unknown BACKEND: {kind}")
