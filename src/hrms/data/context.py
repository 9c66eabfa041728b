"""Central state holder for every entity collection.

The context is the only writer of the persisted collections inside a process:
services read snapshots from it and ask it to mutate. Every mutation

    memory -> store.set(whole collection) -> ChangeEvent on the bus

and every context on the bus (the writer included) reloads from the store and
then notifies its own subscribers. Writes made by other processes are picked
up by `sync()`, which compares the store revision with the one last loaded.

Known limitation: reloads are unconditional, so a reload replaces whatever an
open consumer was holding. There is no merge and no per-record version; the
last write to the store wins.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

from ..attendance.model import AttendanceRecord
from ..common.codec import from_json, to_json
from ..common.datetime_utils import now_local
from ..common.ids import new_id
from ..core import constants
from ..employees.model import Employee
from ..leave.model import LeaveRequest
from ..payroll.model import PayrollRecord
from ..receipts.model import ReceiptPaymentRecord
from ..reviews.model import PerformanceReview
from ..storage.store import KeyValueStore
from . import seed
from .events import ChangeBus, ChangeEvent

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CollectionSpec:
    name: str
    key: str
    model: type
    sample: Callable[..., list]


COLLECTIONS: tuple[CollectionSpec, ...] = (
    CollectionSpec("employees", constants.EMPLOYEES_KEY, Employee, seed.sample_employees),
    CollectionSpec("attendance", constants.ATTENDANCE_KEY, AttendanceRecord, seed.sample_attendance),
    CollectionSpec("leaves", constants.LEAVES_KEY, LeaveRequest, seed.sample_leaves),
    CollectionSpec("payroll", constants.PAYROLL_KEY, PayrollRecord, seed.sample_payroll),
    CollectionSpec("receipt_payments", constants.RECEIPT_PAYMENTS_KEY, ReceiptPaymentRecord, seed.sample_receipt_payments),
    CollectionSpec(
        "performance_reviews",
        constants.PERFORMANCE_REVIEWS_KEY,
        PerformanceReview,
        seed.sample_performance_reviews,
    ),
)

COLLECTION_NAMES = tuple(spec.name for spec in COLLECTIONS)


def append(records: tuple, record) -> tuple:
    return records + (record,)


def replace_by_id(records: tuple, record_id: str, record) -> tuple:
    return tuple(record if r.id == record_id else r for r in records)


def remove_by_id(records: tuple, record_id: str) -> tuple:
    return tuple(r for r in records if r.id != record_id)


class Collection(Generic[T]):
    """Handle over one collection of the context (read + mutate)."""

    def __init__(self, ctx: "DataContext", spec: CollectionSpec):
        self._ctx = ctx
        self._spec = spec

    @property
    def name(self) -> str:
        return self._spec.name

    def all(self) -> list[T]:
        return list(self._ctx._snapshot(self._spec.name))

    def get(self, record_id: str) -> Optional[T]:
        for r in self._ctx._snapshot(self._spec.name):
            if r.id == record_id:
                return r
        return None

    def add(self, record: T) -> T:
        self._ctx._mutate(self._spec, lambda records: append(records, record))
        return record

    def add_many(self, new_records: Iterable[T]) -> list[T]:
        items = tuple(new_records)
        self._ctx._mutate(self._spec, lambda records: records + items)
        return list(items)

    def update(self, record_id: str, record: T) -> T:
        self._ctx._mutate(self._spec, lambda records: replace_by_id(records, record_id, record))
        return record

    def delete(self, record_id: str) -> None:
        self._ctx._mutate(self._spec, lambda records: remove_by_id(records, record_id))

    def __len__(self) -> int:
        return len(self._ctx._snapshot(self._spec.name))


Listener = Callable[[ChangeEvent], None]


class DataContext:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        bus: Optional[ChangeBus] = None,
        seed_sample_data: bool = True,
        clock: Callable[[], Any] = now_local,
    ):
        self._store = store
        self._bus = bus or ChangeBus()
        self._seed = bool(seed_sample_data)
        self._clock = clock
        self._id = new_id()
        self._lock = threading.RLock()
        self._state: dict[str, tuple] = {spec.name: () for spec in COLLECTIONS}
        self._seen_revision: Optional[int] = None
        self._listeners: dict[int, Listener] = {}
        self._next_listener = 0
        self._loaded = False

        self.employees: Collection[Employee] = Collection(self, COLLECTIONS[0])
        self.attendance: Collection[AttendanceRecord] = Collection(self, COLLECTIONS[1])
        self.leaves: Collection[LeaveRequest] = Collection(self, COLLECTIONS[2])
        self.payroll: Collection[PayrollRecord] = Collection(self, COLLECTIONS[3])
        self.receipt_payments: Collection[ReceiptPaymentRecord] = Collection(self, COLLECTIONS[4])
        self.performance_reviews: Collection[PerformanceReview] = Collection(self, COLLECTIONS[5])

        self._unsubscribe_bus = self._bus.subscribe(self._on_change)

    @property
    def id(self) -> str:
        return self._id

    @property
    def bus(self) -> ChangeBus:
        return self._bus

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def loaded(self) -> bool:
        return self._loaded

    def collection(self, name: str) -> Collection:
        if name not in COLLECTION_NAMES:
            raise KeyError(name)
        return getattr(self, name)

    # ------------------------------------------------------------------ load

    def load(self) -> None:
        """Read every collection; seed and persist the ones that are missing.

        Safe to call repeatedly: existing data is never reseeded.
        """
        with self._lock:
            for spec in COLLECTIONS:
                raw = self._store.get(spec.key)
                if raw is None:
                    if not self._seed:
                        self._state[spec.name] = ()
                        continue
                    records = tuple(spec.sample(self._clock()))
                    self._store.set(spec.key, to_json(list(records)))
                    logger.info("seeded %s with %d sample record(s)", spec.key, len(records))
                else:
                    records = tuple(from_json(spec.model, item) for item in raw)
                self._state[spec.name] = records
            self._seen_revision = self._store.revision()
            self._loaded = True

    def sync(self) -> list[str]:
        """Reload if the store moved since our last load (a write from another process).

        Subscribers hear about each collection whose content differs; writes to
        keys outside the collections (users, sessions) only refresh the revision.
        """
        with self._lock:
            if self._loaded and self._store.revision() == self._seen_revision:
                return []
            before = dict(self._state)
            self.load()
            changed = [name for name in COLLECTION_NAMES if self._state[name] != before[name]]
        for name in changed:
            self._notify(ChangeEvent(collection=name, origin="store"))
        return changed

    # ------------------------------------------------------------- observers

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._next_listener += 1
            lid = self._next_listener
            self._listeners[lid] = listener

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.pop(lid, None)

        return unsubscribe

    def close(self) -> None:
        self._unsubscribe_bus()
        with self._lock:
            self._listeners.clear()

    def _notify(self, event: ChangeEvent) -> None:
        with self._lock:
            listeners = list(self._listeners.values())
        for listener in listeners:
            listener(event)

    def _on_change(self, event: ChangeEvent) -> None:
        self.load()
        self._notify(event)

    # ------------------------------------------------------------- mutations

    def _snapshot(self, name: str) -> tuple:
        if not self._loaded:
            self.load()
        return self._state[name]

    def _mutate(self, spec: CollectionSpec, transform: Callable[[tuple], tuple]) -> None:
        with self._lock:
            updated = transform(self._snapshot(spec.name))
            self._state[spec.name] = updated
            # No rollback: a failing write leaves memory ahead of the store.
            self._store.set(spec.key, to_json(list(updated)))
        self._bus.publish(ChangeEvent(collection=spec.name, origin=self._id))
