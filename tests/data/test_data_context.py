from __future__ import annotations

import dataclasses
from datetime import date

import pytest

from hrms.core.constants import EMPLOYEES_KEY, USERS_KEY
from hrms.core.enums import EmployeeStatus
from hrms.core.exceptions import StorageError
from hrms.data.context import COLLECTION_NAMES, DataContext
from hrms.data.events import ChangeBus
from hrms.employees.model import EmergencyContact, Employee
from hrms.storage.store import InMemoryStore, JsonFileStore


def _employee(emp_id: str = "9", **changes) -> Employee:
    emp = Employee(
        id=emp_id,
        name="Ada Lovelace",
        email="ada@company.com",
        phone="+1-555-0199",
        department="Engineering",
        position="Analyst",
        date_of_joining=date(2025, 5, 1),
        salary=50000.0,
        status=EmployeeStatus.ACTIVE,
        emergency_contact=EmergencyContact("Charles", "+1-555-0100", "Friend"),
    )
    return dataclasses.replace(emp, **changes)


def test_load_seeds_every_missing_collection(ctx, store):
    assert len(ctx.employees) == 3
    assert len(ctx.leaves) == 3
    assert len(ctx.payroll) == 2
    assert store.get(EMPLOYEES_KEY)[0]["name"] == "John Doe"


def test_load_never_reseeds_existing_data(store, clock):
    first = DataContext(store, clock=clock)
    first.load()
    first.employees.delete("3")

    second = DataContext(store, clock=clock)
    second.load()
    assert [e.id for e in second.employees.all()] == ["1", "2"]


def test_seeding_can_be_disabled(store, clock):
    ctx = DataContext(store, seed_sample_data=False, clock=clock)
    ctx.load()
    assert all(len(ctx.collection(name)) == 0 for name in COLLECTION_NAMES)
    assert store.keys() == []


def test_records_round_trip_through_the_store(ctx, store, clock):
    emp = ctx.employees.add(_employee())

    fresh = DataContext(store, clock=clock)
    fresh.load()
    assert fresh.employees.get("9") == emp
    assert store.get(EMPLOYEES_KEY)[-1]["dateOfJoining"] == "2025-05-01"
    assert store.get(EMPLOYEES_KEY)[-1]["emergencyContact"]["relationship"] == "Friend"


def test_update_and_delete_rewrite_the_collection(ctx):
    ctx.employees.update("1", dataclasses.replace(ctx.employees.get("1"), salary=80000.0))
    ctx.employees.delete("2")

    assert ctx.employees.get("1").salary == 80000.0
    assert ctx.employees.get("2") is None


def test_unknown_collection_name_raises_key_error(ctx):
    with pytest.raises(KeyError):
        ctx.collection("timesheets")


def test_write_reaches_every_context_on_the_bus(store, clock):
    bus = ChangeBus()
    writer = DataContext(store, bus=bus, clock=clock)
    reader = DataContext(store, bus=bus, clock=clock)
    writer.load()
    reader.load()

    seen_by_writer, seen_by_reader = [], []
    writer.subscribe(seen_by_writer.append)
    reader.subscribe(seen_by_reader.append)

    writer.employees.add(_employee())

    assert [e.collection for e in seen_by_writer] == ["employees"]
    assert [e.collection for e in seen_by_reader] == ["employees"]
    assert seen_by_reader[0].origin == writer.id
    assert reader.employees.get("9") is not None


def test_unsubscribe_and_close_stop_notifications(store, clock):
    bus = ChangeBus()
    a = DataContext(store, bus=bus, clock=clock)
    b = DataContext(store, bus=bus, clock=clock)
    a.load()
    b.load()
    events = []
    stop = b.subscribe(events.append)
    stop()
    a.employees.add(_employee())
    assert events == []

    b.subscribe(events.append)
    b.close()
    a.employees.add(_employee("10"))
    assert events == []


def test_sync_picks_up_writes_from_another_process(tmp_path, clock):
    path = tmp_path / "hrms.json"
    here = DataContext(JsonFileStore(path), clock=clock)
    here.load()
    # Separate store object and bus: stands in for a second process.
    there = DataContext(JsonFileStore(path), clock=clock)
    there.load()

    events = []
    here.subscribe(events.append)
    there.leaves.delete("3")

    assert here.sync() == ["leaves"]
    assert here.leaves.get("3") is None
    assert [e.collection for e in events] == ["leaves"]
    assert here.sync() == []


def test_sync_ignores_writes_outside_the_collections(ctx, store):
    store.set(USERS_KEY, [])
    assert ctx.sync() == []


def test_corrupt_store_file_surfaces_storage_error(tmp_path, clock):
    path = tmp_path / "hrms.json"
    path.write_text("{not json", encoding="utf-8")
    ctx = DataContext(JsonFileStore(path), clock=clock)

    with pytest.raises(StorageError):
        ctx.load()


def test_corrupt_record_surfaces_storage_error(clock):
    store = InMemoryStore({EMPLOYEES_KEY: [{"id": "1"}]})
    ctx = DataContext(store, clock=clock)

    with pytest.raises(StorageError):
        ctx.load()
