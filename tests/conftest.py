import asyncio
import datetime as dt
import itertools
import uuid

import pytest

from services.finance_service import FinanceService
from services.record_store import FinanceStores, prepare_for_storage, record_sort_key

_created = itertools.count()


def make_record(truck_id="T1", user_id="U1", day="2024-01-01", **fields) -> dict:
    """Запис у тому вигляді, в якому його повертає Firestore."""
    day = dt.date.fromisoformat(day) if isinstance(day, str) else day
    data = prepare_for_storage({"truck_id": truck_id, "user_id": user_id, "date": day, **fields})
    data["created_at"] = dt.datetime(2024, 1, 1, tzinfo=dt.timezone.utc) + dt.timedelta(seconds=next(_created))
    data.setdefault("id", uuid.uuid4().hex)
    return data


class InFlightTracker:
    """Рахує, скільки читань виконується одночасно."""

    def __init__(self):
        self.current = 0
        self.peak = 0

    def enter(self):
        self.current += 1
        self.peak = max(self.peak, self.current)

    def leave(self):
        self.current -= 1


class InMemoryRecordStore:
    """Підміна FirestoreRecordStore з тією ж семантикою фільтрів."""

    def __init__(self, records=None, fail=False, delay=0.0, tracker=None):
        self.records = list(records or [])
        self.fail = fail
        self.delay = delay
        self.tracker = tracker
        self.calls = 0

    async def find(self, record_filter):
        self.calls += 1
        if self.tracker is not None:
            self.tracker.enter()
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            if self.tracker is not None:
                self.tracker.leave()
        if self.fail:
            raise RuntimeError("collection unavailable")
        scope = record_filter.scope
        window = record_filter.window
        matched = [
            dict(r)
            for r in self.records
            if r.get(scope.field_name) == scope.value and (window is None or window.contains(r["date"]))
        ]
        matched.sort(key=record_sort_key)
        return matched

    async def find_by_id(self, record_id):
        for r in self.records:
            if r["id"] == record_id:
                return dict(r)
        return None

    async def insert(self, data):
        payload = prepare_for_storage(data)
        payload["created_at"] = dt.datetime.now(dt.timezone.utc)
        payload["id"] = uuid.uuid4().hex
        self.records.append(payload)
        return dict(payload)

    async def update_by_id(self, record_id, changes):
        for r in self.records:
            if r["id"] == record_id:
                r.update(prepare_for_storage(changes))
                return dict(r)
        return None

    async def delete_by_id(self, record_id):
        before = len(self.records)
        self.records = [r for r in self.records if r["id"] != record_id]
        return len(self.records) != before


class FakeResolver:
    def __init__(self, numbers=None, failing=(), hanging=()):
        self.numbers = numbers or {}
        self.failing = set(failing)
        self.hanging = set(hanging)
        self.calls = []

    async def resolve(self, truck_id):
        self.calls.append(truck_id)
        if truck_id in self.failing:
            raise RuntimeError("fleet service down")
        if truck_id in self.hanging:
            await asyncio.sleep(10)
        return self.numbers.get(truck_id, "N/A")


def make_stores(income=(), fuel=(), def_fluid=(), other=(), loan=()) -> FinanceStores:
    return FinanceStores(
        income=InMemoryRecordStore(income),
        fuel=InMemoryRecordStore(fuel),
        def_fluid=InMemoryRecordStore(def_fluid),
        other=InMemoryRecordStore(other),
        loan=InMemoryRecordStore(loan),
    )


@pytest.fixture
def resolver():
    return FakeResolver(numbers={"T1": "KA-1001", "T2": "KA-2002", "T3": "KA-3003"})


@pytest.fixture
def sample_stores():
    """Приклад з документації: T1 за 2024-01-01 -> дохід 500, витрати 200."""
    return make_stores(
        income=[make_record(amount=500, source="freight")],
        fuel=[make_record(cost=100)],
        def_fluid=[make_record(cost=20)],
        other=[make_record(amount=30)],
        loan=[make_record(cost=50)],
    )


@pytest.fixture
def finance_service(sample_stores, resolver):
    return FinanceService(sample_stores, resolver, lookup_timeout=0.05)
