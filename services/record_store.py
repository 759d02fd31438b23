# Доступ до колекцій Firestore: доходи та чотири категорії витрат
import datetime as dt
import logging
from dataclasses import dataclass
from typing import Any

from google.cloud.firestore_v1.base_query import FieldFilter

from models.finance import DateWindow, Scope
from services.date_window import start_of_day

logger = logging.getLogger(__name__)

INCOME_COLLECTION = "incomes"
EXPENSE_COLLECTIONS = {
    "fuel": "fuel_expenses",
    "def": "def_expenses",
    "other": "other_expenses",
    "loan": "loan_calculations",
}

_EPOCH = dt.datetime.min.replace(tzinfo=dt.timezone.utc)


@dataclass(frozen=True)
class RecordFilter:
    scope: Scope
    window: DateWindow | None = None


def _as_utc(value: Any) -> dt.datetime:
    if isinstance(value, dt.datetime):
        return value if value.tzinfo else value.replace(tzinfo=dt.timezone.utc)
    if isinstance(value, dt.date):
        return start_of_day(value)
    return _EPOCH


def record_sort_key(record: dict) -> tuple[dt.datetime, dt.datetime]:
    """Дата транзакції за зростанням, при рівності за порядком вставки."""
    return _as_utc(record.get("date")), _as_utc(record.get("created_at"))


def prepare_for_storage(data: dict) -> dict:
    # Firestore не зберігає date, тільки datetime: зводимо до опівночі UTC
    prepared = dict(data)
    if isinstance(prepared.get("date"), dt.date) and not isinstance(prepared["date"], dt.datetime):
        prepared["date"] = start_of_day(prepared["date"])
    elif isinstance(prepared.get("date"), dt.datetime):
        prepared["date"] = start_of_day(_as_utc(prepared["date"]).date())
    return prepared


class FirestoreRecordStore:
    def __init__(self, db, collection: str):
        self._db = db
        self.collection = collection

    def _query(self, record_filter: RecordFilter):
        scope = record_filter.scope
        query = self._db.collection(self.collection).where(
            filter=FieldFilter(scope.field_name, "==", scope.value)
        )
        window = record_filter.window
        if window is None:
            return query
        if window.is_single_day:
            return query.where(filter=FieldFilter("date", "==", window.start))
        return (
            query.where(filter=FieldFilter("date", ">=", window.start))
            .where(filter=FieldFilter("date", "<=", window.end))
        )

    async def find(self, record_filter: RecordFilter) -> list[dict]:
        results = []
        async for doc in self._query(record_filter).stream():
            data = doc.to_dict()
            data["id"] = doc.id
            results.append(data)

        # Сортуємо локально, щоб не вимагати композитних індексів під order_by
        results.sort(key=record_sort_key)
        logger.debug("%s: %d records for %s", self.collection, len(results), record_filter)
        return results

    async def find_by_id(self, record_id: str) -> dict | None:
        doc = await self._db.collection(self.collection).document(record_id).get()
        if not doc.exists:
            return None
        data = doc.to_dict()
        data["id"] = doc.id
        return data

    async def insert(self, data: dict) -> dict:
        payload = prepare_for_storage(data)
        payload["created_at"] = dt.datetime.now(dt.timezone.utc)
        _, doc_ref = await self._db.collection(self.collection).add(payload)
        logger.info("Created %s record %s", self.collection, doc_ref.id)
        return {**payload, "id": doc_ref.id}

    async def update_by_id(self, record_id: str, changes: dict) -> dict | None:
        doc_ref = self._db.collection(self.collection).document(record_id)
        doc = await doc_ref.get()
        if not doc.exists:
            return None
        payload = prepare_for_storage(changes)
        if payload:
            await doc_ref.update(payload)
        logger.info("Updated %s record %s", self.collection, record_id)
        return {**doc.to_dict(), **payload, "id": record_id}

    async def delete_by_id(self, record_id: str) -> bool:
        doc_ref = self._db.collection(self.collection).document(record_id)
        doc = await doc_ref.get()
        if not doc.exists:
            return False
        await doc_ref.delete()
        logger.info("Deleted %s record %s", self.collection, record_id)
        return True


@dataclass
class FinanceStores:
    """П'ять незалежних колекцій. Між ними немає транзакційної узгодженості."""

    income: Any
    fuel: Any
    def_fluid: Any
    other: Any
    loan: Any

    @classmethod
    def from_db(cls, db) -> "FinanceStores":
        return cls(
            income=FirestoreRecordStore(db, INCOME_COLLECTION),
            fuel=FirestoreRecordStore(db, EXPENSE_COLLECTIONS["fuel"]),
            def_fluid=FirestoreRecordStore(db, EXPENSE_COLLECTIONS["def"]),
            other=FirestoreRecordStore(db, EXPENSE_COLLECTIONS["other"]),
            loan=FirestoreRecordStore(db, EXPENSE_COLLECTIONS["loan"]),
        )

    def expense_store(self, category: str):
        stores = {"fuel": self.fuel, "def": self.def_fluid, "other": self.other, "loan": self.loan}
        return stores[category]


def to_response_data(record: dict) -> dict:
    """Документ Firestore -> дані для відповіді API (дата як календарний день)."""
    data = dict(record)
    if isinstance(data.get("date"), dt.datetime):
        data["date"] = _as_utc(data["date"]).date()
    return data
