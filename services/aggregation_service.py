import asyncio
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Sequence

from core.errors import AggregationError, NoRecordsFoundError
from models.finance import Aggregation, DateWindow, LedgerEntry, Scope
from services.record_store import FinanceStores, RecordFilter

logger = logging.getLogger(__name__)

INCOME_FIELDS = ("amount",)
COST_FIELDS = ("cost",)
# Інші витрати історично приходять то з 'cost', то з 'amount'
OTHER_EXPENSE_FIELDS = ("cost", "amount")

ZERO = Decimal("0")


def _to_decimal(value: Any, field_name: str = "amount") -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        amount = None
    # NaN та Infinity теж вважаємо нечитабельними
    if amount is None or not amount.is_finite():
        logger.warning("Unreadable monetary value in %r: %r, counted as 0", field_name, value)
        return ZERO
    return amount


def normalize_amount(record: dict, money_fields: Sequence[str]) -> Decimal:
    """Перше присутнє і не-null поле з money_fields, інакше нуль."""
    for name in money_fields:
        value = record.get(name)
        if value is not None:
            return _to_decimal(value, name)
    return ZERO


def to_ledger_entry(record: dict, money_fields: Sequence[str]) -> LedgerEntry:
    return LedgerEntry(
        id=record.get("id"),
        truck_id=record.get("truck_id"),
        user_id=record.get("user_id"),
        date=record.get("date"),
        amount=normalize_amount(record, money_fields),
    )


def _sum(records: list[dict], money_fields: Sequence[str]) -> Decimal:
    return sum((to_ledger_entry(r, money_fields).amount for r in records), ZERO)


class TransactionAggregator:
    def __init__(self, stores: FinanceStores):
        self._stores = stores

    async def aggregate(self, scope: Scope, window: DateWindow | None) -> Aggregation:
        """
        Читає доходи та всі чотири категорії витрат паралельно з однаковим
        scope і вікном, після чого рахує суми.

        Падіння будь-якого читання валить весь виклик (AggregationError).
        Порожній список доходів: NoRecordsFoundError, а не нулі.
        """
        record_filter = RecordFilter(scope=scope, window=window)
        stores = self._stores

        try:
            income, fuel, def_fluid, other, loan = await asyncio.gather(
                stores.income.find(record_filter),
                stores.fuel.find(record_filter),
                stores.def_fluid.find(record_filter),
                stores.other.find(record_filter),
                stores.loan.find(record_filter),
            )
        except Exception as e:
            logger.exception("Finance aggregation failed for %s=%s", scope.field_name, scope.value)
            raise AggregationError("Failed to retrieve finance records") from e

        if not income:
            raise NoRecordsFoundError(scope.kind)

        return Aggregation(
            income_records=income,
            total_income=_sum(income, INCOME_FIELDS),
            fuel_total=_sum(fuel, COST_FIELDS),
            def_total=_sum(def_fluid, COST_FIELDS),
            other_total=_sum(other, OTHER_EXPENSE_FIELDS),
            loan_total=_sum(loan, COST_FIELDS),
            window=window,
        )
