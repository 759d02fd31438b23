import asyncio
import datetime as dt
import logging

from models.finance import Aggregation, ExpenseBreakdown, FinanceSummary, FormattedIncome, Scope
from services.aggregation_service import INCOME_FIELDS, normalize_amount
from services.fleet_client import PLACEHOLDER_REGISTRATION

logger = logging.getLogger(__name__)

DISPLAY_DATE_FORMAT = "%d-%b-%Y"  # 01-Jan-2024


def format_display_date(value) -> str | None:
    if isinstance(value, dt.datetime):
        if value.tzinfo:
            value = value.astimezone(dt.timezone.utc)
        return value.strftime(DISPLAY_DATE_FORMAT)
    if isinstance(value, dt.date):
        return value.strftime(DISPLAY_DATE_FORMAT)
    return None


def _calendar_day(value) -> dt.date | None:
    if isinstance(value, dt.datetime):
        if value.tzinfo:
            value = value.astimezone(dt.timezone.utc)
        return value.date()
    if isinstance(value, dt.date):
        return value
    return None


class ProfitCalculator:
    def __init__(self, resolver, lookup_timeout: float = 3.0):
        self._resolver = resolver
        self._lookup_timeout = lookup_timeout

    async def _lookup(self, truck_id: str) -> str:
        try:
            return await asyncio.wait_for(self._resolver.resolve(truck_id), timeout=self._lookup_timeout)
        except asyncio.TimeoutError:
            logger.warning("Truck registration lookup timed out (truck_id=%s)", truck_id)
        except Exception as e:
            logger.warning("Truck registration lookup failed (truck_id=%s): %s", truck_id, e)
        return PLACEHOLDER_REGISTRATION

    async def resolve_registrations(self, truck_ids) -> dict[str, str]:
        """Один запит на кожен унікальний truck_id, усі паралельно."""
        distinct = list(dict.fromkeys(t for t in truck_ids if t))
        if not distinct:
            return {}
        numbers = await asyncio.gather(*(self._lookup(truck_id) for truck_id in distinct))
        return dict(zip(distinct, numbers))

    async def build_summary(self, scope: Scope, aggregation: Aggregation) -> FinanceSummary:
        registrations: dict[str, str] = {}
        if scope.kind == "user":
            registrations = await self.resolve_registrations(
                r.get("truck_id") for r in aggregation.income_records
            )

        records = []
        for index, record in enumerate(aggregation.income_records):
            records.append(
                FormattedIncome(
                    id=record.get("id"),
                    index=index,
                    truck_id=record.get("truck_id"),
                    user_id=record.get("user_id"),
                    amount=normalize_amount(record, INCOME_FIELDS),
                    source=record.get("source"),
                    description=record.get("description"),
                    date=_calendar_day(record.get("date")),
                    formatted_date=format_display_date(record.get("date")),
                    registration_no=(
                        registrations.get(record.get("truck_id"), PLACEHOLDER_REGISTRATION)
                        if scope.kind == "user"
                        else None
                    ),
                )
            )

        total_income = aggregation.total_income
        total_expense = aggregation.total_expense
        window = aggregation.window

        return FinanceSummary(
            scope=scope.kind,
            scope_id=scope.value,
            start_date=window.start.date() if window else None,
            end_date=window.end.date() if window else None,
            records=records,
            total_income=total_income,
            total_expense=total_expense,
            profit=total_income - total_expense,
            expenses=ExpenseBreakdown(
                fuel=aggregation.fuel_total,
                def_fluid=aggregation.def_total,
                other=aggregation.other_total,
                loan=aggregation.loan_total,
            ),
        )
