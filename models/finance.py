# Моделі фінансового ядра: scope, вікно дат, результати агрегації
import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from core.errors import InvalidInputError

ScopeKind = Literal["truck", "user"]

# Усередині ядра гроші зберігаються як Decimal, у JSON віддаються числом
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


@dataclass(frozen=True)
class Scope:
    """Або вантажівка, або користувач. Ніколи обидва в одному запиті."""

    kind: ScopeKind
    value: str

    @property
    def field_name(self) -> str:
        return "truck_id" if self.kind == "truck" else "user_id"

    @classmethod
    def by_truck(cls, truck_id: str | None) -> "Scope":
        return cls("truck", _require_id(truck_id, "truck_id"))

    @classmethod
    def by_user(cls, user_id: str | None) -> "Scope":
        return cls("user", _require_id(user_id, "user_id"))

    @classmethod
    def from_ids(cls, truck_id: str | None = None, user_id: str | None = None) -> "Scope":
        if truck_id and user_id:
            raise InvalidInputError("Provide either truck_id or user_id, not both")
        if truck_id:
            return cls.by_truck(truck_id)
        if user_id:
            return cls.by_user(user_id)
        raise InvalidInputError("Either truck_id or user_id is required")


def _require_id(value: str | None, name: str) -> str:
    if value is None or not str(value).strip():
        raise InvalidInputError(f"{name} is required")
    return str(value).strip()


@dataclass(frozen=True)
class DateWindow:
    start: dt.datetime
    end: dt.datetime

    @property
    def is_single_day(self) -> bool:
        return self.start.date() == self.end.date()

    def contains(self, moment: dt.datetime) -> bool:
        if self.is_single_day:
            return moment == self.start
        return self.start <= moment <= self.end


@dataclass(frozen=True)
class LedgerEntry:
    """Канонічний вигляд запису: сума вже нормалізована з cost/amount."""

    id: str | None
    truck_id: str | None
    user_id: str | None
    date: dt.datetime | None
    amount: Decimal


@dataclass
class Aggregation:
    income_records: list[dict[str, Any]]
    total_income: Decimal
    fuel_total: Decimal
    def_total: Decimal
    other_total: Decimal
    loan_total: Decimal
    window: DateWindow | None = None

    @property
    def total_expense(self) -> Decimal:
        return self.fuel_total + self.def_total + self.other_total + self.loan_total


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FormattedIncome(CamelModel):
    id: str | None = None
    index: int
    truck_id: str | None = None
    user_id: str | None = None
    amount: Money
    source: str | None = None
    description: str | None = None
    date: dt.date | None = None
    formatted_date: str | None = None
    registration_no: str | None = None


class ExpenseBreakdown(CamelModel):
    fuel: Money
    def_fluid: Money
    other: Money
    loan: Money


class FinanceSummary(CamelModel):
    scope: ScopeKind
    scope_id: str
    start_date: dt.date | None = None
    end_date: dt.date | None = None
    records: list[FormattedIncome]
    total_income: Money
    total_expense: Money
    profit: Money
    expenses: ExpenseBreakdown
