# Pydantic моделі для витрат: паливо, DEF, інші витрати, кредитні платежі
import datetime as dt

from pydantic import BaseModel, Field


class ExpenseBase(BaseModel):
    truck_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    date: dt.date
    description: str | None = None


class FuelExpenseCreate(ExpenseBase):
    cost: float = Field(ge=0)
    quantity: float | None = Field(default=None, ge=0)  # літри
    price_per_unit: float | None = Field(default=None, ge=0)
    station: str | None = None


class DefExpenseCreate(FuelExpenseCreate):
    pass


class OtherExpenseCreate(ExpenseBase):
    # Старі клієнти надсилають 'amount', нові: 'cost'. Приймаємо обидва.
    cost: float | None = Field(default=None, ge=0)
    amount: float | None = Field(default=None, ge=0)
    category: str | None = None


class LoanCalculationCreate(ExpenseBase):
    cost: float = Field(ge=0)
    lender: str | None = None


class ExpenseUpdate(BaseModel):
    """Часткове оновлення будь-якої витрати: зберігаються лише передані поля."""

    truck_id: str | None = Field(default=None, min_length=1)
    user_id: str | None = Field(default=None, min_length=1)
    date: dt.date | None = None
    description: str | None = None
    cost: float | None = Field(default=None, ge=0)
    amount: float | None = Field(default=None, ge=0)
    quantity: float | None = Field(default=None, ge=0)
    price_per_unit: float | None = Field(default=None, ge=0)
    station: str | None = None
    category: str | None = None
    lender: str | None = None


class ExpenseInDB(BaseModel):
    id: str
    truck_id: str
    user_id: str
    date: dt.date
    description: str | None = None
    cost: float | None = None
    amount: float | None = None
    quantity: float | None = None
    price_per_unit: float | None = None
    station: str | None = None
    category: str | None = None
    lender: str | None = None
    created_at: dt.datetime | None = None
