# Pydantic моделі для доходів
import datetime as dt

from pydantic import BaseModel, Field


class IncomeCreate(BaseModel):
    truck_id: str = Field(min_length=1)
    user_id: str = Field(min_length=1)
    amount: float = Field(ge=0)
    source: str = Field(min_length=1)  # категорія доходу, напр. "freight"
    date: dt.date
    description: str | None = None


class IncomeUpdate(BaseModel):
    truck_id: str | None = Field(default=None, min_length=1)
    user_id: str | None = Field(default=None, min_length=1)
    amount: float | None = Field(default=None, ge=0)
    source: str | None = Field(default=None, min_length=1)
    date: dt.date | None = None
    description: str | None = None


class IncomeInDB(IncomeCreate):
    id: str
    created_at: dt.datetime | None = None
