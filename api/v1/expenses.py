# api/v1/expenses.py

import logging
from typing import List, Literal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.deps import get_stores
from core.errors import InvalidInputError
from models.expense import (
    DefExpenseCreate,
    ExpenseInDB,
    ExpenseUpdate,
    FuelExpenseCreate,
    LoanCalculationCreate,
    OtherExpenseCreate,
)
from models.finance import Scope
from services.date_window import resolve_window
from services.record_store import FinanceStores, RecordFilter, to_response_data

logger = logging.getLogger(__name__)

router = APIRouter()

ExpenseCategory = Literal["fuel", "def", "other", "loan"]


def _to_expense(record: dict) -> ExpenseInDB:
    return ExpenseInDB(**to_response_data(record))


async def _insert_expense(category: str, expense_data, stores: FinanceStores) -> ExpenseInDB:
    try:
        record = await stores.expense_store(category).insert(expense_data.model_dump(exclude_none=True))
    except Exception as e:
        logger.exception("Failed to add %s expense", category)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to add expense: {e}"
        )
    return _to_expense(record)


@router.post("/fuel/", response_model=ExpenseInDB, status_code=status.HTTP_201_CREATED)
async def create_fuel_expense(expense_data: FuelExpenseCreate, stores: FinanceStores = Depends(get_stores)):
    """
    Створює витрату на паливо.
    """
    return await _insert_expense("fuel", expense_data, stores)


@router.post("/def/", response_model=ExpenseInDB, status_code=status.HTTP_201_CREATED)
async def create_def_expense(expense_data: DefExpenseCreate, stores: FinanceStores = Depends(get_stores)):
    """
    Створює витрату на DEF (AdBlue).
    """
    return await _insert_expense("def", expense_data, stores)


@router.post("/other/", response_model=ExpenseInDB, status_code=status.HTTP_201_CREATED)
async def create_other_expense(expense_data: OtherExpenseCreate, stores: FinanceStores = Depends(get_stores)):
    """
    Створює іншу витрату; сума приймається як 'cost' або 'amount'.
    """
    return await _insert_expense("other", expense_data, stores)


@router.post("/loan/", response_model=ExpenseInDB, status_code=status.HTTP_201_CREATED)
async def create_loan_payment(expense_data: LoanCalculationCreate, stores: FinanceStores = Depends(get_stores)):
    return await _insert_expense("loan", expense_data, stores)


@router.get("/{category}/", response_model=List[ExpenseInDB])
async def list_expenses(
    category: ExpenseCategory,
    truck_id: str | None = Query(default=None, alias="truckId"),
    user_id: str | None = Query(default=None, alias="userId"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    stores: FinanceStores = Depends(get_stores),
):
    try:
        scope = Scope.from_ids(truck_id=truck_id, user_id=user_id)
        window = resolve_window(None if start_date is None and end_date is None else [start_date, end_date])
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        records = await stores.expense_store(category).find(RecordFilter(scope=scope, window=window))
    except Exception as e:
        logger.exception("Failed to read %s expenses", category)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve expenses: {e}"
        )
    return [_to_expense(r) for r in records]


@router.get("/{category}/{expense_id}", response_model=ExpenseInDB)
async def get_expense(
    category: ExpenseCategory,
    expense_id: str,
    stores: FinanceStores = Depends(get_stores),
):
    record = await stores.expense_store(category).find_by_id(expense_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Expense record not found")
    return _to_expense(record)


@router.put("/{category}/{expense_id}", response_model=ExpenseInDB)
async def update_expense(
    category: ExpenseCategory,
    expense_id: str,
    expense_data: ExpenseUpdate,
    stores: FinanceStores = Depends(get_stores),
):
    record = await stores.expense_store(category).update_by_id(
        expense_id, expense_data.model_dump(exclude_unset=True)
    )
    if record is None:
        raise HTTPException(status_code=404, detail="Expense record not found")
    return _to_expense(record)


@router.delete("/{category}/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_expense(
    category: ExpenseCategory,
    expense_id: str,
    stores: FinanceStores = Depends(get_stores),
):
    deleted = await stores.expense_store(category).delete_by_id(expense_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Expense record not found")
