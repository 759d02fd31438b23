import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.deps import get_stores
from core.errors import InvalidInputError
from models.finance import Scope
from models.income import IncomeCreate, IncomeInDB, IncomeUpdate
from services.date_window import resolve_window
from services.record_store import FinanceStores, RecordFilter, to_response_data

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_income(record: dict) -> IncomeInDB:
    return IncomeInDB(**to_response_data(record))


@router.post(
    "/",
    response_model=IncomeInDB,
    status_code=status.HTTP_201_CREATED
)
async def create_income(income_data: IncomeCreate, stores: FinanceStores = Depends(get_stores)):
    """
    Створює новий запис про дохід вантажівки.
    """
    try:
        record = await stores.income.insert(income_data.model_dump())
    except Exception as e:
        logger.exception("Failed to add income")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to add income: {e}"
        )
    return _to_income(record)


@router.get("/", response_model=List[IncomeInDB])
async def list_income(
    truck_id: str | None = Query(default=None, alias="truckId"),
    user_id: str | None = Query(default=None, alias="userId"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    stores: FinanceStores = Depends(get_stores),
):
    """
    Доходи вантажівки або користувача, від старіших до новіших.
    """
    try:
        scope = Scope.from_ids(truck_id=truck_id, user_id=user_id)
        window = resolve_window(None if start_date is None and end_date is None else [start_date, end_date])
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        records = await stores.income.find(RecordFilter(scope=scope, window=window))
    except Exception as e:
        logger.exception("Failed to read income")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to retrieve income: {e}"
        )
    return [_to_income(r) for r in records]


@router.get("/{income_id}", response_model=IncomeInDB)
async def get_income(income_id: str, stores: FinanceStores = Depends(get_stores)):
    record = await stores.income.find_by_id(income_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Income record not found")
    return _to_income(record)


@router.put("/{income_id}", response_model=IncomeInDB)
async def update_income(
    income_id: str,
    income_data: IncomeUpdate,
    stores: FinanceStores = Depends(get_stores),
):
    """
    Оновлює лише передані поля.
    """
    record = await stores.income.update_by_id(income_id, income_data.model_dump(exclude_unset=True))
    if record is None:
        raise HTTPException(status_code=404, detail="Income record not found")
    return _to_income(record)


@router.delete("/{income_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_income(income_id: str, stores: FinanceStores = Depends(get_stores)):
    deleted = await stores.income.delete_by_id(income_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Income record not found")
