# api/v1/finance.py

from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.deps import get_finance_service
from core.errors import AggregationError, InvalidInputError, NoRecordsFoundError
from models.finance import FinanceSummary, Scope
from services.finance_service import FinanceService

router = APIRouter()


async def _run_summary(service: FinanceService, scope_factory, start_date, end_date) -> FinanceSummary:
    try:
        return await scope_factory(service, start_date, end_date)
    except InvalidInputError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NoRecordsFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except AggregationError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve finance summary",
        )


@router.get("/trucks/{truck_id}/summary", response_model=FinanceSummary)
async def get_truck_summary(
    truck_id: str,
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    service: FinanceService = Depends(get_finance_service),
):
    """
    Доходи, витрати та прибуток вантажівки за період (або за весь час).
    """
    return await _run_summary(
        service,
        lambda s, start, end: s.truck_summary(truck_id, start, end),
        start_date,
        end_date,
    )


@router.get("/users/{user_id}/summary", response_model=FinanceSummary)
async def get_user_summary(
    user_id: str,
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    service: FinanceService = Depends(get_finance_service),
):
    """
    Те саме для користувача; кожен дохід доповнюється номером реєстрації вантажівки.
    """
    return await _run_summary(
        service,
        lambda s, start, end: s.user_summary(user_id, start, end),
        start_date,
        end_date,
    )


@router.get("/summary", response_model=FinanceSummary)
async def get_summary(
    truck_id: str | None = Query(default=None, alias="truckId"),
    user_id: str | None = Query(default=None, alias="userId"),
    start_date: str | None = Query(default=None, alias="startDate"),
    end_date: str | None = Query(default=None, alias="endDate"),
    service: FinanceService = Depends(get_finance_service),
):
    """
    Варіант з scope у query: рівно один з truckId / userId.
    """

    async def _by_scope(s: FinanceService, start, end):
        scope = Scope.from_ids(truck_id=truck_id, user_id=user_id)
        if scope.kind == "truck":
            return await s.truck_summary(scope.value, start, end)
        return await s.user_summary(scope.value, start, end)

    return await _run_summary(service, _by_scope, start_date, end_date)
