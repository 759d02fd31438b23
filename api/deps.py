from fastapi import Depends, HTTPException, Request, status

from services.finance_service import FinanceService
from services.record_store import FinanceStores


def get_finance_service(request: Request) -> FinanceService:
    """
    FinanceService створюється один раз у lifespan і лежить в app.state.
    """
    service = getattr(request.app.state, "finance_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Finance service not initialized",
        )
    return service


def get_stores(service: FinanceService = Depends(get_finance_service)) -> FinanceStores:
    return service.stores
