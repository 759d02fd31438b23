import logging

from models.finance import FinanceSummary, Scope
from services.aggregation_service import TransactionAggregator
from services.date_window import DateInput, resolve_window
from services.profit_service import ProfitCalculator
from services.record_store import FinanceStores

logger = logging.getLogger(__name__)


class FinanceService:
    """
    Точка входу фінансового ядра для роутерів.
    Сховища та resolver передаються ззовні (створюються в lifespan).
    """

    def __init__(self, stores: FinanceStores, resolver, lookup_timeout: float = 3.0):
        self.stores = stores
        self.aggregator = TransactionAggregator(stores)
        self.calculator = ProfitCalculator(resolver, lookup_timeout=lookup_timeout)

    async def summary(self, scope: Scope, selection=None) -> FinanceSummary:
        window = resolve_window(selection)
        aggregation = await self.aggregator.aggregate(scope, window)
        summary = await self.calculator.build_summary(scope, aggregation)
        logger.info(
            "Finance summary for %s=%s: income=%s expense=%s profit=%s",
            scope.field_name,
            scope.value,
            summary.total_income,
            summary.total_expense,
            summary.profit,
        )
        return summary

    async def truck_summary(
        self, truck_id: str, start_date: DateInput = None, end_date: DateInput = None
    ) -> FinanceSummary:
        return await self.summary(Scope.by_truck(truck_id), _selection(start_date, end_date))

    async def user_summary(
        self, user_id: str, start_date: DateInput = None, end_date: DateInput = None
    ) -> FinanceSummary:
        return await self.summary(Scope.by_user(user_id), _selection(start_date, end_date))


def _selection(start_date: DateInput, end_date: DateInput):
    # Жодної дати: без фільтра. Лише одна з двох: помилка у resolve_window
    if start_date in (None, "") and end_date in (None, ""):
        return None
    return [start_date, end_date]
