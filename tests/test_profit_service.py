from decimal import Decimal

import pytest

from conftest import FakeResolver, make_record, make_stores
from core.errors import InvalidInputError, NoRecordsFoundError
from models.finance import Aggregation, Scope
from services.finance_service import FinanceService
from services.profit_service import ProfitCalculator, format_display_date


def _aggregation(records, income="0", fuel="0", def_total="0", other="0", loan="0"):
    return Aggregation(
        income_records=records,
        total_income=Decimal(income),
        fuel_total=Decimal(fuel),
        def_total=Decimal(def_total),
        other_total=Decimal(other),
        loan_total=Decimal(loan),
    )


def test_display_date_format():
    record = make_record(day="2024-01-05")

    assert format_display_date(record["date"]) == "05-Jan-2024"
    assert format_display_date(None) is None


async def test_profit_can_be_negative(resolver):
    calculator = ProfitCalculator(resolver)
    aggregation = _aggregation([make_record(amount=100)], income="100", fuel="80", loan="70.5")

    summary = await calculator.build_summary(Scope.by_truck("T1"), aggregation)

    assert summary.total_expense == Decimal("150.5")
    assert summary.profit == Decimal("-50.5")


async def test_truck_scope_skips_enrichment(resolver):
    calculator = ProfitCalculator(resolver)
    records = [make_record(amount=10), make_record(amount=20)]

    summary = await calculator.build_summary(Scope.by_truck("T1"), _aggregation(records, income="30"))

    assert resolver.calls == []
    assert [r.index for r in summary.records] == [0, 1]
    assert all(r.registration_no is None for r in summary.records)


async def test_user_scope_resolves_each_truck_once(resolver):
    calculator = ProfitCalculator(resolver)
    records = [
        make_record(truck_id="T1", user_id="U1", amount=1),
        make_record(truck_id="T2", user_id="U1", amount=2),
        make_record(truck_id="T1", user_id="U1", amount=3),
    ]

    summary = await calculator.build_summary(Scope.by_user("U1"), _aggregation(records, income="6"))

    assert sorted(resolver.calls) == ["T1", "T2"]
    assert [r.registration_no for r in summary.records] == ["KA-1001", "KA-2002", "KA-1001"]


async def test_failed_lookup_degrades_to_placeholder_only_for_that_truck():
    resolver = FakeResolver(numbers={"T1": "KA-1001", "T3": "KA-3003"}, failing={"T2"})
    calculator = ProfitCalculator(resolver)
    records = [
        make_record(truck_id="T1", user_id="U1", amount=1),
        make_record(truck_id="T2", user_id="U1", amount=2),
        make_record(truck_id="T3", user_id="U1", amount=3),
    ]

    summary = await calculator.build_summary(Scope.by_user("U1"), _aggregation(records, income="6"))

    assert [r.registration_no for r in summary.records] == ["KA-1001", "N/A", "KA-3003"]
    assert summary.profit == Decimal("6")


async def test_hanging_lookup_times_out_to_placeholder():
    resolver = FakeResolver(numbers={"T1": "KA-1001"}, hanging={"T2"})
    calculator = ProfitCalculator(resolver, lookup_timeout=0.05)
    records = [
        make_record(truck_id="T1", user_id="U1", amount=1),
        make_record(truck_id="T2", user_id="U1", amount=2),
    ]

    summary = await calculator.build_summary(Scope.by_user("U1"), _aggregation(records, income="3"))

    assert [r.registration_no for r in summary.records] == ["KA-1001", "N/A"]


async def test_example_truck_summary(finance_service):
    summary = await finance_service.truck_summary("T1", "2024-01-01", "2024-01-01")

    assert summary.total_income == Decimal("500")
    assert summary.total_expense == Decimal("200")
    assert summary.profit == Decimal("300")
    assert summary.records[0].formatted_date == "01-Jan-2024"
    assert summary.expenses.other == Decimal("30")


async def test_example_unknown_truck_without_window_is_not_found(finance_service):
    with pytest.raises(NoRecordsFoundError):
        await finance_service.truck_summary("T2")


async def test_invalid_input_rejected_before_any_read(resolver):
    stores = make_stores(income=[make_record(amount=1)])
    service = FinanceService(stores, resolver)

    with pytest.raises(InvalidInputError):
        await service.truck_summary("T1", "2024-01-01", "not-a-date")
    with pytest.raises(InvalidInputError):
        await service.user_summary("  ")

    assert stores.income.calls == 0


async def test_profit_matches_totals_for_many_records(resolver):
    income = [make_record(amount=a) for a in (10.05, 99.99, 0.01, 1234.56)]
    fuel = [make_record(cost=c) for c in (3.33, 3.33, 3.34)]
    other = [make_record(amount=7.77), make_record(cost=2.23), make_record()]
    service = FinanceService(make_stores(income=income, fuel=fuel, other=other), resolver)

    summary = await service.truck_summary("T1")

    assert summary.total_income == Decimal("1344.61")
    assert summary.total_expense == Decimal("20.00")
    assert summary.profit == summary.total_income - summary.total_expense
