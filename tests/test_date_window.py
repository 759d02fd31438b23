import datetime as dt

import pytest

from conftest import make_record
from core.errors import InvalidInputError
from models.finance import DateWindow
from services.date_window import resolve_window

UTC = dt.timezone.utc


@pytest.mark.parametrize("selection", [None, [], [None, None], ["", ""]])
def test_no_selection_means_no_window(selection):
    assert resolve_window(selection) is None


def test_multi_day_window_covers_whole_days():
    window = resolve_window(["2024-01-01", "2024-01-31"])

    assert window.start == dt.datetime(2024, 1, 1, 0, 0, 0, tzinfo=UTC)
    assert window.end == dt.datetime(2024, 1, 31, 23, 59, 59, 999000, tzinfo=UTC)
    assert not window.is_single_day


def test_same_day_window_is_single_day():
    window = resolve_window(["2024-03-05", "2024-03-05"])

    assert window.is_single_day
    assert window.start == dt.datetime(2024, 3, 5, tzinfo=UTC)


def test_accepts_date_and_datetime_values():
    window = resolve_window([dt.date(2024, 2, 1), dt.datetime(2024, 2, 3, 15, 30, tzinfo=UTC)])

    assert window.start.date() == dt.date(2024, 2, 1)
    assert window.end.date() == dt.date(2024, 2, 3)


def test_accepts_iso_timestamps():
    window = resolve_window(["2024-02-01T10:00:00Z", "2024-02-02T00:00:00.000Z"])

    assert window.start == dt.datetime(2024, 2, 1, tzinfo=UTC)
    assert window.end.date() == dt.date(2024, 2, 2)


@pytest.mark.parametrize(
    "selection",
    [
        ["2024-13-01", "2024-12-31"],
        ["yesterday", "2024-01-01"],
        ["2024-01-01", None],
        [None, "2024-01-01"],
        ["2024-01-01"],
        ["2024-01-01", "2024-01-02", "2024-01-03"],
        ["2024-02-01", "2024-01-01"],
    ],
)
def test_malformed_selection_is_rejected(selection):
    with pytest.raises(InvalidInputError):
        resolve_window(selection)


def test_single_day_equality_matches_degenerate_range():
    records = [
        make_record(day="2023-12-31", amount=1),
        make_record(day="2024-01-01", amount=2),
        make_record(day="2024-01-01", amount=3),
        make_record(day="2024-01-02", amount=4),
    ]
    window = resolve_window(["2024-01-01", "2024-01-01"])
    as_range = DateWindow(start=window.start, end=window.end)

    by_equality = [r["id"] for r in records if r["date"] == window.start]
    by_range = [r["id"] for r in records if as_range.start <= r["date"] <= as_range.end]

    assert window.is_single_day
    assert by_equality == by_range
    assert len(by_equality) == 2
