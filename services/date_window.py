# Перетворення вибору дат (пара дат або нічого) на UTC-вікно для запиту
import datetime as dt
from typing import Sequence

from core.errors import InvalidInputError
from models.finance import DateWindow

DateInput = str | dt.date | dt.datetime | None


def _parse_day(value: DateInput, position: str) -> dt.date:
    if isinstance(value, dt.datetime):
        if value.tzinfo:
            value = value.astimezone(dt.timezone.utc)
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str) and value.strip():
        raw = value.strip()
        try:
            return dt.date.fromisoformat(raw)
        except ValueError:
            pass
        try:
            parsed = dt.datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            raise InvalidInputError(f"Invalid {position} date: {value!r}")
        return _parse_day(parsed, position)
    raise InvalidInputError(f"Missing {position} date")


def start_of_day(day: dt.date) -> dt.datetime:
    return dt.datetime.combine(day, dt.time.min, tzinfo=dt.timezone.utc)


def end_of_day(day: dt.date) -> dt.datetime:
    # 23:59:59.999: точність мілісекунд, як у збережених записах
    return dt.datetime.combine(day, dt.time(23, 59, 59, 999000), tzinfo=dt.timezone.utc)


def resolve_window(selection: Sequence[DateInput] | None) -> DateWindow | None:
    """
    Повертає None (без обмеження по датах) або вікно [start, end] в UTC.

    Якщо обидві дати припадають на один календарний день, вікно позначається як
    одноденне і сховище шукає точний збіг дати замість діапазону.
    """
    if selection is None:
        return None
    items = list(selection)
    if not items or all(item is None or item == "" for item in items):
        return None
    if len(items) != 2:
        raise InvalidInputError("Date window must contain exactly two dates")

    first = _parse_day(items[0], "start")
    second = _parse_day(items[1], "end")
    if first > second:
        raise InvalidInputError("Start date must not be after end date")

    return DateWindow(start=start_of_day(first), end=end_of_day(second))
