# Доменні помилки фінансового сервісу. Роутери перетворюють їх на HTTP-відповіді.


class FinanceError(Exception):
    """Базова помилка фінансового ядра."""


class InvalidInputError(FinanceError):
    """Невалідний scope або діапазон дат. Відхиляється до будь-якого I/O."""


class NoRecordsFoundError(FinanceError):
    """
    Для scope + вікна не знайдено жодного доходу.

    Відрізняється від успішної відповіді з нулями: "немає активності" віддається як not-found.
    """

    def __init__(self, scope_label: str):
        self.scope_label = scope_label
        super().__init__(f"No income records found for this {scope_label} in the selected period")


class AggregationError(FinanceError):
    """Одне з читань колекцій впало: часткових сум не повертаємо."""

