"""
Dates — работа с reference period (refper)

Все reference periods хранятся как datetime.date (без времени и time zone).
Строки разбираются как local-midnight даты: используется только часть до "T".
"""

import calendar
from datetime import date, datetime
from typing import Union

RefperLike = Union[date, datetime, str]


def parse_refper(value: RefperLike) -> date:
    """
    Приведение refper к datetime.date.

    Args:
        value: date, datetime (берётся дата) или ISO строка
            ("2018-01-01", "2018-01-01T12:00:00")

    Returns:
        Дата reference period

    Raises:
        ValueError: Если строка не является ISO датой или тип не поддерживается
    """
    # datetime наследуется от date, поэтому проверяется первым
    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        return date.fromisoformat(value.strip().split("T")[0])

    raise ValueError(f"Unsupported refper type: {type(value).__name__}")


def format_refper(value: date) -> str:
    """Refper в формате yyyy-mm-dd."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def days_in_month(year: int, month: int) -> int:
    """Количество дней в месяце (month: 1-12)."""
    return calendar.monthrange(year, month)[1]


def end_of_month(value: date) -> date:
    """Последний день месяца для даты."""
    return value.replace(day=days_in_month(value.year, value.month))


def add_months(value: date, months: int) -> date:
    """
    Сдвиг даты на целое число месяцев с привязкой к концу месяца.

    Результат всегда последний день целевого месяца, так что шаг от
    31 января на один месяц даёт 28/29 февраля, а следующий шаг 31 марта.

    Examples:
        >>> add_months(date(2018, 12, 31), 2)
        datetime.date(2019, 2, 28)
    """
    index = value.year * 12 + (value.month - 1) + months
    year, month0 = divmod(index, 12)
    return date(year, month0 + 1, days_in_month(year, month0 + 1))


def previous_year(value: date) -> date:
    """
    Та же календарная дата годом ранее.

    29 февраля переходит в 28 февраля предыдущего года.
    """
    day = min(value.day, days_in_month(value.year - 1, value.month))
    return value.replace(year=value.year - 1, day=day)
