"""
Aggregation — понижение частоты временного ряда

Ресемплинг выполняется в два шага:
1. frequency_split: разбиение ряда на последовательные периоды по
   предикату границы (core.frequency)
2. frequency_join: свёртка каждого периода в одну точку выбранным режимом

Календарные правила:
- daily / weekly / monthly: разбиение по границе периода
- bi_monthly / quarterly / semi_annual: сначала фильтр месяцев (со сдвигом),
  затем разбиение
- annual: разбиение по году, затем остаются только годы, последний месяц
  которых совпадает с последним месяцем первого года
- bi_annual ... quinquennial: группы по N годовых периодов, отсчёт от
  последнего года; неполная ведущая группа отбрасывается

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Режим "last" возвращает последнюю точку периода без изменений
2. Остальные режимы берут refper и атрибуты последней точки периода
3. Пустой вход даёт пустой Vector
"""

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Union

from vectorlib.core.domain.data_point import DataPoint
from vectorlib.core.domain.exceptions import UnknownAggregationModeError
from vectorlib.core.domain.vector import Vector
from vectorlib.core.frequency import (
    YEARS_PER_PERIOD,
    BoundaryPredicate,
    Frequency,
    FrequencyDetectionConfig,
    annual_boundary,
    cycle_key,
    daily_boundary,
    detect_frequency,
    is_bi_monthly_month,
    is_quarter_month,
    is_semi_annual_month,
    monthly_boundary,
    previous_cycle_key,
    quarterly_boundary,
    semi_annual_boundary,
    weekly_boundary,
)

logger = logging.getLogger(__name__)

AggregationFn = Callable[[Vector], DataPoint]


# =============================================================================
# AGGREGATION MODES
# =============================================================================


class AggregationMode(str, Enum):
    """Режим свёртки периода в одну точку."""

    LAST = "last"
    SUM = "sum"
    AVERAGE = "average"
    MAX = "max"
    MIN = "min"


AggregationModeLike = Union[AggregationMode, str, AggregationFn]


def _last_point(run: Vector) -> DataPoint:
    return run.get(len(run) - 1)


def _aggregate_last(run: Vector) -> DataPoint:
    return _last_point(run)


def _aggregate_sum(run: Vector) -> DataPoint:
    return _last_point(run).with_value(run.sum())


def _aggregate_average(run: Vector) -> DataPoint:
    return _last_point(run).with_value(run.average())


def _aggregate_max(run: Vector) -> DataPoint:
    return _last_point(run).with_value(run.max())


def _aggregate_min(run: Vector) -> DataPoint:
    return _last_point(run).with_value(run.min())


AGGREGATION_MODES: Dict[AggregationMode, AggregationFn] = {
    AggregationMode.LAST: _aggregate_last,
    AggregationMode.SUM: _aggregate_sum,
    AggregationMode.AVERAGE: _aggregate_average,
    AggregationMode.MAX: _aggregate_max,
    AggregationMode.MIN: _aggregate_min,
}


def resolve_mode(mode: AggregationModeLike) -> AggregationFn:
    """
    Функция агрегации по имени режима, AggregationMode или callable.

    Raises:
        UnknownAggregationModeError: Неизвестное имя режима
    """
    if isinstance(mode, AggregationMode):
        return AGGREGATION_MODES[mode]

    if isinstance(mode, str):
        try:
            return AGGREGATION_MODES[AggregationMode(mode.lower())]
        except ValueError:
            raise UnknownAggregationModeError(f"Unknown aggregation mode: {mode!r}") from None

    if callable(mode):
        return mode

    raise UnknownAggregationModeError(f"Unknown aggregation mode: {mode!r}")


# =============================================================================
# SPLIT / JOIN
# =============================================================================


def frequency_split(vector: Vector, boundary: BoundaryPredicate) -> List[Vector]:
    """
    Разбиение ряда на последовательные периоды.

    Новый период начинается, когда boundary(prev.refper, curr.refper) истинно.

    Returns:
        Список непустых векторов-периодов (пустой для пустого входа)
    """
    runs: List[List[DataPoint]] = []
    previous: Optional[DataPoint] = None

    for point in vector:
        if previous is None or boundary(previous.refper, point.refper):
            runs.append([])
        runs[-1].append(point)
        previous = point

    return [Vector(run) for run in runs]


def frequency_join(runs: List[Vector], mode: AggregationModeLike = AggregationMode.LAST) -> Vector:
    """
    Свёртка каждого периода в одну точку.

    Raises:
        UnknownAggregationModeError: Неизвестное имя режима
    """
    aggregate = resolve_mode(mode)
    return Vector(aggregate(run) for run in runs if len(run) > 0)


def _concat(runs: List[Vector]) -> Vector:
    return Vector(point for run in runs for point in run)


def _multi_year_runs(vector: Vector, years: int) -> List[Vector]:
    runs = frequency_split(vector, annual_boundary)
    if not runs:
        return []

    # Годы с тем же последним месяцем, что и у первого года
    anchor_month = _last_point(runs[0]).refper.month
    runs = [run for run in runs if _last_point(run).refper.month == anchor_month]

    if years == 1:
        return runs

    # Группы по years периодов от последнего года назад
    groups: List[Vector] = []
    end = len(runs)
    while end - years >= 0:
        groups.insert(0, _concat(runs[end - years:end]))
        end -= years
    return groups


# =============================================================================
# RESAMPLE
# =============================================================================


def resample(
    vector: Vector,
    frequency: Frequency,
    mode: AggregationModeLike = AggregationMode.LAST,
    offset: int = 0,
) -> Vector:
    """
    Понижение частоты ряда до frequency.

    Args:
        vector: Исходный ряд (refper по возрастанию)
        frequency: Целевая частота
        mode: Режим агрегации периода (имя, AggregationMode или callable)
        offset: Сдвиг месяцев (quarterly: 0-2, semi_annual: 0-5)

    Returns:
        Новый Vector с одной точкой на период

    Raises:
        UnknownAggregationModeError: Неизвестное имя режима
    """
    frequency = Frequency(frequency)

    if frequency == Frequency.DAILY:
        runs = frequency_split(vector, daily_boundary)
    elif frequency == Frequency.WEEKLY:
        runs = frequency_split(vector, weekly_boundary)
    elif frequency == Frequency.MONTHLY:
        runs = frequency_split(vector, monthly_boundary)
    elif frequency == Frequency.BI_MONTHLY:
        filtered = vector.filter(lambda p: is_bi_monthly_month(p.refper))
        runs = frequency_split(filtered, monthly_boundary)
    elif frequency == Frequency.QUARTERLY:
        filtered = vector.filter(lambda p: is_quarter_month(p.refper, offset))
        runs = frequency_split(filtered, quarterly_boundary(offset))
    elif frequency == Frequency.SEMI_ANNUAL:
        filtered = vector.filter(lambda p: is_semi_annual_month(p.refper, offset))
        runs = frequency_split(filtered, semi_annual_boundary(offset))
    else:
        runs = _multi_year_runs(vector, YEARS_PER_PERIOD[frequency])

    result = frequency_join(runs, mode)

    logger.debug(
        "Resampled vector to %s: %d points -> %d points",
        frequency.value,
        len(vector),
        len(result),
    )
    return result


# =============================================================================
# SAME PERIOD PREVIOUS YEAR
# =============================================================================


def same_period_previous_year_lookup(
    vector: Vector,
    config: Optional[FrequencyDetectionConfig] = None,
) -> List[Optional[DataPoint]]:
    """
    Для каждой точки: точка того же периода годом ранее или None.

    Частота ряда определяется detect_frequency; период сопоставляется по
    календарю (monthly и реже: (год - 1, месяц), weekly: 52 недели назад,
    daily: та же дата годом ранее).

    Returns:
        Список той же длины, что и vector
    """
    frequency = detect_frequency(vector.refpers(), config)
    if frequency is None:
        return [None] * len(vector)

    by_period = {cycle_key(p.refper, frequency): p for p in vector}
    return [by_period.get(previous_cycle_key(p.refper, frequency)) for p in vector]
