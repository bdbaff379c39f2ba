"""
Frequency — частоты временных рядов и календарные границы периодов

Модуль содержит:
- Перечисление частот (daily → quinquennial)
- Предикаты границ периодов boundary(prev_refper, curr_refper) для ресемплинга
- Фильтры месяцев для квартальной/полугодовой/двухмесячной частоты со сдвигом
- Определение доминирующей частоты вектора по медианному шагу между точками
- Ключи "тот же период годом ранее" для frequency-aware lookback

Все предикаты работают только с датой refper и предполагают, что вход
уже отфильтрован до нужных месяцев (например, квартальный pre-filter).
"""

import statistics
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Dict, Final, Hashable, Optional, Sequence, Tuple

from vectorlib.core.dates import previous_year

BoundaryPredicate = Callable[[date, date], bool]


# =============================================================================
# ENUMS
# =============================================================================


class Frequency(str, Enum):
    """Частота reference periods."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    BI_MONTHLY = "bi_monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi_annual"
    ANNUAL = "annual"
    BI_ANNUAL = "bi_annual"
    TRI_ANNUAL = "tri_annual"
    QUADRENNIAL = "quadrennial"
    QUINQUENNIAL = "quinquennial"


# Количество отчётных периодов в году (для частот не реже года)
PERIODS_PER_YEAR: Final[Dict[Frequency, int]] = {
    Frequency.DAILY: 365,
    Frequency.WEEKLY: 52,
    Frequency.MONTHLY: 12,
    Frequency.BI_MONTHLY: 6,
    Frequency.QUARTERLY: 4,
    Frequency.SEMI_ANNUAL: 2,
    Frequency.ANNUAL: 1,
}

# Количество лет в одном периоде для многолетних частот
YEARS_PER_PERIOD: Final[Dict[Frequency, int]] = {
    Frequency.ANNUAL: 1,
    Frequency.BI_ANNUAL: 2,
    Frequency.TRI_ANNUAL: 3,
    Frequency.QUADRENNIAL: 4,
    Frequency.QUINQUENNIAL: 5,
}


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class FrequencyDetectionConfig:
    """
    Пороги определения частоты по медианному шагу (в днях).

    Частота выбирается как первая, для которой медианный шаг между
    соседними refper не превышает порог. Пороги лежат между типичными
    шагами соседних частот (1, 7, ~30, ~61, ~91, ~182, 365, ... дней).
    """
    daily_max_gap_days: float = 3.0
    weekly_max_gap_days: float = 10.0
    monthly_max_gap_days: float = 45.0
    bi_monthly_max_gap_days: float = 75.0
    quarterly_max_gap_days: float = 135.0
    semi_annual_max_gap_days: float = 270.0
    annual_max_gap_days: float = 547.0
    bi_annual_max_gap_days: float = 912.0
    tri_annual_max_gap_days: float = 1278.0
    quadrennial_max_gap_days: float = 1643.0

    def thresholds(self) -> Sequence[Tuple[Frequency, float]]:
        """Пары (частота, порог) по возрастанию порога."""
        return (
            (Frequency.DAILY, self.daily_max_gap_days),
            (Frequency.WEEKLY, self.weekly_max_gap_days),
            (Frequency.MONTHLY, self.monthly_max_gap_days),
            (Frequency.BI_MONTHLY, self.bi_monthly_max_gap_days),
            (Frequency.QUARTERLY, self.quarterly_max_gap_days),
            (Frequency.SEMI_ANNUAL, self.semi_annual_max_gap_days),
            (Frequency.ANNUAL, self.annual_max_gap_days),
            (Frequency.BI_ANNUAL, self.bi_annual_max_gap_days),
            (Frequency.TRI_ANNUAL, self.tri_annual_max_gap_days),
            (Frequency.QUADRENNIAL, self.quadrennial_max_gap_days),
        )


# =============================================================================
# BOUNDARY PREDICATES
# =============================================================================


def daily_boundary(prev: date, curr: date) -> bool:
    """Новый период на каждой новой дате."""
    return prev != curr


def day_of_week(value: date) -> int:
    """День недели 0-6, воскресенье = 0."""
    return (value.weekday() + 1) % 7


def weekly_boundary(prev: date, curr: date) -> bool:
    """
    Новая неделя: день недели "завернулся" (day_of_week(curr) < day_of_week(prev)).

    Неделя идёт с воскресенья по субботу.
    """
    return day_of_week(curr) < day_of_week(prev)


def monthly_boundary(prev: date, curr: date) -> bool:
    """Новый период при смене месяца или года."""
    return prev.month != curr.month or prev.year != curr.year


def annual_boundary(prev: date, curr: date) -> bool:
    """Новый период при смене календарного года."""
    return prev.year != curr.year


def quarter_index(value: date, offset: int = 0) -> int:
    """Номер квартала 0-3 со сдвигом: floor(((month0 - offset) mod 12) / 3)."""
    return ((value.month - 1 - offset) % 12) // 3


def half_index(value: date, offset: int = 0) -> int:
    """Номер полугодия 0-1 со сдвигом: floor(((month0 - offset) mod 12) / 6)."""
    return ((value.month - 1 - offset) % 12) // 6


def quarterly_boundary(offset: int = 0) -> BoundaryPredicate:
    """
    Предикат границы квартала для сдвига offset (0-2).

    После квартального фильтра в каждом квартале остаётся ровно один месяц,
    поэтому смена года между точками с одинаковым номером квартала
    тоже означает новый квартал.
    """
    offset = offset % 3

    def boundary(prev: date, curr: date) -> bool:
        return (
            quarter_index(prev, offset) != quarter_index(curr, offset)
            or prev.year != curr.year
        )

    return boundary


def semi_annual_boundary(offset: int = 0) -> BoundaryPredicate:
    """Предикат границы полугодия для сдвига offset (0-5)."""
    offset = offset % 6

    def boundary(prev: date, curr: date) -> bool:
        return (
            half_index(prev, offset) != half_index(curr, offset)
            or prev.year != curr.year
        )

    return boundary


# =============================================================================
# MONTH FILTERS
# =============================================================================


def is_quarter_month(value: date, offset: int = 0) -> bool:
    """
    Месяц входит в квартальную выборку для сдвига offset.

    offset=0: март, июнь, сентябрь, декабрь
    offset=1: февраль, май, август, ноябрь
    offset=2: январь, апрель, июль, октябрь
    """
    return (value.month + (offset % 3)) % 3 == 0


def is_semi_annual_month(value: date, offset: int = 0) -> bool:
    """Месяц входит в полугодовую выборку (offset=0: июнь и декабрь)."""
    return (value.month + (offset % 6)) % 6 == 0


def is_bi_monthly_month(value: date) -> bool:
    """Чётные месяцы: февраль, апрель, ..., декабрь."""
    return value.month % 2 == 0


# =============================================================================
# FREQUENCY DETECTION
# =============================================================================


def detect_frequency(
    refpers: Sequence[date],
    config: Optional[FrequencyDetectionConfig] = None,
) -> Optional[Frequency]:
    """
    Определение доминирующей частоты по медианному шагу между refper.

    Args:
        refpers: Упорядоченные по возрастанию даты
        config: Пороги (default: FrequencyDetectionConfig())

    Returns:
        Frequency или None, если точек меньше двух
    """
    config = config or FrequencyDetectionConfig()

    gaps = [(curr - prev).days for prev, curr in zip(refpers, refpers[1:])]
    if not gaps:
        return None

    median_gap = statistics.median(gaps)
    for frequency, max_gap in config.thresholds():
        if median_gap <= max_gap:
            return frequency

    return Frequency.QUINQUENNIAL


# =============================================================================
# SAME PERIOD PREVIOUS YEAR
# =============================================================================


def cycle_key(value: date, frequency: Frequency) -> Hashable:
    """
    Ключ отчётного периода для поиска того же периода годом ранее.

    Для месячной и более редких частот период идентифицируется парой
    (год, месяц), так что 2019-03-31 и 2018-03-31 сопоставляются
    независимо от дня месяца. Для дневной и недельной частоты ключ сама дата.
    """
    if frequency in (Frequency.DAILY, Frequency.WEEKLY):
        return value
    return (value.year, value.month)


def previous_cycle_key(value: date, frequency: Frequency) -> Hashable:
    """
    Ключ периода ровно на один годовой цикл раньше.

    - weekly: 52 недели назад (тот же день недели)
    - daily: та же календарная дата годом ранее
    - остальные: (год - 1, месяц)
    """
    if frequency == Frequency.WEEKLY:
        return value - timedelta(weeks=PERIODS_PER_YEAR[Frequency.WEEKLY])
    if frequency == Frequency.DAILY:
        return previous_year(value)
    return (value.year - 1, value.month)
