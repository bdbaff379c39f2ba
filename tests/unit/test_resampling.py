"""
Тесты для Frequency Resampling

Проверяет:
1. Предикаты границ периодов и фильтры месяцев
2. Определение частоты по медианному шагу
3. frequency_split / frequency_join и режимы агрегации
4. Понижение частоты: weekly ... quinquennial (включая сдвиги)
5. Поиск того же периода годом ранее
"""

from datetime import date

import pytest

from vectorlib.core.domain import DataPoint, UnknownAggregationModeError, Vector
from vectorlib.resampling import (
    AggregationMode,
    Frequency,
    FrequencyDetectionConfig,
    day_of_week,
    detect_frequency,
    frequency_join,
    frequency_split,
    is_bi_monthly_month,
    is_quarter_month,
    is_semi_annual_month,
    monthly_boundary,
    quarterly_boundary,
    resample,
    resolve_mode,
    same_period_previous_year_lookup,
    weekly_boundary,
)


def make_vector(*pairs) -> Vector:
    return Vector([{"refper": refper, "value": value} for refper, value in pairs])


def monthly_series(start_year: int, end_year: int) -> Vector:
    """Месячный ряд на 1-е число, значения 1, 2, 3, ..."""
    refpers = [
        f"{year}-{month:02d}-01"
        for year in range(start_year, end_year + 1)
        for month in range(1, 13)
    ]
    return make_vector(*zip(refpers, range(1, len(refpers) + 1)))


def december_series(start_year: int, end_year: int) -> Vector:
    """Годовой ряд на 1 декабря, значения 1, 2, 3, ..."""
    years = range(start_year, end_year + 1)
    return make_vector(*[(f"{year}-12-01", i) for i, year in enumerate(years, start=1)])


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def twice_monthly():
    """Две точки в месяц, декабрь 2018 → февраль 2019."""
    return make_vector(
        ("2018-12-01", 1),
        ("2018-12-12", 2),
        ("2019-01-01", 3),
        ("2019-01-12", 4),
        ("2019-02-01", 5),
        ("2019-02-12", 6),
    )


@pytest.fixture
def business_days():
    """Рабочие дни двух недель февраля 2019 (пн-пт)."""
    refpers = [f"2019-02-{day:02d}" for day in (11, 12, 13, 14, 15, 18, 19, 20, 21, 22)]
    return make_vector(*zip(refpers, range(1, 11)))


@pytest.fixture
def nov_to_apr():
    """Месячный ряд ноябрь 2018 → апрель 2019, значения 1-6."""
    refpers = ["2018-11-01", "2018-12-01", "2019-01-01", "2019-02-01", "2019-03-01", "2019-04-01"]
    return make_vector(*zip(refpers, range(1, 7)))


# =============================================================================
# ГРАНИЦЫ И ФИЛЬТРЫ
# =============================================================================


class TestBoundaries:
    """Тесты предикатов границ"""

    def test_weekly_boundary_sunday_start(self) -> None:
        """Суббота → воскресенье начинает новую неделю"""
        assert weekly_boundary(date(2019, 2, 16), date(2019, 2, 17))
        assert not weekly_boundary(date(2019, 2, 17), date(2019, 2, 18))
        assert not weekly_boundary(date(2019, 2, 11), date(2019, 2, 15))

    def test_weekly_boundary_day_of_week_only(self) -> None:
        """Граница определяется только днём недели"""
        assert not weekly_boundary(date(2019, 2, 11), date(2019, 2, 19))
        assert weekly_boundary(date(2019, 2, 15), date(2019, 2, 18))

    def test_day_of_week(self) -> None:
        """Воскресенье 0, суббота 6"""
        assert day_of_week(date(2019, 2, 17)) == 0
        assert day_of_week(date(2019, 2, 18)) == 1
        assert day_of_week(date(2019, 2, 16)) == 6

    def test_monthly_boundary(self) -> None:
        """Смена месяца или года"""
        assert monthly_boundary(date(2018, 12, 31), date(2019, 1, 1))
        assert monthly_boundary(date(2018, 1, 1), date(2019, 1, 1))
        assert not monthly_boundary(date(2019, 1, 1), date(2019, 1, 31))

    def test_quarterly_boundary_year_change(self) -> None:
        """Один номер квартала в разных годах разные кварталы"""
        boundary = quarterly_boundary(0)
        assert boundary(date(2018, 3, 1), date(2019, 3, 1))
        assert boundary(date(2018, 3, 1), date(2018, 6, 1))
        assert not boundary(date(2018, 3, 1), date(2018, 3, 20))

    @pytest.mark.parametrize(
        "offset,months",
        [
            (0, [3, 6, 9, 12]),
            (1, [2, 5, 8, 11]),
            (2, [1, 4, 7, 10]),
        ],
    )
    def test_quarter_months(self, offset, months) -> None:
        """Квартальные месяцы для каждого сдвига"""
        selected = [m for m in range(1, 13) if is_quarter_month(date(2019, m, 1), offset)]
        assert selected == months

    def test_semi_annual_and_bi_monthly_months(self) -> None:
        """Полугодовые и двухмесячные месяцы"""
        assert [m for m in range(1, 13) if is_semi_annual_month(date(2019, m, 1))] == [6, 12]
        assert [m for m in range(1, 13) if is_semi_annual_month(date(2019, m, 1), 1)] == [5, 11]
        assert [m for m in range(1, 13) if is_bi_monthly_month(date(2019, m, 1))] == [2, 4, 6, 8, 10, 12]


# =============================================================================
# ОПРЕДЕЛЕНИЕ ЧАСТОТЫ
# =============================================================================


class TestDetectFrequency:
    """Тесты detect_frequency"""

    @pytest.mark.parametrize(
        "refpers,expected",
        [
            ([date(2019, 1, 1), date(2019, 1, 2), date(2019, 1, 3)], Frequency.DAILY),
            ([date(2019, 1, 7), date(2019, 1, 14), date(2019, 1, 21)], Frequency.WEEKLY),
            ([date(2019, 1, 31), date(2019, 2, 28), date(2019, 3, 31)], Frequency.MONTHLY),
            ([date(2019, 2, 1), date(2019, 4, 1), date(2019, 6, 1)], Frequency.BI_MONTHLY),
            ([date(2019, 3, 31), date(2019, 6, 30), date(2019, 9, 30)], Frequency.QUARTERLY),
            ([date(2018, 6, 1), date(2018, 12, 1), date(2019, 6, 1)], Frequency.SEMI_ANNUAL),
            ([date(2017, 12, 31), date(2018, 12, 31), date(2019, 12, 31)], Frequency.ANNUAL),
            ([date(2010, 1, 1), date(2015, 1, 1), date(2020, 1, 1)], Frequency.QUINQUENNIAL),
        ],
    )
    def test_detection(self, refpers, expected) -> None:
        """Частота по медианному шагу"""
        assert detect_frequency(refpers) == expected

    def test_median_ignores_single_gap(self) -> None:
        """Один пропуск не меняет частоту"""
        refpers = [date(2019, m, 1) for m in (1, 2, 3, 7, 8, 9)]
        assert detect_frequency(refpers) == Frequency.MONTHLY

    def test_too_few_points(self) -> None:
        """Меньше двух точек → None"""
        assert detect_frequency([]) is None
        assert detect_frequency([date(2019, 1, 1)]) is None

    def test_custom_config(self) -> None:
        """Пороги настраиваются"""
        config = FrequencyDetectionConfig(daily_max_gap_days=10.0)
        refpers = [date(2019, 1, 7), date(2019, 1, 14)]
        assert detect_frequency(refpers, config) == Frequency.DAILY

    def test_vector_method(self) -> None:
        """Vector.detect_frequency"""
        assert monthly_series(2018, 2018).detect_frequency() == Frequency.MONTHLY


# =============================================================================
# SPLIT / JOIN
# =============================================================================


class TestSplitJoin:
    """Тесты frequency_split, frequency_join, resolve_mode"""

    def test_split(self, twice_monthly) -> None:
        """Разбиение по месяцам"""
        runs = frequency_split(twice_monthly, monthly_boundary)
        assert [len(run) for run in runs] == [2, 2, 2]
        assert runs[1].values() == [3, 4]

    def test_split_empty(self) -> None:
        """Пустой вход → пустой список"""
        assert frequency_split(Vector(), monthly_boundary) == []

    def test_join(self, twice_monthly) -> None:
        """Свёртка каждого периода"""
        runs = frequency_split(twice_monthly, monthly_boundary)
        assert frequency_join(runs, AggregationMode.SUM).values() == [3, 7, 11]

    def test_resolve_mode_by_name(self) -> None:
        """Имя режима без учёта регистра"""
        assert resolve_mode("SUM") is resolve_mode(AggregationMode.SUM)

    def test_unknown_mode(self, twice_monthly) -> None:
        """Неизвестный режим"""
        with pytest.raises(UnknownAggregationModeError):
            resolve_mode("median")
        with pytest.raises(KeyError):
            twice_monthly.monthly("median")

    def test_callable_mode(self, twice_monthly) -> None:
        """Пользовательская функция агрегации"""
        result = twice_monthly.monthly(lambda run: run.get(0))
        assert result.equals(
            make_vector(("2018-12-01", 1), ("2019-01-01", 3), ("2019-02-01", 5))
        )


# =============================================================================
# RESAMPLING
# =============================================================================


class TestDailyWeekly:
    """Тесты daily и weekly"""

    def test_daily_merges_same_date(self) -> None:
        """Точки одной даты сворачиваются"""
        vector = make_vector(("2019-01-01", 1), ("2019-01-01", 2), ("2019-01-02", 3))
        result = resample(vector, Frequency.DAILY, "sum")
        assert result.equals(make_vector(("2019-01-01", 3), ("2019-01-02", 3)))

    def test_weekly_last(self, business_days) -> None:
        """Последняя точка каждой недели"""
        assert business_days.weekly().equals(
            make_vector(("2019-02-15", 5), ("2019-02-22", 10))
        )

    def test_weekly_sum(self, business_days) -> None:
        """Сумма за неделю"""
        assert business_days.weekly("sum").values() == [15, 40]

    def test_weekend_grouping(self) -> None:
        """Суббота закрывает неделю, воскресенье открывает следующую"""
        vector = make_vector(
            ("2019-02-15", 1), ("2019-02-16", 2), ("2019-02-17", 3), ("2019-02-18", 4)
        )
        assert vector.weekly().equals(make_vector(("2019-02-16", 2), ("2019-02-18", 4)))

    def test_same_weekday_out_of_order(self) -> None:
        """Одинаковый день недели не разрывает период"""
        refpers = [
            "2019-02-11", "2018-02-12", "2019-02-13", "2019-02-14", "2019-02-15",
            "2019-02-18", "2019-02-19", "2019-02-20", "2019-02-21", "2019-02-22",
        ]
        vector = make_vector(*zip(refpers, range(1, 11)))
        assert vector.weekly().equals(make_vector(("2019-02-15", 5), ("2019-02-22", 10)))


class TestMonthly:
    """Тесты monthly и bi_monthly"""

    @pytest.mark.parametrize(
        "mode,expected",
        [
            ("last", [2, 4, 6]),
            ("sum", [3, 7, 11]),
            ("average", [1.5, 3.5, 5.5]),
            ("max", [2, 4, 6]),
            ("min", [1, 3, 5]),
        ],
    )
    def test_monthly_modes(self, twice_monthly, mode, expected) -> None:
        """Режимы агрегации; refper последней точки месяца"""
        result = twice_monthly.monthly(mode)
        assert result.values() == expected
        assert [r.isoformat() for r in result.refpers()] == ["2018-12-12", "2019-01-12", "2019-02-12"]

    def test_aggregate_keeps_extras(self) -> None:
        """Атрибуты берутся из последней точки периода"""
        vector = Vector(
            [
                {"refper": "2019-01-01", "value": 1, "status": "A"},
                {"refper": "2019-01-15", "value": 2, "status": "B"},
            ]
        )
        assert vector.monthly("sum").get(0).extras == {"status": "B"}

    def test_monthly_none_propagates(self) -> None:
        """None в периоде даёт None в сумме"""
        vector = make_vector(("2019-01-01", 1), ("2019-01-15", None), ("2019-02-01", 3))
        assert vector.monthly("sum").values() == [None, 3]

    def test_bi_monthly(self, nov_to_apr) -> None:
        """Только чётные месяцы"""
        assert nov_to_apr.bi_monthly().equals(
            make_vector(("2018-12-01", 2), ("2019-02-01", 4), ("2019-04-01", 6))
        )

    def test_empty_vector(self) -> None:
        """Пустой вектор остаётся пустым"""
        assert Vector().monthly().equals(Vector())
        assert Vector().annual().equals(Vector())


class TestQuarterlySemiAnnual:
    """Тесты quarterly и semi_annual"""

    def test_quarterly(self) -> None:
        """Месяцы вне квартальной выборки отбрасываются"""
        vector = make_vector(
            ("2018-01-01", 1), ("2018-02-01", 2),
            ("2019-03-01", 3), ("2019-06-01", 4), ("2019-09-01", 5), ("2019-12-01", 6),
        )
        assert vector.quarterly().equals(
            make_vector(("2019-03-01", 3), ("2019-06-01", 4), ("2019-09-01", 5), ("2019-12-01", 6))
        )

    @pytest.mark.parametrize(
        "offset,expected",
        [
            (0, [("2018-12-01", 2), ("2019-03-01", 5)]),
            (1, [("2018-11-01", 1), ("2019-02-01", 4)]),
            (2, [("2019-01-01", 3), ("2019-04-01", 6)]),
        ],
    )
    def test_quarterly_offsets(self, nov_to_apr, offset, expected) -> None:
        """Сдвиг квартала через границу года"""
        assert nov_to_apr.quarterly(offset=offset).equals(make_vector(*expected))

    def test_quarterly_daily_data(self) -> None:
        """Несколько точек в квартальном месяце сворачиваются"""
        vector = make_vector(
            ("2019-03-01", 1), ("2019-03-15", 2), ("2019-06-01", 3), ("2019-06-30", 4)
        )
        assert vector.quarterly("sum").equals(make_vector(("2019-03-15", 3), ("2019-06-30", 7)))

    def test_same_quarter_different_years(self) -> None:
        """Мартовские точки разных лет не сливаются"""
        vector = make_vector(("2018-03-01", 1), ("2019-03-01", 2))
        assert vector.quarterly("sum").values() == [1, 2]

    def test_semi_annual(self) -> None:
        """Июнь и декабрь"""
        result = monthly_series(2018, 2019).semi_annual()
        assert result.equals(
            make_vector(
                ("2018-06-01", 6), ("2018-12-01", 12), ("2019-06-01", 18), ("2019-12-01", 24)
            )
        )

    def test_semi_annual_offset(self) -> None:
        """Сдвиг 1: май и ноябрь"""
        result = monthly_series(2018, 2019).semi_annual(offset=1)
        assert result.values() == [5, 11, 17, 23]

    def test_convert_to_frequency_by_name(self, nov_to_apr) -> None:
        """Частота и режим строками"""
        result = nov_to_apr.convert_to_frequency("quarterly", "sum", offset=2)
        assert result.values() == [3, 6]


class TestAnnual:
    """Тесты annual"""

    def test_single_year(self) -> None:
        """Полный год → одна точка"""
        assert monthly_series(2018, 2018).annual().equals(make_vector(("2018-12-01", 12)))

    def test_semi_annual_data(self) -> None:
        """Июнь/декабрь за три года"""
        vector = make_vector(
            ("2018-06-01", 1), ("2018-12-01", 2),
            ("2019-06-01", 3), ("2019-12-01", 4),
            ("2020-06-01", 5), ("2020-12-01", 6),
        )
        assert vector.annual().equals(
            make_vector(("2018-12-01", 2), ("2019-12-01", 4), ("2020-12-01", 6))
        )
        assert vector.annual("sum").values() == [3, 7, 11]

    def test_incomplete_last_year_dropped(self) -> None:
        """Год с другим последним месяцем отбрасывается"""
        refpers = [
            "2018-01-01", "2018-04-01", "2018-07-01", "2018-10-01",
            "2019-01-01", "2019-04-01", "2019-07-01", "2019-10-01",
            "2020-01-01",
        ]
        vector = make_vector(*zip(refpers, range(1, 10)))
        assert vector.annual().equals(make_vector(("2018-10-01", 4), ("2019-10-01", 8)))


class TestMultiYear:
    """Тесты bi_annual ... quinquennial"""

    def test_bi_annual(self) -> None:
        """Группы по 2 года от последнего; 2018 отбрасывается"""
        result = december_series(2018, 2030).bi_annual()
        assert [r.year for r in result.refpers()] == [2020, 2022, 2024, 2026, 2028, 2030]
        assert result.values() == [3, 5, 7, 9, 11, 13]

    def test_bi_annual_quarterly_data(self) -> None:
        """Квартальные данные за три года → один двухлетний период"""
        refpers = [f"{year}-{month:02d}-01" for year in (2018, 2019, 2020) for month in (3, 6, 9, 12)]
        vector = make_vector(*zip(refpers, range(1, 13)))

        assert vector.bi_annual().equals(make_vector(("2020-12-01", 12)))
        assert vector.bi_annual("sum").values() == [sum(range(5, 13))]

    def test_tri_annual(self) -> None:
        result = december_series(2018, 2030).tri_annual()
        assert [r.year for r in result.refpers()] == [2021, 2024, 2027, 2030]

    def test_quadrennial(self) -> None:
        result = december_series(2018, 2030).quadrennial()
        assert [r.year for r in result.refpers()] == [2022, 2026, 2030]

    def test_quinquennial(self) -> None:
        result = december_series(2018, 2030).quinquennial()
        assert [r.year for r in result.refpers()] == [2025, 2030]
        assert result.values() == [8, 13]

    def test_not_enough_years(self) -> None:
        """Меньше N лет → пустой результат"""
        assert december_series(2018, 2020).quadrennial().equals(Vector())


# =============================================================================
# SAME PERIOD PREVIOUS YEAR
# =============================================================================


class TestPreviousYearLookup:
    """Тесты same_period_previous_year_lookup"""

    def test_monthly_lookup(self) -> None:
        """Каждая точка второго года находит пару"""
        vector = monthly_series(2018, 2019)
        previous = same_period_previous_year_lookup(vector)

        assert len(previous) == 24
        assert previous[:12] == [None] * 12
        assert all(isinstance(p, DataPoint) for p in previous[12:])
        assert previous[12].refper == date(2018, 1, 1)

    def test_end_of_month_days_differ(self) -> None:
        """Февраль 28/29 сопоставляется по месяцу"""
        vector = make_vector(
            ("2019-02-28", 1), ("2019-03-31", 2), ("2020-02-29", 3), ("2020-03-31", 4)
        )
        previous = same_period_previous_year_lookup(
            vector, FrequencyDetectionConfig(monthly_max_gap_days=400.0)
        )
        assert previous[2].refper == date(2019, 2, 28)
        assert previous[3].refper == date(2019, 3, 31)

    def test_daily_lookup(self) -> None:
        """Дневной ряд: та же дата годом ранее"""
        vector = make_vector(("2018-01-01", 1), ("2018-01-02", 2), ("2019-01-01", 3), ("2019-01-02", 4))
        config = FrequencyDetectionConfig(daily_max_gap_days=200.0)
        previous = same_period_previous_year_lookup(vector, config)
        assert [p.value if p else None for p in previous] == [None, None, 1, 2]
