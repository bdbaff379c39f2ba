"""
Frequency resampling для vectorlib

Частоты, календарные границы периодов, определение частоты ряда
и понижение частоты с агрегацией.
"""

from vectorlib.core.frequency import (
    PERIODS_PER_YEAR,
    YEARS_PER_PERIOD,
    Frequency,
    FrequencyDetectionConfig,
    annual_boundary,
    daily_boundary,
    day_of_week,
    detect_frequency,
    is_bi_monthly_month,
    is_quarter_month,
    is_semi_annual_month,
    monthly_boundary,
    quarterly_boundary,
    semi_annual_boundary,
    weekly_boundary,
)
from vectorlib.resampling.aggregation import (
    AGGREGATION_MODES,
    AggregationMode,
    frequency_join,
    frequency_split,
    resample,
    resolve_mode,
    same_period_previous_year_lookup,
)

__all__ = [
    # Frequencies
    "Frequency",
    "PERIODS_PER_YEAR",
    "YEARS_PER_PERIOD",
    "FrequencyDetectionConfig",
    "detect_frequency",
    # Boundary predicates
    "day_of_week",
    "daily_boundary",
    "weekly_boundary",
    "monthly_boundary",
    "quarterly_boundary",
    "semi_annual_boundary",
    "annual_boundary",
    # Month filters
    "is_bi_monthly_month",
    "is_quarter_month",
    "is_semi_annual_month",
    # Aggregation
    "AggregationMode",
    "AGGREGATION_MODES",
    "resolve_mode",
    "frequency_split",
    "frequency_join",
    "resample",
    "same_period_previous_year_lookup",
]
