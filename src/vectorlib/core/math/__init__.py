"""
Core math modules для vectorlib

Числовые примитивы с гарантией стабильности для операций над векторами.
"""

from vectorlib.core.math.numerical_safeguards import (
    # NaN/Inf sanitization
    is_valid_float,
    sanitize_float,
    # Safe division
    safe_divide,
    # Rounding
    round_half_away_from_zero,
    round_half_even,
    validate_decimals,
)

__all__ = [
    # NaN/Inf sanitization
    "is_valid_float",
    "sanitize_float",
    # Safe division
    "safe_divide",
    # Rounding
    "round_half_away_from_zero",
    "round_half_even",
    "validate_decimals",
]
