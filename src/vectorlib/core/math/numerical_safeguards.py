"""
Numerical Safeguards — безопасные числовые примитивы

Модуль обеспечивает численную устойчивость операций над значениями векторов:
- Безопасное деление с защитой от деления на ноль (результат None, а не Inf)
- NaN/Inf санитизация
- Округление half-away-from-zero и banker's rounding (half-to-even)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Деление на ноль никогда не поднимает исключение (возвращается fallback)
2. Округление нуля всегда даёт 0, а не -0
3. None (отсутствие значения) никогда не превращается в число
"""

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Optional


# =============================================================================
# NaN/Inf САНИТИЗАЦИЯ
# =============================================================================


def is_valid_float(value: float) -> bool:
    """
    Проверка, является ли float валидным (не NaN, не Inf).

    Args:
        value: Проверяемое значение

    Returns:
        True если значение конечное, False если NaN или Inf
    """
    return math.isfinite(value)


def sanitize_float(value: float, fallback: Optional[float] = None) -> Optional[float]:
    """
    Санитизация float: замена NaN/Inf на fallback значение.

    Args:
        value: Исходное значение
        fallback: Значение для замены NaN/Inf (default: None)

    Returns:
        value если валидное, иначе fallback

    Examples:
        >>> sanitize_float(10.0)
        10.0
        >>> sanitize_float(float('nan')) is None
        True
        >>> sanitize_float(float('-inf'), fallback=-1.0)
        -1.0
    """
    if is_valid_float(value):
        return value
    return fallback


# =============================================================================
# БЕЗОПАСНОЕ ДЕЛЕНИЕ
# =============================================================================


def safe_divide(
    numerator: float,
    denominator: float,
    fallback: Optional[float] = None,
) -> Optional[float]:
    """
    Безопасное деление с защитой от деления на ноль и NaN/Inf.

    В отличие от обычного деления никогда не поднимает ZeroDivisionError:
    точки ряда, где знаменатель равен нулю, получают fallback (по умолчанию
    None, то есть "нет данных за период").

    Args:
        numerator: Числитель
        denominator: Знаменатель
        fallback: Значение при делении на ноль (default: None)

    Returns:
        Результат деления или fallback

    Examples:
        >>> safe_divide(10.0, 2.0)
        5.0
        >>> safe_divide(10.0, 0.0) is None
        True
        >>> safe_divide(10.0, 0.0, fallback=0.0)
        0.0
    """
    if denominator == 0:
        return fallback

    try:
        result = numerator / denominator
    except (ZeroDivisionError, OverflowError):
        return fallback

    return sanitize_float(result, fallback=fallback)


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


def validate_decimals(decimals: int) -> None:
    """
    Валидация количества знаков после запятой.

    Raises:
        ValueError: Если decimals не целое или отрицательное
    """
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise ValueError(f"decimals must be an integer, got {decimals!r}")

    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")


def round_half_away_from_zero(value: float, decimals: int = 0) -> float:
    """
    Стандартное округление: половина округляется от нуля.

    Масштабирование выполняется через десятичное представление значения,
    а не через умножение float, поэтому 1.555 округляется до 1.56
    (умножение 1.555 * 100 дало бы 155.49999...).

    Args:
        value: Значение для округления
        decimals: Количество знаков после запятой (default: 0)

    Returns:
        Округлённое значение; ноль всегда возвращается как 0.0 (не -0.0)

    Examples:
        >>> round_half_away_from_zero(1.555, 2)
        1.56
        >>> round_half_away_from_zero(1.554, 2)
        1.55
        >>> round_half_away_from_zero(-2.5)
        -3.0
    """
    validate_decimals(decimals)

    if value == 0 or not is_valid_float(value):
        return 0.0 if value == 0 else value

    exact = Decimal(repr(value))
    quantum = Decimal(1).scaleb(-decimals)
    with localcontext() as ctx:
        # quantize требует точности не меньше числа цифр результата
        ctx.prec = max(64, exact.adjusted() + decimals + 2)
        rounded = float(exact.quantize(quantum, rounding=ROUND_HALF_UP))

    # Нормализация -0.0 → 0.0
    return rounded if rounded != 0 else 0.0


def round_half_even(value: float, decimals: int = 0) -> float:
    """
    Banker's rounding: половина округляется к ближайшему чётному.

    Алгоритм:
        x = value * 10^decimals
        если |x| mod 1 == 0.5 → выбирается чётное из двух соседних целых
        иначе → обычное округление
        результат = x_rounded * 10^-decimals

    Args:
        value: Значение для округления
        decimals: Количество знаков после запятой (default: 0)

    Returns:
        Округлённое значение; ноль всегда возвращается как 0.0 (не -0.0)

    Examples:
        >>> round_half_even(1.5)
        2.0
        >>> round_half_even(2.5)
        2.0
        >>> round_half_even(-1.5)
        -2.0
    """
    validate_decimals(decimals)

    if value == 0 or not is_valid_float(value):
        return 0.0 if value == 0 else value

    scale = 10 ** decimals
    x = value * scale
    rounded = math.floor(x + 0.5)

    # Ничья: floor(x + 0.5) всегда берёт верхнего соседа, нечётный сдвигаем вниз
    if abs(x) % 1 == 0.5 and rounded % 2 != 0:
        rounded -= 1

    result = rounded / scale
    return result if result != 0 else 0.0
