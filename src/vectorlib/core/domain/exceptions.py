"""
Исключения доменного слоя (Vector и ресемплинг).
"""


class VectorError(Exception):
    """Базовое исключение операций над векторами."""
    pass


class VectorIndexError(VectorError, IndexError):
    """Обращение к позиции за пределами вектора."""
    pass


class VectorLengthError(VectorError, ValueError):
    """
    Запрошено больше точек, чем содержит вектор.

    Возникает в latest_n при n > len(vector).
    """
    pass


class UnknownAggregationModeError(VectorError, KeyError):
    """Неизвестный режим агрегации при понижении частоты."""
    pass
