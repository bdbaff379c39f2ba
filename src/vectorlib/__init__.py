"""
vectorlib — временные ряды (векторы) и векторные выражения.

Основные точки входа:
- Vector / DataPoint: ряд точек refper/value и операции над ним
- VectorLib: проверка и вычисление выражений вида "(v1 + v2) * (2*v3)"
"""

from vectorlib.core.domain import (
    DataPoint,
    UnknownAggregationModeError,
    Vector,
    VectorError,
    VectorIndexError,
    VectorLengthError,
)
from vectorlib.core.frequency import Frequency, FrequencyDetectionConfig
from vectorlib.expression import (
    ExpressionConfig,
    ExpressionError,
    ExpressionEvaluationError,
    ExpressionSyntaxError,
    StructuralError,
    VectorLib,
)
from vectorlib.resampling import AggregationMode

__version__ = "0.1.0"

__all__ = [
    # Domain
    "DataPoint",
    "Vector",
    # Resampling
    "Frequency",
    "FrequencyDetectionConfig",
    "AggregationMode",
    # Expressions
    "VectorLib",
    "ExpressionConfig",
    "StructuralError",
    # Exceptions
    "VectorError",
    "VectorIndexError",
    "VectorLengthError",
    "UnknownAggregationModeError",
    "ExpressionError",
    "ExpressionSyntaxError",
    "ExpressionEvaluationError",
]
