"""
Domain models and value objects.

Contains the time series model: DataPoint, Vector and domain exceptions.
"""

from vectorlib.core.domain.data_point import DataPoint
from vectorlib.core.domain.exceptions import (
    UnknownAggregationModeError,
    VectorError,
    VectorIndexError,
    VectorLengthError,
)
from vectorlib.core.domain.vector import (
    Vector,
    difference,
    percentage_change,
)

__all__ = [
    # Data point model
    "DataPoint",
    # Vector
    "Vector",
    "percentage_change",
    "difference",
    # Exceptions
    "VectorError",
    "VectorIndexError",
    "VectorLengthError",
    "UnknownAggregationModeError",
]
