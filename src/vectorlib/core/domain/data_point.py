"""
DataPoint — Модель точки временного ряда

Immutable Pydantic модель одной точки вектора: reference period, значение и
произвольные пользовательские атрибуты.

Пользовательские атрибуты (extra fields) непрозрачны для движка: каждая
трансформация переносит их в новую точку без изменений. Сериализованный
формат совместим с JSON Schema (core/contracts/schema/vector.json).
"""

from datetime import date
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from vectorlib.core.dates import format_refper, parse_refper


# =============================================================================
# DATA POINT MODEL
# =============================================================================


class DataPoint(BaseModel):
    """
    Точка временного ряда.

    Immutable модель (frozen=True). Любая трансформация создаёт новую точку
    через with_value(), сохраняя refper и пользовательские атрибуты.

    value=None означает "нет данных за период" и отличается от нуля.
    """

    refper: date = Field(..., description="Reference period (дата без времени)")
    value: Optional[float] = Field(None, description="Значение (None = нет данных)")

    model_config = {"frozen": True, "extra": "allow"}

    @field_validator("refper", mode="before")
    @classmethod
    def parse_refper_input(cls, v: Any) -> date:
        """Строки и datetime приводятся к date (local midnight)."""
        return parse_refper(v)

    @property
    def extras(self) -> Dict[str, Any]:
        """Пользовательские атрибуты точки."""
        return dict(self.model_extra or {})

    @property
    def refper_str(self) -> str:
        """Reference period в формате yyyy-mm-dd."""
        return format_refper(self.refper)

    def with_value(self, value: Optional[float]) -> "DataPoint":
        """
        Новая точка с тем же refper и пользовательскими атрибутами.

        Args:
            value: Новое значение (None допустим)

        Returns:
            Новый экземпляр DataPoint
        """
        return self.model_copy(update={"value": value})

    def equals(self, other: "DataPoint") -> bool:
        """
        Структурное равенство точек: совпадают refper и value.

        Пользовательские атрибуты не участвуют в сравнении.
        """
        return self.refper == other.refper and self.value == other.value

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация в dict: refper строкой, value как есть, extras."""
        data: Dict[str, Any] = {"refper": self.refper_str, "value": self.value}
        for key, item in self.extras.items():
            data.setdefault(key, item)
        return data
