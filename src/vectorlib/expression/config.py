"""
Конфигурация движка выражений.
"""

from dataclasses import dataclass, field
from typing import Dict, Final

# Приоритеты операторов: * и / связывают сильнее + и -
DEFAULT_OPERATOR_PRIORITIES: Final[Dict[str, int]] = {
    "*": 2,
    "/": 2,
    "+": 1,
    "-": 1,
}


@dataclass(frozen=True)
class ExpressionConfig:
    """
    Конфигурация токенизатора и парсера.

    operator_priorities: приоритеты операторов для shunting-yard;
    не-операторы на вершине стека (скобки) имеют приоритет 0.
    vector_marker: префикс идентификатора вектора (без учёта регистра).
    """
    operator_priorities: Dict[str, int] = field(
        default_factory=lambda: dict(DEFAULT_OPERATOR_PRIORITIES)
    )
    vector_marker: str = "v"

    def priority(self, symbol: str) -> int:
        return self.operator_priorities.get(symbol, 0)

    def is_operator(self, symbol: str) -> bool:
        return symbol in self.operator_priorities
