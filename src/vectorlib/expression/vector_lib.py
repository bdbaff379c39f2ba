"""
VectorLib — фасад движка векторных выражений

Вычисляет выражения над именованными векторами:

    VectorLib().evaluate("(v1 + v2) * (2*v3)", {"1": v1, "2": v2, "3": v3})

Pipeline: validate_brackets → tokenize → to_postfix → build_tree → evaluate.

Также содержит генераторы векторов заданной частоты по списку значений.
"""

import logging
from datetime import date, timedelta
from typing import Callable, Iterable, List, Mapping, Optional

from vectorlib.core.contracts import validate_structural_error
from vectorlib.core.dates import RefperLike, add_months, end_of_month, parse_refper
from vectorlib.core.domain.vector import Vector, Value
from vectorlib.expression.config import ExpressionConfig
from vectorlib.expression.exceptions import ExpressionSyntaxError
from vectorlib.expression.parser import to_postfix
from vectorlib.expression.state_machine import (
    DIGITS,
    ExpressionStateMachine,
    StructuralError,
    TokenizeResult,
)
from vectorlib.expression.tree import EvaluationResult, build_tree

logger = logging.getLogger(__name__)

NextDateFn = Callable[[date], date]


class VectorLib:
    """
    Разбор, проверка и вычисление векторных выражений.

    Args:
        config: Конфигурация токенизатора/парсера (default: ExpressionConfig())
    """

    def __init__(self, config: Optional[ExpressionConfig] = None):
        self.config = config or ExpressionConfig()
        self.state_machine = ExpressionStateMachine(self.config)

    # =========================================================================
    # EXPRESSIONS
    # =========================================================================

    def _tokenize(self, expression: str) -> TokenizeResult:
        """Токенизация; структурная ошибка проверяется по контракту structural_error."""
        result = self.state_machine.tokenize(expression)
        if result.error is not None:
            validate_structural_error(result.error.model_dump(mode="json"))
        return result

    def validate(self, expression: str) -> Optional[StructuralError]:
        """
        Структурная проверка выражения без вычисления.

        Returns:
            Первая StructuralError или None, если выражение корректно

        Examples:
            >>> VectorLib().validate("((v1)")
            StructuralError(type=<StructuralErrorType.BRACKET: 'bracket'>, position=5)
        """
        return self._tokenize(expression).error

    def evaluate(self, expression: str, vectors: Mapping[str, Vector]) -> EvaluationResult:
        """
        Вычисление выражения.

        Args:
            expression: Выражение над векторами "v<id>" и числами
            vectors: Словарь id → Vector (id без маркера: "1" для "v1")

        Returns:
            Vector, либо число для выражения без векторов

        Raises:
            ExpressionSyntaxError: Структурная ошибка с позицией
                ("Error parsing character at position N",
                "Invalid bracket at position N")
            ExpressionEvaluationError: Неизвестный вектор, несовместимые
                операнды, деление скаляра на ноль
        """
        result = self._tokenize(expression)
        if result.error is not None:
            raise ExpressionSyntaxError(result.error)

        postfix = to_postfix(result.tokens, self.config)
        tree = build_tree(postfix, vectors, self.config.vector_marker)

        logger.debug("Evaluating %r (postfix: %s)", expression, postfix)
        return tree.evaluate()

    def get_vector_ids(self, expression: str) -> List[str]:
        """
        Уникальные id векторов в порядке первого появления.

        Лёгкий разбор без автомата: маркер (без учёта регистра), за которым
        следует цифра, начинает id; цифры перед маркером в id не входят.

        Examples:
            >>> VectorLib().get_vector_ids("(v1 + v22) * (2*V3)")
            ['1', '22', '3']
            >>> VectorLib().get_vector_ids("1v2")
            ['2']
        """
        marker = self.config.vector_marker.lower()
        chars = [c for c in expression if not c.isspace()]

        ids: List[str] = []
        current: Optional[str] = None

        for i, char in enumerate(chars):
            next_char = chars[i + 1] if i + 1 < len(chars) else None

            if char.lower() == marker and next_char in DIGITS:
                if current:
                    ids.append(current)
                current = ""
            elif current is not None and char in DIGITS:
                current += char
            else:
                if current:
                    ids.append(current)
                current = None

        if current:
            ids.append(current)

        return list(dict.fromkeys(ids))

    # =========================================================================
    # GENERATORS
    # =========================================================================

    def _generate(
        self,
        values: Iterable[Value],
        start: date,
        next_date: NextDateFn,
    ) -> Vector:
        vector = Vector()
        current = start
        for value in values:
            vector.push({"refper": current, "value": value})
            current = next_date(current)
        return vector

    def _generate_by_months(self, values: Iterable[Value], start_date: RefperLike, months: int) -> Vector:
        start = end_of_month(parse_refper(start_date))
        return self._generate(values, start, lambda d: add_months(d, months))

    def generate_daily(self, values: Iterable[Value], start_date: RefperLike) -> Vector:
        """Дневной вектор начиная с start_date."""
        return self._generate(values, parse_refper(start_date), lambda d: d + timedelta(days=1))

    def generate_weekly(self, values: Iterable[Value], start_date: RefperLike) -> Vector:
        """Недельный вектор начиная с start_date (шаг 7 дней)."""
        return self._generate(values, parse_refper(start_date), lambda d: d + timedelta(weeks=1))

    def generate_monthly(self, values: Iterable[Value], start_date: RefperLike) -> Vector:
        """
        Месячный вектор: даты на конец месяца, начиная с месяца start_date.

        Examples:
            >>> VectorLib().generate_monthly([0, 1, 2], "2018-12-30").refper_str(2)
            '2019-02-28'
        """
        return self._generate_by_months(values, start_date, 1)

    def generate_bi_monthly(self, values: Iterable[Value], start_date: RefperLike) -> Vector:
        return self._generate_by_months(values, start_date, 2)

    def generate_quarterly(self, values: Iterable[Value], start_date: RefperLike) -> Vector:
        return self._generate_by_months(values, start_date, 3)

    def generate_semi_annual(self, values: Iterable[Value], start_date: RefperLike) -> Vector:
        return self._generate_by_months(values, start_date, 6)

    def generate_annual(self, values: Iterable[Value], start_date: RefperLike) -> Vector:
        return self._generate_by_months(values, start_date, 12)

    def generate_bi_annual(self, values: Iterable[Value], start_date: RefperLike) -> Vector:
        return self._generate_by_months(values, start_date, 24)

    def generate_tri_annual(self, values: Iterable[Value], start_date: RefperLike) -> Vector:
        return self._generate_by_months(values, start_date, 36)

    def generate_quadrennial(self, values: Iterable[Value], start_date: RefperLike) -> Vector:
        return self._generate_by_months(values, start_date, 48)

    def generate_quinquennial(self, values: Iterable[Value], start_date: RefperLike) -> Vector:
        return self._generate_by_months(values, start_date, 60)
