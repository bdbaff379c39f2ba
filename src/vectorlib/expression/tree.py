"""
Expression Tree — дерево выражения и его вычисление

Узлы образуют закрытый набор типов:
- VectorLeaf: вектор из переданного словаря
- ScalarLeaf: числовая константа
- OperatorNode: бинарный оператор с левым и правым поддеревом

Диспетчеризация операндов при вычислении:
- Vector ⊗ Vector → Vector.operate (выравнивание по общим refper)
- Vector ⊗ скаляр, скаляр ⊗ Vector → поточечно op(значение, скаляр):
  скаляр всегда правый операнд, так что "10 - v1" даёт v1 - 10
- скаляр ⊗ скаляр → обычная арифметика

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. None в точке вектора даёт None в результате
2. Поточечное деление на ноль даёт None; скалярное поднимает ошибку
3. Построение из постфикса: первый pop правый потомок, второй левый
"""

import operator
from dataclasses import dataclass
from typing import Callable, Dict, Final, List, Mapping, Optional, Sequence, Union

from vectorlib.core.domain.vector import Vector
from vectorlib.core.math.numerical_safeguards import safe_divide
from vectorlib.expression.exceptions import ExpressionEvaluationError
from vectorlib.expression.parser import is_number, is_vector_id
from vectorlib.expression.state_machine import Token

Scalar = Union[int, float]
EvaluationResult = Union[Vector, Scalar]

# Поточечные операции над значениями векторов
POINT_OPERATIONS: Final[Dict[str, Callable[[float, float], Optional[float]]]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": safe_divide,
}

# Операции над двумя скалярами
SCALAR_OPERATIONS: Final[Dict[str, Callable[[Scalar, Scalar], Scalar]]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
}


def _is_scalar(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def apply_operator(symbol: str, left: EvaluationResult, right: EvaluationResult) -> EvaluationResult:
    """
    Применение оператора к вычисленным операндам.

    Raises:
        ExpressionEvaluationError: Неизвестный оператор, несовместимые
            операнды или деление скаляра на ноль
    """
    if symbol not in POINT_OPERATIONS:
        raise ExpressionEvaluationError(f"Unsupported operator {symbol!r}")

    point_operation = POINT_OPERATIONS[symbol]

    if isinstance(left, Vector) and isinstance(right, Vector):
        return left.operate(right, point_operation)

    if isinstance(left, Vector) and _is_scalar(right):
        return left.period_transformation(lambda value: point_operation(value, right))

    if _is_scalar(left) and isinstance(right, Vector):
        return right.period_transformation(lambda value: point_operation(value, left))

    if _is_scalar(left) and _is_scalar(right):
        if symbol == "/" and right == 0:
            raise ExpressionEvaluationError("Division by zero")
        return SCALAR_OPERATIONS[symbol](left, right)

    raise ExpressionEvaluationError(
        f"Unsupported operand types for {symbol}: "
        f"{type(left).__name__} and {type(right).__name__}"
    )


# =============================================================================
# NODES
# =============================================================================


@dataclass(frozen=True)
class VectorLeaf:
    """Лист с вектором."""

    vector: Vector

    def evaluate(self) -> EvaluationResult:
        return self.vector.copy()


@dataclass(frozen=True)
class ScalarLeaf:
    """Лист с числовой константой."""

    value: Scalar

    def evaluate(self) -> EvaluationResult:
        return self.value


@dataclass(frozen=True)
class OperatorNode:
    """Бинарный оператор."""

    symbol: str
    left: Optional["ExpressionNode"] = None
    right: Optional["ExpressionNode"] = None

    def evaluate(self) -> EvaluationResult:
        if self.left is None or self.right is None:
            raise ExpressionEvaluationError("Could not evaluate operator node")
        return apply_operator(self.symbol, self.left.evaluate(), self.right.evaluate())


ExpressionNode = Union[VectorLeaf, ScalarLeaf, OperatorNode]


# =============================================================================
# TREE CONSTRUCTION
# =============================================================================


def build_tree(
    postfix: Sequence[Token],
    vectors: Mapping[str, Vector],
    marker: str = "v",
) -> ExpressionNode:
    """
    Построение дерева из постфиксной записи.

    Args:
        postfix: Результат to_postfix()
        vectors: Словарь id → Vector, id без маркера ("1" для "v1")
        marker: Маркер идентификатора вектора

    Returns:
        Корень дерева

    Raises:
        ExpressionEvaluationError: Неизвестный вектор или некорректная
            постфиксная запись (нехватка или избыток операндов)
    """
    stack: List[ExpressionNode] = []

    for token in postfix:
        if is_number(token):
            stack.append(ScalarLeaf(token))
        elif is_vector_id(token, marker):
            vector_id = token[len(marker):]
            if vector_id not in vectors:
                raise ExpressionEvaluationError(f"Vector {marker}{vector_id} is not defined")
            stack.append(VectorLeaf(vectors[vector_id]))
        else:
            if len(stack) < 2:
                raise ExpressionEvaluationError(f"Missing operand for operator {token!r}")
            right = stack.pop()
            left = stack.pop()
            stack.append(OperatorNode(symbol=token, left=left, right=right))

    if len(stack) != 1:
        raise ExpressionEvaluationError("Malformed expression")

    return stack[0]
