"""
Parser — преобразование инфиксных токенов в постфиксную запись

Алгоритм shunting-yard:
- стек операторов инициализируется "(", к потоку токенов добавляется ")"
- числа и идентификаторы векторов сразу уходят в выход
- "(" кладётся в стек; ")" выталкивает операторы до парной "("
- оператор выталкивает из стека все операторы с приоритетом >= своего

Операторы одного приоритета сворачиваются слева направо.
"""

from typing import List, Optional, Sequence

from vectorlib.expression.config import ExpressionConfig
from vectorlib.expression.exceptions import ExpressionEvaluationError
from vectorlib.expression.state_machine import CLOSE_BRACKET, OPEN_BRACKET, Token


def is_number(token: Token) -> bool:
    """Числовой токен (int/float, но не bool)."""
    return isinstance(token, (int, float)) and not isinstance(token, bool)


def is_vector_id(token: Token, marker: str = "v") -> bool:
    """Токен вида "v<digits>"."""
    return (
        isinstance(token, str)
        and len(token) > len(marker)
        and token[: len(marker)].lower() == marker.lower()
        and token[len(marker):].isdigit()
    )


def to_postfix(
    tokens: Sequence[Token],
    config: Optional[ExpressionConfig] = None,
) -> List[Token]:
    """
    Инфиксные токены → постфиксная запись.

    Args:
        tokens: Результат ExpressionStateMachine.tokenize()
        config: Приоритеты операторов (default: ExpressionConfig())

    Returns:
        Токены в постфиксном порядке

    Raises:
        ExpressionEvaluationError: Несбалансированные скобки или
            неизвестный токен

    Examples:
        >>> to_postfix([1, "+", 2, "*", 3])
        [1, 2, 3, '*', '+']
    """
    config = config or ExpressionConfig()

    stack: List[Token] = [OPEN_BRACKET]
    output: List[Token] = []

    for token in [*tokens, CLOSE_BRACKET]:
        if is_number(token) or is_vector_id(token, config.vector_marker):
            output.append(token)
        elif token == OPEN_BRACKET:
            stack.append(token)
        elif token == CLOSE_BRACKET:
            while stack and stack[-1] != OPEN_BRACKET:
                output.append(stack.pop())
            if not stack:
                raise ExpressionEvaluationError("Unbalanced brackets in expression")
            stack.pop()
        elif isinstance(token, str) and config.is_operator(token):
            while stack and config.priority(stack[-1]) >= config.priority(token):
                output.append(stack.pop())
            stack.append(token)
        else:
            raise ExpressionEvaluationError(f"Unknown token {token!r}")

    if stack:
        raise ExpressionEvaluationError("Unbalanced brackets in expression")

    return output
