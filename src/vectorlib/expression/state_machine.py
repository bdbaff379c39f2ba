"""
Expression State Machine — токенизация векторных выражений

Конечный автомат разбирает выражение вида "(v1 + v2) * (2*v3)" на токены:
числа, идентификаторы векторов, операторы и скобки.

Состояния: START, SCALAR, DECIMAL, VECTOR, OPERATOR, OPEN_BRACKET,
CLOSE_BRACKET, END. Каждый символ относится к классу (цифра, знак числа,
десятичная точка, маркер вектора, оператор, скобка, конец строки);
переход определяется таблицей (состояние, класс символа) → состояние.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Позиции ошибок 1-based и указывают на символ исходной строки
   (пробелы пропускаются, но не сдвигают нумерацию)
2. Проверка скобок выполняется до токенизации
3. Минус является унарным только в START/OPERATOR и только перед цифрой
4. Выход из VECTOR и DECIMAL возможен только после цифры ("v+", "1." ошибки)
5. Незавершённое выражение даёт ошибку в позиции последнего непробельного
   символа (0 для пустого выражения)
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Final, FrozenSet, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from vectorlib.expression.config import ExpressionConfig

logger = logging.getLogger(__name__)

Token = Union[int, float, str]

DIGITS: Final[FrozenSet[str]] = frozenset("0123456789")
DECIMAL_POINT: Final[str] = "."
OPEN_BRACKET: Final[str] = "("
CLOSE_BRACKET: Final[str] = ")"
MINUS: Final[str] = "-"


# =============================================================================
# ENUMS
# =============================================================================


class TokenState(str, Enum):
    """Состояние автомата токенизации."""

    START = "start"
    SCALAR = "scalar"
    DECIMAL = "decimal"
    VECTOR = "vector"
    OPERATOR = "operator"
    OPEN_BRACKET = "open_bracket"
    CLOSE_BRACKET = "close_bracket"
    END = "end"


class CharClass(str, Enum):
    """Класс входного символа."""

    DIGIT = "digit"
    SIGN = "sign"  # унарный минус перед числом
    DECIMAL_POINT = "decimal_point"
    VECTOR_MARKER = "vector_marker"
    OPERATOR = "operator"
    OPEN_BRACKET = "open_bracket"
    CLOSE_BRACKET = "close_bracket"
    END = "end"
    OTHER = "other"


class StructuralErrorType(str, Enum):
    """Тип структурной ошибки выражения."""

    TOKEN = "token"
    BRACKET = "bracket"


# =============================================================================
# TRANSITION TABLE
# =============================================================================


_S = TokenState
_C = CharClass

TRANSITIONS: Final[Dict[Tuple[TokenState, CharClass], TokenState]] = {
    # START
    (_S.START, _C.DIGIT): _S.SCALAR,
    (_S.START, _C.SIGN): _S.SCALAR,
    (_S.START, _C.VECTOR_MARKER): _S.VECTOR,
    (_S.START, _C.OPEN_BRACKET): _S.OPEN_BRACKET,
    # SCALAR
    (_S.SCALAR, _C.DIGIT): _S.SCALAR,
    (_S.SCALAR, _C.DECIMAL_POINT): _S.DECIMAL,
    (_S.SCALAR, _C.OPERATOR): _S.OPERATOR,
    (_S.SCALAR, _C.CLOSE_BRACKET): _S.CLOSE_BRACKET,
    (_S.SCALAR, _C.END): _S.END,
    # DECIMAL
    (_S.DECIMAL, _C.DIGIT): _S.DECIMAL,
    (_S.DECIMAL, _C.OPERATOR): _S.OPERATOR,
    (_S.DECIMAL, _C.CLOSE_BRACKET): _S.CLOSE_BRACKET,
    (_S.DECIMAL, _C.END): _S.END,
    # VECTOR
    (_S.VECTOR, _C.DIGIT): _S.VECTOR,
    (_S.VECTOR, _C.OPERATOR): _S.OPERATOR,
    (_S.VECTOR, _C.CLOSE_BRACKET): _S.CLOSE_BRACKET,
    (_S.VECTOR, _C.END): _S.END,
    # OPERATOR
    (_S.OPERATOR, _C.DIGIT): _S.SCALAR,
    (_S.OPERATOR, _C.SIGN): _S.SCALAR,
    (_S.OPERATOR, _C.VECTOR_MARKER): _S.VECTOR,
    (_S.OPERATOR, _C.OPEN_BRACKET): _S.OPEN_BRACKET,
    # OPEN_BRACKET
    (_S.OPEN_BRACKET, _C.DIGIT): _S.SCALAR,
    (_S.OPEN_BRACKET, _C.VECTOR_MARKER): _S.VECTOR,
    (_S.OPEN_BRACKET, _C.OPEN_BRACKET): _S.OPEN_BRACKET,
    # CLOSE_BRACKET
    (_S.CLOSE_BRACKET, _C.OPERATOR): _S.OPERATOR,
    (_S.CLOSE_BRACKET, _C.CLOSE_BRACKET): _S.CLOSE_BRACKET,
    (_S.CLOSE_BRACKET, _C.END): _S.END,
}

# Каждая скобка отдельный токен
BRACKET_STATES: Final[FrozenSet[TokenState]] = frozenset(
    {TokenState.OPEN_BRACKET, TokenState.CLOSE_BRACKET}
)

# Состояния, токен которых обязан заканчиваться цифрой
DIGIT_TERMINATED_STATES: Final[FrozenSet[TokenState]] = frozenset(
    {TokenState.VECTOR, TokenState.DECIMAL}
)

# Состояния, в которых минус перед цифрой начинает число
SIGN_STATES: Final[FrozenSet[TokenState]] = frozenset(
    {TokenState.START, TokenState.OPERATOR}
)


# =============================================================================
# MODELS
# =============================================================================


class StructuralError(BaseModel):
    """
    Структурная ошибка выражения с позицией.

    position 1-based индекс символа в исходной строке; 0 для пустого выражения.
    """

    type: StructuralErrorType = Field(..., description="token | bracket")
    position: int = Field(..., ge=0, description="1-based позиция символа")

    model_config = {"frozen": True}

    @property
    def message(self) -> str:
        """Сообщение об ошибке для пользователя."""
        if self.type == StructuralErrorType.BRACKET:
            return f"Invalid bracket at position {self.position}"
        return f"Error parsing character at position {self.position}"


@dataclass(frozen=True)
class TokenizeResult:
    """Результат токенизации: токены или первая структурная ошибка."""

    tokens: List[Token] = field(default_factory=list)
    error: Optional[StructuralError] = None

    @property
    def is_valid(self) -> bool:
        return self.error is None


# =============================================================================
# STATE MACHINE
# =============================================================================


class ExpressionStateMachine:
    """
    Токенизатор выражений на конечном автомате.

    Экземпляр не хранит состояния между вызовами: каждый tokenize()
    работает с локальными переменными.
    """

    def __init__(self, config: Optional[ExpressionConfig] = None):
        self.config = config or ExpressionConfig()
        self._marker = self.config.vector_marker.lower()

    def classify(
        self,
        state: TokenState,
        char: Optional[str],
        next_char: Optional[str],
    ) -> CharClass:
        """
        Класс символа с учётом контекста.

        Args:
            state: Текущее состояние автомата
            char: Текущий символ (None = конец строки)
            next_char: Следующий непробельный символ (None = нет)
        """
        if char is None:
            return CharClass.END
        if char in DIGITS:
            return CharClass.DIGIT
        if char == MINUS and state in SIGN_STATES and next_char in DIGITS:
            return CharClass.SIGN
        if self.config.is_operator(char):
            return CharClass.OPERATOR
        if char == DECIMAL_POINT:
            return CharClass.DECIMAL_POINT
        if char.lower() == self._marker:
            return CharClass.VECTOR_MARKER
        if char == OPEN_BRACKET:
            return CharClass.OPEN_BRACKET
        if char == CLOSE_BRACKET:
            return CharClass.CLOSE_BRACKET
        return CharClass.OTHER

    def transition(
        self,
        state: TokenState,
        char: Optional[str],
        prev_char: Optional[str],
        next_char: Optional[str],
    ) -> Optional[TokenState]:
        """
        Следующее состояние или None, если переход запрещён.

        Args:
            state: Текущее состояние
            char: Текущий символ (None = конец строки)
            prev_char: Предыдущий непробельный символ
            next_char: Следующий непробельный символ
        """
        next_state = TRANSITIONS.get((state, self.classify(state, char, next_char)))
        if next_state is None:
            return None

        if (
            state in DIGIT_TERMINATED_STATES
            and next_state != state
            and prev_char not in DIGITS
        ):
            return None

        return next_state

    def validate_brackets(self, expression: str) -> Optional[StructuralError]:
        """
        Проверка баланса скобок счётчиком слева направо.

        Returns:
            - лишняя ")" → ошибка в её позиции
            - незакрытая "(" → ошибка в позиции len(expression)
            - None если скобки сбалансированы
        """
        depth = 0
        for position, char in enumerate(expression, start=1):
            if char == OPEN_BRACKET:
                depth += 1
            elif char == CLOSE_BRACKET:
                depth -= 1
                if depth < 0:
                    return StructuralError(type=StructuralErrorType.BRACKET, position=position)

        if depth > 0:
            return StructuralError(type=StructuralErrorType.BRACKET, position=len(expression))

        return None

    def tokenize(self, expression: str) -> TokenizeResult:
        """
        Разбор выражения на токены.

        Args:
            expression: Выражение, например "(v1 + v2) * (2*v3)"

        Returns:
            TokenizeResult с токенами (числа int/float, "v<id>", операторы,
            скобки) или с первой структурной ошибкой

        Examples:
            >>> ExpressionStateMachine().tokenize("2 * V1").tokens
            [2, '*', 'v1']
        """
        bracket_error = self.validate_brackets(expression)
        if bracket_error is not None:
            logger.debug("Bracket error in %r at %d", expression, bracket_error.position)
            return TokenizeResult(error=bracket_error)

        # (1-based позиция в исходной строке, символ)
        chars = [(i, c) for i, c in enumerate(expression, start=1) if not c.isspace()]

        state = TokenState.START
        raw: List[Tuple[TokenState, str]] = []

        for k, (position, char) in enumerate(chars):
            prev_char = chars[k - 1][1] if k > 0 else None
            next_char = chars[k + 1][1] if k + 1 < len(chars) else None

            next_state = self.transition(state, char, prev_char, next_char)
            if next_state is None:
                return self._token_error(expression, position)

            if next_state != state or next_state in BRACKET_STATES:
                raw.append((next_state, char))
            else:
                raw[-1] = (state, raw[-1][1] + char)
            state = next_state

        last_position, last_char = chars[-1] if chars else (0, None)
        if self.transition(state, None, last_char, None) != TokenState.END:
            return self._token_error(expression, last_position)

        return TokenizeResult(tokens=self._finalize(raw))

    def _token_error(self, expression: str, position: int) -> TokenizeResult:
        logger.debug("Token error in %r at %d", expression, position)
        return TokenizeResult(
            error=StructuralError(type=StructuralErrorType.TOKEN, position=position)
        )

    def _finalize(self, raw: List[Tuple[TokenState, str]]) -> List[Token]:
        # SCALAR + DECIMAL → одно десятичное число
        merged: List[Tuple[TokenState, str]] = []
        for state, text in raw:
            if state == TokenState.DECIMAL and merged and merged[-1][0] == TokenState.SCALAR:
                merged[-1] = (TokenState.DECIMAL, merged[-1][1] + text)
            else:
                merged.append((state, text))

        tokens: List[Token] = []
        for state, text in merged:
            if state == TokenState.SCALAR:
                tokens.append(int(text))
            elif state == TokenState.DECIMAL:
                tokens.append(float(text))
            elif state == TokenState.VECTOR:
                tokens.append(self._marker + text[1:])
            else:
                tokens.append(text)
        return tokens
