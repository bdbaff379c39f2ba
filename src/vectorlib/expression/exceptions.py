"""
Исключения движка выражений.
"""

from vectorlib.expression.state_machine import StructuralError


class ExpressionError(Exception):
    """Базовое исключение разбора и вычисления выражений."""
    pass


class ExpressionSyntaxError(ExpressionError, ValueError):
    """
    Синтаксическая ошибка выражения (символ или скобка).

    Атрибут error содержит StructuralError с типом и 1-based позицией;
    сообщение совпадает с StructuralError.message.
    """

    def __init__(self, error: StructuralError):
        super().__init__(error.message)
        self.error = error


class ExpressionEvaluationError(ExpressionError, RuntimeError):
    """
    Ошибка вычисления синтаксически корректного выражения.

    Неизвестный идентификатор вектора, несовместимые операнды,
    деление скаляра на ноль, нарушенная структура дерева.
    """
    pass
