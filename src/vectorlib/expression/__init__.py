"""
Expression engine для vectorlib

Токенизация (конечный автомат), shunting-yard, дерево выражения и фасад VectorLib.
"""

from vectorlib.expression.config import DEFAULT_OPERATOR_PRIORITIES, ExpressionConfig
from vectorlib.expression.exceptions import (
    ExpressionError,
    ExpressionEvaluationError,
    ExpressionSyntaxError,
)
from vectorlib.expression.parser import is_number, is_vector_id, to_postfix
from vectorlib.expression.state_machine import (
    TRANSITIONS,
    CharClass,
    ExpressionStateMachine,
    StructuralError,
    StructuralErrorType,
    TokenizeResult,
    TokenState,
)
from vectorlib.expression.tree import (
    ExpressionNode,
    OperatorNode,
    ScalarLeaf,
    VectorLeaf,
    apply_operator,
    build_tree,
)
from vectorlib.expression.vector_lib import VectorLib

__all__ = [
    # Config
    "ExpressionConfig",
    "DEFAULT_OPERATOR_PRIORITIES",
    # Tokenizer
    "TokenState",
    "CharClass",
    "TRANSITIONS",
    "StructuralError",
    "StructuralErrorType",
    "TokenizeResult",
    "ExpressionStateMachine",
    # Parser
    "is_number",
    "is_vector_id",
    "to_postfix",
    # Tree
    "ExpressionNode",
    "VectorLeaf",
    "ScalarLeaf",
    "OperatorNode",
    "apply_operator",
    "build_tree",
    # Facade
    "VectorLib",
    # Exceptions
    "ExpressionError",
    "ExpressionSyntaxError",
    "ExpressionEvaluationError",
]
