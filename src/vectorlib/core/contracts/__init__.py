"""
Contract Validation Module

Модуль для валидации JSON контрактов vectorlib (сериализованные векторы
и структурные ошибки выражений).
"""

from .validators import (
    Contract,
    ContractValidator,
    SchemaLoader,
    get_validator,
    validate_structural_error,
    validate_vector,
)

__all__ = [
    # Classes
    "Contract",
    "SchemaLoader",
    "ContractValidator",
    # Functions
    "get_validator",
    "validate_vector",
    "validate_structural_error",
]
