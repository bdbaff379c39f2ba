"""
JSON Schema Contract Validators

Контракты сериализованных форм vectorlib, проверяемые через jsonschema:
- Contract.VECTOR: Vector.json() (массив точек refper/value)
- Contract.STRUCTURAL_ERROR: StructuralError из VectorLib.validate/evaluate

Схемы лежат в core/contracts/schema/<contract>.json и поставляются как
package data. Каждая схема загружается и проходит meta-validation один раз;
валидаторы кэшируются на уровне модуля.
"""

import json
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Union

import jsonschema
from jsonschema import Draft202012Validator

SCHEMA_DIR = Path(__file__).parent / "schema"


# =============================================================================
# CONTRACTS
# =============================================================================


class Contract(str, Enum):
    """Контракт и одноимённый файл схемы."""

    VECTOR = "vector"
    STRUCTURAL_ERROR = "structural_error"


ContractLike = Union[Contract, str]


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик схем контрактов из schema/ с кэшем по контракту.

    Raises:
        RuntimeError: Если каталог схем не найден (битая установка пакета)
    """

    def __init__(self, schema_dir: Path = SCHEMA_DIR):
        if not schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {schema_dir}")
        self._schema_dir = schema_dir
        self._schemas: Dict[Contract, Dict[str, Any]] = {}

    def load_schema(self, contract: ContractLike) -> Dict[str, Any]:
        """
        Схема контракта после meta-validation.

        Raises:
            ValueError: Неизвестный контракт или файл не является JSON Schema
            FileNotFoundError: Файл схемы отсутствует
        """
        contract = Contract(contract)
        if contract in self._schemas:
            return self._schemas[contract]

        schema_path = self._schema_dir / f"{contract.value}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_path.name}: {e}") from e

        self._schemas[contract] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Проверка документа против схемы одного контракта.

    Args:
        contract: Contract или его имя ("vector", "structural_error")
        loader: Загрузчик схем (default: общий загрузчик модуля)
    """

    def __init__(self, contract: ContractLike, loader: SchemaLoader = _SCHEMA_LOADER):
        self.contract = Contract(contract)
        self.schema = loader.load_schema(self.contract)
        self._validator = Draft202012Validator(self.schema)

    def validate(self, data: Any) -> None:
        """
        Raises:
            ValidationError: Первое нарушение схемы
        """
        self._validator.validate(data)


@lru_cache(maxsize=None)
def get_validator(contract: Contract) -> ContractValidator:
    """Общий ContractValidator контракта."""
    return ContractValidator(contract)


def validate_vector(data: Any) -> None:
    """
    Валидация сериализованного вектора (json.loads(vector.json())).

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    get_validator(Contract.VECTOR).validate(data)


def validate_structural_error(data: Dict[str, Any]) -> None:
    """
    Валидация структурной ошибки (StructuralError.model_dump(mode="json")).

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    get_validator(Contract.STRUCTURAL_ERROR).validate(data)
