"""
Vector — Упорядоченный временной ряд точек DataPoint

Vector хранит последовательность точек, отсортированных по refper по
возрастанию, и предоставляет:
- Доступ по индексу и выборки (range, latest_n, filter, find)
- Выравнивание по общим refper (intersection) и поточечные операции (operate)
- Агрегаты (sum, average, max, min, reduce)
- Трансформации period-over-period, "тот же период годом ранее" и сложная ставка
- Округление (half-away-from-zero и banker's)
- Понижение частоты (weekly ... quinquennial)
- JSON сериализацию с проверкой по JSON Schema

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Все трансформации возвращают новый Vector; исходный не меняется.
   Единственная мутирующая операция push().
2. Порядок точек сохраняется; результат содержит только refper,
   присутствующие во входе.
3. Пользовательские атрибуты точки переносятся в результат без изменений.
4. value=None распространяется через арифметику (None op x = None),
   деление на ноль даёт None.
5. Порядок точек по refper предполагается вызывающим и не проверяется.
"""

import json
from collections.abc import Mapping
from datetime import date
from functools import reduce as functools_reduce
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from vectorlib.core.dates import RefperLike, parse_refper
from vectorlib.core.domain.data_point import DataPoint
from vectorlib.core.domain.exceptions import VectorIndexError, VectorLengthError
from vectorlib.core.contracts import validate_vector
from vectorlib.core.frequency import (
    BoundaryPredicate,
    Frequency,
    FrequencyDetectionConfig,
    annual_boundary,
    detect_frequency,
)
from vectorlib.core.math.numerical_safeguards import (
    round_half_away_from_zero,
    round_half_even,
    safe_divide,
)

if TYPE_CHECKING:
    from vectorlib.resampling.aggregation import AggregationModeLike

PointLike = Union[DataPoint, Mapping]
Value = Optional[float]
BinaryOperation = Callable[[float, float], Value]


def _to_point(point: PointLike) -> DataPoint:
    if isinstance(point, DataPoint):
        return point
    return DataPoint.model_validate(dict(point))


def _combine(point: DataPoint, other_value: Value, operation: BinaryOperation) -> DataPoint:
    """Поточечная операция с распространением None; refper и атрибуты от point."""
    if point.value is None or other_value is None:
        return point.with_value(None)
    return point.with_value(operation(point.value, other_value))


def _add(acc: Value, current: Value) -> Value:
    if acc is None or current is None:
        return None
    return acc + current


def percentage_change(current: float, last: float) -> Value:
    """
    Процентное изменение (current - last) / |last| * 100.

    Returns:
        None если last == 0
    """
    ratio = safe_divide(current - last, abs(last))
    return None if ratio is None else ratio * 100


def difference(current: float, last: float) -> float:
    """Разность current - last."""
    return current - last


# =============================================================================
# VECTOR
# =============================================================================


class Vector:
    """
    Временной ряд: список DataPoint, упорядоченный по refper.

    Args:
        data: Точки ряда: DataPoint или dict вида
            {"refper": "2018-01-01", "value": 1, ...прочие атрибуты}

    Examples:
        >>> v = Vector([{"refper": "2018-01-01", "value": 1}])
        >>> v.value(0)
        1.0
    """

    def __init__(self, data: Optional[Iterable[PointLike]] = None):
        self._data: List[DataPoint] = [_to_point(p) for p in data] if data else []

    @classmethod
    def _from_points(cls, points: Iterable[DataPoint]) -> "Vector":
        vector = cls()
        vector._data = list(points)
        return vector

    # -------------------------------------------------------------------------
    # Доступ
    # -------------------------------------------------------------------------

    @property
    def data(self) -> Tuple[DataPoint, ...]:
        """Точки ряда (read-only view)."""
        return tuple(self._data)

    @property
    def length(self) -> int:
        return len(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[DataPoint]:
        return iter(self._data)

    def __getitem__(self, index: Union[int, slice]) -> Union[DataPoint, "Vector"]:
        if isinstance(index, slice):
            return Vector._from_points(self._data[index])
        return self.get(index)

    def __repr__(self) -> str:
        return f"Vector({self.to_list()!r})"

    def get(self, index: int) -> DataPoint:
        """
        Точка по индексу.

        Raises:
            VectorIndexError: Если index вне [0, len)
        """
        if not 0 <= index < len(self._data):
            raise VectorIndexError(
                f"Index {index} out of range for vector of length {len(self._data)}"
            )
        return self._data[index]

    def refper(self, index: int) -> date:
        return self.get(index).refper

    def refper_str(self, index: int) -> str:
        return self.get(index).refper_str

    def value(self, index: int) -> Value:
        return self.get(index).value

    def values(self) -> List[Value]:
        return [p.value for p in self._data]

    def refpers(self) -> List[date]:
        return [p.refper for p in self._data]

    def push(self, point: PointLike) -> "Vector":
        """
        Добавление точки в конец ряда (мутирует вектор).

        Сортировка не выполняется: вызывающий отвечает за порядок refper.
        """
        self._data.append(_to_point(point))
        return self

    def equals(self, other: "Vector", index: Optional[int] = None) -> bool:
        """
        Структурное сравнение (refper и value) с другим вектором.

        Args:
            other: Вектор для сравнения
            index: Если задан, сравнивается только точка с этим индексом

        Raises:
            VectorIndexError: Если index вне диапазона одного из векторов
        """
        if index is not None:
            return self.get(index).equals(other.get(index))

        if len(self) != len(other):
            return False

        return all(a.equals(b) for a, b in zip(self._data, other._data))

    def copy(self) -> "Vector":
        """Глубокая копия: новые точки с копиями пользовательских атрибутов."""
        return Vector._from_points(p.model_copy(deep=True) for p in self._data)

    # -------------------------------------------------------------------------
    # Итерация и выборки
    # -------------------------------------------------------------------------

    def map(self, fn: Callable[[DataPoint], Any]) -> List[Any]:
        return [fn(p) for p in self._data]

    def find(self, predicate: Callable[[DataPoint], bool]) -> Optional[DataPoint]:
        return next((p for p in self._data if predicate(p)), None)

    def some(self, predicate: Callable[[DataPoint], bool]) -> bool:
        return any(predicate(p) for p in self._data)

    def filter(self, predicate: Callable[[DataPoint], bool]) -> "Vector":
        return Vector._from_points(p for p in self._data if predicate(p))

    def range(
        self,
        start: Optional[RefperLike] = None,
        end: Optional[RefperLike] = None,
    ) -> "Vector":
        """
        Точки с refper в [start, end] (включительно).

        Отсутствующая граница не ограничивает выборку.
        """
        start_date = parse_refper(start) if start is not None else None
        end_date = parse_refper(end) if end is not None else None

        return self.filter(
            lambda p: (start_date is None or p.refper >= start_date)
            and (end_date is None or p.refper <= end_date)
        )

    def latest_n(self, n: int) -> "Vector":
        """
        Последние n точек.

        Raises:
            VectorLengthError: Если n > len(vector)
        """
        if n > len(self._data):
            raise VectorLengthError("N > length of vector.")
        if n <= 0:
            return Vector()
        return Vector._from_points(self._data[-n:])

    # -------------------------------------------------------------------------
    # Выравнивание
    # -------------------------------------------------------------------------

    def interoperable(self, other: "Vector") -> bool:
        """True если длины равны и refper совпадают попарно."""
        if len(self) != len(other):
            return False
        return all(a.refper == b.refper for a, b in zip(self._data, other._data))

    def _intersect(self, other: "Vector") -> "Vector":
        # Слияние двух отсортированных рядов; каждая точка other
        # сопоставляется не более одного раза.
        result: List[DataPoint] = []
        other_points = other._data
        j = 0
        for point in self._data:
            while j < len(other_points) and other_points[j].refper < point.refper:
                j += 1
            if j >= len(other_points):
                break
            if other_points[j].refper == point.refper:
                result.append(point)
                j += 1
        return Vector._from_points(result)

    def intersection(
        self,
        other: Union["Vector", Sequence["Vector"], Mapping],
    ) -> Union["Vector", Dict[Any, "Vector"]]:
        """
        Точки self, refper которых присутствует во всех other.

        Args:
            other: Vector, последовательность Vector (пересечение со всеми)
                или Mapping ключ → Vector

        Returns:
            Vector для Vector/последовательности; для Mapping dict с теми же
            ключами, где каждый вектор выровнен на общий с self носитель
        """
        if isinstance(other, Vector):
            return self._intersect(other)

        if isinstance(other, Mapping):
            support = self.intersection(list(other.values()))
            return {key: vector._intersect(support) for key, vector in other.items()}

        return functools_reduce(
            lambda acc, vector: acc._intersect(vector), other, Vector._from_points(self._data)
        )

    # -------------------------------------------------------------------------
    # Агрегаты
    # -------------------------------------------------------------------------

    def reduce(self, fn: Callable[[Any, Value], Any]) -> Any:
        """
        Свёртка значений слева направо; первое значение служит начальным.

        Returns:
            None для пустого вектора
        """
        values = self.values()
        if not values:
            return None
        return functools_reduce(fn, values[1:], values[0])

    def sum(self) -> Value:
        """Сумма значений: 0 для пустого вектора, None если есть пропуск."""
        if not self._data:
            return 0
        return self.reduce(_add)

    def average(self) -> Value:
        """Среднее значение: None для пустого вектора или при пропусках."""
        if not self._data:
            return None
        total = self.sum()
        return None if total is None else total / len(self._data)

    def max(self) -> Value:
        values = self.values()
        if not values or any(v is None for v in values):
            return None
        return max(values)

    def min(self) -> Value:
        values = self.values()
        if not values or any(v is None for v in values):
            return None
        return min(values)

    # -------------------------------------------------------------------------
    # Поточечные операции и трансформации
    # -------------------------------------------------------------------------

    def operate(self, other: "Vector", operation: BinaryOperation) -> "Vector":
        """
        Поточечная операция на общих refper.

        Оба вектора выравниваются через intersection; результат несёт refper
        и атрибуты точек self. Если одно из значений None, результат None.
        """
        left = self._intersect(other)
        right = other._intersect(self)
        return Vector._from_points(
            _combine(a, b.value, operation) for a, b in zip(left._data, right._data)
        )

    def period_transformation(self, fn: Callable[[float], Value]) -> "Vector":
        """Поэлементное преобразование значения; None остаётся None."""
        return Vector._from_points(
            p.with_value(None if p.value is None else fn(p.value)) for p in self._data
        )

    def period_delta_transformation(self, operation: BinaryOperation) -> "Vector":
        """
        operation(current, last) для соседних точек.

        Первая точка всегда получает None.
        """
        points: List[DataPoint] = []
        for i, point in enumerate(self._data):
            if i == 0:
                points.append(point.with_value(None))
                continue
            points.append(_combine(point, self._data[i - 1].value, operation))
        return Vector._from_points(points)

    def period_to_period_percentage_change(self) -> "Vector":
        return self.period_delta_transformation(percentage_change)

    def period_to_period_difference(self) -> "Vector":
        return self.period_delta_transformation(difference)

    def detect_frequency(
        self,
        config: Optional[FrequencyDetectionConfig] = None,
    ) -> Optional[Frequency]:
        """Доминирующая частота ряда (None если точек меньше двух)."""
        return detect_frequency(self.refpers(), config)

    def same_period_previous_year_transformation(
        self,
        operation: BinaryOperation,
        config: Optional[FrequencyDetectionConfig] = None,
    ) -> "Vector":
        """
        operation(current, same_period_last_year) для каждой точки.

        Тот же период годом ранее ищется по календарю с учётом частоты ряда
        (см. resampling.same_period_previous_year_lookup), а не по смещению
        индекса, поэтому пропуски в ряду не сдвигают сопоставление. Точки
        без пары получают None.
        """
        from vectorlib.resampling.aggregation import same_period_previous_year_lookup

        previous_points = same_period_previous_year_lookup(self, config)

        points: List[DataPoint] = []
        for point, previous in zip(self._data, previous_points):
            if previous is None:
                points.append(point.with_value(None))
            else:
                points.append(_combine(point, previous.value, operation))
        return Vector._from_points(points)

    def same_period_previous_year_percentage_change(
        self,
        config: Optional[FrequencyDetectionConfig] = None,
    ) -> "Vector":
        return self.same_period_previous_year_transformation(percentage_change, config)

    def same_period_previous_year_difference(
        self,
        config: Optional[FrequencyDetectionConfig] = None,
    ) -> "Vector":
        return self.same_period_previous_year_transformation(difference, config)

    def compound_rate(self, boundary: BoundaryPredicate) -> "Vector":
        """
        Сложная ставка внутри периодов: ((1 + R)^n - 1) * 100.

        R = (current - last) / last для соседних точек, n = число точек в
        периоде, которому принадлежит current. Периоды задаются boundary
        (см. resampling.frequency_split). Первая точка каждого периода
        сравнивается с последней точкой предыдущего; первая точка ряда
        получает None, как и точки с last == 0.

        Examples:
            Квартальный ряд 100, 110, 121, 133.1 с annual_boundary даёт
            [None, 46.41, 46.41, 46.41]
        """
        from vectorlib.resampling.aggregation import frequency_split

        points: List[DataPoint] = []
        previous: Optional[DataPoint] = None

        for chunk in frequency_split(self, boundary):
            periods = len(chunk)

            def compound(current: float, last: float, periods: int = periods) -> Value:
                rate = safe_divide(current - last, last)
                return None if rate is None else ((1 + rate) ** periods - 1) * 100

            seeded = chunk if previous is None else Vector._from_points((previous, *chunk._data))
            transformed = seeded.period_delta_transformation(compound)._data
            points.extend(transformed if previous is None else transformed[1:])
            previous = chunk._data[-1]

        return Vector._from_points(points)

    def annualized_compound_rate(self) -> "Vector":
        """Сложная ставка в пределах календарного года."""
        return self.compound_rate(annual_boundary)

    # -------------------------------------------------------------------------
    # Округление
    # -------------------------------------------------------------------------

    def round(self, decimals: int = 0) -> "Vector":
        """Округление half-away-from-zero (1.555 → 1.56 при decimals=2)."""
        return self.period_transformation(lambda v: round_half_away_from_zero(v, decimals))

    def round_bankers(self, decimals: int = 0) -> "Vector":
        """Banker's rounding (half-to-even): 1.5 → 2, 2.5 → 2."""
        return self.period_transformation(lambda v: round_half_even(v, decimals))

    # -------------------------------------------------------------------------
    # Понижение частоты
    # -------------------------------------------------------------------------

    def convert_to_frequency(
        self,
        frequency: Union[Frequency, str],
        mode: "AggregationModeLike" = "last",
        offset: int = 0,
    ) -> "Vector":
        """
        Понижение частоты ряда.

        Args:
            frequency: Целевая частота (Frequency или её строковое имя)
            mode: Режим агрегации периода ("last", "sum", "average", "max",
                "min") или функция Vector → DataPoint
            offset: Сдвиг месяцев для quarterly / semi_annual

        Raises:
            UnknownAggregationModeError: Неизвестное имя режима
        """
        # Локальный импорт: resampling зависит от Vector
        from vectorlib.resampling.aggregation import resample

        return resample(self, Frequency(frequency), mode=mode, offset=offset)

    def weekly(self, mode: "AggregationModeLike" = "last") -> "Vector":
        return self.convert_to_frequency(Frequency.WEEKLY, mode)

    def monthly(self, mode: "AggregationModeLike" = "last") -> "Vector":
        return self.convert_to_frequency(Frequency.MONTHLY, mode)

    def bi_monthly(self, mode: "AggregationModeLike" = "last") -> "Vector":
        return self.convert_to_frequency(Frequency.BI_MONTHLY, mode)

    def quarterly(self, mode: "AggregationModeLike" = "last", offset: int = 0) -> "Vector":
        return self.convert_to_frequency(Frequency.QUARTERLY, mode, offset)

    def semi_annual(self, mode: "AggregationModeLike" = "last", offset: int = 0) -> "Vector":
        return self.convert_to_frequency(Frequency.SEMI_ANNUAL, mode, offset)

    def annual(self, mode: "AggregationModeLike" = "last") -> "Vector":
        return self.convert_to_frequency(Frequency.ANNUAL, mode)

    def bi_annual(self, mode: "AggregationModeLike" = "last") -> "Vector":
        return self.convert_to_frequency(Frequency.BI_ANNUAL, mode)

    def tri_annual(self, mode: "AggregationModeLike" = "last") -> "Vector":
        return self.convert_to_frequency(Frequency.TRI_ANNUAL, mode)

    def quadrennial(self, mode: "AggregationModeLike" = "last") -> "Vector":
        return self.convert_to_frequency(Frequency.QUADRENNIAL, mode)

    def quinquennial(self, mode: "AggregationModeLike" = "last") -> "Vector":
        return self.convert_to_frequency(Frequency.QUINQUENNIAL, mode)

    # -------------------------------------------------------------------------
    # Сериализация
    # -------------------------------------------------------------------------

    def to_list(self) -> List[Dict[str, Any]]:
        """Список dict с refper в формате yyyy-mm-dd."""
        return [p.to_dict() for p in self._data]

    def json(self) -> str:
        """JSON строка: массив объектов {"refper", "value", ...атрибуты}."""
        return json.dumps(self.to_list())

    @classmethod
    def from_json(cls, text: str) -> "Vector":
        """
        Разбор JSON массива точек с проверкой по схеме vector.json.

        Raises:
            json.JSONDecodeError: Некорректный JSON
            jsonschema.ValidationError: Документ не соответствует схеме
        """
        data = json.loads(text)
        validate_vector(data)
        return cls(data)
