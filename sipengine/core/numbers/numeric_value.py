"""
NumericValue — tagged union plain float / extended Decimal.

Одно значение, одна из двух репрезентаций:
- PLAIN: native float, finite, abs(x) < SAFE_NUMBER_THRESHOLD (1e15)
- EXTENDED: decimal.Decimal в отдельном контексте движка
  (precision 34, диапазон экспоненты MAX_EMAX/MIN_EMIN), поэтому 1e1000000
  не переполняется

ПРАВИЛА ПРОДВИЖЕНИЯ:
1. plain ⊕ plain считается во float; если результат non-finite или
   достигает порога, операция пересчитывается в Decimal (результат EXTENDED)
2. Любой EXTENDED операнд продвигает второй операнд до Decimal
3. Деление на ноль и невалидная степень возвращают ZERO, никогда не бросают
4. NaN/Inf никогда не хранятся ни в одной репрезентации
"""

import logging
import math
import operator
from dataclasses import dataclass
from decimal import (
    MAX_EMAX,
    MIN_EMIN,
    ROUND_FLOOR,
    ROUND_HALF_EVEN,
    Context,
    Decimal,
    DecimalException,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)
from enum import Enum
from fractions import Fraction
from typing import Any, Callable, ClassVar, Final, Optional

from sipengine.core.math.numerical_safeguards import (
    SAFE_NUMBER_THRESHOLD,
    is_safe_number,
)

logger = logging.getLogger(__name__)

# =============================================================================
# DECIMAL CONTEXT
# =============================================================================

# Значащие цифры extended-репрезентации
DECIMAL_PRECISION: Final[int] = 34

# Контекст движка: никогда не используется глобальный decimal.getcontext()
ENGINE_CONTEXT: Final[Context] = Context(
    prec=DECIMAL_PRECISION,
    rounding=ROUND_HALF_EVEN,
    Emax=MAX_EMAX,
    Emin=MIN_EMIN,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

SAFE_DECIMAL_THRESHOLD: Final[Decimal] = Decimal(repr(SAFE_NUMBER_THRESHOLD))


def float_to_decimal(value: float) -> Decimal:
    """
    Конверсия float → Decimal через кратчайший repr.

    Decimal(0.6) хранит двоичный артефакт 0.59999999999999997779...,
    Decimal(repr(0.6)) хранит ровно 0.6.
    """
    return Decimal(repr(float(value)))


class NumericKind(str, Enum):
    """Репрезентация NumericValue."""

    PLAIN = "PLAIN"
    EXTENDED = "EXTENDED"


@dataclass(frozen=True, eq=False)
class NumericValue:
    """
    Неизменяемое число неограниченной магнитуды.

    Attributes:
        kind: PLAIN или EXTENDED
        raw: float (PLAIN) или Decimal (EXTENDED)

    Examples:
        >>> NumericValue.plain(2.0) * 3
        NumericValue(PLAIN, 6.0)
        >>> str(NumericValue.plain(1e14) * 1e86)
        '1e+100'
    """

    kind: NumericKind
    raw: float | Decimal

    ZERO: ClassVar["NumericValue"]
    ONE: ClassVar["NumericValue"]

    def __post_init__(self) -> None:
        if self.kind is NumericKind.PLAIN:
            if isinstance(self.raw, bool) or not isinstance(self.raw, (int, float)):
                raise TypeError(f"PLAIN value must be a float, got {type(self.raw).__name__}")
            value = float(self.raw)
            if not is_safe_number(value):
                raise ValueError(
                    f"PLAIN value must be finite and below {SAFE_NUMBER_THRESHOLD}, got {value}"
                )
            # -0.0 → 0.0
            object.__setattr__(self, "raw", value + 0.0)
            return

        if not isinstance(self.raw, Decimal):
            raise TypeError(f"EXTENDED value must be a Decimal, got {type(self.raw).__name__}")
        if not self.raw.is_finite():
            raise ValueError(f"EXTENDED value must be finite, got {self.raw}")
        try:
            rounded = ENGINE_CONTEXT.plus(self.raw)
        except DecimalException as exc:
            raise ValueError(f"EXTENDED value out of engine range: {self.raw!r}") from exc
        object.__setattr__(self, "raw", rounded)

    # -------------------------------------------------------------------------
    # Конструкторы
    # -------------------------------------------------------------------------

    @classmethod
    def plain(cls, value: float) -> "NumericValue":
        return cls(NumericKind.PLAIN, float(value))

    @classmethod
    def extended(cls, value: Decimal) -> "NumericValue":
        return cls(NumericKind.EXTENDED, value)

    @classmethod
    def from_decimal(cls, value: Decimal) -> "NumericValue":
        """
        Выбор репрезентации по магнитуде конечного Decimal.

        Raises:
            ValueError: если value NaN/Inf
        """
        if not value.is_finite():
            raise ValueError(f"value must be finite, got {value}")
        if abs(value) < SAFE_DECIMAL_THRESHOLD:
            as_float = float(value)
            # 999999999999999.99 округляется во float до самого порога
            if is_safe_number(as_float):
                return cls(NumericKind.PLAIN, as_float)
        return cls(NumericKind.EXTENDED, value)

    # -------------------------------------------------------------------------
    # Предикаты
    # -------------------------------------------------------------------------

    @property
    def is_extended(self) -> bool:
        return self.kind is NumericKind.EXTENDED

    @property
    def is_zero(self) -> bool:
        return self.raw == 0

    @property
    def is_negative(self) -> bool:
        return self.raw < 0

    @property
    def is_positive(self) -> bool:
        return self.raw > 0

    # -------------------------------------------------------------------------
    # Конверсии
    # -------------------------------------------------------------------------

    def to_decimal(self) -> Decimal:
        if self.kind is NumericKind.PLAIN:
            return float_to_decimal(self.raw)
        return self.raw

    def to_float(self) -> float:
        """float-проекция; для EXTENDED может быть inf. Только для внутренних расчётов."""
        return float(self.raw)

    def to_number(self) -> float:
        return self.to_float()

    def to_string(self) -> str:
        return str(self)

    def to_plain(self) -> float | str:
        """
        Сериализуемая форма: float если безопасен, иначе lossless строка.

        Examples:
            >>> NumericValue.plain(3.0).to_plain()
            3.0
            >>> NumericValue.extended(Decimal("1.5e100")).to_plain()
            '1.5e+100'
        """
        as_float = self.to_float()
        if is_safe_number(as_float):
            return as_float
        return str(self)

    # -------------------------------------------------------------------------
    # Арифметика
    # -------------------------------------------------------------------------

    def _combine(
        self,
        other: Any,
        name: str,
        float_op: Callable[[float, float], float],
        decimal_op: Callable[[Decimal, Decimal], Decimal],
    ) -> "NumericValue":
        rhs = _coerce(other)

        if self.kind is NumericKind.PLAIN and rhs.kind is NumericKind.PLAIN:
            try:
                result = float_op(self.raw, rhs.raw)
            except (OverflowError, ValueError, ZeroDivisionError):
                result = math.inf  # пересчёт в Decimal ниже
            if is_safe_number(result):
                return NumericValue(NumericKind.PLAIN, result)

        try:
            exact = decimal_op(self.to_decimal(), rhs.to_decimal())
        except DecimalException as exc:
            logger.debug(
                "%s(%s, %s) has no finite result (%s), returning zero",
                name,
                self,
                rhs,
                type(exc).__name__,
            )
            return NumericValue.ZERO

        if not exact.is_finite():
            logger.debug("%s(%s, %s) is not finite, returning zero", name, self, rhs)
            return NumericValue.ZERO

        return NumericValue(NumericKind.EXTENDED, exact)

    def add(self, other: Any) -> "NumericValue":
        return self._combine(other, "add", operator.add, ENGINE_CONTEXT.add)

    def subtract(self, other: Any) -> "NumericValue":
        return self._combine(other, "subtract", operator.sub, ENGINE_CONTEXT.subtract)

    def multiply(self, other: Any) -> "NumericValue":
        return self._combine(other, "multiply", operator.mul, ENGINE_CONTEXT.multiply)

    def divide(self, other: Any) -> "NumericValue":
        """Деление; делитель 0 → ZERO."""
        rhs = _coerce(other)
        if rhs.is_zero:
            logger.debug("divide(%s, 0) returning zero", self)
            return NumericValue.ZERO
        return self._combine(rhs, "divide", operator.truediv, ENGINE_CONTEXT.divide)

    def pow(self, exponent: Any) -> "NumericValue":
        """
        Возведение в степень.

        x ** 0 = 1 для любого x. Отрицательное основание с дробной
        степенью, 0 ** отрицательное и переполнение контекста → ZERO.
        """
        rhs = _coerce(exponent)
        if rhs.is_zero:
            return NumericValue.ONE
        return self._combine(rhs, "pow", math.pow, ENGINE_CONTEXT.power)

    def neg(self) -> "NumericValue":
        if self.kind is NumericKind.PLAIN:
            return NumericValue(NumericKind.PLAIN, -self.raw)
        return NumericValue(NumericKind.EXTENDED, ENGINE_CONTEXT.minus(self.raw))

    def abs(self) -> "NumericValue":
        if self.kind is NumericKind.PLAIN:
            return NumericValue(NumericKind.PLAIN, abs(self.raw))
        return NumericValue(NumericKind.EXTENDED, ENGINE_CONTEXT.abs(self.raw))

    def floor(self) -> "NumericValue":
        if self.kind is NumericKind.PLAIN:
            return NumericValue(NumericKind.PLAIN, float(math.floor(self.raw)))
        return NumericValue(
            NumericKind.EXTENDED,
            self.raw.to_integral_value(rounding=ROUND_FLOOR, context=ENGINE_CONTEXT),
        )

    def sqrt(self) -> "NumericValue":
        if self.is_negative:
            logger.debug("sqrt(%s) of negative value, returning zero", self)
            return NumericValue.ZERO
        if self.kind is NumericKind.PLAIN:
            return NumericValue(NumericKind.PLAIN, math.sqrt(self.raw))
        return NumericValue(NumericKind.EXTENDED, ENGINE_CONTEXT.sqrt(self.raw))

    def ln(self) -> "NumericValue":
        """Натуральный логарифм; для x <= 0 → ZERO."""
        if not self.is_positive:
            logger.debug("ln(%s) of non-positive value, returning zero", self)
            return NumericValue.ZERO
        if self.kind is NumericKind.PLAIN:
            return NumericValue(NumericKind.PLAIN, math.log(self.raw))
        return NumericValue.from_decimal(ENGINE_CONTEXT.ln(self.raw))

    def log10(self) -> "NumericValue":
        """Десятичный логарифм (оценка магнитуды); для x <= 0 → ZERO."""
        if not self.is_positive:
            logger.debug("log10(%s) of non-positive value, returning zero", self)
            return NumericValue.ZERO
        if self.kind is NumericKind.PLAIN:
            return NumericValue(NumericKind.PLAIN, math.log10(self.raw))
        return NumericValue.from_decimal(ENGINE_CONTEXT.log10(self.raw))

    # -------------------------------------------------------------------------
    # Сравнения
    # -------------------------------------------------------------------------

    def compare(self, other: Any) -> int:
        """-1, 0, 1 как у классического cmp()."""
        rhs = _coerce(other)
        if self.kind is NumericKind.PLAIN and rhs.kind is NumericKind.PLAIN:
            lhs_raw, rhs_raw = self.raw, rhs.raw
        else:
            lhs_raw, rhs_raw = self.to_decimal(), rhs.to_decimal()
        if lhs_raw < rhs_raw:
            return -1
        if lhs_raw > rhs_raw:
            return 1
        return 0

    def eq(self, other: Any) -> bool:
        return self.compare(other) == 0

    def gt(self, other: Any) -> bool:
        return self.compare(other) > 0

    def gte(self, other: Any) -> bool:
        return self.compare(other) >= 0

    def lt(self, other: Any) -> bool:
        return self.compare(other) < 0

    def lte(self, other: Any) -> bool:
        return self.compare(other) <= 0

    # -------------------------------------------------------------------------
    # Python protocol
    # -------------------------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return self.compare(rhs) == 0

    def __hash__(self) -> int:
        return hash(self.to_decimal())

    def __lt__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return self.compare(rhs) < 0

    def __le__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return self.compare(rhs) <= 0

    def __gt__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return self.compare(rhs) > 0

    def __ge__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return self.compare(rhs) >= 0

    def __add__(self, other: object) -> "NumericValue":
        rhs = _operand(other)
        return NotImplemented if rhs is None else self.add(rhs)

    def __radd__(self, other: object) -> "NumericValue":
        rhs = _operand(other)
        return NotImplemented if rhs is None else rhs.add(self)

    def __sub__(self, other: object) -> "NumericValue":
        rhs = _operand(other)
        return NotImplemented if rhs is None else self.subtract(rhs)

    def __rsub__(self, other: object) -> "NumericValue":
        rhs = _operand(other)
        return NotImplemented if rhs is None else rhs.subtract(self)

    def __mul__(self, other: object) -> "NumericValue":
        rhs = _operand(other)
        return NotImplemented if rhs is None else self.multiply(rhs)

    def __rmul__(self, other: object) -> "NumericValue":
        rhs = _operand(other)
        return NotImplemented if rhs is None else rhs.multiply(self)

    def __truediv__(self, other: object) -> "NumericValue":
        rhs = _operand(other)
        return NotImplemented if rhs is None else self.divide(rhs)

    def __rtruediv__(self, other: object) -> "NumericValue":
        rhs = _operand(other)
        return NotImplemented if rhs is None else rhs.divide(self)

    def __pow__(self, other: object) -> "NumericValue":
        rhs = _operand(other)
        return NotImplemented if rhs is None else self.pow(rhs)

    def __rpow__(self, other: object) -> "NumericValue":
        rhs = _operand(other)
        return NotImplemented if rhs is None else rhs.pow(self)

    def __neg__(self) -> "NumericValue":
        return self.neg()

    def __abs__(self) -> "NumericValue":
        return self.abs()

    def __bool__(self) -> bool:
        return not self.is_zero

    def __float__(self) -> float:
        return self.to_float()

    def __str__(self) -> str:
        if self.kind is NumericKind.PLAIN:
            return repr(self.raw)
        return f"{self.raw.normalize(ENGINE_CONTEXT):e}"

    def __repr__(self) -> str:
        return f"NumericValue({self.kind.value}, {self})"


NumericValue.ZERO = NumericValue(NumericKind.PLAIN, 0.0)
NumericValue.ONE = NumericValue(NumericKind.PLAIN, 1.0)


def maximum(a: Any, b: Any) -> NumericValue:
    lhs, rhs = _coerce(a), _coerce(b)
    return lhs if lhs.gte(rhs) else rhs


def minimum(a: Any, b: Any) -> NumericValue:
    lhs, rhs = _coerce(a), _coerce(b)
    return lhs if lhs.lte(rhs) else rhs


# =============================================================================
# КОЭРСИЯ ОПЕРАНДОВ
# =============================================================================


def _coerce(value: Any) -> NumericValue:
    """Lenient коэрсия операнда (строки, Coercible, ...) через слой конверсии."""
    if isinstance(value, NumericValue):
        return value
    # conversion импортирует этот модуль
    from sipengine.core.numbers.conversion import from_any

    return from_any(value)


def _operand(value: object) -> Optional[NumericValue]:
    """Операнд для операторов Python: только числовые типы, только конечные."""
    if isinstance(value, NumericValue):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Decimal) and not value.is_finite():
        return None
    if isinstance(value, (int, float, Decimal, Fraction)):
        return _coerce(value)
    return None
