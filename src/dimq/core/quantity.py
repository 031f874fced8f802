"""
dimq.core.quantity
==================

Defines the `Quantity` class: a numeric value tagged with a compound unit
signature and bound to a `UnitSystem`.

This module provides:
- Dimension-aware arithmetic (``+ - * / **``, unary ``-``/``+``, ``abs``).
- Equality and ordering on the normalized (base unit) form.
- Conversion between equivalent units (`Quantity.to`, `Quantity.to_strict`).
- Textual rendering of the unit signature.

Quantities are immutable. The signature is reduced when the quantity is
built; the normalized form is computed on first use and cached.
"""

from __future__ import annotations

import operator
import re
from fractions import Fraction
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from dimq.core.coercion import apply_through_coercion, swapped, to_quantity
from dimq.core.normalization import normalize_signature
from dimq.core.reduction import reduce_signature
from dimq.core.signature import (
    EMPTY,
    RawSignature,
    Signature,
    UnitTerm,
    power_signature,
    split_polarity,
)
from dimq.core.utils import exact_divide, exact_power, is_number, rationalize, simplify_fraction
from dimq.errors import (
    ConversionMismatchError,
    IncompatibleUnitsError,
    MalformedUnitError,
    UnsupportedOperandError,
)

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from dimq.units.system import UnitSystem

UnitLike = Union[str, RawSignature, None]

_QUANTITY_RE = re.compile(
    r"""
    ^\s*
    (?P<num>[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)
    (?:/(?P<den>\d+))?
    \s*(?P<unit>.*?)\s*$
    """,
    re.X,
)


def _parse_number(text: str, den: Optional[str]) -> Any:
    if den is not None:
        return simplify_fraction(Fraction(int(text), int(den)))
    if any(c in text for c in ".eE"):
        return float(text)
    return int(text)


class Quantity:
    """
    A value with a unit, bound to a unit system.

    Parameters
    ----------
    value : number
        Magnitude. ints, `Fraction` and floats are kept in their own domain;
        ``int / int`` produces a `Fraction`.
    unit : str or sequence of (factor, unit, exponent), optional
        Unit expression text (parsed and validated by `system`) or a raw
        signature. Omit for a dimensionless quantity.
    system : UnitSystem, optional
        Unit system to bind to. Defaults to the default SI system.

    Attributes
    ----------
    value : number
        Magnitude in the units of `unit`.
    unit : Signature
        Reduced unit signature.
    system : UnitSystem
        The bound unit system.
    """

    __slots__ = ("_value", "_unit", "_system", "_normalized")

    def __init__(self, value: Any, unit: UnitLike = None, system: "UnitSystem | None" = None):
        if not is_number(value):
            raise TypeError(f"Quantity value must be a number, got {type(value).__name__}")
        if system is None:
            from dimq.units.si import get_default_system
            system = get_default_system()

        if unit is None:
            unit = EMPTY
        elif isinstance(unit, str):
            unit = system.parse_unit(unit)
            system.validate_unit(unit)

        self._system = system
        self._value, self._unit = reduce_signature(value, unit, system)
        self._normalized: Optional[Quantity] = None

    @classmethod
    def parse(cls, text: str, system: "UnitSystem | None" = None) -> "Quantity":
        """
        Build a quantity from ``"<number> <unit expression>"`` text.

        The number may be an integer (``5``), a decimal (``2.5``, ``1e3``) or a
        ratio (``1/3``); the unit part may be empty.

        >>> Quantity.parse("5 km/h")
        Quantity('5 km.h^-1')
        """
        m = _QUANTITY_RE.match(text)
        if not m:
            raise MalformedUnitError(f"Cannot parse quantity {text!r}")
        value = _parse_number(m.group("num"), m.group("den"))
        return cls(value, m.group("unit"), system)

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------
    @property
    def value(self) -> Any:
        return self._value

    @property
    def unit(self) -> Signature:
        return self._unit

    @property
    def system(self) -> "UnitSystem":
        return self._system

    # ------------------------------------------------------------------
    # Normalization & compatibility
    # ------------------------------------------------------------------
    def normalize(self) -> "Quantity":
        """Return this quantity expressed in base units (cached)."""
        normalized = self._normalized
        if normalized is None:
            value, unit = normalize_signature(self._value, self._unit, self._system)
            if unit == self._unit and value == self._value:
                normalized = self
            else:
                normalized = Quantity(value, unit, self._system)
                normalized._normalized = normalized
            self._normalized = normalized
        return normalized

    @property
    def dimensionless(self) -> bool:
        """True when the normalized unit is empty."""
        return not self.normalize()._unit

    unitless = dimensionless

    def compatible(self, other: Any) -> bool:
        """True when `other` has the same normalized unit, i.e. can be added to this one."""
        other = self._coerce(other)
        return self.normalize()._unit == other.normalize()._unit

    compatible_with = compatible

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------
    def to(self, target: Any) -> "Quantity":
        """
        Express this quantity in the unit of `target`.

        `target` may be a quantity (only its unit is used), unit text or a raw
        signature. If the units are not compatible the result carries whatever
        is left over, see `to_strict`.
        """
        conversion = Quantity(1, self._coerce(target)._unit, self._system)
        return (self / conversion).normalize() * conversion

    def to_strict(self, target: Any) -> "Quantity":
        """Like `to`, but raise `ConversionMismatchError` unless the result is in `target`'s unit."""
        target = self._coerce(target)
        result = self.to(target)
        if result._unit != target._unit:
            raise ConversionMismatchError(
                f"Unexpected {result!r}, expected to be in {target.unit_string()}"
            )
        return result

    def approx(self) -> "Quantity":
        """Same unit, value converted to float."""
        return Quantity(float(self._value), self._unit, self._system)

    # ------------------------------------------------------------------
    # Coercion
    # ------------------------------------------------------------------
    def _coerce(self, other: Any) -> "Quantity":
        return to_quantity(other, self._system)

    def __quantity_coerce__(self, other: Any) -> tuple["Quantity", "Quantity"]:
        return self._coerce(other), self

    def _binary(
        self,
        other: Any,
        op: Callable[[Any, Any], Any],
        impl: Callable[["Quantity", "Quantity"], "Quantity"],
        reflected: bool = False,
    ) -> Any:
        try:
            other_q = self._coerce(other)
        except UnsupportedOperandError:
            return apply_through_coercion(self, other, swapped(op) if reflected else op)
        if reflected:
            return impl(other_q, self)
        return impl(self, other_q)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------
    @staticmethod
    def _mul(a: "Quantity", b: "Quantity") -> "Quantity":
        return Quantity(a._value * b._value, a._unit + b._unit, a._system)

    @staticmethod
    def _div(a: "Quantity", b: "Quantity") -> "Quantity":
        return Quantity(
            exact_divide(a._value, b._value),
            a._unit + tuple(power_signature(b._unit, -1)),
            a._system,
        )

    @staticmethod
    def _add(a: "Quantity", b: "Quantity") -> "Quantity":
        return a._combine(b, operator.add)

    @staticmethod
    def _sub(a: "Quantity", b: "Quantity") -> "Quantity":
        return a._combine(b, operator.sub)

    def _combine(self, other: "Quantity", op: Callable[[Any, Any], Any]) -> "Quantity":
        # result is re-expressed in the left operand's unit
        a, b = self.normalize(), other.normalize()
        if a._unit != b._unit:
            raise IncompatibleUnitsError(f"{self!r} and {other!r} are incompatible")
        return Quantity(op(a._value, b._value), a._unit, self._system).to(self)

    def __mul__(self, other: Any) -> Any:
        return self._binary(other, operator.mul, Quantity._mul)

    def __rmul__(self, other: Any) -> Any:
        return self._binary(other, operator.mul, Quantity._mul, reflected=True)

    def __truediv__(self, other: Any) -> Any:
        return self._binary(other, operator.truediv, Quantity._div)

    def __rtruediv__(self, other: Any) -> Any:
        return self._binary(other, operator.truediv, Quantity._div, reflected=True)

    def __add__(self, other: Any) -> Any:
        return self._binary(other, operator.add, Quantity._add)

    def __radd__(self, other: Any) -> Any:
        return self._binary(other, operator.add, Quantity._add, reflected=True)

    def __sub__(self, other: Any) -> Any:
        return self._binary(other, operator.sub, Quantity._sub)

    def __rsub__(self, other: Any) -> Any:
        return self._binary(other, operator.sub, Quantity._sub, reflected=True)

    def __pow__(self, exponent: Any, modulo: Any | None = None) -> "Quantity":
        if modulo is not None:
            raise TypeError("Modulo exponentiation is not supported for Quantity.")
        if isinstance(exponent, Quantity):
            if not exponent.dimensionless:
                raise IncompatibleUnitsError(f"Exponent {exponent!r} must be dimensionless")
            exponent = exponent.normalize()._value
        if not is_number(exponent):
            raise UnsupportedOperandError(
                f"Exponent must be a number, got {type(exponent).__name__}"
            )

        unit_power = exponent
        if self._unit and isinstance(exponent, float):
            unit_power = rationalize(exponent)
        return Quantity(
            exact_power(self._value, exponent),
            power_signature(self._unit, unit_power),
            self._system,
        )

    def __neg__(self) -> "Quantity":
        return Quantity(-self._value, self._unit, self._system)

    def __pos__(self) -> "Quantity":
        return self

    def __abs__(self) -> "Quantity":
        return Quantity(abs(self._value), self._unit, self._system)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        try:
            other_q = self._coerce(other)
        except UnsupportedOperandError:
            if hasattr(other, "__quantity_coerce__"):
                return apply_through_coercion(self, other, operator.eq)
            return NotImplemented
        except MalformedUnitError:
            return NotImplemented
        a, b = self.normalize(), other_q.normalize()
        return a._value == b._value and a._unit == b._unit

    def __hash__(self) -> int:
        """
        Hash of the normalized form.

        Consistent with ``==`` between quantities, and between a
        dimensionless quantity and a plain number. ``==`` also coerces unit
        text and raw signatures (``1 * u.km == "km"``), but those operands
        keep their own ``str``/``tuple`` hash, so do not mix quantities with
        unit text or signatures as keys of one dict or set.
        """
        n = self.normalize()
        # dimensionless quantities compare equal to plain numbers
        if not n._unit:
            return hash(n._value)
        return hash((n._value, n._unit))

    def compare(self, other: Any) -> Optional[int]:
        """
        Three-way comparison on normalized values.

        Returns -1, 0 or 1, or ``None`` when the quantities are not
        compatible and therefore have no order. Operands that only support
        `__quantity_coerce__` are compared through that hook.
        """
        try:
            other_q = self._coerce(other)
        except UnsupportedOperandError:
            return apply_through_coercion(
                self, other, lambda first, last: self._coerce(first).compare(last)
            )
        a, b = self.normalize(), other_q.normalize()
        if a._unit != b._unit:
            return None
        return (a._value > b._value) - (a._value < b._value)

    def _ordering(self, other: Any) -> int:
        result = self.compare(other)
        if result is None:
            raise IncompatibleUnitsError(
                f"Cannot compare {self!r} with {other!r}: units are incompatible"
            )
        return result

    def __lt__(self, other: Any) -> bool:
        return self._ordering(other) < 0

    def __le__(self, other: Any) -> bool:
        return self._ordering(other) <= 0

    def __gt__(self, other: Any) -> bool:
        return self._ordering(other) > 0

    def __ge__(self, other: Any) -> bool:
        return self._ordering(other) >= 0

    # ------------------------------------------------------------------
    # Numeric conversions
    # ------------------------------------------------------------------
    def is_zero(self) -> bool:
        return self._value == 0

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __int__(self) -> int:
        return int(self._value)

    def __float__(self) -> float:
        return float(self._value)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------
    def _symbols(self, terms: list[UnitTerm]) -> list[str]:
        symbols = []
        for t in terms:
            sym = self._system.factor(t.factor).symbol + self._system.unit(t.unit).symbol
            exp = t.exponent
            if exp != 1:
                if isinstance(exp, Fraction):
                    sym += f"^({exp.numerator}/{exp.denominator})"
                else:
                    sym += f"^{exp}"
            symbols.append(sym)
        return sorted(symbols)

    def unit_string(self, sep: str = "·") -> str:
        """
        Render the unit signature, e.g. ``'kg·m·s^-2'``.

        Symbols are sorted alphabetically, positive exponents before negative
        ones; the ``^n`` suffix is omitted for ``n == 1``.
        """
        positive, negative = split_polarity(self._unit)
        return sep.join(self._symbols(positive) + self._symbols(negative))

    def __str__(self) -> str:
        if not self._unit:
            return str(self._value)
        return f"{self._value} {self.unit_string()}"

    def __repr__(self) -> str:
        text = str(self._value)
        if self._unit:
            text = f"{text} {self.unit_string('.')}"
        return f"Quantity({text!r})"

    def __format__(self, spec: str) -> str:
        """
        Custom string formatting.

        Supported specifiers
        --------------------
        "" (empty), or "native"
            The quantity in its own unit, as `str` renders it.
        "base"
            The quantity normalized to base units.

        Raises
        ------
        ValueError
            If the format specifier is not one of "", "native", or "base".
        """
        spec = (spec or "").strip().lower()
        if spec in ("", "native"):
            return str(self)
        if spec == "base":
            return str(self.normalize())
        raise ValueError("Unknown format spec; use '', 'native', or 'base'")


__all__ = ["Quantity"]
