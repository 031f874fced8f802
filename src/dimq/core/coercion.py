"""
dimq.core.coercion
==================

Turning arbitrary operands into quantities bound to a given unit system.

Supported operands are quantities of the same system, raw signatures
(sequences of ``(factor, unit, exponent)`` triples), unit expression text and
plain numbers. Any other object may take part in arithmetic by implementing
the `SupportsQuantityCoercion` hook, which mirrors the operation back to the
quantity in a form both sides understand.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

from dimq.core.utils import is_number
from dimq.errors import IncompatibleUnitsError, MalformedUnitError, UnsupportedOperandError

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from dimq.core.quantity import Quantity
    from dimq.units.system import UnitSystem


@runtime_checkable
class SupportsQuantityCoercion(Protocol):
    """
    Objects that know how to combine themselves with a `Quantity`.

    ``obj.__quantity_coerce__(q)`` must return a pair ``(first, last)`` such
    that ``op(first, last)`` computes ``op(q, obj)``.
    """

    def __quantity_coerce__(self, other: "Quantity") -> tuple[Any, Any]: ...


def to_quantity(obj: Any, system: "UnitSystem") -> "Quantity":
    """
    Coerce `obj` into a `Quantity` bound to `system`.

    Raises
    ------
    IncompatibleUnitsError
        If `obj` is a quantity of another unit system.
    MalformedUnitError
        If `obj` is text or a raw signature the system rejects.
    UnsupportedOperandError
        If `obj` is of any other type.
    """
    # Local import to avoid a cycle with dimq.core.quantity.
    from dimq.core.quantity import Quantity

    if isinstance(obj, Quantity):
        if obj.system is not system:
            raise IncompatibleUnitsError(
                f"Unit system of {obj!r} is incompatible with {system.name}"
            )
        return obj
    if isinstance(obj, str):
        unit = system.parse_unit(obj)
        system.validate_unit(unit)
        return Quantity(1, unit, system)
    if isinstance(obj, (list, tuple)):
        system.validate_unit(obj)
        return Quantity(1, obj, system)
    if is_number(obj):
        return Quantity(obj, (), system)
    raise UnsupportedOperandError(f"{obj!r} has no unit support")


def apply_through_coercion(
    quantity: "Quantity", obj: Any, op: Callable[[Any, Any], Any]
) -> Any:
    """
    Compute ``op(quantity, obj)`` through `obj`'s own coercion hook.

    Raises
    ------
    UnsupportedOperandError
        If `obj` has no hook, the hook fails or returns something other than
        a pair, or the pair it returns is itself unusable (unsupported
        operands, unknown units).
    IncompatibleUnitsError
        If the pair is usable but its units do not match for `op`.
    """
    if not isinstance(obj, SupportsQuantityCoercion):
        raise UnsupportedOperandError(f"{obj!r} can't be coerced into Quantity")
    try:
        coercion = obj.__quantity_coerce__(quantity)
    except Exception as e:
        raise UnsupportedOperandError(f"{obj!r} can't be coerced into Quantity: {e!r}") from e
    if not isinstance(coercion, tuple) or len(coercion) != 2:
        raise UnsupportedOperandError(
            f"{type(obj).__name__}.__quantity_coerce__ must return a pair, got {coercion!r}"
        )
    first, last = coercion
    try:
        return op(first, last)
    except (UnsupportedOperandError, MalformedUnitError) as e:
        raise UnsupportedOperandError(
            f"{type(obj).__name__}.__quantity_coerce__ returned an unusable pair: {e}"
        ) from e


def swapped(op: Callable[[Any, Any], Any]) -> Callable[[Any, Any], Any]:
    """``op`` with its arguments exchanged, for reflected operators."""
    def _swapped(a: Any, b: Any) -> Any:
        return op(b, a)
    return _swapped


__all__ = [
    "SupportsQuantityCoercion",
    "to_quantity",
    "apply_through_coercion",
    "swapped",
]
