"""
dimq.core.utils
===============

Numeric helpers shared by reduction, normalization and the `Quantity`
operators.

Integer and rational values stay exact wherever Python would otherwise drop
to floating point: ``int / int`` and ``int ** -n`` produce a `Fraction`, and a
`Fraction` that turns out to be integral is handed back as an ``int``.
"""

from __future__ import annotations

from fractions import Fraction
from math import isclose
from numbers import Number
from typing import Any


def is_integer(x: Any) -> bool:
    """True for ints, but not for bools."""
    return isinstance(x, int) and not isinstance(x, bool)


def is_number(x: Any) -> bool:
    return isinstance(x, Number) and not isinstance(x, bool)


def simplify_fraction(x: Any) -> Any:
    """Return ``x.numerator`` for an integral `Fraction`, leave everything else untouched."""
    if isinstance(x, Fraction) and x.denominator == 1:
        return x.numerator
    return x


def rationalize(x: float, max_denominator: int = 1000) -> int | Fraction:
    """
    Turn a float exponent such as ``0.5`` into ``Fraction(1, 2)``.

    Raises
    ------
    ValueError
        If `x` is not within float precision of a rational with a
        denominator of at most `max_denominator`.
    """
    frac = Fraction(x).limit_denominator(max_denominator)
    if not isclose(float(frac), x, rel_tol=1e-12, abs_tol=1e-12):
        raise ValueError(f"Exponent {x!r} is not a simple rational number")
    return simplify_fraction(frac)


def exact_power(base: Any, exp: Any) -> Any:
    """``base ** exp`` that stays exact for rational bases and integral exponents."""
    exp = simplify_fraction(exp)
    if is_integer(exp) and exp < 0 and (is_integer(base) or isinstance(base, Fraction)):
        return simplify_fraction(Fraction(base) ** exp)
    return base ** exp


def exact_divide(a: Any, b: Any) -> Any:
    """``a / b`` with ``int / int`` promoted to an exact `Fraction`."""
    if is_integer(a) and is_integer(b):
        return simplify_fraction(Fraction(a, b))
    return a / b


__all__ = [
    "is_integer",
    "is_number",
    "simplify_fraction",
    "rationalize",
    "exact_power",
    "exact_divide",
]
