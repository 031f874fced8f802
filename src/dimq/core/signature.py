# dimq.core.signature

from __future__ import annotations

from fractions import Fraction
from typing import Any, Iterable, NamedTuple, Tuple, TypeAlias, Union

from dimq.core.utils import is_number, simplify_fraction

# Factor id of the implicit "no prefix" factor (multiplier 1, empty symbol).
NO_PREFIX = "none"

Exponent: TypeAlias = Union[int, Fraction, float]
UnitRef: TypeAlias = Union[str, int, Fraction, float]


class UnitTerm(NamedTuple):
    """
    One ``factor·unit^exponent`` term of a compound unit.

    `unit` is either a unit id from the catalog or a bare numeric literal
    (e.g. the ``60`` in ``min = 60·s``). Literal terms always carry the
    `NO_PREFIX` factor.

    Being a tuple subclass, a term compares equal to the plain
    ``(factor, unit, exponent)`` tuple.
    """

    factor: str
    unit: UnitRef
    exponent: Exponent

    @property
    def is_literal(self) -> bool:
        return is_literal(self.unit)


Signature: TypeAlias = Tuple[UnitTerm, ...]
RawSignature: TypeAlias = Iterable[Union[UnitTerm, Tuple[str, UnitRef, Exponent]]]

EMPTY: Signature = ()


def is_literal(ref: Any) -> bool:
    return is_number(ref)


def as_terms(raw: RawSignature) -> list[UnitTerm]:
    """Convert any iterable of 3-sequences into a list of `UnitTerm`."""
    terms: list[UnitTerm] = []
    for item in raw:
        if isinstance(item, UnitTerm):
            terms.append(item)
            continue
        factor, unit, exponent = item
        terms.append(UnitTerm(factor, unit, exponent))
    return terms


def power_signature(terms: Iterable[UnitTerm], power: Exponent) -> list[UnitTerm]:
    """Multiply every exponent by `power`."""
    return [
        UnitTerm(t.factor, t.unit, simplify_fraction(t.exponent * power))
        for t in terms
    ]


def canonical_key(term: UnitTerm) -> tuple[str, Any]:
    """Sort key of reduced signatures: factor id, then unit id."""
    return (term.factor, term.unit)


def collapse_key(term: UnitTerm) -> tuple[Any, str]:
    """Scan order for factor collapsing: unit id, then factor id."""
    return (term.unit, term.factor)


def split_polarity(terms: Iterable[UnitTerm]) -> tuple[list[UnitTerm], list[UnitTerm]]:
    """Split into (non-negative exponents, negative exponents), preserving order."""
    positive: list[UnitTerm] = []
    negative: list[UnitTerm] = []
    for t in terms:
        (negative if t.exponent < 0 else positive).append(t)
    return positive, negative


__all__ = [
    "NO_PREFIX",
    "EMPTY",
    "UnitTerm",
    "Signature",
    "RawSignature",
    "is_literal",
    "as_terms",
    "power_signature",
    "canonical_key",
    "collapse_key",
    "split_polarity",
]
