"""
dimq.core.reduction
===================

Canonicalisation of raw unit signatures.

A raw signature may be unsorted, contain the same ``(factor, unit)`` pair
several times, carry zero exponents or embed bare numeric literals. Reduction
turns it into the canonical form every `Quantity` stores:

1. numeric literals are folded into the value,
2. terms are sorted by ``(factor, unit)``,
3. equal ``(factor, unit)`` pairs are merged and zero exponents dropped,
4. prefixes of a numerator/denominator pair with opposite exponents are
   collapsed onto the numerator when the ratio of their multipliers is itself
   a registered prefix (``m/ms`` becomes ``km/s``).

Step 4 runs once, without cascading. Its output is sorted and merged again so
the canonical invariants hold for the returned signature.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Optional

from dimq.core.signature import (
    NO_PREFIX,
    RawSignature,
    Signature,
    UnitTerm,
    as_terms,
    canonical_key,
    collapse_key,
    is_literal,
)
from dimq.core.utils import exact_power, simplify_fraction
from dimq.errors import InternalConsistencyError

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from dimq.units.system import UnitSystem


def extract_literals(value: Any, terms: Iterable[UnitTerm]) -> tuple[Any, list[UnitTerm]]:
    """Fold numeric literal terms into `value` and return the remaining terms."""
    kept: list[UnitTerm] = []
    for term in terms:
        if not is_literal(term.unit):
            kept.append(term)
            continue
        if term.factor != NO_PREFIX:
            raise InternalConsistencyError(
                f"Numeric unit term {tuple(term)!r} carries prefix {term.factor!r}"
            )
        value = value * exact_power(term.unit, term.exponent)
    return value, kept


def merge_terms(terms: Iterable[UnitTerm]) -> list[UnitTerm]:
    """Sort canonically, sum exponents of equal ``(factor, unit)`` pairs, drop zeros."""
    merged: list[UnitTerm] = []
    for term in sorted(terms, key=canonical_key):
        if merged and canonical_key(merged[-1]) == canonical_key(term):
            last = merged[-1]
            merged[-1] = last._replace(exponent=simplify_fraction(last.exponent + term.exponent))
        else:
            merged.append(term)
    return [t for t in merged if t.exponent != 0]


def _combined_factor(system: "UnitSystem", numerator: str, denominator: str) -> Optional[str]:
    """Factor id whose multiplier is ``numerator / denominator``, if it is registered."""
    quotient, remainder = divmod(
        system.factor(numerator).value, system.factor(denominator).value
    )
    if remainder != 0:
        return None
    return system.factor_for_value(quotient)


def collapse_factors(terms: list[UnitTerm], system: "UnitSystem") -> list[UnitTerm]:
    """
    Move prefixes from denominator terms onto numerator terms.

    For each term ``k`` with a positive exponent, the terms ``j`` with exponent
    ``-exponent(k)`` and a real prefix are scanned in ``(unit, factor)`` order.
    The first ``j`` for which ``multiplier(k) / multiplier(j)`` is a registered
    prefix wins: ``k`` takes that prefix and ``j`` loses its own.
    """
    terms = list(terms)
    order = sorted(range(len(terms)), key=lambda i: collapse_key(terms[i]))
    for k in order:
        if terms[k].exponent <= 0:
            continue
        for j in order:
            candidate = terms[j]
            # an unprefixed denominator never matches, so km/(g·ms) goes on to ms
            if candidate.factor == NO_PREFIX or candidate.exponent != -terms[k].exponent:
                continue
            combined = _combined_factor(system, terms[k].factor, candidate.factor)
            if combined is None:
                continue
            terms[k] = terms[k]._replace(factor=combined)
            terms[j] = candidate._replace(factor=NO_PREFIX)
            break
    return terms


def reduce_signature(
    value: Any, terms: RawSignature, system: "UnitSystem"
) -> tuple[Any, Signature]:
    """
    Canonicalise `terms` and return ``(value, signature)``.

    The returned signature has no duplicate ``(factor, unit)`` pairs, no zero
    exponents, no numeric literals, and is sorted by ``(factor, unit)``.

    Raises
    ------
    InternalConsistencyError
        If a numeric literal term carries a prefix.
    """
    value, kept = extract_literals(value, as_terms(terms))
    merged = merge_terms(kept)
    collapsed = collapse_factors(merged, system)
    return value, tuple(merge_terms(collapsed))


__all__ = [
    "extract_literals",
    "merge_terms",
    "collapse_factors",
    "reduce_signature",
]
