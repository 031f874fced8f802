"""
dimq.core.normalization
=======================

Expansion of a signature into irreducible base units.

Each pass folds every prefix multiplier into the value and replaces every
catalog unit by its definition raised to the term's exponent. Base units are
defined as themselves, so the expansion reaches a fixed point once only
unprefixed base units and numeric literals remain; the result is then reduced.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable

from dimq.core.reduction import reduce_signature
from dimq.core.signature import (
    NO_PREFIX,
    RawSignature,
    Signature,
    UnitTerm,
    as_terms,
    is_literal,
    power_signature,
)
from dimq.core.utils import exact_power
from dimq.errors import MalformedUnitError

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from dimq.units.system import UnitSystem

logger = logging.getLogger(__name__)

MAX_DEPTH = 64
_WARN_DEPTH = 16


def expand_once(
    value: Any, terms: Iterable[UnitTerm], system: "UnitSystem"
) -> tuple[Any, list[UnitTerm]]:
    """Run a single expansion pass."""
    expanded: list[UnitTerm] = []
    for term in terms:
        if term.factor != NO_PREFIX:
            value = value * exact_power(system.factor(term.factor).value, term.exponent)
        if is_literal(term.unit):
            expanded.append(UnitTerm(NO_PREFIX, term.unit, term.exponent))
        else:
            expanded.extend(power_signature(system.unit(term.unit).definition, term.exponent))
    return value, expanded


def normalize_signature(
    value: Any,
    signature: RawSignature,
    system: "UnitSystem",
    max_depth: int = MAX_DEPTH,
) -> tuple[Any, Signature]:
    """
    Rewrite ``value · signature`` purely in base units.

    Parameters
    ----------
    value : number
        Magnitude attached to `signature`.
    signature : sequence of UnitTerm or (factor, unit, exponent)
        Signature to expand.
    system : UnitSystem
        Catalog providing prefix multipliers and unit definitions.
    max_depth : int, optional
        Number of expansion passes after which the catalog is assumed to be
        cyclic.

    Returns
    -------
    tuple
        ``(value, signature)`` with the signature reduced and made of base
        units only.

    Raises
    ------
    MalformedUnitError
        If no fixed point is reached within `max_depth` passes.
    """
    if not signature:
        return value, ()

    current = as_terms(signature)
    for depth in range(1, max_depth + 1):
        value, expanded = expand_once(value, current, system)
        if expanded == current:
            break
        current = expanded
    else:
        raise MalformedUnitError(
            f"Unit definitions in {system.name!r} do not reach base units "
            f"within {max_depth} expansions (cyclic definition?)"
        )

    if depth > _WARN_DEPTH:
        logger.warning(
            "Normalizing %r in unit system %r took %d expansion passes",
            signature, system.name, depth,
        )
    return reduce_signature(value, current, system)


__all__ = ["MAX_DEPTH", "expand_once", "normalize_signature"]
