"""
dimq.errors
===========

Exception hierarchy raised by quantities and unit systems.

Every error derives from :class:`DimqError` and from the built-in exception
that callers of a numeric type already expect, so ``except TypeError`` around
arithmetic and ``except ValueError`` around parsing keep working.
"""

from __future__ import annotations


class DimqError(Exception):
    """Base class for all dimq errors."""


class IncompatibleUnitsError(DimqError, TypeError):
    """Operands do not share a normalized unit signature or a unit system."""


class UnsupportedOperandError(DimqError, TypeError):
    """Operand cannot be turned into a quantity, not even through its own coercion hook."""


class MalformedUnitError(DimqError, ValueError):
    """A unit expression or raw signature is rejected by the unit system."""


class ConversionMismatchError(DimqError, TypeError):
    """A strict conversion produced a unit other than the requested one."""


class InternalConsistencyError(DimqError, RuntimeError):
    """A signature violates an invariant that well-formed input can never break."""


__all__ = [
    "DimqError",
    "IncompatibleUnitsError",
    "UnsupportedOperandError",
    "MalformedUnitError",
    "ConversionMismatchError",
    "InternalConsistencyError",
]
