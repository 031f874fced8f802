"""
dimq.units.system
=================

A thread-safe catalog of scale factors (prefixes) and units.

Key points
----------
- Every system contains the "no prefix" factor (`NO_PREFIX`, multiplier 1).
- Units are registered with a definition in terms of other units. A unit
  registered without a definition is a base unit and is defined as itself.
- Names resolve through ids, symbols and aliases, optionally preceded by a
  prefix id or symbol ("km", "kilometre"), unless the unit is marked
  non-prefixable.
- Multipliers map back to factor ids, which lets reduction collapse
  ``k·m / m·s`` style prefixes.
- Multiple independent systems can coexist; quantities of different systems
  never mix.
"""
from __future__ import annotations

import logging
import threading
import unicodedata
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from dimq.core.signature import (
    NO_PREFIX,
    RawSignature,
    Signature,
    UnitTerm,
    as_terms,
    is_literal,
)
from dimq.core.utils import is_number
from dimq.errors import MalformedUnitError
from dimq.units.parser import parse_unit_expr

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Factor:
    """A named scale factor such as ``kilo`` (symbol ``k``, value 1000)."""

    id: str
    symbol: str
    value: Any


@dataclass(frozen=True, slots=True)
class UnitDefinition:
    """A catalog unit and its definition signature."""

    id: str
    symbol: str
    definition: Signature

    @property
    def is_base(self) -> bool:
        return self.definition == ((NO_PREFIX, self.id, 1),)


def normalize_symbol(s: str) -> str:
    """Strip surrounding whitespace and apply Unicode NFC (composed forms like "µ")."""
    if not s:
        return s
    return unicodedata.normalize("NFC", s.strip())


class UnitSystem:
    """Catalog of factors and units that quantities are bound to.

    Parameters
    ----------
    name : str
        Identity of the system, used in error messages.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._lock = threading.RLock()
        self._factors: Dict[str, Factor] = {NO_PREFIX: Factor(NO_PREFIX, "", 1)}
        self._factor_values: Dict[Any, str] = {1: NO_PREFIX}
        self._factor_names: Dict[str, str] = {}
        self._units: Dict[str, UnitDefinition] = {}
        self._unit_names: Dict[str, str] = {}
        self._non_prefixable: set[str] = set()

    def __repr__(self) -> str:
        return f"UnitSystem({self.name!r})"

    def __contains__(self, expr: str) -> bool:
        try:
            self.parse_unit(expr)
            return True
        except MalformedUnitError:
            return False

    # -------------------------- registration -------------------------------
    def register_factor(
        self,
        id: str,
        symbol: str,
        value: Any,
        aliases: Iterable[str] = (),
        replace: bool = False,
    ) -> Factor:
        """Register a prefix. Its multiplier must not collide with another factor's."""
        if not is_number(value) or value <= 0:
            raise ValueError(f"Factor value must be a positive number, got {value!r}")
        names = [normalize_symbol(n) for n in (id, symbol, *aliases)]
        with self._lock:
            if not replace:
                if id in self._factors:
                    raise ValueError(f"Cannot register factor '{id}': a factor with this id already exists.")
                if value in self._factor_values:
                    raise ValueError(
                        f"Cannot register factor '{id}': value {value!r} already belongs to "
                        f"'{self._factor_values[value]}'."
                    )
                for n in names:
                    if n in self._factor_names:
                        raise ValueError(f"Cannot register factor '{id}': name '{n}' is taken.")
            factor = Factor(id, symbol, value)
            self._factors[id] = factor
            self._factor_values[value] = id
            for n in names:
                self._factor_names[n] = id
        logger.debug("Registered factor %s (%s = %s) in %s", id, symbol, value, self.name)
        return factor

    def register_unit(
        self,
        id: str,
        symbol: Optional[str] = None,
        definition: "str | RawSignature | None" = None,
        aliases: Iterable[str] = (),
        prefixable: bool = True,
        replace: bool = False,
    ) -> UnitDefinition:
        """Register a unit.

        `definition` is unit expression text or a raw signature over units
        already in the catalog; leave it out to register a base unit.
        """
        symbol = id if symbol is None else symbol
        if definition is None:
            terms: Signature = (UnitTerm(NO_PREFIX, id, 1),)
        else:
            raw = self.parse_unit(definition) if isinstance(definition, str) else as_terms(definition)
            self.validate_unit(raw)
            terms = tuple(raw)

        names = [normalize_symbol(n) for n in (id, symbol, *aliases)]
        with self._lock:
            if not replace:
                if id in self._units:
                    raise ValueError(f"Cannot register unit '{id}': a unit with this id already exists.")
                for n in names:
                    if n in self._unit_names and self._unit_names[n] != id:
                        raise ValueError(
                            f"Cannot register unit '{id}': name '{n}' already refers to "
                            f"'{self._unit_names[n]}'."
                        )
            unit = UnitDefinition(id, symbol, terms)
            self._units[id] = unit
            for n in names:
                self._unit_names[n] = id
            if prefixable:
                self._non_prefixable.discard(id)
            else:
                self._non_prefixable.add(id)
        logger.debug("Registered unit %s (%s) in %s", id, symbol, self.name)
        return unit

    def register_alias(self, alias: str, unit_id: str, replace: bool = False) -> None:
        key = normalize_symbol(alias)
        with self._lock:
            if unit_id not in self._units:
                raise MalformedUnitError(f"Unknown unit {unit_id!r} in unit system {self.name}")
            if not replace and key in self._unit_names and self._unit_names[key] != unit_id:
                raise ValueError(
                    f"Cannot register alias '{alias}': it already refers to '{self._unit_names[key]}'."
                )
            self._unit_names[key] = unit_id

    # -------------------------- lookups ------------------------------------
    def factor(self, id: str) -> Factor:
        with self._lock:
            f = self._factors.get(id) if isinstance(id, str) else None
        if f is None:
            raise MalformedUnitError(f"Unknown factor {id!r} in unit system {self.name}")
        return f

    def factor_for_value(self, value: Any) -> Optional[str]:
        """Reverse lookup: the factor id whose multiplier is `value`, or None."""
        with self._lock:
            return self._factor_values.get(value)

    def unit(self, id: str) -> UnitDefinition:
        with self._lock:
            u = self._units.get(id) if isinstance(id, str) else None
        if u is None:
            raise MalformedUnitError(f"Unknown unit {id!r} in unit system {self.name}")
        return u

    def factors(self) -> Mapping[str, Factor]:
        with self._lock:
            return dict(self._factors)

    def units(self) -> Mapping[str, UnitDefinition]:
        with self._lock:
            return dict(self._units)

    def names(self) -> Iterable[str]:
        """All unit ids, symbols and aliases."""
        with self._lock:
            return sorted(self._unit_names)

    def resolve(self, name: str) -> Tuple[str, str]:
        """Resolve a (possibly prefixed) unit name to ``(factor_id, unit_id)``.

        Exact unit names win over prefixed readings, so "min" is a minute and
        not a milli-inch.
        """
        sym = normalize_symbol(name)
        with self._lock:
            unit_id = self._unit_names.get(sym)
            if unit_id is not None:
                return NO_PREFIX, unit_id

            # Longest prefix first, so "da" is tried before "d".
            for prefix in sorted(self._factor_names, key=len, reverse=True):
                if not sym.startswith(prefix) or len(sym) == len(prefix):
                    continue
                unit_id = self._unit_names.get(sym[len(prefix):])
                if unit_id is not None and unit_id not in self._non_prefixable:
                    return self._factor_names[prefix], unit_id

        raise MalformedUnitError(f"Unknown unit {name!r} in unit system {self.name}")

    # -------------------------- expressions --------------------------------
    def parse_unit(self, expr: str) -> list[UnitTerm]:
        """Parse unit expression text into a raw (unreduced) signature."""
        return parse_unit_expr(expr, self)

    def validate_unit(self, signature: RawSignature) -> None:
        """Check that every term names known factors and units.

        Raises
        ------
        MalformedUnitError
            On a malformed term, an unknown factor or unit, a non-numeric
            exponent, or a numeric literal carrying a prefix.
        """
        if isinstance(signature, (str, bytes)):
            raise MalformedUnitError(f"Expected a sequence of unit terms, got {signature!r}")
        for item in signature:
            try:
                factor, unit, exponent = item
            except (TypeError, ValueError) as e:
                raise MalformedUnitError(f"Malformed unit term {item!r}") from e
            if not is_number(exponent):
                raise MalformedUnitError(f"Exponent of unit term {item!r} is not a number")
            self.factor(factor)
            if is_literal(unit):
                if factor != NO_PREFIX:
                    raise MalformedUnitError(f"Numeric unit {unit!r} cannot carry prefix {factor!r}")
            else:
                self.unit(unit)

    # -------------------------- conveniences -------------------------------
    def quantity(self, value: Any, unit: "str | RawSignature | None" = None):
        """Build a `Quantity` bound to this system."""
        from dimq.core.quantity import Quantity  # local import
        return Quantity(value, unit, self)

    def as_namespace(self):
        from dimq.units.namespace import UnitNamespace  # local import
        return UnitNamespace(self)


__all__ = [
    "Factor",
    "UnitDefinition",
    "UnitSystem",
    "normalize_symbol",
]
