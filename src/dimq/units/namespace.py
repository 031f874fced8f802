from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from dimq.errors import MalformedUnitError

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from dimq.core.quantity import Quantity
    from dimq.units.system import UnitSystem


class UnitNamespace:
    """Attribute-style access to the units of a system.

    ``u.km`` (or ``u("km/h")``) returns a magnitude-1 `Quantity`, so that
    ``5 * u.km`` reads naturally.
    """

    _reserved_names: ClassVar[set[str]] = set()

    def __init__(self, system: "UnitSystem") -> None:
        self._system = system

    def __contains__(self, spec: str) -> bool:
        return spec in self._system

    def define(
        self,
        id: str,
        definition: "str | None" = None,
        symbol: "str | None" = None,
        replace: bool = False,
    ) -> None:
        if id in getattr(UnitNamespace, "_reserved_names", ()):
            raise ValueError(
                f"Cannot define unit '{id}': "
                "name conflicts with UnitNamespace attribute/method."
            )
        self._system.register_unit(id, symbol, definition, replace=replace)

    def __call__(self, spec: str) -> "Quantity":
        return self._system.quantity(1, spec)

    def __getattr__(self, name: str) -> "Quantity":
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self(name)
        except MalformedUnitError as e:
            # Unknown symbol should look like a missing attribute
            raise AttributeError(name) from e

    def __dir__(self) -> list[str]:
        """List all available unit names for autocomplete."""
        base_dir = set(super().__dir__())
        return sorted(base_dir | set(self._system.names()))


UnitNamespace._reserved_names = set(dir(UnitNamespace))  # type: set[str]

__all__ = ["UnitNamespace"]
