"""
dimq.units
==========

Unit catalogs: the `UnitSystem` class, the expression parser, the default
SI system and the ``u`` attribute namespace over it.

``from dimq.units import u`` is resolved on access, so it always reflects
the current default system (see `dimq.units.si.set_default_system`).
"""
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from dimq.units.namespace import UnitNamespace
    from dimq.units.system import UnitSystem


def _get_default_system() -> "UnitSystem":
    # The SI bootstrap runs on first import of dimq.units.si.
    from dimq.units.si import get_default_system  # local import
    return get_default_system()


def _namespace() -> "UnitNamespace":
    return _get_default_system().as_namespace()


def __getattr__(name: str) -> Any:
    """Resolve ``u`` against whatever the default system is right now."""
    if name == "u":
        return _namespace()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    return sorted([*globals(), "u"])
