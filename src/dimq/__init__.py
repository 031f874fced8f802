"""
dimq: dimensional quantities with exact unit algebra.

A `Quantity` pairs a number with a compound unit signature bound to a unit
system. Arithmetic checks dimensions, conversion goes through base units, and
integer/rational values stay exact. This module exposes a minimal, stable
public API. Heavy subsystems (e.g. the default SI system) are imported lazily
to avoid import-time side effects and circular imports.
"""

from importlib import metadata as _metadata
from pathlib import Path as _Path


__license__ = "MIT"

# Try to read the installed package version first; fall back to pyproject.toml for local dev.
try:
    __version__ = _metadata.version("dimq")
except _metadata.PackageNotFoundError:
    import tomllib
    with open(_Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - typing aid only
    from dimq.units.system import UnitSystem

# Public names resolved on first access: name -> (module, attribute)
_LAZY = {
    "Quantity": ("dimq.core.quantity", "Quantity"),
    "UnitSystem": ("dimq.units.system", "UnitSystem"),
    "get_default_system": ("dimq.units.si", "get_default_system"),
    "set_default_system": ("dimq.units.si", "set_default_system"),
}

__all__ = ["__version__", "__license__", *_LAZY, "u"]


def _get_default_system() -> "UnitSystem":
    from dimq.units.si import get_default_system  # local import
    return get_default_system()


def __getattr__(name: str) -> Any:
    """
    Lazy attribute access. Accessing 'u' builds a namespace from the default
    unit system; the other public names are imported on first use.
    """
    if name == "u":
        return _get_default_system().as_namespace()
    if name in _LAZY:
        import importlib
        module, attr = _LAZY[name]
        return getattr(importlib.import_module(module), attr)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:
    # Improve discoverability in REPL / autocomplete.
    return sorted(list(globals().keys()) + ["u", *_LAZY])
