"""
dimq.units.si
=============

Bootstrap of the default unit system: SI prefixes, the SI base units (with
the gram as mass base so that "kg" is simply kilo-gram), the named derived
units, and a handful of common non-SI units.

The default system is created at import time and can be swapped with
`set_default_system`; quantities built without an explicit system bind to
whatever `get_default_system` returns at that moment.
"""
from __future__ import annotations

from fractions import Fraction

from dimq.units.system import UnitSystem


# (id, symbol, value, aliases); values are exact
_PREFIXES = (
    ("yotta", "Y",  10**24,              ()),
    ("zetta", "Z",  10**21,              ()),
    ("exa",   "E",  10**18,              ()),
    ("peta",  "P",  10**15,              ()),
    ("tera",  "T",  10**12,              ()),
    ("giga",  "G",  10**9,               ()),
    ("mega",  "M",  10**6,               ()),
    ("kilo",  "k",  10**3,               ()),
    ("hecto", "h",  10**2,               ()),
    ("deca",  "da", 10,                  ("deka",)),
    ("deci",  "d",  Fraction(1, 10),     ()),
    ("centi", "c",  Fraction(1, 10**2),  ()),
    ("milli", "m",  Fraction(1, 10**3),  ()),
    ("micro", "µ",  Fraction(1, 10**6),  ("u", "μ")),   # micro sign, ASCII u, Greek mu
    ("nano",  "n",  Fraction(1, 10**9),  ()),
    ("pico",  "p",  Fraction(1, 10**12), ()),
    ("femto", "f",  Fraction(1, 10**15), ()),
    ("atto",  "a",  Fraction(1, 10**18), ()),
    ("zepto", "z",  Fraction(1, 10**21), ()),
    ("yocto", "y",  Fraction(1, 10**24), ()),
)

# (id, symbol, aliases)
_BASE_UNITS = (
    ("metre",   "m",   ("meter", "metres", "meters")),      # length
    ("gram",    "g",   ("gramme", "grams")),                # mass
    ("second",  "s",   ("sec", "seconds")),                 # time
    ("ampere",  "A",   ("amp", "amperes")),                 # electric current
    ("kelvin",  "K",   ()),                                 # temperature
    ("mole",    "mol", ("moles",)),                         # amount of substance
    ("candela", "cd",  ()),                                 # luminous intensity
)

# (id, symbol, definition, aliases); order matters, definitions refer to earlier units
_DERIVED_UNITS = (
    ("radian",    "rad", "1",          ()),
    ("steradian", "sr",  "1",          ()),
    ("hertz",     "Hz",  "s**-1",      ()),
    ("newton",    "N",   "kg*m/s**2",  ()),
    ("pascal",    "Pa",  "N/m**2",     ()),
    ("joule",     "J",   "N*m",        ()),
    ("watt",      "W",   "J/s",        ()),
    ("coulomb",   "C",   "A*s",        ()),
    ("volt",      "V",   "W/A",        ()),
    ("farad",     "F",   "C/V",        ()),
    ("ohm",       "Ω",   "V/A",        ("Ohm", "OHM")),
    ("siemens",   "S",   "A/V",        ()),
    ("weber",     "Wb",  "V*s",        ()),
    ("tesla",     "T",   "Wb/m**2",    ()),
    ("henry",     "H",   "Wb/A",       ()),
    ("lumen",     "lm",  "cd*sr",      ()),
    ("lux",       "lx",  "lm/m**2",    ()),
    ("becquerel", "Bq",  "s**-1",      ()),
    ("gray",      "Gy",  "J/kg",       ()),
    ("sievert",   "Sv",  "J/kg",       ()),
    ("katal",     "kat", "mol/s",      ()),
    ("litre",     "L",   "dm**3",      ("l", "liter", "litres", "liters")),
    ("tonne",     "t",   "1000*kg",    ("tonnes",)),
)

# (id, symbol, definition, aliases); never prefixed
_NON_SI_UNITS = (
    ("minute",    "min",       "60*s",        ("minutes",)),
    ("hour",      "h",         "60*min",      ("hr", "hours")),
    ("day",       "d",         "24*h",        ("days",)),
    ("week",      "wk",        "7*d",         ("weeks",)),
    ("fortnight", "fortnight", "14*d",        ("fortnights",)),
    # Civil (Gregorian) average year and month
    ("year",      "yr",        "365.2425*d",  ("years", "annum")),
    ("month",     "mo",        "yr/12",       ("months",)),
    ("inch",      "in",        "2.54*cm",     ("inches",)),
    ("foot",      "ft",        "12*in",       ("feet",)),
    ("yard",      "yd",        "3*ft",        ("yards",)),
    ("mile",      "mi",        "1760*yd",     ("miles",)),
)


def _bootstrap_si_system() -> UnitSystem:
    system = UnitSystem("SI")

    for id, symbol, value, aliases in _PREFIXES:
        system.register_factor(id, symbol, value, aliases)
    for id, symbol, aliases in _BASE_UNITS:
        system.register_unit(id, symbol, aliases=aliases)
    for id, symbol, definition, aliases in _DERIVED_UNITS:
        system.register_unit(id, symbol, definition, aliases=aliases)
    for id, symbol, definition, aliases in _NON_SI_UNITS:
        system.register_unit(id, symbol, definition, aliases=aliases, prefixable=False)

    return system


# Public, shared default system
DEFAULT_SYSTEM: UnitSystem = _bootstrap_si_system()


def get_default_system() -> UnitSystem:
    return DEFAULT_SYSTEM


def set_default_system(system: UnitSystem) -> None:
    """Replace the system that quantities bind to when none is given."""
    global DEFAULT_SYSTEM
    if not isinstance(system, UnitSystem):
        raise TypeError(f"Expected a UnitSystem, got {type(system).__name__}")
    DEFAULT_SYSTEM = system


__all__ = [
    "DEFAULT_SYSTEM",
    "get_default_system",
    "set_default_system",
]
