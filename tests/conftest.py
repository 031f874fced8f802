# tests/conftest.py
from fractions import Fraction

import pytest

from dimq.units.si import DEFAULT_SYSTEM as _si
from dimq.units.system import UnitSystem


def build_toy_system(name: str = "toy") -> UnitSystem:
    """Small, isolated catalog: three prefixes, three base units, two derived units."""
    s = UnitSystem(name)
    s.register_factor("kilo", "k", 1000)
    s.register_factor("mega", "M", 10**6)
    s.register_factor("milli", "m", Fraction(1, 1000))
    s.register_unit("metre", "m")
    s.register_unit("gram", "g")
    s.register_unit("second", "s")
    s.register_unit("minute", "min", "60*s", prefixable=False)
    s.register_unit("newton", "N", "kg*m/s**2")
    return s


@pytest.fixture(scope="session")
def si():
    return _si


@pytest.fixture
def toy():
    """Fresh toy system per test so registrations never leak."""
    return build_toy_system()


@pytest.fixture
def u():
    return _si.as_namespace()
