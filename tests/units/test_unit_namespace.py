# pytest tests for dimq.units.namespace (UnitNamespace)

from fractions import Fraction

import pytest

from dimq.core.quantity import Quantity
from dimq.units.namespace import UnitNamespace
from dimq.units.si import _bootstrap_si_system


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def system():
    """Fresh, fully-bootstrapped SI system for isolation per test."""
    return _bootstrap_si_system()


@pytest.fixture()
def ns(system):
    return UnitNamespace(system)


# ---------------------------------------------------------------------------
# Access styles: __call__, __getattr__
# ---------------------------------------------------------------------------

def test_namespace_call_returns_unit_quantity(ns, system):
    q = ns("m")
    assert isinstance(q, Quantity)
    assert q.value == 1
    assert q.unit == (("none", "metre", 1),)
    assert q.system is system


def test_namespace_getattr_returns_unit_quantity(ns):
    q = ns.kg
    assert q.value == 1
    assert q.unit == (("kilo", "gram", 1),)


def test_namespace_access_styles_equivalent(ns):
    assert ns("A") == ns.A


def test_namespace_call_accepts_expressions(ns):
    assert ns("km/h").unit == (("kilo", "metre", 1), ("none", "hour", -1))


@pytest.mark.parametrize("alias, canonical", [
    ("ohm", "Ω"),
    ("Ohm", "Ω"),
    ("liter", "L"),
    ("meters", "m"),
])
def test_aliases_via_getattr(ns, alias, canonical):
    assert getattr(ns, alias) == ns(canonical)


def test_multiplying_by_namespace_units(ns):
    q = 5 * ns.km / (30 * ns.min)
    assert q.to("km/h").value == 10


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

def test_unknown_attribute_is_attribute_error(ns):
    with pytest.raises(AttributeError):
        ns.parsec
    assert not hasattr(ns, "parsec")


def test_private_names_are_not_looked_up(ns):
    with pytest.raises(AttributeError):
        ns._secret


def test_call_with_bad_expression_raises_value_error(ns):
    with pytest.raises(ValueError):
        ns("m**")


# ---------------------------------------------------------------------------
# Membership, dir(), define()
# ---------------------------------------------------------------------------

def test_contains(ns):
    assert "km" in ns
    assert "kg*m/s**2" in ns
    assert "parsec" not in ns


def test_dir_lists_units(ns):
    names = dir(ns)
    assert "metre" in names
    assert "km/h" not in names
    assert "define" in names


def test_define_new_unit(ns, system):
    ns.define("furlong", "220*yd", symbol="fur")
    assert "fur" in ns
    assert (8 * ns.fur).to("mi").value == 1
    assert system.unit("furlong").symbol == "fur"


def test_define_base_unit(ns):
    ns.define("bit")
    assert ns.bit.unit == (("none", "bit", 1),)
    assert ns.kbit.unit == (("kilo", "bit", 1),)


@pytest.mark.parametrize("name", ["define", "__call__", "__getattr__"])
def test_define_rejects_reserved_names(ns, name):
    with pytest.raises(ValueError):
        ns.define(name, "m")


def test_define_replace(ns):
    ns.define("smoot", "1.7*m")
    with pytest.raises(ValueError):
        ns.define("smoot", "1.7018*m")
    ns.define("smoot", "1.7018*m", replace=True)
    assert ns.smoot.to("mm").value == Fraction(17018, 10)


def test_defined_units_stay_in_their_system(ns):
    ns.define("smoot", "1.7018*m")
    other = _bootstrap_si_system().as_namespace()
    assert "smoot" not in other
