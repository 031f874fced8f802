import operator

import pytest

from dimq.core.coercion import SupportsQuantityCoercion, apply_through_coercion, swapped, to_quantity
from dimq.core.quantity import Quantity
from dimq.errors import IncompatibleUnitsError, MalformedUnitError, UnsupportedOperandError


class Meters:
    """Foreign length type that knows how to meet a Quantity halfway."""

    def __init__(self, n):
        self.n = n

    def __quantity_coerce__(self, other):
        return other, Quantity(self.n, "m", other.system)


class BadShape:
    def __quantity_coerce__(self, other):
        return (other,)


class Failing:
    def __quantity_coerce__(self, other):
        raise ValueError("nope")


class Crashing:
    def __quantity_coerce__(self, other):
        raise KeyError("boom")


class UnknownUnitPair:
    def __quantity_coerce__(self, other):
        return other, "parsec"


class ForeignPair:
    def __quantity_coerce__(self, other):
        return other, object()


# -------------------------------
# to_quantity
# -------------------------------

def test_same_system_quantity_passes_through(toy):
    q = Quantity(2, "m", toy)
    assert to_quantity(q, toy) is q


def test_other_system_quantity_is_rejected(toy, si):
    with pytest.raises(IncompatibleUnitsError):
        to_quantity(Quantity(2, "m", si), toy)


def test_text_becomes_unit_quantity(toy):
    q = to_quantity("km/s", toy)
    assert q.value == 1
    assert q.unit == (("kilo", "metre", 1), ("none", "second", -1))


def test_unknown_text_is_malformed(toy):
    with pytest.raises(MalformedUnitError):
        to_quantity("furlong", toy)


def test_raw_signature_becomes_unit_quantity(toy):
    q = to_quantity([("none", "second", -1), ("none", "metre", 1)], toy)
    assert q.value == 1
    assert q.unit == (("none", "metre", 1), ("none", "second", -1))


def test_raw_signature_is_validated(toy):
    with pytest.raises(MalformedUnitError):
        to_quantity([("none", "parsec", 1)], toy)
    with pytest.raises(MalformedUnitError):
        to_quantity([("giga", "metre", 1)], toy)


def test_numbers_become_dimensionless(toy):
    q = to_quantity(2.5, toy)
    assert q.value == 2.5
    assert q.unit == ()


@pytest.mark.parametrize("obj", [True, None, object(), {"m": 1}])
def test_unsupported_objects(toy, obj):
    with pytest.raises(UnsupportedOperandError):
        to_quantity(obj, toy)


def test_unsupported_operand_is_type_error(toy):
    with pytest.raises(TypeError):
        to_quantity(object(), toy)


# -------------------------------
# coercion hook
# -------------------------------

def test_hook_class_satisfies_protocol():
    assert isinstance(Meters(1), SupportsQuantityCoercion)
    assert not isinstance(object(), SupportsQuantityCoercion)


def test_apply_through_coercion_uses_the_pair(toy):
    q = Quantity(3, "m", toy)
    result = apply_through_coercion(q, Meters(2), operator.add)
    assert result == Quantity(5, "m", toy)
    assert result.unit == (("none", "metre", 1),)


def test_arithmetic_falls_back_to_hook(toy):
    q = Quantity(1, "km", toy)
    assert q + Meters(500) == Quantity(1500, "m", toy)
    assert q * Meters(2) == Quantity(2000, "m**2", toy)


def test_reflected_arithmetic_through_hook(toy):
    q = Quantity(2, "m", toy)
    # Meters(10) - q
    assert q.__rsub__(Meters(10)) == Quantity(8, "m", toy)


def test_hook_without_pair_is_rejected(toy):
    with pytest.raises(UnsupportedOperandError):
        Quantity(1, "m", toy) + BadShape()


def test_hook_errors_are_wrapped(toy):
    with pytest.raises(UnsupportedOperandError) as exc:
        Quantity(1, "m", toy) * Failing()
    assert isinstance(exc.value.__cause__, ValueError)


def test_missing_hook_raises(toy):
    with pytest.raises(UnsupportedOperandError):
        Quantity(1, "m", toy) + object()


def test_equality_through_hook(toy):
    assert Quantity(1, "km", toy) == Meters(1000)
    assert Quantity(1, "km", toy) != Meters(1)


def test_swapped_exchanges_arguments():
    assert swapped(operator.sub)(1, 10) == 9


@pytest.mark.regression(reason="Any error raised by the hook ends in UnsupportedOperandError")
def test_hook_errors_of_any_kind_are_wrapped(toy):
    with pytest.raises(UnsupportedOperandError) as exc:
        Quantity(1, "m", toy) + Crashing()
    assert isinstance(exc.value.__cause__, KeyError)


@pytest.mark.regression(reason="A pair the operator cannot use ends in UnsupportedOperandError")
@pytest.mark.parametrize("hook", [UnknownUnitPair, ForeignPair])
def test_unusable_pair_is_wrapped(toy, hook):
    with pytest.raises(UnsupportedOperandError) as exc:
        Quantity(1, "m", toy) + hook()
    assert exc.value.__cause__ is not None


def test_incompatible_pair_is_not_masked(toy):
    class Seconds:
        def __quantity_coerce__(self, other):
            return other, Quantity(1, "s", other.system)

    with pytest.raises(IncompatibleUnitsError):
        Quantity(1, "m", toy) + Seconds()


@pytest.mark.regression(reason="compare and ordering fall back to the coercion hook")
def test_compare_through_hook(toy):
    q = Quantity(1, "km", toy)
    assert q.compare(Meters(1000)) == 0
    assert q.compare(Meters(999)) == 1
    assert q.compare(Meters(2000)) == -1


def test_ordering_through_hook(toy):
    q = Quantity(1, "km", toy)
    assert q < Meters(2000)
    assert q <= Meters(1000)
    assert q > Meters(10)
    assert q >= Meters(1000)


def test_compare_through_failing_hook(toy):
    with pytest.raises(UnsupportedOperandError):
        Quantity(1, "km", toy).compare(Failing())
    with pytest.raises(UnsupportedOperandError):
        Quantity(1, "km", toy) < object()
