import pytest
from fractions import Fraction

# Target module
import dimq.core.utils as utils


# -------------------------------
# is_integer / is_number
# -------------------------------

@pytest.mark.parametrize("x, expected", [
    (3, True),
    (-7, True),
    (True, False),      # bools are not quantities' numbers
    (3.0, False),
    (Fraction(3), False),
])
def test_is_integer(x, expected):
    assert utils.is_integer(x) is expected


@pytest.mark.parametrize("x, expected", [
    (1, True),
    (1.5, True),
    (Fraction(1, 3), True),
    (2 + 1j, True),
    (False, False),
    ("1", False),
    (None, False),
])
def test_is_number(x, expected):
    assert utils.is_number(x) is expected


# -------------------------------
# simplify_fraction
# -------------------------------

def test_simplify_fraction_integral_becomes_int():
    out = utils.simplify_fraction(Fraction(4, 2))
    assert out == 2 and type(out) is int


def test_simplify_fraction_leaves_others_alone():
    assert utils.simplify_fraction(Fraction(1, 3)) == Fraction(1, 3)
    assert type(utils.simplify_fraction(2.0)) is float


# -------------------------------
# rationalize
# -------------------------------

@pytest.mark.parametrize("x, expected", [
    (0.5, Fraction(1, 2)),
    (-0.25, Fraction(-1, 4)),
    (2.0, 2),
    (1 / 3, Fraction(1, 3)),
])
def test_rationalize(x, expected):
    assert utils.rationalize(x) == expected


def test_rationalize_integral_float_gives_int():
    assert type(utils.rationalize(3.0)) is int


def test_rationalize_rejects_irrational_looking_floats():
    with pytest.raises(ValueError):
        utils.rationalize(2 ** 0.5)


# -------------------------------
# exact_power / exact_divide
# -------------------------------

def test_exact_power_negative_exponent_is_fraction():
    assert utils.exact_power(10, -3) == Fraction(1, 1000)
    assert isinstance(utils.exact_power(10, -3), Fraction)


def test_exact_power_of_fraction():
    assert utils.exact_power(Fraction(1, 1000), -1) == 1000
    assert type(utils.exact_power(Fraction(1, 1000), -1)) is int


def test_exact_power_integral_fraction_exponent():
    assert utils.exact_power(3, Fraction(-2, 1)) == Fraction(1, 9)


def test_exact_power_falls_back_for_floats():
    assert utils.exact_power(2.0, -1) == 0.5
    assert utils.exact_power(4, Fraction(1, 2)) == pytest.approx(2.0)


def test_exact_divide_ints():
    assert utils.exact_divide(1, 3) == Fraction(1, 3)
    out = utils.exact_divide(6, 3)
    assert out == 2 and type(out) is int


def test_exact_divide_mixed_is_plain_division():
    assert utils.exact_divide(1.0, 4) == 0.25
    assert utils.exact_divide(Fraction(1, 2), 2) == Fraction(1, 4)


def test_exact_divide_by_zero_raises():
    with pytest.raises(ZeroDivisionError):
        utils.exact_divide(1, 0)
