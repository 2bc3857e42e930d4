import random

import pytest

from homovote.errors import InvalidArgument, NotInvertible
from homovote.modint import ONE, TWO, ZERO, ModInteger


def test_value_is_reduced_on_construction():
    assert ModInteger(23, 11).value == 1
    assert ModInteger(-1, 11).value == 10
    assert ModInteger(23).value == 23


def test_equality_ignores_modulus():
    assert ModInteger(23, 11) == ModInteger(1)
    assert ModInteger(23, 11) == 1
    assert ModInteger(1, 11) != ModInteger(2, 11)
    assert hash(ModInteger(23, 11)) == hash(ModInteger(1, 5))


def test_subtract_reduces():
    assert ModInteger(23, 11).subtract(ONE) == ZERO
    assert ModInteger(3, 11) - 5 == ModInteger(9, 11)


def test_negate():
    assert ModInteger(2, 11).negate() == ModInteger(9, 11)
    assert ModInteger(0, 11).negate() == ZERO
    assert ModInteger(5).negate().value == -5
    assert (-ModInteger(2, 11)).modulus == 11


def test_add_multiply_keep_left_modulus():
    a = ModInteger(7, 11)
    assert a.add(ModInteger(6, 13)) == 2
    assert a.add(6).modulus == 11
    assert a.multiply(TWO) == 3
    assert (a * a) == 5


def test_divide_uses_modular_inverse():
    assert ModInteger(1, 11).divide(2) == 6
    assert ModInteger(6, 11) / TWO == 3
    assert ModInteger(7).divide(2) == 3


def test_divide_by_non_invertible_element():
    with pytest.raises(NotInvertible):
        ModInteger(3, 12).divide(4)
    with pytest.raises(ArithmeticError):
        ModInteger(3, 12).divide(0)


def test_pow():
    assert ModInteger(2, 11).pow(10) == 1
    assert ModInteger(2, 11).pow(-1) == 6
    assert ModInteger(2).pow(10) == 1024
    assert ModInteger(3, 7) ** ModInteger(2, 5) == 2
    with pytest.raises(InvalidArgument):
        ModInteger(2).pow(-1)


def test_mod():
    assert ModInteger(23).mod(11) == 1
    assert ModInteger(10, 13).mod(4).modulus == 13
    with pytest.raises(InvalidArgument):
        ModInteger(10).mod(0)


def test_ordering_and_conversion():
    assert ModInteger(3, 11) < ModInteger(4)
    assert int(ModInteger(14, 11)) == 3
    assert sorted([ModInteger(5), ModInteger(1), ModInteger(3)]) == [1, 3, 5]
    assert not ModInteger(11, 11)


def test_random_stays_below_bound():
    rng = random.Random(1)
    draws = [ModInteger.random(10, rng) for _ in range(500)]
    assert all(0 <= d.value < 10 for d in draws)
    assert all(d.modulus == 10 for d in draws)
    assert set(d.value for d in draws) == set(range(10))


def test_random_accepts_modinteger_bound():
    r = ModInteger.random(ModInteger(97), random.Random(3))
    assert r.modulus == 97


def test_random_is_reproducible_with_seeded_generator():
    a = [ModInteger.random(2 ** 61, random.Random(9)) for _ in range(3)]
    b = [ModInteger.random(2 ** 61, random.Random(9)) for _ in range(3)]
    assert a == b


@pytest.mark.parametrize("bound", [1, 0, -5])
def test_random_rejects_small_bound(bound):
    with pytest.raises(InvalidArgument):
        ModInteger.random(bound)


def test_negative_modulus():
    with pytest.raises(InvalidArgument):
        ModInteger(1, -3)
