import random

import pytest

from homovote.elgamal import gen_group, gen_keypair

# Small enough to keep the suite fast, large enough that a forged proof
# passes with negligible probability.
TEST_QNBITS = 32


@pytest.fixture
def rng():
    return random.Random(2770)


@pytest.fixture(scope="session")
def group():
    return gen_group(TEST_QNBITS, random.Random(42))


@pytest.fixture(scope="session")
def keypair(group):
    p, q, g = group
    return gen_keypair(p, q, g, random.Random(7))


@pytest.fixture
def sk(keypair):
    return keypair[0]


@pytest.fixture
def pk(keypair):
    return keypair[1]
