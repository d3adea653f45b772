"""
Shared fixtures for the Dilithium test suite
"""

import random

import pytest

from dilithium import Dilithium2, Dilithium3, Dilithium5


@pytest.fixture
def rng():
    """Deterministic random source for coefficient test data"""
    return random.Random(0x5EED)


@pytest.fixture(scope="session")
def seed():
    return (b"TESTSEED0" * 4)[:32]


@pytest.fixture(scope="session")
def message():
    return b"abc"


@pytest.fixture(scope="session")
def keypair2(seed):
    return Dilithium2().keygen(seed)


@pytest.fixture(scope="session")
def keypair3(seed):
    return Dilithium3().keygen(seed)


@pytest.fixture(scope="session")
def keypair5(seed):
    return Dilithium5().keygen(seed)
