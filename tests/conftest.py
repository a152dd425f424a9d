import random

import pytest

from rsastream.keys import generate_keypair


@pytest.fixture
def rng():
    return random.Random(20240601)


@pytest.fixture(scope="session")
def keypair_512():
    return generate_keypair(512, rng=random.Random(512))


@pytest.fixture(scope="session")
def keypair_256():
    return generate_keypair(256, rng=random.Random(256))
