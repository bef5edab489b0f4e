import pytest

from blind_threshold_bls import keygen, threshold_keygen

SEED = b"a" * 59
USER_SEED = b"b" * 59
MSG = bytes([1, 2, 3, 4, 6])


@pytest.fixture(scope="session")
def seed():
    return SEED


@pytest.fixture(scope="session")
def user_seed():
    return USER_SEED


@pytest.fixture(scope="session")
def msg():
    return MSG


@pytest.fixture(scope="session")
def keypair():
    return keygen(SEED)


@pytest.fixture(scope="session")
def keys():
    """The 3-of-5 sharing used throughout the suite."""
    return threshold_keygen(5, 3, SEED)
