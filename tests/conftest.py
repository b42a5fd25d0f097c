"""Shared pytest fixtures for signing tests.

No network access: every test runs against in-memory keys.
"""

import pytest

from hypercore_signing.network import NetworkConfig
from hypercore_signing.signer import HotSigner


@pytest.fixture(scope="session")
def mainnet() -> NetworkConfig:
    return NetworkConfig.mainnet()


@pytest.fixture(scope="session")
def testnet() -> NetworkConfig:
    return NetworkConfig.testnet()


@pytest.fixture()
def known_signer() -> HotSigner:
    """Signer with a fixed key, used for known-answer signatures."""
    return HotSigner.from_private_key("e908f86dbb4d55ac876378565aafeabc187f6690f046459397b17d9b9a19688e")


@pytest.fixture()
def lead() -> HotSigner:
    """Multisig participant submitting the action."""
    return HotSigner.create_for_testing()


@pytest.fixture()
def alice() -> HotSigner:
    return HotSigner.create_for_testing()


@pytest.fixture()
def bob() -> HotSigner:
    return HotSigner.create_for_testing()


@pytest.fixture()
def carol() -> HotSigner:
    return HotSigner.create_for_testing()


@pytest.fixture()
def multisig_address() -> str:
    """Multisig user, checksummed on purpose."""
    return "0x0D1d9635D0640821d15e323ac8AdADfA9c111414"


@pytest.fixture()
def nonce() -> int:
    return 1_700_000_000_000
