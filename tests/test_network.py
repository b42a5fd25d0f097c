"""Network configuration."""

import pytest

from hypercore_signing.network import Network, NetworkConfig


def test_mainnet_constants(mainnet):
    """Mainnet signs with Arbitrum One chain id and source a."""
    assert mainnet.is_mainnet
    assert mainnet.agent_source == "a"
    assert mainnet.signature_chain_id_hex == "0xa4b1"
    assert mainnet.agent_domain()["chainId"] == 1337
    assert mainnet.user_signed_domain()["name"] == "HyperliquidSignTransaction"


def test_testnet_constants(testnet):
    """Testnet signs with Arbitrum Sepolia chain id and source b."""
    assert not testnet.is_mainnet
    assert testnet.agent_source == "b"
    assert testnet.name == "Testnet"
    assert testnet.signature_chain_id_hex == "0x66eee"


def test_from_env(monkeypatch):
    """HYPERLIQUID_NETWORK selects the network."""
    monkeypatch.setenv("HYPERLIQUID_NETWORK", "Testnet")
    assert NetworkConfig.from_env() == NetworkConfig.testnet()

    monkeypatch.delenv("HYPERLIQUID_NETWORK")
    assert NetworkConfig.from_env().network == Network.mainnet


def test_from_env_unknown(monkeypatch):
    """Typos are not silently mapped to mainnet."""
    monkeypatch.setenv("HYPERLIQUID_NETWORK", "mainet")
    with pytest.raises(ValueError):
        NetworkConfig.from_env()


def test_config_is_immutable(mainnet):
    """Config can be shared freely."""
    with pytest.raises(AttributeError):
        mainnet.agent_source = "b"
