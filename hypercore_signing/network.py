"""Per-network signing configuration.

Network specific constants (EIP-712 chain ids, agent source tags) live in an
immutable :py:class:`NetworkConfig` that is created once and then passed
explicitly to the hashing and signing functions.

Example:

.. code-block:: python

    from hypercore_signing.network import NetworkConfig

    # Read HYPERLIQUID_NETWORK, defaults to mainnet
    network = NetworkConfig.from_env()
    print(network.name, network.signature_chain_id_hex)
"""

import enum
import logging
import os
from dataclasses import dataclass

from hypercore_signing.constants import (
    AGENT_CHAIN_ID,
    AGENT_DOMAIN_NAME,
    ARBITRUM_MAINNET_CHAIN_ID,
    ARBITRUM_TESTNET_CHAIN_ID,
    DOMAIN_VERSION,
    MAINNET_AGENT_SOURCE,
    MAINNET_CHAIN_NAME,
    NETWORK_ENV_VAR,
    TESTNET_AGENT_SOURCE,
    TESTNET_CHAIN_NAME,
    USER_SIGNED_DOMAIN_NAME,
    ZERO_ADDRESS,
)

logger = logging.getLogger(__name__)


class Network(enum.Enum):
    """Hyperliquid network."""

    mainnet = "mainnet"
    testnet = "testnet"


@dataclass(slots=True, frozen=True)
class NetworkConfig:
    """Signing constants for one Hyperliquid network.

    - Use :py:meth:`mainnet` or :py:meth:`testnet` to construct

    - Never mutate: the same config can be shared by all threads
    """

    #: Which network this is
    network: Network

    #: Value for ``hyperliquidChain`` fields: ``Mainnet`` or ``Testnet``
    name: str

    #: Agent envelope ``source``: ``a`` or ``b``
    agent_source: str

    #: EIP-712 chain id for user-signed actions
    signature_chain_id: int

    #: EIP-712 chain id for the agent domain
    agent_chain_id: int = AGENT_CHAIN_ID

    @staticmethod
    def mainnet() -> "NetworkConfig":
        return NetworkConfig(
            network=Network.mainnet,
            name=MAINNET_CHAIN_NAME,
            agent_source=MAINNET_AGENT_SOURCE,
            signature_chain_id=ARBITRUM_MAINNET_CHAIN_ID,
        )

    @staticmethod
    def testnet() -> "NetworkConfig":
        return NetworkConfig(
            network=Network.testnet,
            name=TESTNET_CHAIN_NAME,
            agent_source=TESTNET_AGENT_SOURCE,
            signature_chain_id=ARBITRUM_TESTNET_CHAIN_ID,
        )

    @staticmethod
    def from_network(network: Network) -> "NetworkConfig":
        match network:
            case Network.mainnet:
                return NetworkConfig.mainnet()
            case Network.testnet:
                return NetworkConfig.testnet()
            case _:
                raise AssertionError(f"Unknown network: {network}")

    @staticmethod
    def from_env(default: str = "mainnet") -> "NetworkConfig":
        """Create the network config from ``HYPERLIQUID_NETWORK`` environment variable.

        :param default:
            Network to use when the environment variable is not set.

        :raise ValueError:
            Unknown network name.
        """
        value = os.environ.get(NETWORK_ENV_VAR, default).strip().lower()
        try:
            network = Network(value)
        except ValueError as e:
            raise ValueError(f"{NETWORK_ENV_VAR} must be mainnet or testnet, got {value!r}") from e
        logger.info("Using Hyperliquid network %s", network.value)
        return NetworkConfig.from_network(network)

    @property
    def is_mainnet(self) -> bool:
        return self.network == Network.mainnet

    @property
    def signature_chain_id_hex(self) -> str:
        """Chain id as sent in ``signatureChainId`` field, e.g. ``0xa4b1``."""
        return hex(self.signature_chain_id)

    def user_signed_domain(self) -> dict:
        """EIP-712 domain for user-signed actions."""
        return {
            "name": USER_SIGNED_DOMAIN_NAME,
            "version": DOMAIN_VERSION,
            "chainId": self.signature_chain_id,
            "verifyingContract": ZERO_ADDRESS,
        }

    def agent_domain(self) -> dict:
        """EIP-712 domain for L1 actions signed through the agent envelope."""
        return {
            "name": AGENT_DOMAIN_NAME,
            "version": DOMAIN_VERSION,
            "chainId": self.agent_chain_id,
            "verifyingContract": ZERO_ADDRESS,
        }
