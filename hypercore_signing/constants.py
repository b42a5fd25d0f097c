"""Constants for Hyperliquid action signing.

Shared constants used across the signing modules
(:py:mod:`~hypercore_signing.network`,
:py:mod:`~hypercore_signing.typed_data`, etc.).

- `See signing documentation <https://hyperliquid.gitbook.io/hyperliquid-docs/for-developers/api/signing>`__
"""

#: EIP-712 chain id used for user-signed actions on mainnet.
#:
#: Arbitrum One. Sent as ``signatureChainId`` in the action payload.
ARBITRUM_MAINNET_CHAIN_ID: int = 42161

#: EIP-712 chain id used for user-signed actions on testnet.
#:
#: Arbitrum Sepolia, ``0x66eee``.
ARBITRUM_TESTNET_CHAIN_ID: int = 421614

#: EIP-712 chain id of the L1 agent domain.
#:
#: The same for mainnet and testnet, the network is distinguished
#: by the ``source`` field of the agent envelope instead.
AGENT_CHAIN_ID: int = 1337

#: EIP-712 domain name for L1 actions signed through the agent envelope.
AGENT_DOMAIN_NAME = "Exchange"

#: EIP-712 domain name for user-signed actions.
USER_SIGNED_DOMAIN_NAME = "HyperliquidSignTransaction"

#: EIP-712 domain version for both domains.
DOMAIN_VERSION = "1"

#: Both domains use the zero address as the verifying contract.
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

#: Prefix of the primary type name of every user-signed action.
#:
#: E.g. ``HyperliquidTransaction:UsdSend``.
HYPERLIQUID_EIP_PREFIX = "HyperliquidTransaction:"

#: Agent envelope ``source`` tag for mainnet.
MAINNET_AGENT_SOURCE = "a"

#: Agent envelope ``source`` tag for testnet.
TESTNET_AGENT_SOURCE = "b"

#: Value of ``hyperliquidChain`` field for mainnet.
MAINNET_CHAIN_NAME = "Mainnet"

#: Value of ``hyperliquidChain`` field for testnet.
TESTNET_CHAIN_NAME = "Testnet"

#: Environment variable read by :py:meth:`hypercore_signing.network.NetworkConfig.from_env`.
NETWORK_ENV_VAR = "HYPERLIQUID_NETWORK"

#: Significant figures a Hyperliquid price may have.
#:
#: Integer prices are always allowed regardless of the significant figures.
#:
#: See https://hyperliquid.gitbook.io/hyperliquid-docs/for-developers/api/tick-and-lot-size
MAX_PRICE_SIGNIFICANT_FIGURES = 5

#: Maximum price decimals for perpetual markets, before subtracting ``szDecimals``.
MAX_PERP_DECIMALS = 6

#: Maximum price decimals for spot markets, before subtracting ``szDecimals``.
MAX_SPOT_DECIMALS = 8

#: Spot asset ids in orders are offset by this number.
#:
#: Spot market with index 1 is asset 10001.
SPOT_ASSET_OFFSET = 10_000

#: How far behind the wall clock a nonce counter may fall before
#: :py:class:`hypercore_signing.nonce.NonceHandler` resyncs it, in milliseconds.
NONCE_RESYNC_THRESHOLD_MS = 300
