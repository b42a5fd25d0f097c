"""Action hash for L1 actions.

The hash covers the canonical action bytes and the request metadata,
so a signature cannot be replayed with another nonce, vault or expiry.

Layout of the hashed bytes:

- MessagePack bytes of the action

- Nonce, 8 bytes big endian

- ``0x00`` without vault, or ``0x01`` followed by the 20 vault address bytes

- Only when expiry is set: ``0x00`` followed by the expiry, 8 bytes big endian
"""

import logging

from eth_typing import HexAddress
from hexbytes import HexBytes

from hypercore_signing.action import Action
from hypercore_signing.eip_712 import fast_keccak
from hypercore_signing.network import NetworkConfig
from hypercore_signing.rmp import encode_action
from hypercore_signing.wire import normalise_address

logger = logging.getLogger(__name__)


def _u64(value: int, name: str) -> bytes:
    assert type(value) == int, f"{name} must be int, got {type(value)}"
    assert 0 <= value < 2**64, f"{name} does not fit u64: {value}"
    return value.to_bytes(8, "big")


def action_hash(
    canonical: bytes,
    nonce: int,
    vault_address: HexAddress | str | None = None,
    expires_after: int | None = None,
) -> HexBytes:
    """Compute the 32 byte signing hash of an encoded action.

    :param canonical:
        Output of :py:func:`hypercore_signing.rmp.encode_action`.

    :param nonce:
        Millisecond timestamp nonce.

    :param vault_address:
        Vault or subaccount the action is done on behalf of.

    :param expires_after:
        Millisecond timestamp after which the exchange rejects the action.

    :return:
        Keccak-256 digest, used as the ``connectionId`` of the agent envelope.
    """
    data = bytearray(canonical)
    data += _u64(nonce, "nonce")

    if vault_address is None:
        data.append(0)
    else:
        data.append(1)
        data += bytes.fromhex(normalise_address(vault_address)[2:])

    if expires_after is not None:
        data.append(0)
        data += _u64(expires_after, "expires_after")

    digest = HexBytes(fast_keccak(bytes(data)))
    logger.debug("Action hash %s, nonce %d, vault %s, expires %s", digest.hex(), nonce, vault_address, expires_after)
    return digest


def hash_action(
    action: Action,
    nonce: int,
    vault_address: HexAddress | str | None = None,
    expires_after: int | None = None,
    network: NetworkConfig | None = None,
) -> HexBytes:
    """Encode and hash an action in one go."""
    return action_hash(encode_action(action, network), nonce, vault_address, expires_after)
