"""EIP-712 hashing.

- Documents are ``eth_signTypedData_v4`` style dicts with ``types``, ``domain``,
  ``primaryType`` and ``message``

- Encoding is done by :py:func:`eth_account.messages.encode_typed_data`, which
  accepts Hyperliquid type names with a colon, e.g. ``HyperliquidTransaction:UsdSend``

- We return the raw digest instead of signing here, so that
  :py:class:`~hypercore_signing.signer.BaseSigner` implementations only need to sign hashes

Example:

.. code-block:: python

    document = {
        "types": {
            "EIP712Domain": [
                {"name": "name", "type": "string"},
                {"name": "version", "type": "string"},
                {"name": "chainId", "type": "uint256"},
                {"name": "verifyingContract", "type": "address"},
            ],
            "Agent": [
                {"name": "source", "type": "string"},
                {"name": "connectionId", "type": "bytes32"},
            ],
        },
        "domain": {"name": "Exchange", "version": "1", "chainId": 1337, "verifyingContract": "0x0000000000000000000000000000000000000000"},
        "primaryType": "Agent",
        "message": {"source": "a", "connectionId": connection_id},
    }

    digest = eip712_encode_hash(document)
"""

from typing import Any

from eth_abi.exceptions import EncodingError as ABIEncodingError
from eth_account.messages import encode_typed_data
from eth_utils.exceptions import ValidationError
from hexbytes import HexBytes
from web3 import Web3

from hypercore_signing.exceptions import EncodingError


def fast_keccak(value: bytes) -> bytes:
    return Web3.keccak(value)


def eip712_encode(typed_data: dict[str, Any]) -> list[bytes]:
    """Split a typed data document to its signable parts.

    :return:
        ``[0x1901, domain separator, message struct hash]``

    :raise EncodingError:
        The document is malformed.
    """
    try:
        signable = encode_typed_data(full_message=typed_data)
    except (KeyError, AttributeError, TypeError, IndexError, ValueError, ValidationError, ABIEncodingError) as exc:
        raise EncodingError(f"Not a valid typed data document: {typed_data}") from exc

    return [b"\x19" + signable.version, signable.header, signable.body]


def eip712_encode_hash(typed_data: dict[str, Any]) -> HexBytes:
    """Digest a signer signs for an EIP-712 document.

    :param typed_data:
        Document with ``types``, ``domain``, ``primaryType`` and ``message``.

    :return:
        Keccak-256 of the encoded signable data
    """
    return HexBytes(fast_keccak(b"".join(eip712_encode(typed_data))))
