"""Signer capability.

- :py:class:`BaseSigner` is the narrow interface the signing core needs:
  an address and a way to sign a 32 byte digest

- :py:class:`HotSigner` keeps a plain text private key in the process memory
  using :py:class:`eth_account.signers.local.LocalAccount`

- Hardware and cloud KMS signers subclass :py:class:`BaseSigner` and implement :py:meth:`BaseSigner.sign_hash`

Example:

.. code-block:: python

    import os

    from hypercore_signing.signer import HotSigner, recover_signer

    signer = HotSigner.from_private_key(os.environ["PRIVATE_KEY"])
    signature = signer.sign_hash(digest)
    assert recover_signer(digest, signature) == signer.address
"""

import logging
import re
from abc import ABC, abstractmethod

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_typing import HexAddress
from hexbytes import HexBytes

from hypercore_signing.compat import WEB3_PY_V7
from hypercore_signing.eip_712 import eip712_encode_hash
from hypercore_signing.exceptions import InvalidKey
from hypercore_signing.network import NetworkConfig
from hypercore_signing.signature import Signature
from hypercore_signing.typed_data import build_agent_typed_data

logger = logging.getLogger(__name__)

_PRIVATE_KEY_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")


class BaseSigner(ABC):
    """Abstract base class for Hyperliquid signers.

    Subclasses only need to sign raw digests. EIP-712 hashing is done here,
    so remote signers never need to understand Hyperliquid documents.
    """

    @property
    @abstractmethod
    def address(self) -> HexAddress:
        """Checksummed address of the signing key."""

    @abstractmethod
    def sign_hash(self, digest: bytes) -> Signature:
        """Sign a 32 byte digest without any prefix.

        :raise Exception:
            Any failure of the underlying primitive. The caller wraps it
            in :py:class:`hypercore_signing.exceptions.SigningFailure`.
        """

    def sign_typed_data(self, document: dict) -> Signature:
        """Sign an EIP-712 document."""
        return self.sign_hash(eip712_encode_hash(document))

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.address}>"


class HotSigner(BaseSigner):
    """Sign with a private key held in memory."""

    def __init__(self, account: LocalAccount):
        assert isinstance(account, LocalAccount), f"Expected LocalAccount, got {type(account)}"
        self.account = account

    @property
    def address(self) -> HexAddress:
        return self.account.address

    def sign_hash(self, digest: bytes) -> Signature:
        digest = HexBytes(digest)
        assert len(digest) == 32, f"Expected 32 byte digest, got {len(digest)}"
        if WEB3_PY_V7:
            signed = self.account.unsafe_sign_hash(digest)
        else:
            signed = self.account.signHash(digest)
        return Signature(r=signed.r, s=signed.s, v=signed.v)

    @staticmethod
    def from_private_key(key: str) -> "HotSigner":
        """Create a signer from a private key passed in as a hex string.

        Example:

        .. code-block:: python

            # Generated with openssl rand -hex 32
            signer = HotSigner.from_private_key("0x54c137e27d2930f7b3433249c5f07b37ddcfea70871c0a4ef9e0f65655faf957")

        :param key:
            64 hex characters, ``0x`` prefix optional

        :raise InvalidKey:
            Not a valid secp256k1 private key.
        """
        if type(key) != str:
            raise InvalidKey(f"Expected private key as string, got {type(key)}")

        hex_str = key[2:] if key.startswith("0x") else key
        if not _PRIVATE_KEY_PATTERN.match(hex_str):
            # Do not echo the key material
            raise InvalidKey(f"Private key must be 32 bytes as hex, got {len(hex_str)} characters")

        try:
            account = Account.from_key("0x" + hex_str)
        except (ValueError, TypeError) as e:
            raise InvalidKey("Private key is out of the secp256k1 range") from e

        logger.info("Loaded hot signer %s", account.address)
        return HotSigner(account)

    @staticmethod
    def create_for_testing() -> "HotSigner":
        """Random throwaway key."""
        return HotSigner(Account.create())


def recover_signer(digest: bytes, signature: Signature) -> HexAddress:
    """Recover the checksummed address that signed a digest."""
    return Account._recover_hash(HexBytes(digest), vrs=(signature.v, signature.r, signature.s))


def recover_typed_data_signer(document: dict, signature: Signature) -> HexAddress:
    """Recover the address that signed an EIP-712 document."""
    return recover_signer(eip712_encode_hash(document), signature)


def recover_rmp_signer(connection_id: bytes, network: NetworkConfig, signature: Signature) -> HexAddress:
    """Recover the address that signed an L1 action hash in the agent envelope."""
    return recover_typed_data_signer(build_agent_typed_data(connection_id, network), signature)
