"""Sign actions.

Every action is signed along exactly one path, picked by :py:func:`sign_action`:

- L1 actions: canonical bytes are hashed together with the nonce, vault and expiry,
  then the hash is signed inside the ``Agent`` envelope, see :py:func:`sign_rmp`

- User-signed actions: the EIP-712 document of the action is signed directly,
  see :py:func:`sign_typed_data`

- Multisig actions: the lead signer signs ``SendMultiSig`` over the hash of the
  multisig action, see :py:mod:`hypercore_signing.multisig`

Signer failures are wrapped in :py:class:`~hypercore_signing.exceptions.SigningFailure`
and never retried.
"""

import logging
from dataclasses import dataclass

from eth_typing import HexAddress
from hexbytes import HexBytes

from hypercore_signing.action import Action, MultiSigAction, SigningPath, get_signing_path
from hypercore_signing.eip_712 import eip712_encode_hash
from hypercore_signing.exceptions import SigningFailure
from hypercore_signing.hashing import action_hash
from hypercore_signing.network import NetworkConfig
from hypercore_signing.rmp import action_to_wire, encode_action, multi_sig_action_to_wire, pack
from hypercore_signing.signature import Signature
from hypercore_signing.signer import BaseSigner
from hypercore_signing.typed_data import build_agent_typed_data, build_send_multi_sig_typed_data, build_typed_data
from hypercore_signing.wire import normalise_address

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class SignedAction:
    """An action with its signature, ready to be sent to the exchange."""

    action: Action

    nonce: int

    signature: Signature

    network: NetworkConfig

    vault_address: HexAddress | None = None

    expires_after: int | None = None

    def to_payload(self) -> dict:
        """Body of the ``POST /exchange`` request.

        ``vaultAddress`` and ``expiresAfter`` are only included when set.
        """
        payload = {
            "action": action_to_wire(self.action, self.network),
            "nonce": self.nonce,
            "signature": self.signature.to_wire(),
        }
        if self.vault_address is not None:
            payload["vaultAddress"] = normalise_address(self.vault_address)
        if self.expires_after is not None:
            payload["expiresAfter"] = self.expires_after
        return payload


def _sign_document(signer: BaseSigner, document: dict) -> Signature:
    # Malformed documents raise EncodingError before the signer is asked
    digest = eip712_encode_hash(document)
    try:
        return signer.sign_hash(digest)
    except Exception as e:
        raise SigningFailure(f"Signer {signer} failed to sign {document['primaryType']}") from e


def sign_rmp(signer: BaseSigner, connection_id: bytes, network: NetworkConfig) -> Signature:
    """Sign an L1 action hash.

    The hash is never signed bare: it goes to the ``connectionId`` field of the
    ``Agent`` envelope in the ``Exchange`` domain.

    :param connection_id:
        Output of :py:func:`hypercore_signing.hashing.action_hash`
    """
    document = build_agent_typed_data(connection_id, network)
    signature = _sign_document(signer, document)
    logger.debug("Signed agent envelope %s by %s", HexBytes(connection_id).hex(), signer.address)
    return signature


def sign_typed_data(signer: BaseSigner, document: dict) -> Signature:
    """Sign an EIP-712 document.

    :param document:
        Output of one of the builders in :py:mod:`hypercore_signing.typed_data`
    """
    signature = _sign_document(signer, document)
    logger.debug("Signed %s by %s", document["primaryType"], signer.address)
    return signature


def multi_sig_action_hash(
    action: MultiSigAction,
    nonce: int,
    vault_address: HexAddress | None = None,
    expires_after: int | None = None,
    network: NetworkConfig | None = None,
) -> HexBytes:
    """Hash of a multisig action as signed by the lead.

    The ``type`` tag is not part of the hashed bytes.
    """
    return action_hash(pack(multi_sig_action_to_wire(action, network)), nonce, vault_address, expires_after)


def sign_action(
    signer: BaseSigner,
    action: Action,
    nonce: int,
    network: NetworkConfig,
    vault_address: HexAddress | None = None,
    expires_after: int | None = None,
) -> SignedAction:
    """Sign any action along its signing path.

    Example:

    .. code-block:: python

        signed = sign_action(signer, BatchCancel(cancels=[Cancel(asset=0, oid=123)]), nonce=nonce, network=NetworkConfig.mainnet())
        payload = signed.to_payload()

    :param nonce:
        Millisecond timestamp, see :py:class:`hypercore_signing.nonce.NonceHandler`

    :param vault_address:
        Trade on behalf of a vault or subaccount. Only used by L1 and multisig actions.

    :param expires_after:
        Millisecond timestamp after which the exchange rejects the action.
        Only used by L1 and multisig actions.

    :raise EncodingError:
        The action has a malformed field.

    :raise SigningFailure:
        The signer failed.
    """
    path = get_signing_path(action)
    match path:
        case SigningPath.rmp:
            connection_id = action_hash(encode_action(action, network), nonce, vault_address, expires_after)
            signature = sign_rmp(signer, connection_id, network)
        case SigningPath.typed_data:
            if vault_address is not None or expires_after is not None:
                logger.warning("vault_address and expires_after are not signed for %s", type(action).__name__)
            signature = sign_typed_data(signer, build_typed_data(action, network))
        case SigningPath.multi_sig:
            digest = multi_sig_action_hash(action, nonce, vault_address, expires_after, network)
            signature = sign_typed_data(signer, build_send_multi_sig_typed_data(digest, nonce, network))
        case _:
            raise AssertionError(f"Unknown signing path: {path}")

    logger.info("Signed %s with nonce %d on %s", type(action).__name__, nonce, network.name)

    return SignedAction(
        action=action,
        nonce=nonce,
        signature=signature,
        network=network,
        vault_address=vault_address if path != SigningPath.typed_data else None,
        expires_after=expires_after if path != SigningPath.typed_data else None,
    )
