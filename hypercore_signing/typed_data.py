"""EIP-712 documents for Hyperliquid.

Three kinds of documents are built here:

- User-signed actions (transfers, agent approval, multisig conversion) in the
  ``HyperliquidSignTransaction`` domain, with primary type ``HyperliquidTransaction:<Name>``

- The ``Agent`` envelope that carries the hash of an L1 action, in the ``Exchange`` domain

- The ``SendMultiSig`` envelope the lead signer signs when submitting a multisig action

The documents are plain dicts in the ``eth_signTypedData_v4`` layout, so they
can be handed to an external signer as is.
"""

import logging

from eth_typing import HexAddress
from hexbytes import HexBytes

from hypercore_signing.action import (
    Action,
    ApproveAgent,
    ConvertToMultiSigUser,
    EvmTransfer,
    SendAsset,
    SpotSend,
    UsdSend,
)
from hypercore_signing.constants import HYPERLIQUID_EIP_PREFIX
from hypercore_signing.exceptions import EncodingError
from hypercore_signing.network import NetworkConfig
from hypercore_signing.rmp import format_multi_sig_signers
from hypercore_signing.wire import decimal_to_wire, normalise_address

logger = logging.getLogger(__name__)


#: Domain struct as used by both Hyperliquid domains
EIP712_DOMAIN_TYPE = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

AGENT_TYPE = [
    {"name": "source", "type": "string"},
    {"name": "connectionId", "type": "bytes32"},
]

USD_SEND_TYPE = [
    {"name": "hyperliquidChain", "type": "string"},
    {"name": "destination", "type": "string"},
    {"name": "amount", "type": "string"},
    {"name": "time", "type": "uint64"},
]

SPOT_SEND_TYPE = [
    {"name": "hyperliquidChain", "type": "string"},
    {"name": "destination", "type": "string"},
    {"name": "token", "type": "string"},
    {"name": "amount", "type": "string"},
    {"name": "time", "type": "uint64"},
]

SEND_ASSET_TYPE = [
    {"name": "hyperliquidChain", "type": "string"},
    {"name": "destination", "type": "string"},
    {"name": "sourceDex", "type": "string"},
    {"name": "destinationDex", "type": "string"},
    {"name": "token", "type": "string"},
    {"name": "amount", "type": "string"},
    {"name": "fromSubAccount", "type": "string"},
    {"name": "nonce", "type": "uint64"},
]

APPROVE_AGENT_TYPE = [
    {"name": "hyperliquidChain", "type": "string"},
    {"name": "agentAddress", "type": "address"},
    {"name": "agentName", "type": "string"},
    {"name": "nonce", "type": "uint64"},
]

CONVERT_TO_MULTI_SIG_USER_TYPE = [
    {"name": "hyperliquidChain", "type": "string"},
    {"name": "signers", "type": "string"},
    {"name": "nonce", "type": "uint64"},
]

SEND_MULTI_SIG_TYPE = [
    {"name": "hyperliquidChain", "type": "string"},
    {"name": "multiSigActionHash", "type": "bytes32"},
    {"name": "nonce", "type": "uint64"},
]

#: Inserted after ``hyperliquidChain`` when a multisig participant signs a transfer
MULTI_SIG_FIELDS = [
    {"name": "payloadMultiSigUser", "type": "address"},
    {"name": "outerSigner", "type": "address"},
]


def with_multi_sig_fields(fields: list[dict]) -> list[dict]:
    """Multisig variant of a user-signed struct."""
    assert fields[0]["name"] == "hyperliquidChain", f"Expected hyperliquidChain first, got {fields[0]}"
    return [fields[0]] + MULTI_SIG_FIELDS + fields[1:]


def make_typed_data(domain: dict, type_name: str, fields: list[dict], message: dict) -> dict:
    """Assemble an ``eth_signTypedData_v4`` document.

    The message keeps only the fields declared by the type.
    """
    missing = [f["name"] for f in fields if f["name"] not in message]
    assert not missing, f"Message for {type_name} lacks fields {missing}"
    return {
        "domain": domain,
        "types": {
            "EIP712Domain": EIP712_DOMAIN_TYPE,
            type_name: fields,
        },
        "primaryType": type_name,
        "message": {f["name"]: message[f["name"]] for f in fields},
    }


def _user_signed_type(action: Action) -> tuple[str, list[dict], dict]:
    """Resolve EIP-712 name, struct fields and message of a user-signed action."""
    match action:
        case UsdSend():
            return "UsdSend", USD_SEND_TYPE, {
                "destination": normalise_address(action.destination),
                "amount": decimal_to_wire(action.amount),
                "time": action.time,
            }
        case SpotSend():
            return "SpotSend", SPOT_SEND_TYPE, {
                "destination": normalise_address(action.destination),
                "token": action.token,
                "amount": decimal_to_wire(action.amount),
                "time": action.time,
            }
        case EvmTransfer():
            return "SpotSend", SPOT_SEND_TYPE, {
                "destination": normalise_address(action.system_address),
                "token": action.token,
                "amount": decimal_to_wire(action.amount),
                "time": action.time,
            }
        case SendAsset():
            return "SendAsset", SEND_ASSET_TYPE, {
                "destination": normalise_address(action.destination),
                "sourceDex": action.source_dex,
                "destinationDex": action.destination_dex,
                "token": action.token,
                "amount": decimal_to_wire(action.amount),
                "fromSubAccount": action.from_sub_account,
                "nonce": action.nonce,
            }
        case ApproveAgent():
            return "ApproveAgent", APPROVE_AGENT_TYPE, {
                "agentAddress": normalise_address(action.agent_address),
                "agentName": action.agent_name or "",
                "nonce": action.nonce,
            }
        case ConvertToMultiSigUser():
            return "ConvertToMultiSigUser", CONVERT_TO_MULTI_SIG_USER_TYPE, {
                "signers": format_multi_sig_signers(action.authorized_users, action.threshold),
                "nonce": action.nonce,
            }
        case _:
            raise EncodingError(f"{type(action).__name__} is not signed as typed data")


def build_typed_data(
    action: Action,
    network: NetworkConfig,
    multi_sig: tuple[HexAddress, HexAddress] | None = None,
) -> dict:
    """Build the EIP-712 document of a user-signed action.

    Example:

    .. code-block:: python

        action = UsdSend(destination="0x0D1d9635D0640821d15e323ac8AdADfA9c111414", amount=Decimal(1), time=1690393044548)
        document = build_typed_data(action, NetworkConfig.mainnet())
        assert document["primaryType"] == "HyperliquidTransaction:UsdSend"

    :param multi_sig:
        ``(multisig user, lead signer)`` when the action is signed by a multisig participant.
        Only transfers have multisig variants.

    :raise EncodingError:
        The action is not user-signed, or has no multisig variant.
    """
    name, fields, message = _user_signed_type(action)
    message = {"hyperliquidChain": network.name} | message

    if multi_sig is not None:
        if name not in ("UsdSend", "SpotSend", "SendAsset"):
            raise EncodingError(f"{name} has no multisig typed data variant")
        multi_sig_user, outer_signer = multi_sig
        fields = with_multi_sig_fields(fields)
        message["payloadMultiSigUser"] = normalise_address(multi_sig_user)
        message["outerSigner"] = normalise_address(outer_signer)

    return make_typed_data(
        network.user_signed_domain(),
        f"{HYPERLIQUID_EIP_PREFIX}{name}",
        fields,
        message,
    )


def build_agent_typed_data(connection_id: bytes, network: NetworkConfig) -> dict:
    """Agent envelope for an L1 action hash.

    :param connection_id:
        32 byte action hash, see :py:func:`hypercore_signing.hashing.action_hash`.
    """
    connection_id = HexBytes(connection_id)
    assert len(connection_id) == 32, f"connectionId must be 32 bytes, got {len(connection_id)}"
    return make_typed_data(
        network.agent_domain(),
        "Agent",
        AGENT_TYPE,
        {"source": network.agent_source, "connectionId": bytes(connection_id)},
    )


def build_send_multi_sig_typed_data(multi_sig_action_hash: bytes, nonce: int, network: NetworkConfig) -> dict:
    """Envelope the lead signer signs over the hash of a multisig action."""
    multi_sig_action_hash = HexBytes(multi_sig_action_hash)
    assert len(multi_sig_action_hash) == 32, f"multiSigActionHash must be 32 bytes, got {len(multi_sig_action_hash)}"
    return make_typed_data(
        network.user_signed_domain(),
        f"{HYPERLIQUID_EIP_PREFIX}SendMultiSig",
        SEND_MULTI_SIG_TYPE,
        {
            "hyperliquidChain": network.name,
            "multiSigActionHash": bytes(multi_sig_action_hash),
            "nonce": nonce,
        },
    )
