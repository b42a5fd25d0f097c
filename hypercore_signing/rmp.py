"""Canonical MessagePack encoding of actions.

L1 actions are signed over the MessagePack bytes of their wire form.
The exchange re-encodes the JSON request it receives and compares hashes,
so the wire dict must have the same keys, in the same order, with the same value
types as the exchange expects.

- Keys are emitted in schema order, the ``type`` tag first

- Numbers that carry prices and sizes are strings, see :py:func:`hypercore_signing.wire.decimal_to_wire`

- Addresses are lowercase strings

Example:

.. code-block:: python

    from hypercore_signing.action import BatchCancel, Cancel
    from hypercore_signing.rmp import encode_action

    data = encode_action(BatchCancel(cancels=[Cancel(asset=1, oid=2)]))
    assert data.hex() == "82a474797065a663616e63656ca763616e63656c739182a16101a16f02"
"""

import json
import logging

import msgpack

from hypercore_signing.action import (
    Action,
    ApproveAgent,
    BatchCancel,
    BatchCancelByCloid,
    BatchModify,
    BatchOrder,
    ConvertToMultiSigUser,
    EvmTransfer,
    EvmUserModify,
    LimitOrderType,
    MultiSigAction,
    Noop,
    OrderRequest,
    ScheduleCancel,
    SendAsset,
    SpotSend,
    TriggerOrderType,
    UsdSend,
)
from hypercore_signing.exceptions import EncodingError
from hypercore_signing.network import NetworkConfig
from hypercore_signing.wire import decimal_to_wire, format_cloid, normalise_address

logger = logging.getLogger(__name__)


def order_type_to_wire(order_type: LimitOrderType | TriggerOrderType) -> dict:
    match order_type:
        case LimitOrderType(tif=tif):
            return {"limit": {"tif": tif.value}}
        case TriggerOrderType(is_market=is_market, trigger_px=trigger_px, tpsl=tpsl):
            return {
                "trigger": {
                    "isMarket": is_market,
                    "triggerPx": decimal_to_wire(trigger_px),
                    "tpsl": tpsl.value,
                }
            }
        case _:
            raise EncodingError(f"Unknown order type: {order_type}")


def order_to_wire(order: OrderRequest) -> dict:
    """Single order in the short key form used by the exchange.

    ``c`` is left out when the order has no client order id.
    """
    wire = {
        "a": order.asset,
        "b": order.is_buy,
        "p": decimal_to_wire(order.limit_px),
        "s": decimal_to_wire(order.sz),
        "r": order.reduce_only,
        "t": order_type_to_wire(order.order_type),
    }
    if order.cloid is not None:
        wire["c"] = format_cloid(order.cloid)
    return wire


def format_multi_sig_signers(authorized_users: tuple, threshold: int) -> str:
    """``signers`` field of ``convertToMultiSigUser``.

    Compact JSON with sorted lowercase addresses, or ``null`` to turn
    a multisig user back to a normal user.
    """
    if not authorized_users:
        return "null"
    users = sorted(normalise_address(a) for a in authorized_users)
    return json.dumps({"authorizedUsers": users, "threshold": threshold}, separators=(",", ":"))


def _user_signed_header(type_name: str, network: NetworkConfig | None) -> dict:
    if network is None:
        raise EncodingError(f"{type_name} is chain specific and needs a network")
    return {
        "type": type_name,
        "signatureChainId": network.signature_chain_id_hex,
        "hyperliquidChain": network.name,
    }


def action_to_wire(action: Action, network: NetworkConfig | None = None) -> dict:
    """Convert an action to its exchange wire form.

    The result is both the ``action`` field of the request JSON
    and the input of :py:func:`encode_action`.

    :param network:
        Needed for user-signed actions, which embed the chain in the action.

    :raise EncodingError:
        Bad field value or unknown action.
    """
    match action:
        case BatchOrder(orders=orders, grouping=grouping):
            return {
                "type": "order",
                "orders": [order_to_wire(o) for o in orders],
                "grouping": grouping.value,
            }

        case BatchCancel(cancels=cancels):
            return {
                "type": "cancel",
                "cancels": [{"a": c.asset, "o": c.oid} for c in cancels],
            }

        case BatchCancelByCloid(cancels=cancels):
            return {
                "type": "cancelByCloid",
                "cancels": [{"asset": c.asset, "cloid": format_cloid(c.cloid)} for c in cancels],
            }

        case BatchModify(modifies=modifies):
            return {
                "type": "batchModify",
                "modifies": [
                    {
                        "oid": m.oid if isinstance(m.oid, int) else format_cloid(m.oid),
                        "order": order_to_wire(m.order),
                    }
                    for m in modifies
                ],
            }

        case ScheduleCancel(time=time):
            wire = {"type": "scheduleCancel"}
            if time is not None:
                wire["time"] = time
            return wire

        case EvmUserModify(using_big_blocks=using_big_blocks):
            return {"type": "evmUserModify", "usingBigBlocks": using_big_blocks}

        case Noop():
            return {"type": "noop"}

        case UsdSend():
            return _user_signed_header("usdSend", network) | {
                "destination": normalise_address(action.destination),
                "amount": decimal_to_wire(action.amount),
                "time": action.time,
            }

        case SpotSend():
            return _user_signed_header("spotSend", network) | {
                "destination": normalise_address(action.destination),
                "token": action.token,
                "amount": decimal_to_wire(action.amount),
                "time": action.time,
            }

        case EvmTransfer():
            return _user_signed_header("spotSend", network) | {
                "destination": normalise_address(action.system_address),
                "token": action.token,
                "amount": decimal_to_wire(action.amount),
                "time": action.time,
            }

        case SendAsset():
            return _user_signed_header("sendAsset", network) | {
                "destination": normalise_address(action.destination),
                "sourceDex": action.source_dex,
                "destinationDex": action.destination_dex,
                "token": action.token,
                "amount": decimal_to_wire(action.amount),
                "fromSubAccount": action.from_sub_account,
                "nonce": action.nonce,
            }

        case ApproveAgent():
            wire = _user_signed_header("approveAgent", network) | {
                "agentAddress": normalise_address(action.agent_address),
            }
            if action.agent_name is not None:
                wire["agentName"] = action.agent_name
            wire["nonce"] = action.nonce
            return wire

        case ConvertToMultiSigUser():
            return _user_signed_header("convertToMultiSigUser", network) | {
                "signers": format_multi_sig_signers(action.authorized_users, action.threshold),
                "nonce": action.nonce,
            }

        case MultiSigAction():
            return {"type": "multiSig"} | multi_sig_action_to_wire(action, network)

        case _:
            raise EncodingError(f"Not an action: {type(action)}")


def multi_sig_action_to_wire(action: MultiSigAction, network: NetworkConfig | None = None) -> dict:
    """Wire form of a multisig action without the ``type`` tag.

    This is what the lead signer hashes.
    """
    return {
        "signatureChainId": hex(action.signature_chain_id),
        "signatures": [s.to_wire() for s in action.signatures],
        "payload": {
            "multiSigUser": normalise_address(action.multi_sig_user),
            "outerSigner": normalise_address(action.outer_signer),
            "action": action_to_wire(action.action, network),
        },
    }


def pack(value) -> bytes:
    """MessagePack encode a wire value.

    Only dicts, lists, strings, ints, bools and ``None`` are accepted.

    :raise EncodingError:
        Value contains something MessagePack cannot represent.
    """
    try:
        return msgpack.packb(value, use_bin_type=True)
    except (TypeError, ValueError, OverflowError) as e:
        raise EncodingError(f"Could not MessagePack encode: {value!r}") from e


def encode_action(action: Action, network: NetworkConfig | None = None) -> bytes:
    """Canonical bytes of an action.

    Deterministic: the same action always encodes to the same bytes.
    """
    data = pack(action_to_wire(action, network))
    logger.debug("Encoded %s to %d bytes", type(action).__name__, len(data))
    return data
