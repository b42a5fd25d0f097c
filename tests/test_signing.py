"""Signing along both paths."""

from decimal import Decimal

import pytest

from hypercore_signing.action import (
    ApproveAgent,
    BatchCancel,
    BatchOrder,
    Cancel,
    ConvertToMultiSigUser,
    LimitOrderType,
    OrderRequest,
    SendAsset,
    SigningPath,
    SpotSend,
    TimeInForce,
    UsdSend,
    get_signing_path,
)
from hypercore_signing.exceptions import EncodingError, InvalidKey, SigningFailure
from hypercore_signing.hashing import hash_action
from hypercore_signing.signature import Signature
from hypercore_signing.signer import BaseSigner, HotSigner, recover_rmp_signer, recover_typed_data_signer
from hypercore_signing.signing import sign_action, sign_rmp, sign_typed_data
from hypercore_signing.typed_data import build_typed_data

DESTINATION = "0x0D1d9635D0640821d15e323ac8AdADfA9c111414"

VAULT = "0x1719884eb866cb12b2287399b15f7db5e7d775ea"


class BrokenSigner(BaseSigner):
    """Signer whose backend is down."""

    @property
    def address(self):
        return "0x0000000000000000000000000000000000000001"

    def sign_hash(self, digest: bytes) -> Signature:
        raise RuntimeError("KMS unavailable")


@pytest.fixture()
def order_action() -> BatchOrder:
    return BatchOrder(
        orders=[
            OrderRequest(
                asset=0,
                is_buy=True,
                limit_px=Decimal("93231"),
                sz=Decimal("0.001"),
                reduce_only=False,
                order_type=LimitOrderType(TimeInForce.gtc),
            )
        ]
    )


def test_usd_send_known_signature(known_signer, mainnet):
    """USDC transfer signature matches the reference vector."""
    action = UsdSend(destination=DESTINATION, amount=Decimal(1), time=1690393044548)
    signed = sign_action(known_signer, action, nonce=1690393044548, network=mainnet)
    assert signed.signature.to_hex() == (
        "0xeca6267bcaadc4c0ae1aed73f5a2c45fcdbb7271f2e9356992404e5d4bad75a3"
        "572e08fe93f17755abadb7f84be7d1e9c4ce48bb5633e339bc430c672d5a20ed1b"
    )


def test_usd_send_typed_data_document(mainnet):
    """Transfer documents use the user-signed domain and lowercase destination."""
    action = UsdSend(destination=DESTINATION, amount=Decimal(1), time=1690393044548)
    document = build_typed_data(action, mainnet)
    assert document["primaryType"] == "HyperliquidTransaction:UsdSend"
    assert document["domain"] == {
        "name": "HyperliquidSignTransaction",
        "version": "1",
        "chainId": 42161,
        "verifyingContract": "0x0000000000000000000000000000000000000000",
    }
    assert document["message"] == {
        "hyperliquidChain": "Mainnet",
        "destination": "0x0d1d9635d0640821d15e323ac8adadfa9c111414",
        "amount": "1",
        "time": 1690393044548,
    }


def test_rmp_signature_recovers(known_signer, mainnet, order_action, nonce):
    """The agent envelope signature recovers to the signer."""
    signed = sign_action(known_signer, order_action, nonce=nonce, network=mainnet, vault_address=VAULT, expires_after=nonce + 60_000)
    connection_id = hash_action(order_action, nonce, VAULT, nonce + 60_000)
    assert recover_rmp_signer(connection_id, mainnet, signed.signature) == known_signer.address


def test_rmp_signature_is_network_specific(known_signer, mainnet, testnet, order_action, nonce):
    """Agent source differs between mainnet and testnet."""
    connection_id = hash_action(order_action, nonce)
    assert sign_rmp(known_signer, connection_id, mainnet) != sign_rmp(known_signer, connection_id, testnet)
    testnet_signature = sign_rmp(known_signer, connection_id, testnet)
    assert recover_rmp_signer(connection_id, mainnet, testnet_signature) != known_signer.address


@pytest.mark.parametrize(
    "action",
    [
        UsdSend(destination=DESTINATION, amount=Decimal("12.5"), time=1),
        SpotSend(destination=DESTINATION, token="PURR:0xc4bf3f870c0e9465323c0b6ed28096c2", amount=Decimal("3"), time=2),
        SendAsset(
            destination=DESTINATION,
            source_dex="",
            destination_dex="spot",
            token="USDC:0x6d1e7cde53ba9467b783cb7c530ce054",
            amount=Decimal("1.25"),
            from_sub_account="",
            nonce=3,
        ),
        ApproveAgent(agent_address=DESTINATION, nonce=4, agent_name="bot"),
        ApproveAgent(agent_address=DESTINATION, nonce=5),
        ConvertToMultiSigUser(authorized_users=[DESTINATION], threshold=1, nonce=6),
    ],
)
def test_typed_data_signature_recovers(known_signer, testnet, action):
    """User-signed actions recover to the signer."""
    signed = sign_action(known_signer, action, nonce=1, network=testnet)
    document = build_typed_data(action, testnet)
    assert recover_typed_data_signer(document, signed.signature) == known_signer.address


def test_signed_action_payload(known_signer, mainnet, nonce):
    """Request body carries action, nonce, signature and optional vault."""
    action = BatchCancel(cancels=[Cancel(asset=0, oid=77)])
    signed = sign_action(known_signer, action, nonce=nonce, network=mainnet, vault_address="0x1719884EB866cB12b2287399B15f7db5e7D775EA")
    payload = signed.to_payload()
    assert payload["action"] == {"type": "cancel", "cancels": [{"a": 0, "o": 77}]}
    assert payload["nonce"] == nonce
    assert payload["vaultAddress"] == VAULT
    assert "expiresAfter" not in payload
    assert payload["signature"]["v"] in (27, 28)
    assert payload["signature"]["r"].startswith("0x")


def test_typed_data_payload_has_no_vault(known_signer, mainnet):
    """Vault is not part of user-signed actions."""
    action = UsdSend(destination=DESTINATION, amount=Decimal(1), time=1)
    signed = sign_action(known_signer, action, nonce=1, network=mainnet, vault_address=VAULT)
    payload = signed.to_payload()
    assert "vaultAddress" not in payload
    assert payload["action"]["type"] == "usdSend"


def test_signing_path():
    """Each action has exactly one signing path."""
    assert get_signing_path(BatchCancel(cancels=[])) == SigningPath.rmp
    assert get_signing_path(UsdSend(destination=DESTINATION, amount=Decimal(1), time=1)) == SigningPath.typed_data
    with pytest.raises(TypeError):
        get_signing_path("order")


def test_signer_failure_is_wrapped(mainnet, order_action, nonce):
    """Backend errors surface as SigningFailure with the cause attached."""
    with pytest.raises(SigningFailure) as exc_info:
        sign_action(BrokenSigner(), order_action, nonce=nonce, network=mainnet)
    assert isinstance(exc_info.value.__cause__, RuntimeError)


@pytest.mark.parametrize(
    "key",
    [
        "0x1234",
        "zz" * 32,
        "e908f86dbb4d55ac876378565aafeabc187f6690f046459397b17d9b9a19688e00",
        b"\x01" * 32,
    ],
)
def test_invalid_key(key):
    """Malformed private keys are rejected before signing."""
    with pytest.raises(InvalidKey):
        HotSigner.from_private_key(key)


def test_key_with_and_without_prefix():
    """0x prefix is optional."""
    key = "e908f86dbb4d55ac876378565aafeabc187f6690f046459397b17d9b9a19688e"
    assert HotSigner.from_private_key(key).address == HotSigner.from_private_key("0x" + key).address


@pytest.mark.parametrize(
    "network_name,r,s,v",
    [
        (
            "mainnet",
            0xD65369825A9DF5D80099E513CCE430311D7D26DDF477F5B3A33D2806B100D78E,
            0x2B54116FF64054968AA237C20CA9FF68000F977C93289157748A3162B6EA940E,
            28,
        ),
        (
            "testnet",
            0x82B2BA28E76B3D761093AADED1B1CDAD4960B3AF30212B343FB2E6CDFA4E3D54,
            None,
            27,
        ),
    ],
)
def test_order_known_signature(request, network_name, r, s, v):
    """L1 order signature matches the reference vector."""
    network = request.getfixturevalue(network_name)
    signer = HotSigner.from_private_key("0x0123456789012345678901234567890123456789012345678901234567890123")
    action = BatchOrder(
        orders=[
            OrderRequest(
                asset=1,
                is_buy=True,
                limit_px=Decimal(100),
                sz=Decimal(100),
                reduce_only=False,
                order_type=LimitOrderType(TimeInForce.gtc),
            )
        ]
    )
    signed = sign_action(signer, action, nonce=0, network=network)
    assert signed.signature.r == r
    if s is not None:
        assert signed.signature.s == s
    assert signed.signature.v == v


def test_malformed_document_is_not_signer_failure(testnet):
    """Encoding errors are raised as is and the signer is never asked."""
    action = UsdSend(destination=DESTINATION, amount=Decimal(1), time=1)
    document = build_typed_data(action, testnet)
    del document["message"]["amount"]
    with pytest.raises(EncodingError):
        sign_typed_data(BrokenSigner(), document)
