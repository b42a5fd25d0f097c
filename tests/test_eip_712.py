"""EIP-712 hashing."""

import pytest
from web3 import Web3

from hypercore_signing.action import SendAsset
from hypercore_signing.eip_712 import eip712_encode, eip712_encode_hash
from hypercore_signing.exceptions import EncodingError
from hypercore_signing.typed_data import build_agent_typed_data, build_typed_data


@pytest.fixture()
def send_asset() -> SendAsset:
    return SendAsset(
        destination="0x1719884eb866cb12b2287399b15f7db5e7d775ea",
        source_dex="",
        destination_dex="spot",
        token="USDC:0x6d1e7cde53ba9467b783cb7c530ce054",
        amount=1,
        from_sub_account="",
        nonce=1,
    )


def test_signable_parts(mainnet):
    """Digest is keccak of 0x1901, domain separator and struct hash."""
    document = build_agent_typed_data(b"\x11" * 32, mainnet)
    prefix, domain_separator, struct_hash = eip712_encode(document)
    assert prefix == b"\x19\x01"
    assert len(domain_separator) == 32
    assert len(struct_hash) == 32
    assert eip712_encode_hash(document) == Web3.keccak(prefix + domain_separator + struct_hash)


def test_prefixed_type_names(testnet, send_asset):
    """Type names with a colon are part of the struct hash."""
    document = build_typed_data(send_asset, testnet)
    assert document["primaryType"] == "HyperliquidTransaction:SendAsset"

    renamed = dict(document)
    renamed["types"] = {("SendAsset" if k == document["primaryType"] else k): v for k, v in document["types"].items()}
    renamed["primaryType"] = "SendAsset"

    _, domain_separator, struct_hash = eip712_encode(document)
    _, renamed_domain_separator, renamed_struct_hash = eip712_encode(renamed)
    assert domain_separator == renamed_domain_separator
    assert struct_hash != renamed_struct_hash


def test_agent_hash_depends_on_network(mainnet, testnet):
    """Source and domain are part of the digest."""
    connection_id = b"\x11" * 32
    assert eip712_encode_hash(build_agent_typed_data(connection_id, mainnet)) != eip712_encode_hash(build_agent_typed_data(connection_id, testnet))


def test_malformed_document():
    """Broken documents raise EncodingError."""
    with pytest.raises(EncodingError):
        eip712_encode_hash({"types": {}, "primaryType": "Agent"})


def test_missing_message_field(testnet, send_asset):
    """A document without a declared field is an encoding error."""
    document = build_typed_data(send_asset, testnet)
    document["message"] = {k: v for k, v in document["message"].items() if k != "destination"}
    with pytest.raises(EncodingError):
        eip712_encode_hash(document)
