"""Hyperliquid (Hypercore) action signing.

This package builds, encodes, hashes and signs actions for the Hyperliquid
exchange. The exchange accepts two signature formats:

- *L1 actions* (orders, cancels, modifications) are MessagePack encoded,
  hashed with Keccak-256 and the digest is signed inside an EIP-712 ``Agent``
  envelope. See :py:mod:`hypercore_signing.rmp` and :py:mod:`hypercore_signing.hashing`.

- *User-signed actions* (USDC and spot transfers, agent approval) are signed
  directly as EIP-712 typed data. See :py:mod:`hypercore_signing.typed_data`.

Multiple key holders can authorise a single action through
:py:class:`hypercore_signing.multisig.MultiSigAggregator`.

Prices must be normalised to the market tick before they are put in an order,
see :py:mod:`hypercore_signing.price`.

Example:

.. code-block:: python

    import os
    from decimal import Decimal

    from hypercore_signing.action import BatchOrder, LimitOrderType, OrderRequest, TimeInForce
    from hypercore_signing.network import NetworkConfig
    from hypercore_signing.price import MarketClass, MarketMetadata
    from hypercore_signing.signer import HotSigner
    from hypercore_signing.signing import sign_action

    btc = MarketMetadata(name="BTC", asset=0, sz_decimals=5, market_class=MarketClass.perp)
    order = OrderRequest(
        asset=btc.asset,
        is_buy=True,
        limit_px=btc.round_price(Decimal("93231.23")),
        sz=Decimal("0.001"),
        reduce_only=False,
        order_type=LimitOrderType(TimeInForce.gtc),
    )

    signer = HotSigner.from_private_key(os.environ["PRIVATE_KEY"])
    signed = sign_action(signer, BatchOrder(orders=(order,)), nonce=1700000000000, network=NetworkConfig.mainnet())
    payload = signed.to_payload()  # POST this to /exchange
"""
