"""Signable Hyperliquid actions.

A closed set of immutable dataclasses, one per action type the exchange accepts.
The classes are pure data: canonical field order is defined by
:py:mod:`hypercore_signing.rmp` and :py:mod:`hypercore_signing.typed_data`.

Each action is bound to exactly one signing path, see :py:func:`get_signing_path`:

- L1 actions are MessagePack encoded, hashed and signed in an agent envelope

- User-signed actions are signed as EIP-712 typed data

- Multisig wrappers are signed by the lead signer, see :py:mod:`hypercore_signing.multisig`

- `Exchange endpoint documentation <https://hyperliquid.gitbook.io/hyperliquid-docs/for-developers/api/exchange-endpoint>`__
"""

import enum
from dataclasses import dataclass
from decimal import Decimal

from eth_typing import HexAddress

from hypercore_signing.signature import Signature


class Side(enum.Enum):
    """Order side.

    The wire letters used by the exchange in fills and books.
    """

    bid = "B"
    ask = "A"

    @property
    def is_buy(self) -> bool:
        return self == Side.bid


class TimeInForce(enum.Enum):
    """Time-in-force of a limit order."""

    #: Add liquidity only, maker-only
    alo = "Alo"

    #: Immediate or cancel, taker-only
    ioc = "Ioc"

    #: Good till cancel
    gtc = "Gtc"

    #: Used by the Hyperliquid frontend for market orders
    frontend_market = "FrontendMarket"


class TpSl(enum.Enum):
    """Trigger kind: take profit or stop loss."""

    tp = "tp"
    sl = "sl"


class OrderGrouping(enum.Enum):
    """How orders in a batch relate to each other."""

    #: Independent orders
    na = "na"

    #: Main order with its TP/SL orders
    normal_tpsl = "normalTpsl"

    #: TP/SL attached to an existing position
    position_tpsl = "positionTpsl"


class SigningPath(enum.Enum):
    """Which pipeline signs an action."""

    #: MessagePack + Keccak, signed inside the agent envelope
    rmp = "rmp"

    #: EIP-712 typed data signed directly
    typed_data = "typed_data"

    #: Lead signer signs ``SendMultiSig`` over the hash of the multisig action
    multi_sig = "multi_sig"


@dataclass(slots=True, frozen=True)
class LimitOrderType:
    tif: TimeInForce = TimeInForce.gtc


@dataclass(slots=True, frozen=True)
class TriggerOrderType:
    is_market: bool
    trigger_px: Decimal
    tpsl: TpSl


@dataclass(slots=True, frozen=True)
class OrderRequest:
    """One order in a :py:class:`BatchOrder`.

    Prices must already be rounded to the market tick,
    see :py:func:`hypercore_signing.price.round_price`.
    """

    #: Asset index. Perps use the universe index, spot uses ``10000 + spot index``
    asset: int

    is_buy: bool

    limit_px: Decimal

    #: Size in base asset units
    sz: Decimal

    reduce_only: bool

    order_type: LimitOrderType | TriggerOrderType

    #: Client order id, 16 bytes as ``0x`` hex
    cloid: str | None = None


@dataclass(slots=True, frozen=True)
class BatchOrder:
    """Place one or more orders."""

    orders: tuple[OrderRequest, ...]
    grouping: OrderGrouping = OrderGrouping.na

    def __post_init__(self):
        object.__setattr__(self, "orders", tuple(self.orders))


@dataclass(slots=True, frozen=True)
class Cancel:
    asset: int
    oid: int


@dataclass(slots=True, frozen=True)
class BatchCancel:
    """Cancel orders by exchange order id."""

    cancels: tuple[Cancel, ...]

    def __post_init__(self):
        object.__setattr__(self, "cancels", tuple(self.cancels))


@dataclass(slots=True, frozen=True)
class CancelByCloid:
    asset: int
    cloid: str


@dataclass(slots=True, frozen=True)
class BatchCancelByCloid:
    """Cancel orders by client order id."""

    cancels: tuple[CancelByCloid, ...]

    def __post_init__(self):
        object.__setattr__(self, "cancels", tuple(self.cancels))


@dataclass(slots=True, frozen=True)
class Modify:
    #: Exchange order id (int) or client order id (hex str)
    oid: int | str

    #: Replacement order
    order: OrderRequest


@dataclass(slots=True, frozen=True)
class BatchModify:
    """Replace existing orders."""

    modifies: tuple[Modify, ...]

    def __post_init__(self):
        object.__setattr__(self, "modifies", tuple(self.modifies))


@dataclass(slots=True, frozen=True)
class ScheduleCancel:
    """Dead man's switch: cancel all orders at ``time``.

    ``None`` removes the scheduled cancel.
    """

    time: int | None = None


@dataclass(slots=True, frozen=True)
class EvmUserModify:
    """Toggle HyperEVM big blocks for the user."""

    using_big_blocks: bool


@dataclass(slots=True, frozen=True)
class Noop:
    """Do nothing, used to invalidate a nonce."""


@dataclass(slots=True, frozen=True)
class UsdSend:
    """Send USDC from the perp balance to another address."""

    destination: HexAddress

    #: Amount in USDC, not in raw units
    amount: Decimal

    #: Millisecond timestamp, should match the nonce
    time: int


@dataclass(slots=True, frozen=True)
class SpotSend:
    """Send spot tokens to another address."""

    destination: HexAddress

    #: Token as ``NAME:0x<token id>``, e.g. ``PURR:0xc4bf3f870c0e9465323c0b6ed28096c2``
    token: str

    amount: Decimal

    #: Millisecond timestamp, should match the nonce
    time: int


@dataclass(slots=True, frozen=True)
class SendAsset:
    """Move an asset between accounts, DEXes and sub-accounts."""

    destination: HexAddress

    #: Empty string for the default perp DEX, ``spot`` for spot
    source_dex: str

    destination_dex: str

    token: str

    amount: Decimal

    #: Empty string when sending from the main account
    from_sub_account: str

    nonce: int


@dataclass(slots=True, frozen=True)
class EvmTransfer:
    """Move a spot token from HyperCore to HyperEVM.

    Travels on the wire as a ``spotSend`` to the token's system address.
    """

    token: str

    #: Cross-chain system address of the token, e.g. ``0x2000000000000000000000000000000000000001``
    system_address: HexAddress

    amount: Decimal

    time: int


@dataclass(slots=True, frozen=True)
class ApproveAgent:
    """Authorise an API wallet (agent) to sign L1 actions for the user."""

    agent_address: HexAddress

    nonce: int

    #: ``None`` for the unnamed agent
    agent_name: str | None = None


@dataclass(slots=True, frozen=True)
class ConvertToMultiSigUser:
    """Turn the signing account into a multisig user.

    Empty ``authorized_users`` converts a multisig user back to a normal user.
    """

    authorized_users: tuple[HexAddress, ...]

    threshold: int

    nonce: int

    def __post_init__(self):
        object.__setattr__(self, "authorized_users", tuple(self.authorized_users))


@dataclass(slots=True, frozen=True)
class MultiSigAction:
    """An inner action wrapped with the signatures of multisig participants.

    Constructed by :py:meth:`hypercore_signing.multisig.MultiSigAggregator.finalize`.
    """

    #: EIP-712 chain id of the network
    signature_chain_id: int

    #: In the order the signatures were collected
    signatures: tuple[Signature, ...]

    #: The multisig account, lowercase
    multi_sig_user: HexAddress

    #: The lead signer submitting the action, lowercase
    outer_signer: HexAddress

    action: "Action"

    def __post_init__(self):
        object.__setattr__(self, "signatures", tuple(self.signatures))


#: Every action the signing core accepts
Action = BatchOrder | BatchCancel | BatchCancelByCloid | BatchModify | ScheduleCancel | EvmUserModify | Noop | UsdSend | SpotSend | SendAsset | EvmTransfer | ApproveAgent | ConvertToMultiSigUser | MultiSigAction

#: Actions that carry user-signed EIP-712 variants with multisig fields
MULTI_SIG_TYPED_DATA_ACTIONS = (UsdSend, SpotSend, SendAsset, EvmTransfer)


def get_signing_path(action: Action) -> SigningPath:
    """Resolve the signing path of an action.

    :raise TypeError:
        Not a known action.
    """
    match action:
        case BatchOrder() | BatchCancel() | BatchCancelByCloid() | BatchModify() | ScheduleCancel() | EvmUserModify() | Noop():
            return SigningPath.rmp
        case UsdSend() | SpotSend() | SendAsset() | EvmTransfer() | ApproveAgent() | ConvertToMultiSigUser():
            return SigningPath.typed_data
        case MultiSigAction():
            return SigningPath.multi_sig
        case _:
            raise TypeError(f"Not a signable action: {type(action)}")
