"""Price tick normalisation.

Hyperliquid rejects orders whose price has too many digits:

- At most 5 significant figures, integer prices are always allowed

- At most ``6 - szDecimals`` decimals for perps and ``8 - szDecimals`` for spot

Prices must be rounded with these functions before they are put in
an :py:class:`~hypercore_signing.action.OrderRequest`.

- `Tick and lot size <https://hyperliquid.gitbook.io/hyperliquid-docs/for-developers/api/tick-and-lot-size>`__

Example:

.. code-block:: python

    btc = MarketMetadata(name="BTC", asset=0, sz_decimals=5, market_class=MarketClass.perp)
    assert btc.round_price(Decimal("93231.23")) == Decimal("93231")

    # Buy limit slightly above the market
    assert btc.round_by_side(Side.bid, Decimal("93231.4"), round_up=True) == Decimal("93232")
"""

import enum
import logging
from dataclasses import dataclass
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation

from hypercore_signing.action import Side
from hypercore_signing.constants import MAX_PERP_DECIMALS, MAX_PRICE_SIGNIFICANT_FIGURES, MAX_SPOT_DECIMALS, SPOT_ASSET_OFFSET
from hypercore_signing.exceptions import InvalidPrice

logger = logging.getLogger(__name__)


class MarketClass(enum.Enum):
    perp = "perp"
    spot = "spot"


@dataclass(slots=True, frozen=True)
class PriceTick:
    """Allowed price precision for one market at one price level."""

    #: Decimals the price is rounded to
    decimals: int

    #: Upper bound from the market's size decimals
    max_decimals: int

    @property
    def quantum(self) -> Decimal:
        """Smallest price step, e.g. ``0.01`` for 2 decimals."""
        return Decimal(1).scaleb(-self.decimals)


@dataclass(slots=True, frozen=True)
class MarketMetadata:
    """What the signing core needs to know about a market.

    Fetched from the ``meta`` and ``spotMeta`` info endpoints by the caller.
    """

    #: Coin or pair name, e.g. ``BTC`` or ``PURR/USDC``
    name: str

    #: Asset id used in orders
    asset: int

    #: ``szDecimals`` of the market, ``None`` if unknown
    sz_decimals: int | None

    market_class: MarketClass = MarketClass.perp

    @staticmethod
    def spot(name: str, spot_index: int, sz_decimals: int) -> "MarketMetadata":
        """Spot market. The asset id is offset by 10000."""
        return MarketMetadata(name=name, asset=SPOT_ASSET_OFFSET + spot_index, sz_decimals=sz_decimals, market_class=MarketClass.spot)

    def round_price(self, price: Decimal | str | int | float) -> Decimal:
        return round_price(tick_for(self, price), price)

    def round_by_side(self, side: Side, price: Decimal | str | int | float, round_up: bool) -> Decimal:
        return round_by_side(tick_for(self, price), side, price, round_up)


def _parse_price(price) -> Decimal:
    if isinstance(price, bool) or price is None:
        raise InvalidPrice(f"Not a price: {price!r}")

    try:
        value = price if isinstance(price, Decimal) else Decimal(str(price))
    except (InvalidOperation, ValueError) as e:
        raise InvalidPrice(f"Cannot parse price: {price!r}") from e

    if not value.is_finite():
        raise InvalidPrice(f"Price is not finite: {price!r}")

    if value <= 0:
        raise InvalidPrice(f"Price must be positive: {price!r}")

    return value


def max_decimals_for(market: MarketMetadata) -> int:
    """Decimals limit of a market, never negative.

    :raise InvalidPrice:
        Market has no size decimals.
    """
    if market.sz_decimals is None:
        raise InvalidPrice(f"Market {market.name} lacks szDecimals metadata")

    match market.market_class:
        case MarketClass.perp:
            limit = MAX_PERP_DECIMALS
        case MarketClass.spot:
            limit = MAX_SPOT_DECIMALS
        case _:
            raise AssertionError(f"Unknown market class: {market.market_class}")

    return max(limit - market.sz_decimals, 0)


def tick_for(market: MarketMetadata, price: Decimal | str | int | float) -> PriceTick:
    """Compute the price tick of a market at the given price level.

    The number of decimals keeps the price within 5 significant figures
    and within the market's decimals limit.

    :raise InvalidPrice:
        Price is not positive and finite, or the market lacks metadata.
    """
    value = _parse_price(price)
    max_decimals = max_decimals_for(market)

    # adjusted() is floor(log10(value)) and exact for powers of ten
    magnitude = value.adjusted()
    decimals = MAX_PRICE_SIGNIFICANT_FIGURES - magnitude - 1
    decimals = min(max(decimals, 0), max_decimals)

    return PriceTick(decimals=decimals, max_decimals=max_decimals)


def _quantize(tick: PriceTick, price, rounding: str) -> Decimal:
    value = _parse_price(price)
    try:
        return value.quantize(tick.quantum, rounding=rounding)
    except InvalidOperation as e:
        raise InvalidPrice(f"Cannot round {price!r} to {tick.decimals} decimals") from e


def round_price(tick: PriceTick, price: Decimal | str | int | float) -> Decimal:
    """Round to the nearest tick, halves away from zero."""
    return _quantize(tick, price, ROUND_HALF_UP)


def round_by_side(tick: PriceTick, side: Side, price: Decimal | str | int | float, round_up: bool) -> Decimal:
    """Round in a fixed direction.

    :param side:
        Order side. Only logged, ``round_up`` decides the direction.

    :param round_up:
        ``True`` rounds toward positive infinity, ``False`` toward negative infinity.
    """
    rounding = ROUND_CEILING if round_up else ROUND_FLOOR
    rounded = _quantize(tick, price, rounding)
    logger.debug("Rounded %s %s to %s, round up: %s", side.name, price, rounded, round_up)
    return rounded
