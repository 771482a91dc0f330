"""Line-oriented CSV ingestion connectors.

Record schemas (one record per line, comma separated, prices in fractional
notation):

    price        productId, mid, spread
    trade        productId, tradeId, price, book, quantity, side
    market data  productId, price, quantity, side
    inquiry      inquiryId, productId, side, quantity, price, state

Blank lines are skipped. Any other line that does not match its schema
raises MalformedRecordError; unknown product ids raise NotFoundError.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Iterable, Iterator

from trading_desk.core.domain.errors import MalformedRecordError
from trading_desk.core.domain.fractional_price import parse_fractional_price
from trading_desk.core.domain.reference_data import lookup_product
from trading_desk.core.domain.types import Bond, Inquiry, Order, OrderBook, Price, Trade

if TYPE_CHECKING:
    from trading_desk.core.services.inquiry import InquiryService
    from trading_desk.core.services.market_data import MarketDataService
    from trading_desk.core.services.pricing import PricingService
    from trading_desk.core.services.trade_booking import TradeBookingService

LOGGER = logging.getLogger(__name__)

ProductLookup = Callable[[str], Bond]

MARKET_DATA_BATCH_SIZE = 10

_PRICING_SIDES = ("BID", "OFFER")
_TRADE_SIDES = ("BUY", "SELL")
_INQUIRY_STATES = ("RECEIVED", "QUOTED", "DONE", "REJECTED", "CUSTOMER_REJECTED")


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------

def _split(line: str, expected: int, kind: str) -> list[str]:
    fields = [field.strip() for field in line.strip().split(",")]
    if len(fields) != expected:
        raise MalformedRecordError(
            f"{kind} record expects {expected} fields, got {len(fields)}", line
        )
    return fields


def _parse_price(text: str, line: str) -> float:
    try:
        return parse_fractional_price(text)
    except MalformedRecordError:
        raise MalformedRecordError(f"invalid fractional price {text!r}", line) from None


def _parse_quantity(text: str, line: str) -> int:
    try:
        quantity = int(text)
    except ValueError:
        raise MalformedRecordError(f"invalid quantity {text!r}", line) from None
    if quantity < 0:
        raise MalformedRecordError(f"negative quantity {text!r}", line)
    return quantity


def _parse_choice(text: str, choices: tuple[str, ...], field: str, line: str) -> str:
    if text not in choices:
        raise MalformedRecordError(f"invalid {field} {text!r}", line)
    return text


def _non_blank(source: Iterable[str]) -> Iterator[str]:
    for line in source:
        if line.strip():
            yield line


# ---------------------------------------------------------------------------
# Record parsers
# ---------------------------------------------------------------------------

def parse_price_record(line: str, product_lookup: ProductLookup = lookup_product) -> Price:
    product_id, mid_text, spread_text = _split(line, 3, "price")
    product = product_lookup(product_id)
    mid = _parse_price(mid_text, line)
    spread = _parse_price(spread_text, line)
    # The derived bid (mid - spread/2) must stay non-negative.
    if spread / 2.0 > mid:
        raise MalformedRecordError("spread wider than twice the mid", line)
    return Price(product=product, mid=mid, bid_offer_spread=spread)


def parse_trade_record(line: str, product_lookup: ProductLookup = lookup_product) -> Trade:
    product_id, trade_id, price, book, quantity, side = _split(line, 6, "trade")
    if not trade_id:
        raise MalformedRecordError("empty trade id", line)
    if not book:
        raise MalformedRecordError("empty book", line)
    return Trade(
        product=product_lookup(product_id),
        trade_id=trade_id,
        price=_parse_price(price, line),
        book=book,
        quantity=_parse_quantity(quantity, line),
        side=_parse_choice(side, _TRADE_SIDES, "side", line),
    )


def parse_market_data_record(line: str) -> tuple[str, Order]:
    """Parse one depth record into (product id, order)."""
    product_id, price, quantity, side = _split(line, 4, "market data")
    order = Order(
        price=_parse_price(price, line),
        quantity=_parse_quantity(quantity, line),
        side=_parse_choice(side, _PRICING_SIDES, "side", line),
    )
    return product_id, order


def parse_inquiry_record(line: str, product_lookup: ProductLookup = lookup_product) -> Inquiry:
    inquiry_id, product_id, side, quantity, price, state = _split(line, 6, "inquiry")
    if not inquiry_id:
        raise MalformedRecordError("empty inquiry id", line)
    return Inquiry(
        inquiry_id=inquiry_id,
        product=product_lookup(product_id),
        side=_parse_choice(side, _TRADE_SIDES, "side", line),
        quantity=_parse_quantity(quantity, line),
        price=_parse_price(price, line),
        state=_parse_choice(state, _INQUIRY_STATES, "state", line),
    )


# ---------------------------------------------------------------------------
# Connectors
# ---------------------------------------------------------------------------

class PricingConnector:
    """Subscribe-only connector feeding the pricing service."""

    def __init__(self, service: PricingService, product_lookup: ProductLookup = lookup_product) -> None:
        self._service = service
        self._product_lookup = product_lookup

    def publish(self, data: Price) -> None:
        return

    def subscribe(self, source: Iterable[str]) -> int:
        count = 0
        for line in _non_blank(source):
            self._service.on_message(parse_price_record(line, self._product_lookup))
            count += 1
        return count


class TradeBookingConnector:
    """Subscribe-only connector feeding externally booked trades."""

    def __init__(self, service: TradeBookingService, product_lookup: ProductLookup = lookup_product) -> None:
        self._service = service
        self._product_lookup = product_lookup

    def publish(self, data: Trade) -> None:
        return

    def subscribe(self, source: Iterable[str]) -> int:
        count = 0
        for line in _non_blank(source):
            self._service.on_message(parse_trade_record(line, self._product_lookup))
            count += 1
        return count


class MarketDataConnector:
    """Subscribe-only connector grouping depth records into order book snapshots.

    Every ``batch_size`` consecutive records form one snapshot of a single
    product. A trailing incomplete batch is dropped.
    """

    def __init__(
        self,
        service: MarketDataService,
        *,
        batch_size: int = MARKET_DATA_BATCH_SIZE,
        product_lookup: ProductLookup = lookup_product,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self._service = service
        self._batch_size = batch_size
        self._product_lookup = product_lookup

    def publish(self, data: OrderBook) -> None:
        return

    def subscribe(self, source: Iterable[str]) -> int:
        count = 0
        batch: list[tuple[str, Order, str]] = []

        for line in _non_blank(source):
            product_id, order = parse_market_data_record(line)
            batch.append((product_id, order, line))
            count += 1

            if len(batch) == self._batch_size:
                self._service.on_message(self._build_book(batch))
                batch = []

        if batch:
            LOGGER.warning(
                "dropping incomplete market data snapshot",
                extra={"records": len(batch), "batch_size": self._batch_size},
            )

        return count

    def _build_book(self, batch: list[tuple[str, Order, str]]) -> OrderBook:
        product_id = batch[0][0]
        for other_id, _, line in batch[1:]:
            if other_id != product_id:
                raise MalformedRecordError(
                    f"snapshot mixes products {product_id!r} and {other_id!r}", line
                )

        return OrderBook(
            product=self._product_lookup(product_id),
            bid_stack=tuple(order for _, order, _ in batch if order.side == "BID"),
            offer_stack=tuple(order for _, order, _ in batch if order.side == "OFFER"),
        )


class InquiryConnector:
    """Subscribe and publish connector for customer inquiries.

    Publishing stands in for the customer side: the inquiry comes straight
    back to the service as QUOTED.
    """

    def __init__(self, service: InquiryService, product_lookup: ProductLookup = lookup_product) -> None:
        self._service = service
        self._product_lookup = product_lookup

    def publish(self, data: Inquiry) -> None:
        self._service.on_message(data.with_state("QUOTED"))

    def subscribe(self, source: Iterable[str]) -> int:
        count = 0
        for line in _non_blank(source):
            self._service.on_message(parse_inquiry_record(line, self._product_lookup))
            count += 1
        return count
