"""Core shared data models.

This module defines the canonical Pydantic models that flow through the
desk pipeline: products, prices, order books, price streams, executions,
trades, positions, risk and customer inquiries. Value objects are frozen;
``Position`` is the only model that is updated in place by its owning
service, and listeners always receive a snapshot copy of it.
"""

# pylint: disable=missing-class-docstring,missing-function-docstring
from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from trading_desk.core.domain.fractional_price import format_fractional_price

PricingSide = Literal["BID", "OFFER"]
Side = Literal["BUY", "SELL"]
OrderType = Literal["FOK", "IOC", "MARKET", "LIMIT", "STOP"]
InquiryState = Literal["RECEIVED", "QUOTED", "DONE", "REJECTED", "CUSTOMER_REJECTED"]
PersistType = Literal["POSITION", "RISK", "EXECUTION", "STREAMING", "INQUIRY"]


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------


class Bond(BaseModel):
    product_id: str = Field(..., min_length=1)
    id_type: Literal["CUSIP", "ISIN"] = "CUSIP"
    ticker: str = Field(..., min_length=1)
    coupon: float = Field(..., ge=0)
    maturity: date

    model_config = ConfigDict(extra="forbid", frozen=True)


class BucketedSector(BaseModel):
    """A named group of products over which risk is aggregated."""

    name: str = Field(..., min_length=1)
    products: tuple[Bond, ...]

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def product_id(self) -> str:
        return self.name


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------


class Price(BaseModel):
    product: Bond
    mid: float = Field(..., ge=0)
    bid_offer_spread: float = Field(..., ge=0)

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def product_id(self) -> str:
        return self.product.product_id


class PriceStreamOrder(BaseModel):
    price: float
    visible_quantity: int = Field(..., ge=0)
    hidden_quantity: int = Field(..., ge=0)
    side: PricingSide

    model_config = ConfigDict(extra="forbid", frozen=True)

    def render(self) -> str:
        return (
            f"Side: {self.side.lower()}, "
            f"Price: {format_fractional_price(self.price)}, "
            f"Visible quantity: {self.visible_quantity}, "
            f"Hidden quantity: {self.hidden_quantity}"
        )


class PriceStream(BaseModel):
    """Two-way market derived from an internal price."""

    product: Bond
    bid_order: PriceStreamOrder
    offer_order: PriceStreamOrder

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def validate_sides(self) -> PriceStream:
        if self.bid_order.side != "BID":
            raise ValueError("bid_order must be on the BID side")
        if self.offer_order.side != "OFFER":
            raise ValueError("offer_order must be on the OFFER side")
        return self

    @property
    def product_id(self) -> str:
        return self.product.product_id

    def render(self) -> str:
        return f"CUSIP: {self.product_id}, {self.bid_order.render()}, {self.offer_order.render()}"


# ---------------------------------------------------------------------------
# Market data
# ---------------------------------------------------------------------------


class Order(BaseModel):
    price: float
    quantity: int = Field(..., ge=0)
    side: PricingSide

    model_config = ConfigDict(extra="forbid", frozen=True)


class BidOffer(BaseModel):
    """Best bid and best offer of a book. A side is None when its stack is empty."""

    bid_order: Order | None
    offer_order: Order | None

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def spread(self) -> float | None:
        if self.bid_order is None or self.offer_order is None:
            return None
        return self.offer_order.price - self.bid_order.price


class OrderBook(BaseModel):
    """Full depth snapshot of bid and offer orders for one product.

    Crossed input (best bid above best offer) is accepted as-is.
    """

    product: Bond
    bid_stack: tuple[Order, ...]
    offer_stack: tuple[Order, ...]

    model_config = ConfigDict(extra="forbid", frozen=True)

    @model_validator(mode="after")
    def validate_stack_sides(self) -> OrderBook:
        if any(order.side != "BID" for order in self.bid_stack):
            raise ValueError("bid_stack must contain BID orders only")
        if any(order.side != "OFFER" for order in self.offer_stack):
            raise ValueError("offer_stack must contain OFFER orders only")
        return self

    @property
    def product_id(self) -> str:
        return self.product.product_id

    def best_bid_offer(self) -> BidOffer:
        """Highest bid and lowest offer; the first order wins a price tie."""
        best_bid: Order | None = None
        for order in self.bid_stack:
            if best_bid is None or order.price > best_bid.price:
                best_bid = order

        best_offer: Order | None = None
        for order in self.offer_stack:
            if best_offer is None or order.price < best_offer.price:
                best_offer = order

        return BidOffer(bid_order=best_bid, offer_order=best_offer)

    def aggregate(self) -> OrderBook:
        """Return a new book with one order per distinct price and side.

        Prices are grouped by exact equality, levels keep the order in which
        each price was first seen.
        """
        return OrderBook(
            product=self.product,
            bid_stack=_aggregate_stack(self.bid_stack, "BID"),
            offer_stack=_aggregate_stack(self.offer_stack, "OFFER"),
        )


def _aggregate_stack(stack: tuple[Order, ...], side: PricingSide) -> tuple[Order, ...]:
    totals: dict[float, int] = {}
    for order in stack:
        totals[order.price] = totals.get(order.price, 0) + order.quantity
    return tuple(Order(price=price, quantity=qty, side=side) for price, qty in totals.items())


# ---------------------------------------------------------------------------
# Executions and trades
# ---------------------------------------------------------------------------


class ExecutionOrder(BaseModel):
    product: Bond
    side: PricingSide
    order_id: str = Field(..., min_length=1)
    order_type: OrderType
    price: float
    visible_quantity: int = Field(..., ge=0)
    hidden_quantity: int = Field(..., ge=0)
    parent_order_id: str | None = None
    is_child_order: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def product_id(self) -> str:
        return self.product.product_id

    @property
    def total_quantity(self) -> int:
        return self.visible_quantity + self.hidden_quantity

    def render(self) -> str:
        return (
            f"CUSIP: {self.product_id}, "
            f"Side: {self.side.lower()}, "
            f"Order ID: {self.order_id}, "
            f"Order type: {self.order_type}, "
            f"Price: {format_fractional_price(self.price)}, "
            f"Visible quantity: {self.visible_quantity}, "
            f"Hidden quantity: {self.hidden_quantity}, "
            f"Parent order ID: {self.parent_order_id or 'NA'}, "
            f"Is child order: {int(self.is_child_order)}"
        )


class Trade(BaseModel):
    product: Bond
    trade_id: str = Field(..., min_length=1)
    price: float
    book: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=0)
    side: Side

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def product_id(self) -> str:
        return self.product.product_id

    @property
    def signed_quantity(self) -> int:
        return -self.quantity if self.side == "SELL" else self.quantity


# ---------------------------------------------------------------------------
# Positions and risk
# ---------------------------------------------------------------------------


class Position(BaseModel):
    """Net quantity per book for one product.

    Books that were never traded read as flat (0).
    """

    product: Bond
    positions: dict[str, int] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @property
    def product_id(self) -> str:
        return self.product.product_id

    def get_position(self, book: str) -> int:
        return self.positions.get(book, 0)

    def add_position(self, book: str, quantity: int) -> None:
        self.positions[book] = self.positions.get(book, 0) + quantity

    def get_aggregate_position(self) -> int:
        return sum(self.positions.values())

    def snapshot(self) -> Position:
        return self.model_copy(deep=True)

    def render(self) -> str:
        books = "".join(f"{book}: {qty}, " for book, qty in self.positions.items())
        return f"CUSIP: {self.product_id}, {books}Aggregate: {self.get_aggregate_position()}"


class PV01(BaseModel):
    """PV01 risk of a single product or of a bucketed sector.

    For a single product ``quantity`` is the aggregate position. For a
    bucketed sector ``pv01`` already holds the summed risk and ``quantity``
    is fixed at 1.
    """

    product: Bond | BucketedSector
    pv01: float
    quantity: int

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def product_id(self) -> str:
        return self.product.product_id

    @property
    def risk(self) -> float:
        return self.pv01 * self.quantity

    def render(self) -> str:
        return f"CUSIP: {self.product_id}, PV01: {self.pv01:.6f}, Quantity: {self.quantity}"


# ---------------------------------------------------------------------------
# Customer inquiries
# ---------------------------------------------------------------------------


class Inquiry(BaseModel):
    inquiry_id: str = Field(..., min_length=1)
    product: Bond
    side: Side
    quantity: int = Field(..., ge=0)
    price: float
    state: InquiryState

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def product_id(self) -> str:
        return self.product.product_id

    def with_state(self, state: InquiryState) -> Inquiry:
        return self.model_copy(update={"state": state})

    def with_price(self, price: float) -> Inquiry:
        return self.model_copy(update={"price": price})

    def render(self) -> str:
        return (
            f"Inquiry ID: {self.inquiry_id}, "
            f"CUSIP: {self.product_id}, "
            f"Side: {self.side.lower()}, "
            f"Price: {format_fractional_price(self.price)}, "
            f"Quantity: {self.quantity}, "
            f"State: {self.state}"
        )
