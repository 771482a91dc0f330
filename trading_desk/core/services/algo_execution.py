"""Algorithmic execution: crosses the spread when the book is tight enough."""

from __future__ import annotations

import logging

from trading_desk.core.domain.types import ExecutionOrder, OrderBook
from trading_desk.core.soa.listener import ServiceListener
from trading_desk.core.soa.service import Service

LOGGER = logging.getLogger(__name__)

CROSSABLE_SPREAD: float = 1.0 / 128.0


class AlgoExecutionService(Service[str, ExecutionOrder]):
    """Turns order book updates into market execution orders.

    On every update with ``offer - bid <= crossable_spread`` one MARKET order is
    emitted, alternating between lifting the offer (BID side) and hitting the
    bid (OFFER side). The alternation and the order id counter are scoped to
    this service instance, not to a product.
    """

    def __init__(self, *, crossable_spread: float = CROSSABLE_SPREAD) -> None:
        super().__init__()
        self._crossable_spread = crossable_spread
        self.next_is_buy = True
        self.order_counter = 0

    def on_message(self, data: ExecutionOrder) -> None:
        self._store(data.product_id, data)
        self._emit(data)

    def algo_execute_order(self, order_book: OrderBook) -> ExecutionOrder | None:
        """Run the spread-crossing decision on a book; None when not crossable."""
        bid_offer = order_book.best_bid_offer()
        best_bid = bid_offer.bid_order
        best_offer = bid_offer.offer_order

        if best_bid is None or best_offer is None:
            LOGGER.debug(
                "one-sided book, no execution",
                extra={"product_id": order_book.product_id},
            )
            return None

        if best_offer.price - best_bid.price > self._crossable_spread:
            LOGGER.debug(
                "spread too wide, no execution",
                extra={
                    "product_id": order_book.product_id,
                    "bid": best_bid.price,
                    "offer": best_offer.price,
                },
            )
            return None

        # Crossing the spread: a buy takes the offer, a sell hits the bid.
        if self.next_is_buy:
            side, taken = "BID", best_offer
        else:
            side, taken = "OFFER", best_bid

        execution = ExecutionOrder(
            product=order_book.product,
            side=side,
            order_id=str(self.order_counter),
            order_type="MARKET",
            price=taken.price,
            visible_quantity=taken.quantity,
            hidden_quantity=0,
            parent_order_id=None,
            is_child_order=False,
        )

        self.on_message(execution)

        self.next_is_buy = not self.next_is_buy
        self.order_counter += 1

        return execution


class MarketDataListener(ServiceListener[OrderBook]):
    """Feeds market data order books into the algo execution service."""

    def __init__(self, service: AlgoExecutionService) -> None:
        self._service = service

    def process_add(self, data: OrderBook) -> None:
        self._service.algo_execute_order(data)
