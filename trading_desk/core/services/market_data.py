"""Market data service holding one full-depth order book per product."""

from __future__ import annotations

from trading_desk.core.domain.types import BidOffer, OrderBook
from trading_desk.core.soa.service import Service


class MarketDataService(Service[str, OrderBook]):
    """Order book service keyed on product id.

    Each snapshot replaces the stored book wholesale; there is no incremental
    merge of depth updates.
    """

    def on_message(self, data: OrderBook) -> None:
        self._store(data.product_id, data)
        self._emit(data)

    def get_best_bid_offer(self, product_id: str) -> BidOffer:
        return self.get_data(product_id).best_bid_offer()

    def aggregate_depth(self, product_id: str) -> OrderBook:
        """Aggregate the stored book at every price level into a new book.

        The stored book is left untouched.
        """
        return self.get_data(product_id).aggregate()
