"""Position keeping: nets trades into per-book and aggregate positions."""

from __future__ import annotations

import logging

from trading_desk.core.domain.types import Position, Trade
from trading_desk.core.soa.listener import ServiceListener
from trading_desk.core.soa.service import Service

LOGGER = logging.getLogger(__name__)


class PositionService(Service[str, Position]):
    """Positions keyed on product id.

    Invariants:
    - A trade id is applied at most once.
    - Listeners and readers receive snapshot copies; the stored position is
      only mutated by ``add_trade``.
    """

    def __init__(self) -> None:
        super().__init__()
        self._applied_trade_ids: set[str] = set()

    def get_data(self, key: str) -> Position:
        return super().get_data(key).snapshot()

    def on_message(self, data: Position) -> None:
        self._store(data.product_id, data)
        self._emit(data.snapshot())

    def add_trade(self, trade: Trade) -> Position | None:
        """Apply a trade to its product's position.

        Returns the updated position, or None if the trade id was already applied.
        """
        if trade.trade_id in self._applied_trade_ids:
            LOGGER.debug("trade already applied", extra={"trade_id": trade.trade_id})
            return None
        self._applied_trade_ids.add(trade.trade_id)

        position = self._data.get(trade.product_id)
        if position is None:
            position = Position(product=trade.product)

        position.add_position(trade.book, trade.signed_quantity)
        self.on_message(position)

        return position.snapshot()


class TradeBookingListener(ServiceListener[Trade]):
    def __init__(self, service: PositionService) -> None:
        self._service = service

    def process_add(self, data: Trade) -> None:
        self._service.add_trade(data)
