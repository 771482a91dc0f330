"""Trade booking: turns executions into trades against a rotating set of books."""

from __future__ import annotations

import logging
from typing import Iterable

from trading_desk.core.domain.types import ExecutionOrder, Trade
from trading_desk.core.soa.listener import ServiceListener
from trading_desk.core.soa.service import Service

LOGGER = logging.getLogger(__name__)

DEFAULT_BOOKS: tuple[str, ...] = ("TRSY1", "TRSY2", "TRSY3")

EXECUTION_TRADE_ID_PREFIX = "TRADE-EXECUTE-"


class TradeBookingService(Service[str, Trade]):
    """Trade store keyed on trade id.

    Booking is idempotent per trade id: a trade id that is already stored is
    neither stored again nor re-emitted.
    """

    def __init__(self, books: Iterable[str] = DEFAULT_BOOKS) -> None:
        super().__init__()
        self._books = tuple(books)
        if not self._books:
            raise ValueError("at least one book is required")
        self.booked_count = 0

    @property
    def books(self) -> tuple[str, ...]:
        return self._books

    def on_message(self, data: Trade) -> None:
        existing = self._data.get(data.trade_id)
        if existing is not None:
            if existing != data:
                LOGGER.warning(
                    "conflicting trade for booked trade id ignored",
                    extra={"trade_id": data.trade_id},
                )
            return

        self._store(data.trade_id, data)
        self._emit(data)

    def add_trade(self, trade: Trade) -> None:
        self.on_message(trade)

    def book_execution(self, execution: ExecutionOrder) -> Trade:
        """Book an execution against the next book in rotation."""
        book = self._books[self.booked_count % len(self._books)]
        self.booked_count += 1

        trade = Trade(
            product=execution.product,
            trade_id=EXECUTION_TRADE_ID_PREFIX + execution.order_id,
            price=execution.price,
            book=book,
            quantity=execution.total_quantity,
            side="BUY" if execution.side == "BID" else "SELL",
        )

        # Listener chain first, then the direct booking call. The second call
        # is absorbed by trade id idempotence.
        self.on_message(trade)
        self.add_trade(trade)

        return trade


class ExecutionListener(ServiceListener[ExecutionOrder]):
    """Books every execution order emitted by the execution service."""

    def __init__(self, service: TradeBookingService) -> None:
        self._service = service

    def process_add(self, data: ExecutionOrder) -> None:
        self._service.book_execution(data)
