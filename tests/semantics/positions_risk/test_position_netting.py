"""
Semantic test: trades net into per-book positions.

Invariant:
A BUY adds and a SELL subtracts its quantity in the trade's book; the
aggregate is the sum over books; a trade id is applied at most once; and
listeners receive snapshots that later trades do not mutate.
"""

from __future__ import annotations

from trading_desk.core.domain.reference_data import lookup_product
from trading_desk.core.domain.types import Position, Trade
from trading_desk.core.services.position import PositionService, TradeBookingListener
from trading_desk.core.services.trade_booking import TradeBookingService
from trading_desk.core.sinks.null_sinks import RecordingListener


def _trade(trade_id: str, book: str, quantity: int, side: str) -> Trade:
    return Trade(
        product=lookup_product("91282CFY2"),
        trade_id=trade_id,
        price=99.5,
        book=book,
        quantity=quantity,
        side=side,
    )


def test_buy_then_sell_nets_within_a_book() -> None:
    service = PositionService()

    service.add_trade(_trade("T1", "TRSY1", 1_000_000, "BUY"))
    service.add_trade(_trade("T2", "TRSY1", 400_000, "SELL"))
    service.add_trade(_trade("T3", "TRSY3", 250_000, "SELL"))

    position = service.get_data("91282CFY2")
    assert position.get_position("TRSY1") == 600_000
    assert position.get_position("TRSY2") == 0
    assert position.get_position("TRSY3") == -250_000
    assert position.get_aggregate_position() == 350_000


def test_emitted_positions_are_snapshots() -> None:
    service = PositionService()
    listener: RecordingListener[Position] = RecordingListener()
    service.add_listener(listener)

    service.add_trade(_trade("T1", "TRSY1", 1_000_000, "BUY"))
    service.add_trade(_trade("T2", "TRSY1", 400_000, "SELL"))

    assert [p.get_position("TRSY1") for p in listener.received] == [1_000_000, 600_000]

    # Mutating a read copy does not touch the stored position.
    service.get_data("91282CFY2").add_position("TRSY1", 5)
    assert service.get_data("91282CFY2").get_position("TRSY1") == 600_000


def test_trade_id_is_applied_once() -> None:
    service = PositionService()
    trade = _trade("T1", "TRSY2", 1_000_000, "BUY")

    assert service.add_trade(trade) is not None
    assert service.add_trade(trade) is None

    assert service.get_data("91282CFY2").get_aggregate_position() == 1_000_000


def test_repeated_booking_reaches_positions_once() -> None:
    booking = TradeBookingService()
    positions = PositionService()
    booking.add_listener(TradeBookingListener(positions))

    trade = _trade("T9", "TRSY1", 1_000_000, "BUY")
    booking.on_message(trade)
    booking.add_trade(trade)

    assert positions.get_data("91282CFY2").get_position("TRSY1") == 1_000_000


def test_position_rendering() -> None:
    service = PositionService()
    service.add_trade(_trade("T1", "TRSY1", 1_000_000, "BUY"))
    service.add_trade(_trade("T2", "TRSY2", 400_000, "SELL"))

    assert service.get_data("91282CFY2").render() == (
        "CUSIP: 91282CFY2, TRSY1: 1000000, TRSY2: -400000, Aggregate: 600000"
    )
