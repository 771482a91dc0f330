"""
Semantic test: GUI throttling.

Invariant:
A price is published to the GUI only if strictly more than the throttle
interval (300 ms) has elapsed since the last publication; updates inside
the window are dropped, not queued.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from trading_desk.core.domain.reference_data import lookup_product
from trading_desk.core.domain.types import Price
from trading_desk.core.services.gui import GUIPricingListener, GUIService
from trading_desk.core.services.pricing import PricingService
from trading_desk.core.sinks.file_recorder import GuiFileConnector

T0 = datetime(2024, 1, 1, 12, 0, 0)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance_ms(self, ms: int) -> None:
        self.now += timedelta(milliseconds=ms)


def _price(mid: float = 100.0) -> Price:
    return Price(product=lookup_product("91282CFX4"), mid=mid, bid_offer_spread=1 / 64)


def test_publication_requires_strictly_more_than_throttle(tmp_path) -> None:
    clock = FakeClock(T0)
    connector = GuiFileConnector(tmp_path, clock)
    gui = GUIService(connector, throttle=timedelta(milliseconds=300), clock=clock)

    clock.advance_ms(300)
    assert gui.throttle_price(_price()) is False

    clock.advance_ms(1)
    assert gui.throttle_price(_price(100.5)) is True

    clock.advance_ms(300)
    assert gui.throttle_price(_price()) is False

    clock.advance_ms(1)
    assert gui.throttle_price(_price(101.0)) is True

    connector.close()

    lines = (tmp_path / "gui.txt").read_text(encoding="utf-8").splitlines()
    assert lines == [
        "2024-01-01 12:00:00.301000, 91282CFX4, 100.5, 0.015625",
        "2024-01-01 12:00:00.602000, 91282CFX4, 101.0, 0.015625",
    ]
    assert gui.published_count == 2
    assert gui.dropped_count == 2
    assert gui.get_data("91282CFX4").mid == 101.0


def test_pricing_listener_feeds_gui(tmp_path) -> None:
    clock = FakeClock(T0)
    connector = GuiFileConnector(tmp_path, clock)
    gui = GUIService(connector, clock=clock)
    pricing = PricingService()
    pricing.add_listener(GUIPricingListener(gui))

    clock.advance_ms(1_000)
    pricing.on_message(_price())
    pricing.on_message(_price())

    connector.close()

    assert gui.published_count == 1
    assert gui.dropped_count == 1
