"""
Semantic test: keyed store and synchronous listener dispatch.

Invariant:
Listeners are invoked synchronously, in registration order, before
on_message returns. get_data on a missing key raises NotFoundError.
"""

from __future__ import annotations

import pytest

from trading_desk.core.domain.errors import NotFoundError
from trading_desk.core.domain.reference_data import lookup_product, lookup_pv01
from trading_desk.core.domain.types import Price
from trading_desk.core.services.pricing import PricingService
from trading_desk.core.soa.listener import ServiceListener


class _Tagged(ServiceListener[Price]):
    def __init__(self, tag: str, log: list[str]) -> None:
        self._tag = tag
        self._log = log

    def process_add(self, data: Price) -> None:
        self._log.append(f"{self._tag}:{data.product_id}")


def test_listeners_fire_in_registration_order() -> None:
    log: list[str] = []
    service = PricingService()
    for tag in ("a", "b", "c"):
        service.add_listener(_Tagged(tag, log))

    service.on_message(Price(product=lookup_product("91282CFX4"), mid=100.0, bid_offer_spread=0.0))
    log.append("returned")

    assert log == ["a:91282CFX4", "b:91282CFX4", "c:91282CFX4", "returned"]
    assert len(service.listeners) == 3


def test_last_write_wins_per_key() -> None:
    service = PricingService()
    bond = lookup_product("91282CFX4")

    service.on_message(Price(product=bond, mid=100.0, bid_offer_spread=0.0))
    service.on_message(Price(product=bond, mid=101.0, bid_offer_spread=0.0))

    assert service.get_data("91282CFX4").mid == 101.0
    assert len(service) == 1


def test_missing_keys_raise_not_found() -> None:
    with pytest.raises(NotFoundError) as excinfo:
        PricingService().get_data("91282CFX4")
    assert excinfo.value.key == "91282CFX4"
    assert excinfo.value.store == "PricingService"

    with pytest.raises(LookupError):
        lookup_product("000000000")
    with pytest.raises(NotFoundError):
        lookup_pv01("000000000")
