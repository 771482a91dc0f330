"""Pricing service holding the current internal mid/spread per product."""

from __future__ import annotations

from trading_desk.core.domain.types import Price
from trading_desk.core.soa.service import Service


class PricingService(Service[str, Price]):
    """Keyed on product id, last write wins."""

    def on_message(self, data: Price) -> None:
        self._store(data.product_id, data)
        self._emit(data)
