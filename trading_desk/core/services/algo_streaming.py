"""Algorithmic streaming: derives two-way quotes from internal prices."""

from __future__ import annotations

from trading_desk.core.domain.types import Price, PriceStream, PriceStreamOrder
from trading_desk.core.soa.listener import ServiceListener
from trading_desk.core.soa.service import Service

BASE_VISIBLE_QUANTITY: int = 10_000_000


class AlgoStreamingService(Service[str, PriceStream]):
    """Builds a PriceStream for every incoming Price.

    Visible size alternates between 1x and 2x the base size on successive
    quotes of this service instance, whatever the product. Hidden size is
    always twice the visible size.
    """

    def __init__(self, *, base_visible_quantity: int = BASE_VISIBLE_QUANTITY) -> None:
        super().__init__()
        self._base_visible_quantity = base_visible_quantity
        self.parity = False

    def on_message(self, data: PriceStream) -> None:
        self._store(data.product_id, data)
        self._emit(data)

    def publish_price(self, price: Price) -> PriceStream:
        half_spread = price.bid_offer_spread / 2.0
        visible_quantity = (2 if self.parity else 1) * self._base_visible_quantity
        hidden_quantity = 2 * visible_quantity
        self.parity = not self.parity

        price_stream = PriceStream(
            product=price.product,
            bid_order=PriceStreamOrder(
                price=price.mid - half_spread,
                visible_quantity=visible_quantity,
                hidden_quantity=hidden_quantity,
                side="BID",
            ),
            offer_order=PriceStreamOrder(
                price=price.mid + half_spread,
                visible_quantity=visible_quantity,
                hidden_quantity=hidden_quantity,
                side="OFFER",
            ),
        )
        self.on_message(price_stream)
        return price_stream


class PricingListener(ServiceListener[Price]):
    """Feeds internal prices into the algo streaming service."""

    def __init__(self, service: AlgoStreamingService) -> None:
        self._service = service

    def process_add(self, data: Price) -> None:
        self._service.publish_price(data)
