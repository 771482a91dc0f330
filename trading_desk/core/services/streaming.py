"""Streaming service republishing two-way prices downstream."""

from __future__ import annotations

from trading_desk.core.domain.types import PriceStream
from trading_desk.core.soa.listener import ServiceListener
from trading_desk.core.soa.service import Service


class StreamingService(Service[str, PriceStream]):
    def on_message(self, data: PriceStream) -> None:
        self._store(data.product_id, data)
        self._emit(data)

    def publish_price(self, price_stream: PriceStream) -> None:
        self.on_message(price_stream)


class AlgoStreamingListener(ServiceListener[PriceStream]):
    def __init__(self, service: StreamingService) -> None:
        self._service = service

    def process_add(self, data: PriceStream) -> None:
        self._service.publish_price(data)
