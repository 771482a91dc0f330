"""GUI service: throttled republication of internal prices."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Callable

from trading_desk.core.domain.types import Price
from trading_desk.core.soa.listener import ServiceListener
from trading_desk.core.soa.service import Service

if TYPE_CHECKING:
    from trading_desk.core.sinks.file_recorder import GuiFileConnector

LOGGER = logging.getLogger(__name__)

DEFAULT_THROTTLE = timedelta(milliseconds=300)


class GUIService(Service[str, Price]):
    """Publishes a price only if strictly more than ``throttle`` has elapsed
    since the last publication. Updates inside the window are dropped.
    """

    def __init__(
        self,
        connector: GuiFileConnector,
        *,
        throttle: timedelta = DEFAULT_THROTTLE,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__()
        self._connector = connector
        self._throttle = throttle
        self._clock = clock
        self.last_publish_time = clock()
        self.published_count = 0
        self.dropped_count = 0

    def on_message(self, data: Price) -> None:
        self._store(data.product_id, data)
        self._emit(data)

    def throttle_price(self, price: Price) -> bool:
        """Publish the price unless throttled; returns True if it was published."""
        now = self._clock()
        if now - self.last_publish_time > self._throttle:
            self._connector.publish_at(now, price)
            self.on_message(price)
            self.last_publish_time = now
            self.published_count += 1
            return True

        self.dropped_count += 1
        LOGGER.debug("gui update throttled", extra={"product_id": price.product_id})
        return False


class GUIPricingListener(ServiceListener[Price]):
    def __init__(self, service: GUIService) -> None:
        self._service = service

    def process_add(self, data: Price) -> None:
        self._service.throttle_price(data)
