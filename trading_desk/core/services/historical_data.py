"""Historical data service persisting any entity stream to a write-only store."""

from __future__ import annotations

from typing import Any, Callable

from trading_desk.core.domain.types import Inquiry, PersistType
from trading_desk.core.soa.connector import Connector
from trading_desk.core.soa.listener import ServiceListener
from trading_desk.core.soa.service import Service


def default_persist_key(data: Any) -> str:
    """Inquiries persist under their inquiry id, everything else under its product id."""
    if isinstance(data, Inquiry):
        return data.inquiry_id
    return data.product_id


class HistoricalDataService(Service[str, Any]):
    """Terminal sink parameterized by persist kind.

    Every value is stored as the latest for its key and immediately handed to
    the publishing connector. The service never emits to listeners and never
    answers queries against persisted history.
    """

    def __init__(
        self,
        persist_type: PersistType,
        connector: Connector[Any],
        persist_key: Callable[[Any], str] = default_persist_key,
    ) -> None:
        super().__init__()
        self.persist_type = persist_type
        self._connector = connector
        self._persist_key = persist_key
        self.persisted_count = 0

    def on_message(self, data: Any) -> None:
        self.persist_data(self._persist_key(data), data)

    def persist_data(self, persist_key: str, data: Any) -> None:
        self._store(persist_key, data)
        self._connector.publish(data)
        self.persisted_count += 1


class ToHistoricalDataListener(ServiceListener[Any]):
    def __init__(self, service: HistoricalDataService) -> None:
        self._service = service

    def process_add(self, data: Any) -> None:
        self._service.on_message(data)
