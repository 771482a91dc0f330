from __future__ import annotations

from typing import Any, Generic, Iterable, TypeVar

from trading_desk.core.soa.listener import ServiceListener

V = TypeVar("V")


class NullConnector:
    """Connector that keeps published values without forwarding them (used for tests)."""

    def __init__(self) -> None:
        self.published: list[Any] = []

    def publish(self, data: Any) -> None:
        self.published.append(data)

    def subscribe(self, source: Iterable[str]) -> int:
        return 0


class RecordingListener(ServiceListener[V], Generic[V]):
    """Listener that keeps every value it receives, in delivery order (used for tests)."""

    def __init__(self) -> None:
        self.received: list[V] = []

    def process_add(self, data: V) -> None:
        self.received.append(data)
