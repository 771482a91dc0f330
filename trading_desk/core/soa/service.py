"""
Keyed service base class with synchronous listener fan-out.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Hashable, TypeVar

from trading_desk.core.domain.errors import NotFoundError
from trading_desk.core.soa.listener import ServiceListener

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class Service(ABC, Generic[K, V]):
    """Keyed store that dispatches every accepted value to registered listeners.

    Invariants:
    - The service exclusively owns its store and its listener list.
    - Listeners are invoked synchronously, in registration order, before
      ``on_message`` returns.
    """

    def __init__(self) -> None:
        self._data: dict[K, V] = {}
        self._listeners: list[ServiceListener[V]] = []

    @property
    def name(self) -> str:
        return type(self).__name__

    def get_data(self, key: K) -> V:
        """Return the current value for a key, raising NotFoundError if absent."""
        try:
            return self._data[key]
        except KeyError:
            raise NotFoundError(self.name, key) from None

    def has_data(self, key: K) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    @abstractmethod
    def on_message(self, data: V) -> None:
        """Callback invoked by a connector or an upstream listener for new data."""

    def add_listener(self, listener: ServiceListener[V]) -> None:
        """Register a new listener."""
        self._listeners.append(listener)

    @property
    def listeners(self) -> tuple[ServiceListener[V], ...]:
        return tuple(self._listeners)

    def _store(self, key: K, data: V) -> None:
        self._data[key] = data

    def _emit(self, data: V) -> None:
        """Emit a value to all listeners."""
        for listener in self._listeners:
            listener.process_add(data)
