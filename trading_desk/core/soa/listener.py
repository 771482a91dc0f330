"""
Service listener interface.

Listeners are registered on an upstream service and receive every value the
service emits, synchronously and in registration order.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

V = TypeVar("V")


class ServiceListener(ABC, Generic[V]):
    """Callback target for add, remove and update events on a Service.

    The pipeline only models replace-by-add, so remove and update are no-ops
    unless a listener overrides them.
    """

    @abstractmethod
    def process_add(self, data: V) -> None:
        """Consume a value added to (or replaced in) the upstream service."""

    def process_remove(self, data: V) -> None:
        return

    def process_update(self, data: V) -> None:
        return
