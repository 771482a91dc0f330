"""
Connector interface.

A connector sits between a service and the outside world. A publishing
connector receives values from its service, a subscribing connector reads an
external source and pushes every parsed value into the service's
``on_message``. A connector may do both.
"""
from __future__ import annotations

from typing import Iterable, Protocol, TypeVar

V_contra = TypeVar("V_contra", contravariant=True)


class Connector(Protocol[V_contra]):
    def publish(self, data: V_contra) -> None:
        """Send a value from the service to the external sink."""

    def subscribe(self, source: Iterable[str]) -> int:
        """Ingest every record of the source into the service.

        Returns the number of records consumed.
        """
