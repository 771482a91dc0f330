"""
Logging listener.
"""
from __future__ import annotations

import logging
from typing import Any

from trading_desk.core.soa.listener import ServiceListener


class LoggingListener(ServiceListener[Any]):
    """Logs every value emitted by a service using the standard logging module."""

    def __init__(self, logger: logging.Logger, source: str) -> None:
        self._logger = logger
        self._source = source

    def process_add(self, data: Any) -> None:
        self._logger.debug("service_event", extra={"source": self._source, "event": data})
