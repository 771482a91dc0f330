"""Execution service recording the orders sent to market."""

from __future__ import annotations

from trading_desk.core.domain.types import ExecutionOrder
from trading_desk.core.soa.listener import ServiceListener
from trading_desk.core.soa.service import Service


class ExecutionService(Service[str, ExecutionOrder]):
    """Keyed on product id; holds the latest execution per product."""

    def on_message(self, data: ExecutionOrder) -> None:
        self._store(data.product_id, data)
        self._emit(data)

    def execute_order(self, execution_order: ExecutionOrder) -> None:
        self.on_message(execution_order)


class AlgoExecutionListener(ServiceListener[ExecutionOrder]):
    def __init__(self, service: ExecutionService) -> None:
        self._service = service

    def process_add(self, data: ExecutionOrder) -> None:
        self._service.execute_order(data)
