"""PV01 risk per product and across bucketed sectors."""

from __future__ import annotations

import logging
from typing import Callable, Iterable

from trading_desk.core.domain.reference_data import lookup_pv01
from trading_desk.core.domain.types import PV01, BucketedSector, Position
from trading_desk.core.soa.listener import ServiceListener
from trading_desk.core.soa.service import Service

LOGGER = logging.getLogger(__name__)


class RiskService(Service[str, PV01]):
    """Risk service keyed on product id.

    Single-name PV01 carries the static per-unit factor and the aggregate
    position as quantity. Bucketed PV01 carries the summed risk of the sector
    members with quantity fixed at 1.
    """

    def __init__(self, pv01_lookup: Callable[[str], float] = lookup_pv01) -> None:
        super().__init__()
        self._pv01_lookup = pv01_lookup

    def on_message(self, data: PV01) -> None:
        self._store(data.product_id, data)
        self._emit(data)

    def add_position(self, position: Position) -> PV01:
        pv01 = PV01(
            product=position.product,
            pv01=self._pv01_lookup(position.product_id),
            quantity=position.get_aggregate_position(),
        )
        self.on_message(pv01)
        return pv01

    def get_bucketed_risk(self, sector: BucketedSector) -> PV01:
        """Sum pv01 x quantity over the sector members.

        Members without any stored risk hold no position and contribute 0.
        """
        total = 0.0
        for product in sector.products:
            risk = self._data.get(product.product_id)
            if risk is None:
                LOGGER.debug(
                    "no risk for sector member",
                    extra={"sector": sector.name, "product_id": product.product_id},
                )
                continue
            total += risk.risk

        return PV01(product=sector, pv01=total, quantity=1)

    def get_bucketed_risks(self, sectors: Iterable[BucketedSector]) -> list[PV01]:
        return [self.get_bucketed_risk(sector) for sector in sectors]


class PositionListener(ServiceListener[Position]):
    def __init__(self, service: RiskService) -> None:
        self._service = service

    def process_add(self, data: Position) -> None:
        self._service.add_position(data)
