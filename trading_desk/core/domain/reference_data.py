"""Static bond reference data.

The desk trades the seven on-the-run US Treasuries. Products and PV01
factors are keyed by CUSIP; unknown ids raise ``NotFoundError``.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable

from trading_desk.core.domain.errors import NotFoundError
from trading_desk.core.domain.types import Bond, BucketedSector

_BONDS: dict[str, Bond] = {
    bond.product_id: bond
    for bond in (
        Bond(product_id="91282CFX4", ticker="T", coupon=0.04500, maturity=date(2024, 11, 30)),
        Bond(product_id="91282CGA3", ticker="T", coupon=0.04000, maturity=date(2025, 12, 15)),
        Bond(product_id="91282CFZ9", ticker="T", coupon=0.03875, maturity=date(2027, 11, 30)),
        Bond(product_id="91282CFY2", ticker="T", coupon=0.03875, maturity=date(2029, 11, 30)),
        Bond(product_id="91282CFV8", ticker="T", coupon=0.04125, maturity=date(2032, 11, 15)),
        Bond(product_id="912810TM0", ticker="T", coupon=0.04000, maturity=date(2042, 11, 15)),
        Bond(product_id="912810TL2", ticker="T", coupon=0.04000, maturity=date(2052, 11, 15)),
    )
}

# PV01 per unit of face value.
_PV01: dict[str, float] = {
    "91282CFX4": 0.0188,
    "91282CGA3": 0.0276,
    "91282CFZ9": 0.0452,
    "91282CFY2": 0.0617,
    "91282CFV8": 0.0862,
    "912810TM0": 0.1442,
    "912810TL2": 0.1992,
}

DEFAULT_SECTORS: dict[str, tuple[str, ...]] = {
    "FrontEnd": ("91282CFX4", "91282CGA3"),
    "Belly": ("91282CFZ9", "91282CFY2", "91282CFV8"),
    "LongEnd": ("912810TM0", "912810TL2"),
}


def product_ids() -> tuple[str, ...]:
    """All known CUSIPs, shortest maturity first."""
    return tuple(_BONDS)


def lookup_product(product_id: str) -> Bond:
    try:
        return _BONDS[product_id]
    except KeyError:
        raise NotFoundError("reference_data.products", product_id) from None


def lookup_pv01(product_id: str) -> float:
    try:
        return _PV01[product_id]
    except KeyError:
        raise NotFoundError("reference_data.pv01", product_id) from None


def build_sector(name: str, members: Iterable[str]) -> BucketedSector:
    """Build a bucketed sector from CUSIPs, preserving member order."""
    return BucketedSector(
        name=name,
        products=tuple(lookup_product(product_id) for product_id in members),
    )
