"""Public API for the trading_desk package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Domain Types
# ----------------------------------------------------------------------
from trading_desk.core.domain.errors import (
    DeskError,
    InvalidStateTransitionError,
    MalformedRecordError,
    NotFoundError,
)
from trading_desk.core.domain.fractional_price import (
    format_fractional_price,
    parse_fractional_price,
)
from trading_desk.core.domain.types import (
    PV01,
    BidOffer,
    Bond,
    BucketedSector,
    ExecutionOrder,
    Inquiry,
    Order,
    OrderBook,
    Position,
    Price,
    PriceStream,
    PriceStreamOrder,
    Trade,
)

# ----------------------------------------------------------------------
# Service Framework
# ----------------------------------------------------------------------
from trading_desk.core.soa.connector import Connector
from trading_desk.core.soa.listener import ServiceListener
from trading_desk.core.soa.service import Service

# ----------------------------------------------------------------------
# Runtime API
# ----------------------------------------------------------------------
from trading_desk.runtime.pipeline import RunSummary, TradingSystem
from trading_desk.runtime.pipeline_config import PipelineConfig

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Runtime
    "TradingSystem",
    "RunSummary",
    "PipelineConfig",

    # Service framework
    "Service",
    "ServiceListener",
    "Connector",

    # Domain
    "Bond",
    "BucketedSector",
    "Price",
    "PriceStream",
    "PriceStreamOrder",
    "Order",
    "BidOffer",
    "OrderBook",
    "ExecutionOrder",
    "Trade",
    "Position",
    "PV01",
    "Inquiry",
    "parse_fractional_price",
    "format_fractional_price",

    # Errors
    "DeskError",
    "NotFoundError",
    "MalformedRecordError",
    "InvalidStateTransitionError",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("trading-desk")
except PackageNotFoundError:
    __version__ = "0.0.0"
