"""
Service wiring and run loop for the desk pipeline.

The TradingSystem owns every service, connector and file sink. Listener
registration order matters: each service dispatches synchronously in the
order listeners were added, so the sequence below fixes the order in which
downstream effects (and file lines) are produced.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Protocol

from trading_desk.core.connectors.file_ingest import (
    InquiryConnector,
    MarketDataConnector,
    PricingConnector,
    TradeBookingConnector,
)
from trading_desk.core.domain.reference_data import lookup_pv01
from trading_desk.core.domain.types import PersistType
from trading_desk.core.services.algo_execution import AlgoExecutionService, MarketDataListener
from trading_desk.core.services.algo_streaming import AlgoStreamingService, PricingListener
from trading_desk.core.services.execution import AlgoExecutionListener, ExecutionService
from trading_desk.core.services.gui import GUIPricingListener, GUIService
from trading_desk.core.services.historical_data import (
    HistoricalDataService,
    ToHistoricalDataListener,
)
from trading_desk.core.services.inquiry import InquiryService
from trading_desk.core.services.market_data import MarketDataService
from trading_desk.core.services.position import PositionService, TradeBookingListener
from trading_desk.core.services.pricing import PricingService
from trading_desk.core.services.risk import PositionListener, RiskService
from trading_desk.core.services.streaming import AlgoStreamingListener, StreamingService
from trading_desk.core.services.trade_booking import ExecutionListener, TradeBookingService
from trading_desk.core.sinks.file_recorder import GuiFileConnector, HistoricalFileConnector
from trading_desk.core.sinks.sink_logging import LoggingListener
from trading_desk.core.soa.service import Service
from trading_desk.runtime.pipeline_config import PipelineConfig

LOGGER = logging.getLogger(__name__)

PERSIST_TYPES: tuple[PersistType, ...] = ("POSITION", "RISK", "EXECUTION", "STREAMING", "INQUIRY")


class _Subscriber(Protocol):
    def subscribe(self, source: Iterable[str]) -> int:
        ...


# ---------------------------------------------------------------------------
# Run summary
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class RunSummary:
    prices: int = 0
    trades: int = 0
    market_data_records: int = 0
    inquiries: int = 0
    order_books: int = 0
    executions: int = 0
    booked_trades: int = 0
    positions: int = 0
    gui_published: int = 0
    gui_dropped: int = 0
    persisted: dict[str, int] = field(default_factory=dict)
    bucketed_risk: dict[str, float] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def as_metrics(self) -> dict[str, float]:
        """Flat name -> value view used for metrics export."""
        metrics: dict[str, float] = {
            "prices": self.prices,
            "trades": self.trades,
            "market_data_records": self.market_data_records,
            "inquiries": self.inquiries,
            "order_books": self.order_books,
            "executions": self.executions,
            "booked_trades": self.booked_trades,
            "positions": self.positions,
            "gui_published": self.gui_published,
            "gui_dropped": self.gui_dropped,
        }
        for persist_type, count in self.persisted.items():
            metrics[f"persisted_{persist_type.lower()}"] = count
        return metrics


def print_run_summary(summary: RunSummary) -> None:
    print(f"Prices: {summary.prices}")
    print(f"Trades: {summary.trades}")
    print(f"Market data records: {summary.market_data_records} ({summary.order_books} books)")
    print(f"Inquiries: {summary.inquiries}")
    print(f"Executions: {summary.executions}")
    print(f"Booked trades: {summary.booked_trades}")
    print(f"Positions: {summary.positions}")
    print(f"GUI updates: {summary.gui_published} published, {summary.gui_dropped} throttled")
    print()

    print("Persisted:")
    for persist_type, count in summary.persisted.items():
        print(f"  - {persist_type}: {count}")
    print()

    print("Bucketed PV01:")
    for sector, risk in summary.bucketed_risk.items():
        print(f"  - {sector}: {risk:.2f}")

    if summary.warnings:
        print()
        print("Warnings:")
        for w in summary.warnings:
            print(f"  - {w}")


# ---------------------------------------------------------------------------
# Trading system
# ---------------------------------------------------------------------------

class TradingSystem:
    """Builds and wires the full service graph for one run."""

    def __init__(
        self,
        config: PipelineConfig,
        *,
        clock: Callable[[], datetime] = datetime.now,
        pv01_lookup: Callable[[str], float] = lookup_pv01,
    ) -> None:
        self.config = config
        self.sectors = config.build_sectors()

        output_dir = Path(config.output_dir)

        # Services
        self.pricing = PricingService()
        self.algo_streaming = AlgoStreamingService(
            base_visible_quantity=config.base_visible_quantity,
        )
        self.streaming = StreamingService()
        self.market_data = MarketDataService()
        self.algo_execution = AlgoExecutionService(crossable_spread=config.crossable_spread)
        self.execution = ExecutionService()
        self.trade_booking = TradeBookingService(config.books)
        self.position = PositionService()
        self.risk = RiskService(pv01_lookup=pv01_lookup)
        self.inquiry = InquiryService()

        # Output sinks
        self._historical_connectors = {
            persist_type: HistoricalFileConnector(persist_type, output_dir, clock)
            for persist_type in PERSIST_TYPES
        }
        self.historical = {
            persist_type: HistoricalDataService(persist_type, connector)
            for persist_type, connector in self._historical_connectors.items()
        }
        self._gui_connector = GuiFileConnector(output_dir, clock)
        self.gui = GUIService(self._gui_connector, throttle=config.gui_throttle, clock=clock)

        # Input connectors
        self.pricing_connector = PricingConnector(self.pricing)
        self.trade_booking_connector = TradeBookingConnector(self.trade_booking)
        self.market_data_connector = MarketDataConnector(
            self.market_data,
            batch_size=config.market_data_batch_size,
        )
        self.inquiry_connector = InquiryConnector(self.inquiry)
        self.inquiry.attach_connector(self.inquiry_connector)

        self._wire()
        if config.log_events:
            self._attach_logging()

        self._closed = False

    def _wire(self) -> None:
        self.pricing.add_listener(PricingListener(self.algo_streaming))
        self.pricing.add_listener(GUIPricingListener(self.gui))
        self.algo_streaming.add_listener(AlgoStreamingListener(self.streaming))
        self.streaming.add_listener(ToHistoricalDataListener(self.historical["STREAMING"]))

        self.market_data.add_listener(MarketDataListener(self.algo_execution))
        self.algo_execution.add_listener(AlgoExecutionListener(self.execution))
        self.execution.add_listener(ExecutionListener(self.trade_booking))
        self.execution.add_listener(ToHistoricalDataListener(self.historical["EXECUTION"]))

        self.trade_booking.add_listener(TradeBookingListener(self.position))
        self.position.add_listener(PositionListener(self.risk))
        self.position.add_listener(ToHistoricalDataListener(self.historical["POSITION"]))
        self.risk.add_listener(ToHistoricalDataListener(self.historical["RISK"]))

        self.inquiry.add_listener(ToHistoricalDataListener(self.historical["INQUIRY"]))

    def _attach_logging(self) -> None:
        logger = logging.getLogger("trading_desk.events")
        for service in self.services():
            service.add_listener(LoggingListener(logger, service.name))

    def services(self) -> list[Service]:
        return [
            self.pricing,
            self.algo_streaming,
            self.streaming,
            self.gui,
            self.market_data,
            self.algo_execution,
            self.execution,
            self.trade_booking,
            self.position,
            self.risk,
            self.inquiry,
        ]

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    def run(self) -> RunSummary:
        """Process the four input streams in order and summarize the run."""
        summary = RunSummary()
        config = self.config

        summary.prices = self._ingest(config.prices_path, self.pricing_connector, summary)
        summary.trades = self._ingest(config.trades_path, self.trade_booking_connector, summary)
        summary.market_data_records = self._ingest(
            config.market_data_path, self.market_data_connector, summary
        )
        summary.inquiries = self._ingest(config.inquiries_path, self.inquiry_connector, summary)

        summary.order_books = len(self.market_data)
        summary.executions = self.algo_execution.order_counter
        summary.booked_trades = len(self.trade_booking)
        summary.positions = len(self.position)
        summary.gui_published = self.gui.published_count
        summary.gui_dropped = self.gui.dropped_count
        summary.persisted = {
            persist_type: service.persisted_count
            for persist_type, service in self.historical.items()
        }
        summary.bucketed_risk = {
            risk.product_id: risk.pv01 for risk in self.risk.get_bucketed_risks(self.sectors)
        }

        LOGGER.info(
            "run complete",
            extra={"executions": summary.executions, "booked_trades": summary.booked_trades},
        )
        return summary

    @staticmethod
    def _ingest(path: Path, connector: _Subscriber, summary: RunSummary) -> int:
        if not path.exists():
            LOGGER.warning("input file missing; skipped", extra={"path": str(path)})
            summary.warnings.append(f"missing input file {path}")
            return 0

        with path.open("r", encoding="utf-8") as fh:
            count = connector.subscribe(fh)

        LOGGER.info("ingested", extra={"path": str(path), "records": count})
        return count

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        if self._closed:
            return
        for connector in self._historical_connectors.values():
            connector.close()
        self._gui_connector.close()
        self._closed = True

    def __enter__(self) -> TradingSystem:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
