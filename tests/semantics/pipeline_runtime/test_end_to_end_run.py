"""
Semantic test: full pipeline run on generated inputs.

Invariant:
Every input record flows through the wired services exactly once: prices
become streams, tight books become executions booked as trades, trades
update positions and risk, inquiries complete to DONE, and each flow lands
in its historical file. The same seed yields the same run.
"""

from __future__ import annotations

import logging
from datetime import datetime

from trading_desk.core.services.algo_streaming import PricingListener
from trading_desk.core.services.gui import GUIPricingListener
from trading_desk.core.services.historical_data import ToHistoricalDataListener
from trading_desk.core.services.trade_booking import ExecutionListener
from trading_desk.core.sinks.sink_logging import LoggingListener
from trading_desk.runtime.data_generator import generate_inputs
from trading_desk.runtime.pipeline import TradingSystem
from trading_desk.runtime.pipeline_config import PipelineConfig

TS = datetime(2024, 1, 1, 12, 0, 0)


def _clock() -> datetime:
    return TS


def _config(root, **overrides) -> PipelineConfig:
    return PipelineConfig(input_dir=root / "in", output_dir=root / "out", **overrides)


def _lines(path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()


def test_generated_inputs_flow_through_every_service(tmp_path) -> None:
    config = _config(tmp_path)
    generate_inputs(config, seed=7, records=4)

    with TradingSystem(config, clock=_clock) as system:
        summary = system.run()

    # 7 products x 4 records per stream.
    assert summary.prices == 28
    assert summary.trades == 28
    assert summary.inquiries == 28
    assert summary.market_data_records == 280
    assert summary.order_books == 7

    # Only the first snapshot of each product has a 1/128 top spread.
    assert summary.executions == 7
    assert summary.booked_trades == 28 + 7
    assert summary.positions == 7

    # The clock never advances, so every GUI update is throttled.
    assert summary.gui_published == 0
    assert summary.gui_dropped == 28

    assert summary.persisted == {
        "POSITION": 35,
        "RISK": 35,
        "EXECUTION": 7,
        "STREAMING": 28,
        "INQUIRY": 28,
    }
    assert set(summary.bucketed_risk) == {"FrontEnd", "Belly", "LongEnd"}
    assert summary.warnings == []

    out = tmp_path / "out"
    assert len(_lines(out / "streaming.txt")) == 28
    assert len(_lines(out / "executions.txt")) == 7
    assert len(_lines(out / "positions.txt")) == 35
    assert len(_lines(out / "risk.txt")) == 35
    inquiries = _lines(out / "allinquiries.txt")
    assert len(inquiries) == 28
    assert all(line.endswith("State: DONE") for line in inquiries)
    assert _lines(out / "gui.txt") == []


def test_execution_trades_rotate_books(tmp_path) -> None:
    config = _config(tmp_path)
    generate_inputs(config, seed=1, records=1)

    with TradingSystem(config, clock=_clock) as system:
        system.run()
        booked = [system.trade_booking.get_data(f"TRADE-EXECUTE-{i}") for i in range(7)]

    assert [t.book for t in booked] == ["TRSY1", "TRSY2", "TRSY3"] * 2 + ["TRSY1"]
    assert [t.side for t in booked] == ["BUY", "SELL"] * 3 + ["BUY"]


def test_same_seed_same_summary(tmp_path) -> None:
    summaries = []
    for name in ("a", "b"):
        config = _config(tmp_path / name)
        generate_inputs(config, seed=3, records=2)
        with TradingSystem(config, clock=_clock) as system:
            summaries.append(system.run())

    first, second = summaries
    assert first.as_metrics() == second.as_metrics()
    assert first.bucketed_risk == second.bucketed_risk


def test_missing_inputs_are_skipped(tmp_path) -> None:
    with TradingSystem(_config(tmp_path), clock=_clock) as system:
        summary = system.run()

    assert summary.prices == 0
    assert summary.executions == 0
    assert len(summary.warnings) == 4
    assert all(risk == 0.0 for risk in summary.bucketed_risk.values())


def test_listener_wiring_order(tmp_path) -> None:
    with TradingSystem(_config(tmp_path)) as system:
        assert [type(l) for l in system.pricing.listeners] == [PricingListener, GUIPricingListener]
        assert [type(l) for l in system.execution.listeners] == [
            ExecutionListener,
            ToHistoricalDataListener,
        ]
        assert all(not service.listeners for service in system.historical.values())


def test_event_logging_listeners(tmp_path, caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="trading_desk.events")

    with TradingSystem(_config(tmp_path, log_events=True), clock=_clock) as system:
        assert all(isinstance(s.listeners[-1], LoggingListener) for s in system.services())
        system.pricing_connector.subscribe(["91282CFX4,100-000,0-002"])

    sources = [r.source for r in caplog.records if r.getMessage() == "service_event"]
    # Logging listeners are registered last, so the deepest service logs first.
    assert sources == ["StreamingService", "AlgoStreamingService", "PricingService"]
