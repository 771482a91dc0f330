"""
Semantic test: pipeline configuration.

Invariant:
An empty JSON object yields the desk defaults; unknown keys, a book list
other than three distinct names, and sectors naming unknown products are
rejected.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest
from pydantic import ValidationError

from trading_desk.runtime.pipeline_config import PipelineConfig


def test_defaults() -> None:
    config = PipelineConfig.from_json_obj({})

    assert config.books == ["TRSY1", "TRSY2", "TRSY3"]
    assert config.market_data_batch_size == 10
    assert config.crossable_spread == 1 / 128
    assert config.base_visible_quantity == 10_000_000
    assert config.gui_throttle == timedelta(milliseconds=300)
    assert config.prices_path == Path("data") / "prices.txt"
    assert [s.name for s in config.build_sectors()] == ["FrontEnd", "Belly", "LongEnd"]


def test_json_overrides() -> None:
    config = PipelineConfig.from_json_obj(
        {
            "input_dir": "/tmp/desk-in",
            "gui_throttle_ms": 50,
            "sectors": {"Wings": ["91282CFX4", "912810TL2"]},
        }
    )

    assert config.market_data_path == Path("/tmp/desk-in/marketdata.txt")
    assert config.gui_throttle == timedelta(milliseconds=50)
    (sector,) = config.build_sectors()
    assert [p.product_id for p in sector.products] == ["91282CFX4", "912810TL2"]


@pytest.mark.parametrize(
    "raw",
    [
        {"books": ["TRSY1", "TRSY2"]},
        {"books": ["TRSY1", "TRSY1", "TRSY2"]},
        {"sectors": {"FrontEnd": ["000000000"]}},
        {"sectors": {"Empty": []}},
        {"market_data_batch_size": 0},
        {"unexpected": True},
    ],
)
def test_invalid_configs_are_rejected(raw: dict) -> None:
    with pytest.raises(ValidationError):
        PipelineConfig.from_json_obj(raw)
