"""Pipeline configuration model.

This module defines the PipelineConfig schema used to parse and normalize
pipeline configuration from JSON into the parameters consumed by the
service wiring. Every field has a default, so an empty JSON object is a
valid configuration.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from trading_desk.core.connectors.file_ingest import MARKET_DATA_BATCH_SIZE
from trading_desk.core.domain.reference_data import DEFAULT_SECTORS, build_sector, product_ids
from trading_desk.core.domain.types import BucketedSector
from trading_desk.core.services.algo_execution import CROSSABLE_SPREAD
from trading_desk.core.services.algo_streaming import BASE_VISIBLE_QUANTITY
from trading_desk.core.services.trade_booking import DEFAULT_BOOKS


class PipelineConfig(BaseModel):
    """Structured pipeline configuration.

    JSON example:
        {
          "input_dir": "data",
          "output_dir": "output",
          "gui_throttle_ms": 300,
          "books": ["TRSY1", "TRSY2", "TRSY3"],
          "sectors": {"FrontEnd": ["91282CFX4", "91282CGA3"]}
        }
    """

    # Data wiring
    input_dir: Path = Path("data")
    output_dir: Path = Path("output")

    prices_file: str = Field("prices.txt", min_length=1)
    trades_file: str = Field("trades.txt", min_length=1)
    market_data_file: str = Field("marketdata.txt", min_length=1)
    inquiries_file: str = Field("inquiries.txt", min_length=1)

    # Service parameters
    market_data_batch_size: int = Field(MARKET_DATA_BATCH_SIZE, gt=0)
    crossable_spread: float = Field(CROSSABLE_SPREAD, ge=0)
    books: list[str] = Field(default_factory=lambda: list(DEFAULT_BOOKS), min_length=3, max_length=3)
    base_visible_quantity: int = Field(BASE_VISIBLE_QUANTITY, gt=0)
    gui_throttle_ms: int = Field(300, ge=0)

    # Risk reporting
    sectors: dict[str, list[str]] = Field(
        default_factory=lambda: {name: list(members) for name, members in DEFAULT_SECTORS.items()}
    )

    # Debug logging of every emitted value
    log_events: bool = False

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_json_obj(cls, obj: dict[str, Any]) -> PipelineConfig:
        """Create a PipelineConfig instance from a JSON-compatible object."""
        return cls.model_validate(obj)

    @model_validator(mode="after")
    def validate_consistency(self) -> PipelineConfig:
        """Validate internal consistency of the configuration."""
        if len(set(self.books)) != len(self.books):
            raise ValueError("books must be distinct")
        if any(not book for book in self.books):
            raise ValueError("book names must be non-empty")

        known = set(product_ids())
        for name, members in self.sectors.items():
            if not members:
                raise ValueError(f"sector {name!r} has no members")
            unknown = [member for member in members if member not in known]
            if unknown:
                raise ValueError(f"sector {name!r} has unknown products: {unknown}")
        return self

    @property
    def prices_path(self) -> Path:
        return self.input_dir / self.prices_file

    @property
    def trades_path(self) -> Path:
        return self.input_dir / self.trades_file

    @property
    def market_data_path(self) -> Path:
        return self.input_dir / self.market_data_file

    @property
    def inquiries_path(self) -> Path:
        return self.input_dir / self.inquiries_file

    @property
    def gui_throttle(self) -> timedelta:
        return timedelta(milliseconds=self.gui_throttle_ms)

    def build_sectors(self) -> list[BucketedSector]:
        return [build_sector(name, members) for name, members in self.sectors.items()]
