"""
Synthetic input generation.

This module writes deterministic input files (prices, trades, market data
and inquiries) in the ingestion record schemas. All prices are produced on
the 1/256 grid so that they survive the fractional notation exactly.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from trading_desk.core.domain.fractional_price import format_fractional_price
from trading_desk.core.domain.reference_data import product_ids
from trading_desk.runtime.pipeline_config import PipelineConfig

TICKS_PER_POINT = 256

_MIN_MID_TICKS = 99 * TICKS_PER_POINT
_MAX_MID_TICKS = 101 * TICKS_PER_POINT

# Top-of-book spread cycles through 1/128, 1/64, 3/128 and 1/32.
_TOP_SPREAD_TICKS = (2, 4, 6, 8)

_DEPTH_LEVELS = 5
_LEVEL_STEP_TICKS = 2
_LEVEL_QUANTITY = 10_000_000

_TRADE_QUANTITIES = (1_000_000, 2_000_000, 3_000_000, 4_000_000, 5_000_000)


@dataclass(frozen=True, slots=True)
class GeneratedInputs:
    prices: Path
    trades: Path
    market_data: Path
    inquiries: Path


def _fmt(ticks: int) -> str:
    return format_fractional_price(ticks / TICKS_PER_POINT)


def _walk(rng: random.Random, ticks: int) -> int:
    ticks += rng.choice((-1, 0, 1))
    return min(max(ticks, _MIN_MID_TICKS), _MAX_MID_TICKS)


# ---------------------------------------------------------------------------
# Record builders
# ---------------------------------------------------------------------------

def generate_price_lines(rng: random.Random, products: Sequence[str], count: int) -> list[str]:
    """``count`` price records per product; spread oscillates between 1/128 and 1/64."""
    lines: list[str] = []
    for product_id in products:
        mid = rng.randint(_MIN_MID_TICKS, _MAX_MID_TICKS)
        for i in range(count):
            mid = _walk(rng, mid)
            spread = 2 if i % 2 == 0 else 4
            lines.append(f"{product_id},{_fmt(mid)},{_fmt(spread)}")
    return lines


def generate_trade_lines(
    rng: random.Random,
    products: Sequence[str],
    books: Sequence[str],
    count: int,
) -> list[str]:
    """``count`` trades per product, rotating books and alternating BUY/SELL."""
    lines: list[str] = []
    for product_id in products:
        for i in range(count):
            price = rng.randint(_MIN_MID_TICKS, _MAX_MID_TICKS)
            trade_id = f"{product_id}-T{i:05d}"
            book = books[i % len(books)]
            quantity = rng.choice(_TRADE_QUANTITIES)
            side = "BUY" if i % 2 == 0 else "SELL"
            lines.append(f"{product_id},{trade_id},{_fmt(price)},{book},{quantity},{side}")
    return lines


def generate_market_data_lines(rng: random.Random, products: Sequence[str], count: int) -> list[str]:
    """``count`` book snapshots per product, each ``2 * _DEPTH_LEVELS`` records long."""
    lines: list[str] = []
    for product_id in products:
        mid = rng.randint(_MIN_MID_TICKS, _MAX_MID_TICKS)
        for i in range(count):
            mid = _walk(rng, mid)
            half_spread = _TOP_SPREAD_TICKS[i % len(_TOP_SPREAD_TICKS)] // 2
            for level in range(_DEPTH_LEVELS):
                offset = half_spread + level * _LEVEL_STEP_TICKS
                quantity = (level + 1) * _LEVEL_QUANTITY
                lines.append(f"{product_id},{_fmt(mid - offset)},{quantity},BID")
                lines.append(f"{product_id},{_fmt(mid + offset)},{quantity},OFFER")
    return lines


def generate_inquiry_lines(rng: random.Random, products: Sequence[str], count: int) -> list[str]:
    """``count`` RECEIVED inquiries per product."""
    lines: list[str] = []
    for product_id in products:
        for i in range(count):
            price = rng.randint(_MIN_MID_TICKS, _MAX_MID_TICKS)
            inquiry_id = f"{product_id}-I{i:05d}"
            side = rng.choice(("BUY", "SELL"))
            quantity = rng.choice(_TRADE_QUANTITIES)
            lines.append(f"{inquiry_id},{product_id},{side},{quantity},{_fmt(price)},RECEIVED")
    return lines


# ---------------------------------------------------------------------------
# File writer
# ---------------------------------------------------------------------------

def _write_lines(path: Path, lines: list[str]) -> None:
    path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")


def generate_inputs(
    config: PipelineConfig,
    *,
    seed: int = 0,
    records: int = 10,
    products: Sequence[str] | None = None,
) -> GeneratedInputs:
    """Write all four input files into ``config.input_dir``.

    ``records`` is the per-product count for every stream (market data
    counts snapshots, not lines). The same seed always yields the same files.
    """
    if records <= 0:
        raise ValueError("records must be positive")
    if config.market_data_batch_size != 2 * _DEPTH_LEVELS:
        raise ValueError(
            f"generated snapshots are {2 * _DEPTH_LEVELS} records long, "
            f"config expects {config.market_data_batch_size}"
        )

    rng = random.Random(seed)
    products = tuple(products) if products is not None else product_ids()

    config.input_dir.mkdir(parents=True, exist_ok=True)

    _write_lines(config.prices_path, generate_price_lines(rng, products, records))
    _write_lines(config.trades_path, generate_trade_lines(rng, products, config.books, records))
    _write_lines(config.market_data_path, generate_market_data_lines(rng, products, records))
    _write_lines(config.inquiries_path, generate_inquiry_lines(rng, products, records))

    return GeneratedInputs(
        prices=config.prices_path,
        trades=config.trades_path,
        market_data=config.market_data_path,
        inquiries=config.inquiries_path,
    )
