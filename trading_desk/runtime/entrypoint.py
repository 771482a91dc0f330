from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from trading_desk.core.domain.errors import DeskError
from trading_desk.runtime.data_generator import generate_inputs
from trading_desk.runtime.pipeline import RunSummary, TradingSystem, print_run_summary
from trading_desk.runtime.pipeline_config import PipelineConfig
from trading_desk.runtime.prometheus_metrics import PrometheusMetricsClient

LOGGER = logging.getLogger(__name__)

METRICS_JOB = "trading-desk"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _load_json(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    return json.loads(path.read_text(encoding="utf-8"))


def _load_config(args: argparse.Namespace) -> PipelineConfig:
    raw: dict[str, Any] = _load_json(args.config) if args.config is not None else {}

    # CLI flags override the directories of the config file.
    if getattr(args, "input_dir", None) is not None:
        raw["input_dir"] = str(args.input_dir)
    if getattr(args, "output_dir", None) is not None:
        raw["output_dir"] = str(args.output_dir)

    return PipelineConfig.from_json_obj(raw)


def _push_metrics(summary: RunSummary) -> None:
    metrics = PrometheusMetricsClient()
    if not metrics.is_enabled():
        return

    try:
        metrics.record_run(summary)
        metrics.push_all(job=METRICS_JOB)
    except Exception:  # pylint: disable=broad-exception-caught
        LOGGER.exception("Prometheus push failed; run result unaffected")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def _run(args: argparse.Namespace) -> int:
    config = _load_config(args)

    try:
        with TradingSystem(config) as system:
            summary = system.run()
    except DeskError:
        LOGGER.exception("run aborted")
        return 1

    print_run_summary(summary)
    print()
    print(f"Output written to: {config.output_dir}")

    _push_metrics(summary)
    return 0


def _generate(args: argparse.Namespace) -> int:
    config = _load_config(args)

    generated = generate_inputs(config, seed=args.seed, records=args.records)

    print(f"Prices: {generated.prices}")
    print(f"Trades: {generated.trades}")
    print(f"Market data: {generated.market_data}")
    print(f"Inquiries: {generated.inquiries}")
    return 0


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Treasury trading desk pipeline (run on input files or generate inputs)"
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to pipeline JSON config. Defaults apply when omitted.",
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Root logging level.",
    )

    sub = parser.add_subparsers(dest="command")

    run = sub.add_parser("run", help="Process the input files and write the output files.")
    run.add_argument(
        "--input-dir",
        type=Path,
        default=None,
        help="Directory holding prices, trades, market data and inquiries files.",
    )
    run.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory receiving the historical and GUI files (appended to).",
    )

    generate = sub.add_parser("generate", help="Write synthetic input files.")
    generate.add_argument(
        "--output-dir",
        dest="input_dir",
        type=Path,
        default=None,
        help="Directory receiving the generated input files.",
    )
    generate.add_argument("--seed", type=int, default=0, help="Random seed.")
    generate.add_argument(
        "--records",
        type=int,
        default=10,
        help="Records per product and per stream (snapshots for market data).",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        print("Error: a command (run or generate) must be specified.", file=sys.stderr)
        sys.exit(2)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    try:
        if args.command == "run":
            code = _run(args)
        else:
            code = _generate(args)
    except (FileNotFoundError, ValidationError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
