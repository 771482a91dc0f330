"""
Pushgateway export of run counts.

Environment:
- PROMETHEUS_PUSHGATEWAY_URL: Pushgateway address; export is disabled when unset.
- PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON: optional JSON object of string
  labels used as grouping key, e.g. {"desk": "treasuries"}. Non-string
  entries are dropped; an unparsable value is ignored with a warning.
"""

from __future__ import annotations

import json
import logging
import os

from prometheus_client import CollectorRegistry, Gauge, push_to_gateway

from trading_desk.runtime.pipeline import RunSummary

LOGGER = logging.getLogger(__name__)

METRIC_PREFIX = "trading_desk_"

_URL_ENV = "PROMETHEUS_PUSHGATEWAY_URL"
_GROUPING_ENV = "PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON"


def _grouping_key_from_env() -> dict[str, str]:
    raw = os.environ.get(_GROUPING_ENV)
    if not raw:
        return {}

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        LOGGER.warning("grouping key is not valid JSON; ignored", extra={"env": _GROUPING_ENV})
        return {}

    if not isinstance(parsed, dict):
        return {}
    return {k: v for k, v in parsed.items() if isinstance(k, str) and isinstance(v, str)}


class PrometheusMetricsClient:
    """Collects one gauge per run count and pushes them in a single request.

    Callers treat delivery as a side effect: a failed push is logged and
    never fails the run.
    """

    def __init__(self) -> None:
        self._url = os.environ.get(_URL_ENV)
        self._grouping_key = _grouping_key_from_env()
        self._registry = CollectorRegistry()
        self._gauges: dict[str, Gauge] = {}

    def is_enabled(self) -> bool:
        return self._url is not None

    def _gauge(self, name: str, labelnames: tuple[str, ...] = ()) -> Gauge:
        # A registry accepts each metric name once.
        if name not in self._gauges:
            self._gauges[name] = Gauge(
                name,
                documentation=f"Pipeline run value {name}",
                labelnames=labelnames,
                registry=self._registry,
            )
        return self._gauges[name]

    def record_run(self, summary: RunSummary) -> None:
        for name, value in summary.as_metrics().items():
            self._gauge(METRIC_PREFIX + name).set(value)

        bucketed = self._gauge(METRIC_PREFIX + "bucketed_pv01", ("sector",))
        for sector, risk in summary.bucketed_risk.items():
            bucketed.labels(sector=sector).set(risk)

    def push_all(self, *, job: str) -> None:
        if self._url is None:
            return

        push_to_gateway(
            self._url,
            job=job,
            registry=self._registry,
            grouping_key=self._grouping_key,
        )
        LOGGER.info("run metrics pushed", extra={"job": job, "metrics": len(self._gauges)})
