"""
Append-only file sinks for historical records and GUI prices.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Iterable

from trading_desk.core.domain.types import PersistType, Price

HISTORICAL_FILE_NAMES: dict[str, str] = {
    "POSITION": "positions.txt",
    "RISK": "risk.txt",
    "EXECUTION": "executions.txt",
    "STREAMING": "streaming.txt",
    "INQUIRY": "allinquiries.txt",
}

GUI_FILE_NAME = "gui.txt"


def format_timestamp(ts: datetime) -> str:
    return ts.isoformat(sep=" ", timespec="microseconds")


class FileRecorder:
    """Writes one line per record to a file opened in append mode."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self._path.open("a", encoding="utf-8")
        self._closed = False

    @property
    def path(self) -> Path:
        return self._path

    def write_line(self, line: str) -> None:
        self._fh.write(line + "\n")
        self._fh.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._fh.flush()
        self._fh.close()
        self._closed = True


class HistoricalFileConnector:
    """Publish-only connector writing ``"<timestamp>, <rendering>"`` lines.

    Any value exposing ``render() -> str`` can be persisted.
    """

    def __init__(
        self,
        persist_type: PersistType,
        output_dir: str | Path,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.persist_type = persist_type
        self._clock = clock
        self._recorder = FileRecorder(Path(output_dir) / HISTORICAL_FILE_NAMES[persist_type])

    @property
    def path(self) -> Path:
        return self._recorder.path

    def publish(self, data: Any) -> None:
        self._recorder.write_line(f"{format_timestamp(self._clock())}, {data.render()}")

    def subscribe(self, source: Iterable[str]) -> int:
        # Historical data is write-only.
        return 0

    def close(self) -> None:
        self._recorder.close()


class GuiFileConnector:
    """Publish-only connector writing ``"<timestamp>, <productId>, <mid>, <spread>"`` lines."""

    def __init__(
        self,
        output_dir: str | Path,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._clock = clock
        self._recorder = FileRecorder(Path(output_dir) / GUI_FILE_NAME)

    @property
    def path(self) -> Path:
        return self._recorder.path

    def publish(self, data: Price) -> None:
        self.publish_at(self._clock(), data)

    def publish_at(self, ts: datetime, data: Price) -> None:
        self._recorder.write_line(
            f"{format_timestamp(ts)}, {data.product_id}, {data.mid}, {data.bid_offer_spread}"
        )

    def subscribe(self, source: Iterable[str]) -> int:
        return 0

    def close(self) -> None:
        self._recorder.close()
