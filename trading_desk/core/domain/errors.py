"""Error taxonomy for the desk pipeline.

No error is caught inside the pipeline. Every failure below propagates to
the caller of the ingesting connector and aborts the run.
"""

from __future__ import annotations


class DeskError(Exception):
    """Base class for all pipeline errors."""


class NotFoundError(DeskError, LookupError):
    """Key is absent from a keyed store or a reference table."""

    def __init__(self, store: str, key: object) -> None:
        super().__init__(f"{store}: no entry for key {key!r}")
        self.store = store
        self.key = key


class MalformedRecordError(DeskError, ValueError):
    """Ingestion line does not match the expected record schema."""

    def __init__(self, reason: str, line: str | None = None) -> None:
        message = reason if line is None else f"{reason}: {line!r}"
        super().__init__(message)
        self.reason = reason
        self.line = line


class InvalidStateTransitionError(DeskError):
    """Requested lifecycle transition is not allowed from the current state."""

    def __init__(self, entity_id: str, prev_state: str | None, next_state: str) -> None:
        super().__init__(
            f"{entity_id}: transition {prev_state} -> {next_state} is not allowed"
        )
        self.entity_id = entity_id
        self.prev_state = prev_state
        self.next_state = next_state
