"""
Customer inquiry lifecycle state machine definitions.

This module defines the terminal inquiry states and the allowed transitions
between them. It is passive: callers decide what to do with an invalid
transition (InquiryService raises InvalidStateTransitionError).
"""

from __future__ import annotations

# Terminal inquiry states: once reached, no further transition exists.
INQUIRY_TERMINAL_STATES: frozenset[str] = frozenset(
    {
        "DONE",
        "REJECTED",
        "CUSTOMER_REJECTED",
    }
)


# Allowed inquiry state transitions.
#
# Key   : previous state (or None if the inquiry was not previously stored)
# Value : set of allowed next states
#
# Notes:
# - QUOTED -> DONE is applied automatically by the service.
# - RECEIVED -> RECEIVED covers re-sending a quote while still RECEIVED.
INQUIRY_ALLOWED_TRANSITIONS: dict[str | None, frozenset[str]] = {
    None: frozenset({"RECEIVED"}),

    "RECEIVED": frozenset(
        {
            "RECEIVED",
            "QUOTED",
            "REJECTED",
            "CUSTOMER_REJECTED",
        }
    ),

    "QUOTED": frozenset({"DONE"}),
}


def is_terminal_state(state: str) -> bool:
    """Return True if the given state is terminal."""
    return state in INQUIRY_TERMINAL_STATES


def is_valid_transition(prev_state: str | None, next_state: str) -> bool:
    """Return True if the transition prev_state -> next_state is allowed."""
    allowed = INQUIRY_ALLOWED_TRANSITIONS.get(prev_state)
    if allowed is None:
        return False
    return next_state in allowed
