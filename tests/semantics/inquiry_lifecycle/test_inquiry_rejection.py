"""
Semantic test: inquiry rejection and terminal states.

Invariant:
DONE, REJECTED and CUSTOMER_REJECTED are terminal: no quote, answer or
further rejection is accepted afterwards. Rejection does not notify
listeners.
"""

from __future__ import annotations

import pytest

from trading_desk.core.connectors.file_ingest import InquiryConnector
from trading_desk.core.domain.errors import InvalidStateTransitionError, NotFoundError
from trading_desk.core.domain.inquiry_state_machine import is_terminal_state, is_valid_transition
from trading_desk.core.domain.reference_data import lookup_product
from trading_desk.core.domain.types import Inquiry
from trading_desk.core.services.inquiry import InquiryService
from trading_desk.core.sinks.null_sinks import RecordingListener


def _received(inquiry_id: str = "INQ-1") -> Inquiry:
    return Inquiry(
        inquiry_id=inquiry_id,
        product=lookup_product("91282CGA3"),
        side="SELL",
        quantity=2_000_000,
        price=99.0,
        state="RECEIVED",
    )


def test_rejected_inquiry_cannot_be_quoted() -> None:
    service = InquiryService()
    listener: RecordingListener[Inquiry] = RecordingListener()
    service.add_listener(listener)
    service.on_message(_received())

    rejected = service.reject_inquiry("INQ-1")

    assert rejected.state == "REJECTED"
    assert service.get_data("INQ-1").state == "REJECTED"
    assert len(listener.received) == 1

    with pytest.raises(InvalidStateTransitionError):
        service.send_quote("INQ-1", 99.5)
    with pytest.raises(InvalidStateTransitionError):
        service.reject_inquiry("INQ-1")
    with pytest.raises(InvalidStateTransitionError):
        service.on_message(_received())

    assert service.get_data("INQ-1").price == 99.0


def test_customer_rejection_is_terminal() -> None:
    service = InquiryService()
    service.on_message(_received())

    assert service.customer_reject_inquiry("INQ-1").state == "CUSTOMER_REJECTED"
    with pytest.raises(InvalidStateTransitionError):
        service.on_message(service.get_data("INQ-1").with_state("QUOTED"))


def test_done_inquiry_cannot_be_rejected() -> None:
    service = InquiryService()
    service.on_message(_received())
    service.on_message(_received().with_state("QUOTED"))

    with pytest.raises(InvalidStateTransitionError):
        service.reject_inquiry("INQ-1")


def test_unknown_inquiry_and_unexpected_states() -> None:
    service = InquiryService()

    with pytest.raises(NotFoundError):
        service.reject_inquiry("missing")
    with pytest.raises(InvalidStateTransitionError):
        service.on_message(_received().with_state("QUOTED"))
    with pytest.raises(InvalidStateTransitionError):
        service.on_message(_received().with_state("DONE"))


def test_transition_table() -> None:
    assert is_valid_transition(None, "RECEIVED")
    assert is_valid_transition("RECEIVED", "QUOTED")
    assert is_valid_transition("QUOTED", "DONE")
    assert not is_valid_transition(None, "QUOTED")
    assert not is_valid_transition("DONE", "RECEIVED")
    assert not is_valid_transition("REJECTED", "QUOTED")

    assert all(is_terminal_state(s) for s in ("DONE", "REJECTED", "CUSTOMER_REJECTED"))
    assert not is_terminal_state("RECEIVED")


def test_input_records_must_open_a_new_lifecycle() -> None:
    service = InquiryService()
    connector = InquiryConnector(service)
    service.attach_connector(connector)

    with pytest.raises(InvalidStateTransitionError):
        connector.subscribe(["INQ-9,91282CGA3,SELL,2000000,99-000,DONE"])
    assert not service.has_data("INQ-9")

    connector.subscribe(["INQ-1,91282CGA3,SELL,2000000,99-000,RECEIVED"])
    assert service.get_data("INQ-1").state == "DONE"

    with pytest.raises(InvalidStateTransitionError):
        connector.subscribe(["INQ-1,91282CGA3,SELL,2000000,99-000,RECEIVED"])
    assert service.get_data("INQ-1").state == "DONE"
