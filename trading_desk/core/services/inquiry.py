"""Customer inquiry negotiation.

Lifecycle (see inquiry_state_machine):

    RECEIVED --quote sent--> QUOTED --auto--> DONE
    RECEIVED --reject_inquiry--> REJECTED
    RECEIVED --customer_reject_inquiry--> CUSTOMER_REJECTED

DONE, REJECTED and CUSTOMER_REJECTED are terminal.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from trading_desk.core.domain.errors import InvalidStateTransitionError
from trading_desk.core.domain.inquiry_state_machine import is_valid_transition
from trading_desk.core.domain.types import Inquiry, InquiryState
from trading_desk.core.soa.service import Service

if TYPE_CHECKING:
    from trading_desk.core.soa.connector import Connector

LOGGER = logging.getLogger(__name__)


class InquiryService(Service[str, Inquiry]):
    """Inquiry store keyed on inquiry id.

    A RECEIVED inquiry is stored, published to the connector (the customer
    side, which answers with a QUOTED copy) and then sent to listeners with
    its latest stored state. A QUOTED inquiry is completed to DONE without
    listener notification. Rejections do not notify listeners either.
    """

    def __init__(self, connector: Connector[Inquiry] | None = None) -> None:
        super().__init__()
        self._connector = connector

    def attach_connector(self, connector: Connector[Inquiry]) -> None:
        self._connector = connector

    def on_message(self, data: Inquiry) -> None:
        inquiry_id = data.inquiry_id
        prev = self._data.get(inquiry_id)
        prev_state = None if prev is None else prev.state

        if data.state == "RECEIVED":
            self._check_transition(inquiry_id, prev_state, "RECEIVED")
            self._store(inquiry_id, data)
            if self._connector is not None:
                self._connector.publish(data)
            self._emit(self._data[inquiry_id])
            return

        if data.state == "QUOTED":
            self._check_transition(inquiry_id, prev_state, "QUOTED")
            self._store(inquiry_id, data.with_state("DONE"))
            LOGGER.debug("inquiry done", extra={"inquiry_id": inquiry_id})
            return

        raise InvalidStateTransitionError(inquiry_id, prev_state, data.state)

    def send_quote(self, inquiry_id: str, price: float) -> None:
        """Quote a price back to the customer; only valid while RECEIVED."""
        inquiry = self.get_data(inquiry_id)
        if inquiry.state != "RECEIVED":
            raise InvalidStateTransitionError(inquiry_id, inquiry.state, "QUOTED")
        self.on_message(inquiry.with_price(price))

    def reject_inquiry(self, inquiry_id: str) -> Inquiry:
        return self._terminate(inquiry_id, "REJECTED")

    def customer_reject_inquiry(self, inquiry_id: str) -> Inquiry:
        return self._terminate(inquiry_id, "CUSTOMER_REJECTED")

    def _terminate(self, inquiry_id: str, state: InquiryState) -> Inquiry:
        inquiry = self.get_data(inquiry_id)
        self._check_transition(inquiry_id, inquiry.state, state)
        rejected = inquiry.with_state(state)
        self._store(inquiry_id, rejected)
        return rejected

    @staticmethod
    def _check_transition(inquiry_id: str, prev_state: str | None, next_state: str) -> None:
        if not is_valid_transition(prev_state, next_state):
            raise InvalidStateTransitionError(inquiry_id, prev_state, next_state)
