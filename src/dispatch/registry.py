"""
Tool registry: the closed set of tool names and their handlers.

Every name the voice runtime may call is a ToolName member, and a
ToolRegistry refuses to build unless each member has a handler. Adding a
tool means adding an enum member and a handler in the same change.
"""

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, Optional

from src.tools.call_summary import summarize_client_call
from src.tools.context import ToolContext
from src.tools.onboarding import confirm_payment, create_payment_link, initiate_onboarding
from src.tools.scheduling import schedule_appointment
from src.tools.sms import send_sms

logger = logging.getLogger(__name__)

ToolHandler = Callable[[ToolContext, dict[str, Any]], Awaitable[str]]


class ToolName(str, Enum):
    """Function names the voice runtime can invoke."""
    SCHEDULE_APPOINTMENT = "scheduleAppointment"
    SEND_SMS = "sendSMS"
    CREATE_PAYMENT_LINK = "createPaymentLink"
    SUMMARIZE_CLIENT_CALL = "summarizeClientCall"
    INITIATE_ONBOARDING = "initiateOnboarding"
    CONFIRM_PAYMENT = "confirmPayment"


DEFAULT_HANDLERS: dict[ToolName, ToolHandler] = {
    ToolName.SCHEDULE_APPOINTMENT: schedule_appointment,
    ToolName.SEND_SMS: send_sms,
    ToolName.CREATE_PAYMENT_LINK: create_payment_link,
    ToolName.SUMMARIZE_CLIENT_CALL: summarize_client_call,
    ToolName.INITIATE_ONBOARDING: initiate_onboarding,
    ToolName.CONFIRM_PAYMENT: confirm_payment,
}


class ToolRegistry:
    """Maps tool names to handlers. Complete by construction."""

    def __init__(self, handlers: Optional[Mapping[ToolName, ToolHandler]] = None) -> None:
        handlers = dict(DEFAULT_HANDLERS if handlers is None else handlers)
        missing = [name.value for name in ToolName if name not in handlers]
        if missing:
            raise ValueError(f"No handler registered for tools: {missing}")
        self._handlers = handlers
        logger.debug("Tool registry built with %d handlers", len(handlers))

    def resolve(self, name: Optional[str]) -> Optional[ToolHandler]:
        """Return the handler for ``name``, or None if it is not a known tool."""
        try:
            tool = ToolName(name)
        except ValueError:
            return None
        return self._handlers[tool]

    def names(self) -> list[str]:
        return [name.value for name in ToolName]
