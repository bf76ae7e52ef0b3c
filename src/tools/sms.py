"""
sendSMS: plain texts and appointment confirmations.

When the call carries customerName, appointmentType, selectedDate and
selectedTime, the customer gets a branded confirmation with an
add-to-calendar link and the business owner gets a copy. Otherwise
``body`` is sent as-is. A failed owner copy never fails the tool.
"""

import logging
from typing import Any, Optional

from src.errors import CollaboratorError, ValidationError
from src.prompts.sms_templates import (
    appointment_description,
    appointment_title,
    build_appointment_confirmation,
    build_owner_notification,
    owner_appointment_description,
)
from src.tools.calendar_link import build_link
from src.tools.context import ToolContext
from src.utils import normalize_phone

logger = logging.getLogger(__name__)

APPOINTMENT_FIELDS = ("customerName", "appointmentType", "selectedDate", "selectedTime")
DEFAULT_ADDRESS = "Customer Property"


def _is_appointment(params: dict[str, Any]) -> bool:
    return all(params.get(name) for name in APPOINTMENT_FIELDS)


async def _notify_owner(ctx: ToolContext, params: dict[str, Any], address: str) -> Optional[str]:
    if not ctx.business.owner_phone:
        logger.warning("Owner notification skipped: OWNER_PHONE is not configured")
        return None
    customer = params["customerName"]
    appointment_type = params["appointmentType"]
    link = build_link(
        title=appointment_title(appointment_type),
        description=owner_appointment_description(appointment_type, customer, address),
        location=address,
        start_date=params["selectedDate"],
        start_time=params["selectedTime"],
    )
    body = build_owner_notification(
        customer, appointment_type, params["selectedDate"], params["selectedTime"], address, link
    )
    try:
        return await ctx.sms.send(ctx.business.owner_phone, body)
    except CollaboratorError as exc:
        logger.error("Error sending owner notification SMS: %s", exc)
        return None


async def send_sms(ctx: ToolContext, params: dict[str, Any]) -> str:
    to = params.get("to")
    if not to:
        raise ValidationError('Missing SMS "to" parameter.')

    appointment = _is_appointment(params)
    address = params.get("propertyAddress") or DEFAULT_ADDRESS
    if appointment:
        appointment_type = params["appointmentType"]
        link = build_link(
            title=appointment_title(appointment_type),
            description=appointment_description(appointment_type),
            location=address,
            start_date=params["selectedDate"],
            start_time=params["selectedTime"],
        )
        body = build_appointment_confirmation(
            params["customerName"],
            appointment_type,
            params["selectedDate"],
            params["selectedTime"],
            link,
        )
    elif params.get("body"):
        body = str(params["body"])
    else:
        raise ValidationError('Missing SMS parameters. Need either "body" or appointment details.')

    try:
        customer_sid = await ctx.sms.send(normalize_phone(str(to)), body)
    except CollaboratorError as exc:
        logger.error("Error sending SMS: %s", exc)
        raise CollaboratorError(f"Could not send SMS: {exc}", exc.collaborator) from exc

    if not appointment:
        return f"SMS sent successfully! SID: {customer_sid}"

    owner_sid = await _notify_owner(ctx, params, address)
    owner_status = f" Owner notified: {owner_sid}" if owner_sid else " (Owner notification failed)"
    return (
        f"Appointment SMS sent to {params['customerName']}! "
        f"Customer SID: {customer_sid}.{owner_status}"
    )
