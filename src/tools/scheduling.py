"""scheduleAppointment: put an event on the business calendar."""

import logging
from typing import Any

from src.errors import ValidationError
from src.schemas.calendar_schema import CalendarEvent
from src.tools.context import ToolContext

logger = logging.getLogger(__name__)


async def schedule_appointment(ctx: ToolContext, params: dict[str, Any]) -> str:
    start_time = params.get("startTime")
    end_time = params.get("endTime")
    if not start_time or not end_time:
        raise ValidationError("Missing appointment startTime or endTime.")

    event = CalendarEvent(
        summary=str(params.get("summary") or "New Appointment"),
        location=str(params.get("location") or ""),
        description=str(params.get("description") or ""),
        start_time=str(start_time),
        end_time=str(end_time),
        time_zone=ctx.business.timezone,
    )
    link = await ctx.calendar.insert_event(event)
    logger.info("Appointment '%s' scheduled for %s", event.summary, event.start_time)
    if link:
        return f"Appointment scheduled successfully! See details: {link}"
    return "Appointment scheduled, but no event link available."
