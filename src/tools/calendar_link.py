"""
"Add to Google Calendar" link construction for confirmation texts.

Every function here is fail-soft: a date the caller mangled must still
produce some usable link, because the link is embedded in an SMS that
has to go out regardless.

Timestamps use the compact local form ``YYYYMMDDTHHMMSS`` expected by
the calendar render URL (no timezone suffix).
"""

import logging
from datetime import datetime, timedelta
from urllib.parse import urlencode

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

CALENDAR_RENDER_URL = "https://calendar.google.com/calendar/render"
FALLBACK_CALENDAR_URL = "https://calendar.google.com/calendar"
TIMESTAMP_FORMAT = "%Y%m%dT%H%M00"
FALLBACK_HOUR = 14


def _fallback_start() -> str:
    tomorrow = datetime.now() + timedelta(days=1)
    return f"{tomorrow:%Y%m%d}T{FALLBACK_HOUR:02d}0000"


def encode_start(date: str, time: str) -> str:
    """Convert a human-entered date and time to a compact local timestamp.

    Unparseable input falls back to tomorrow at 14:00 local time.

    Examples:
        >>> encode_start("February 10, 2025", "10:00 AM")
        '20250210T100000'
    """
    try:
        date_str = str(date or "").replace(",", "").strip()
        combined = f"{date_str} {time or ''}".strip()
        parsed = date_parser.parse(combined)
        return parsed.strftime(TIMESTAMP_FORMAT)
    except Exception as exc:
        logger.warning("Could not parse appointment time %r %r: %s", date, time, exc)
        return _fallback_start()


def add_one_hour(timestamp: str) -> str:
    """Return the compact timestamp sixty minutes later.

    Carries across day, month and year boundaries. Seconds in the input
    are dropped: the result always ends in 00, matching encode_start.
    Returns the input unchanged if it cannot be read.

    Examples:
        >>> add_one_hour("20251231T235000")
        '20260101T005000'
    """
    try:
        start = datetime(
            int(timestamp[0:4]),
            int(timestamp[4:6]),
            int(timestamp[6:8]),
            int(timestamp[9:11]),
            int(timestamp[11:13]),
        )
    except (ValueError, TypeError) as exc:
        logger.warning("Could not add an hour to %r: %s", timestamp, exc)
        return timestamp
    return (start + timedelta(hours=1)).strftime(TIMESTAMP_FORMAT)


def build_link(
    title: str,
    description: str,
    location: str,
    start_date: str,
    start_time: str,
) -> str:
    """Build a one-hour "add event" link, or the bare calendar URL on failure."""
    try:
        start = encode_start(start_date, start_time)
        end = add_one_hour(start)
        params = {
            "action": "TEMPLATE",
            "text": title,
            "dates": f"{start}/{end}",
            "details": description,
            "location": location or "",
            "trp": "false",
        }
        return f"{CALENDAR_RENDER_URL}?{urlencode(params)}"
    except Exception as exc:
        logger.error("Error creating calendar link: %s", exc)
        return FALLBACK_CALENDAR_URL
