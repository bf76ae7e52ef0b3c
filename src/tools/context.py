"""Collaborators shared by every tool handler."""

from dataclasses import dataclass
from typing import Optional, Protocol

from src.config import BusinessConfig
from src.integrations.sms import SmsSender
from src.onboarding.service import OnboardingService
from src.schemas.calendar_schema import CalendarEvent
from src.storage.summary_store import CallSummaryStore


class CalendarClient(Protocol):
    async def insert_event(self, event: CalendarEvent) -> Optional[str]:
        """Create the event and return its viewable link, if any."""


@dataclass
class ToolContext:
    sms: SmsSender
    calendar: CalendarClient
    onboarding: OnboardingService
    summaries: CallSummaryStore
    business: BusinessConfig
