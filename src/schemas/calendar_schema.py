"""Calendar event and call summary models."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CalendarEvent(BaseModel):
    """Ephemeral event handed to the calendar collaborator and discarded."""

    summary: str = "New Appointment"
    location: str = ""
    description: str = ""
    start_time: str
    end_time: str
    time_zone: str

    def to_google_body(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "location": self.location,
            "description": self.description,
            "start": {"dateTime": self.start_time, "timeZone": self.time_zone},
            "end": {"dateTime": self.end_time, "timeZone": self.time_zone},
        }


class CallSummary(BaseModel):
    """Structured notes captured at the end of a sales call."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    client_name: str
    business_name: str
    business_type: str = "general"
    services: list[str] = Field(default_factory=list)
    budget: str = "not specified"
    timeline: str = "flexible"
    notes: str = ""
    summarized_at: str
    client_id: Optional[str] = None
