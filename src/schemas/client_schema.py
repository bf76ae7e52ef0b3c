"""Client onboarding data models."""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


class WorkflowStatus(str, Enum):
    FAILED = "failed"


class _CamelModel(BaseModel):
    """Accepts and emits the camelCase keys used on the wire and on disk."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClientProfile(_CamelModel):
    """Caller-supplied profile used to start onboarding.

    Every field is optional here so missing mandatory fields can be
    reported together by the onboarding service instead of by pydantic.
    """

    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    client_email: Optional[str] = None
    business_name: Optional[str] = None
    business_type: Optional[str] = None
    amount: Optional[Union[float, str]] = None

    @field_validator("client_name", "client_phone", "business_name", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        # Voice runtimes sometimes send digits as numbers
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class ClientRecord(_CamelModel):
    """One onboarding attempt, persisted by clientId."""

    client_id: str
    client_name: str
    client_phone: str
    client_email: Optional[str] = None
    business_name: Optional[str] = None
    business_type: Optional[str] = None
    amount: float
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_intent_id: Optional[str] = None
    payment_link: Optional[str] = None
    workflow_id: Optional[str] = None
    assigned_phone_number: Optional[str] = None
    workflow_status: Optional[WorkflowStatus] = None
    workflow_error: Optional[str] = None
    created_at: str
    paid_at: Optional[str] = None
    payment_link_sent_at: Optional[str] = None
    activation_notified_at: Optional[str] = None
    notification_error: Optional[str] = None
    revision: int = Field(default=0, ge=0)

    @property
    def display_business_name(self) -> str:
        return self.business_name or f"{self.client_name}'s Business"

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.COMPLETED

    def to_document(self) -> dict:
        """Serialize with camelCase keys for storage and HTTP responses."""
        return self.model_dump(by_alias=True, mode="json")
