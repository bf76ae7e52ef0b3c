"""Request, response and result models for the onboarding lifecycle."""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from src.schemas.client_schema import ClientRecord


class PaymentConfirmedRequest(BaseModel):
    """Body of the payment-confirmed webhook."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    client_id: Optional[str] = None
    payment_intent_id: Optional[str] = None


class PaymentLinkResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    client_id: str
    payment_link: str
    message: str


class PaymentConfirmedResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    client_id: str
    status: str


@dataclass
class InitiationResult:
    """Outcome of starting onboarding for a client."""

    client: ClientRecord
    payment_link: str
    notification_error: Optional[str] = None

    @property
    def notified(self) -> bool:
        return self.notification_error is None


@dataclass
class NotificationResult:
    """Outcome of an operator-triggered resend."""

    client: ClientRecord
    error: Optional[str] = None

    @property
    def delivered(self) -> bool:
        return self.error is None


@dataclass
class ConfirmationResult:
    """Outcome of a payment confirmation.

    Provisioning and activation-notice failures do not fail the
    confirmation; they are reported here and on the stored record.
    """

    client: ClientRecord
    provisioned: bool = False
    skipped: bool = False
    provisioning_error: Optional[str] = None
    notification_error: Optional[str] = None
