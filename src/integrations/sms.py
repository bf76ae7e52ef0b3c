"""
Twilio SMS delivery.

Used directly by the sendSMS tool and by the onboarding service for the
payment-link and activation notices.
"""

import logging
from typing import Optional, Protocol

from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from src.errors import CollaboratorError
from src.integrations.base import run_blocking

logger = logging.getLogger(__name__)


class SmsSender(Protocol):
    async def send(self, to: str, body: str) -> str:
        """Deliver ``body`` to ``to`` and return the provider message ID."""


class TwilioSmsSender:
    """Sends texts from a single configured Twilio number."""

    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        timeout: float,
        client: Optional[Client] = None,
    ) -> None:
        if client is None and account_sid and auth_token:
            client = Client(account_sid, auth_token)
        self._client = client
        self._from_number = from_number
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return self._client is not None

    async def send(self, to: str, body: str) -> str:
        if self._client is None:
            raise CollaboratorError("Twilio credentials are not configured", "twilio")
        try:
            message = await run_blocking(
                self._client.messages.create,
                timeout=self._timeout,
                collaborator="twilio",
                body=body,
                from_=self._from_number,
                to=to,
            )
        except (TwilioException, OSError) as exc:
            detail = getattr(exc, "msg", None) or str(exc)
            raise CollaboratorError(detail, "twilio") from exc
        logger.info("SMS sent to %s: %s", to, message.sid)
        return message.sid
