"""
Google Calendar access: OAuth authorization-code flow and event insert.

Tokens from the consent screen are stored as an authorized-user JSON
file and refreshed on use.
"""

import logging
from pathlib import Path
from typing import Optional

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from src.config import GoogleConfig
from src.errors import CollaboratorError
from src.integrations.base import run_blocking
from src.schemas.calendar_schema import CalendarEvent

logger = logging.getLogger(__name__)

AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
TOKEN_URI = "https://oauth2.googleapis.com/token"
NO_TOKENS_MESSAGE = "No stored OAuth tokens found. Please visit /auth first."


class GoogleCalendarClient:
    """Inserts events into one calendar on behalf of the authorized account."""

    def __init__(self, config: GoogleConfig, timeout: float) -> None:
        self._config = config
        self._timeout = timeout

    @property
    def token_path(self) -> Path:
        return Path(self._config.token_path)

    def _flow(self) -> Flow:
        client_config = {
            "web": {
                "client_id": self._config.client_id,
                "client_secret": self._config.client_secret,
                "auth_uri": AUTH_URI,
                "token_uri": TOKEN_URI,
                "redirect_uris": [self._config.redirect_uri],
            }
        }
        return Flow.from_client_config(
            client_config,
            scopes=list(self._config.scopes),
            redirect_uri=self._config.redirect_uri,
        )

    def authorization_url(self) -> str:
        """Consent-screen URL requesting offline access."""
        url, _state = self._flow().authorization_url(access_type="offline", prompt="consent")
        logger.info("Authorize this app by visiting: %s", url)
        return url

    def exchange_code(self, code: str) -> None:
        """Trade an authorization code for tokens and store them."""
        flow = self._flow()
        flow.fetch_token(code=code)
        self.token_path.write_text(flow.credentials.to_json(), encoding="utf-8")
        logger.info("Tokens acquired and saved to %s", self.token_path)

    def _credentials(self) -> Credentials:
        creds = Credentials.from_authorized_user_file(
            str(self.token_path), list(self._config.scopes)
        )
        if creds.expired and creds.refresh_token:
            creds.refresh(Request())
            self.token_path.write_text(creds.to_json(), encoding="utf-8")
        return creds

    def _insert(self, body: dict) -> dict:
        service = build("calendar", "v3", credentials=self._credentials(), cache_discovery=False)
        return service.events().insert(calendarId=self._config.calendar_id, body=body).execute()

    async def insert_event(self, event: CalendarEvent) -> Optional[str]:
        """Create the event and return its viewable link, if the API gave one."""
        if not self.token_path.exists():
            raise CollaboratorError(NO_TOKENS_MESSAGE, "google-calendar")
        try:
            created = await run_blocking(
                self._insert,
                event.to_google_body(),
                timeout=self._timeout,
                collaborator="google-calendar",
            )
        except CollaboratorError as exc:
            raise CollaboratorError(
                f"Could not schedule appointment: {exc}", "google-calendar"
            ) from exc
        except (HttpError, GoogleAuthError, OSError, ValueError) as exc:
            logger.error("Error scheduling appointment: %s", exc)
            raise CollaboratorError(
                f"Could not schedule appointment: {exc}", "google-calendar"
            ) from exc
        return created.get("htmlLink")
