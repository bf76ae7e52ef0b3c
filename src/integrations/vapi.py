"""Vapi workflow API client used for provisioning."""

import logging
from typing import Any, Optional

import httpx

from src.errors import CollaboratorError

logger = logging.getLogger(__name__)


class VapiWorkflowClient:
    """Submits workflow specifications and returns the created workflow ID."""

    def __init__(
        self,
        api_key: str,
        api_base: str,
        timeout: float,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._api_base = api_base.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    async def create_workflow(self, spec: dict[str, Any]) -> str:
        if not self._api_key:
            raise CollaboratorError("Vapi API key is not configured", "vapi")
        try:
            async with httpx.AsyncClient(
                base_url=self._api_base, timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post("/workflow", json=spec, headers=self._headers())
        except httpx.TimeoutException:
            raise CollaboratorError(
                f"Workflow creation timed out after {self._timeout:g}s", "vapi"
            ) from None
        except httpx.HTTPError as exc:
            raise CollaboratorError(f"Workflow creation failed: {exc}", "vapi") from exc

        if response.is_error:
            raise CollaboratorError(
                f"Workflow creation failed: {response.status_code} {response.reason_phrase}",
                "vapi",
            )
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            raise CollaboratorError("Workflow creation failed: invalid response body", "vapi")
        workflow_id = payload.get("id")
        if not workflow_id:
            raise CollaboratorError("Workflow creation failed: response carried no id", "vapi")
        logger.info("Vapi workflow created: %s", workflow_id)
        return workflow_id
