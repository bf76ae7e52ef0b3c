"""Provisioning: create the client's remote workflow, then assign a number."""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from src.config import VapiConfig
from src.integrations.phone_numbers import PhoneNumberAllocator
from src.prompts.workflow_template import build_workflow_spec
from src.schemas.client_schema import ClientRecord

logger = logging.getLogger(__name__)


class WorkflowClient(Protocol):
    async def create_workflow(self, spec: dict[str, Any]) -> str:
        """Submit a workflow specification and return its remote ID."""


@dataclass(frozen=True)
class ProvisioningResult:
    workflow_id: str
    phone_number: str


class Provisioner:
    """Builds and submits the workflow, then obtains a phone number for it.

    Collaborators raise CollaboratorError on failure; it propagates to the
    onboarding service, which records it on the client.
    """

    def __init__(
        self,
        workflow_client: WorkflowClient,
        allocator: PhoneNumberAllocator,
        vapi_config: Optional[VapiConfig] = None,
    ) -> None:
        self._workflows = workflow_client
        self._allocator = allocator
        self._vapi_config = vapi_config

    async def provision(self, client: ClientRecord) -> ProvisioningResult:
        spec = build_workflow_spec(client.display_business_name, self._vapi_config)
        workflow_id = await self._workflows.create_workflow(spec)
        phone_number = await self._allocator.assign(client, workflow_id)
        logger.info(
            "Provisioned %s: workflow %s, number %s",
            client.client_id, workflow_id, phone_number,
        )
        return ProvisioningResult(workflow_id=workflow_id, phone_number=phone_number)
