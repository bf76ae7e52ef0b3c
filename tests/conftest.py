"""Shared test fixtures and fake collaborators."""

import random
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.dependencies import Services
from src.config import BusinessConfig, VapiConfig
from src.dispatch.dispatcher import ToolDispatcher
from src.errors import CollaboratorError
from src.integrations.phone_numbers import MockPhoneNumberAllocator
from src.onboarding.provisioning import Provisioner
from src.onboarding.service import OnboardingService, ReconfirmPolicy
from src.schemas.calendar_schema import CalendarEvent
from src.schemas.client_schema import ClientProfile
from src.storage.client_store import InMemoryClientStore
from src.storage.summary_store import CallSummaryStore
from src.tools.context import ToolContext

OWNER_PHONE = "+15550001111"
PAYMENT_LINK_TEMPLATE = "https://pay.example.com/{client_id}"
EVENT_LINK = "https://www.google.com/calendar/event?eid=abc123"


class FakeSmsSender:
    """Records every text; fails for selected recipients or for everyone."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail_for: set[str] = set()
        self.fail_all = False

    async def send(self, to: str, body: str) -> str:
        if self.fail_all or to in self.fail_for:
            raise CollaboratorError("Twilio is down", "twilio")
        self.sent.append((to, body))
        return f"SM{len(self.sent):04d}"


class FakeWorkflowClient:
    def __init__(self) -> None:
        self.specs: list[dict] = []
        self.error: Optional[str] = None
        self.exception: Optional[Exception] = None

    async def create_workflow(self, spec: dict) -> str:
        if self.exception is not None:
            raise self.exception
        if self.error:
            raise CollaboratorError(self.error, "vapi")
        self.specs.append(spec)
        return f"wf_{len(self.specs)}"


class FakeCalendar:
    def __init__(self) -> None:
        self.events: list[CalendarEvent] = []
        self.link: Optional[str] = EVENT_LINK
        self.error: Optional[str] = None
        self.codes: list[str] = []

    async def insert_event(self, event: CalendarEvent) -> Optional[str]:
        if self.error:
            raise CollaboratorError(f"Could not schedule appointment: {self.error}", "google-calendar")
        self.events.append(event)
        return self.link

    def authorization_url(self) -> str:
        return "https://accounts.google.com/o/oauth2/auth?client_id=test"

    def exchange_code(self, code: str) -> None:
        if code == "bad":
            raise ValueError("invalid_grant")
        self.codes.append(code)


@pytest.fixture
def sms():
    return FakeSmsSender()


@pytest.fixture
def workflow_client():
    return FakeWorkflowClient()


@pytest.fixture
def calendar():
    return FakeCalendar()


@pytest.fixture
def store():
    return InMemoryClientStore()


@pytest.fixture
def provisioner(workflow_client):
    return Provisioner(
        workflow_client,
        MockPhoneNumberAllocator(area_code="855", rng=random.Random(7)),
        VapiConfig(),
    )


def _service(store, sms, provisioner, policy=ReconfirmPolicy.REPROVISION):
    return OnboardingService(
        store=store,
        sms=sms,
        provisioner=provisioner,
        payment_link_template=PAYMENT_LINK_TEMPLATE,
        reconfirm_policy=policy,
    )


@pytest.fixture
def onboarding(store, sms, provisioner):
    return _service(store, sms, provisioner)


@pytest.fixture
def make_onboarding(store, sms, provisioner):
    """Factory for a service with a specific re-confirmation policy."""
    def _make(policy: ReconfirmPolicy) -> OnboardingService:
        return _service(store, sms, provisioner, policy)
    return _make


@pytest.fixture
def summaries(tmp_path):
    return CallSummaryStore(tmp_path / "call_summaries.json")


@pytest.fixture
def tool_context(sms, calendar, onboarding, summaries):
    return ToolContext(
        sms=sms,
        calendar=calendar,
        onboarding=onboarding,
        summaries=summaries,
        business=BusinessConfig(owner_phone=OWNER_PHONE),
    )


@pytest.fixture
def dispatcher(tool_context):
    return ToolDispatcher(tool_context)


@pytest.fixture
def services(store, onboarding, dispatcher, calendar):
    return Services(store=store, onboarding=onboarding, dispatcher=dispatcher, calendar=calendar)


@pytest.fixture
def client(services):
    return TestClient(create_app(services))


def make_profile(**overrides) -> ClientProfile:
    """ClientProfile with sensible defaults."""
    data = {
        "clientName": "Dana Reyes",
        "clientPhone": "(973) 555-0142",
        "clientEmail": "dana@example.com",
        "businessName": "Reyes Roofing",
        "businessType": "roofing",
        "amount": 500,
    }
    data.update(overrides)
    return ClientProfile.model_validate(data)
