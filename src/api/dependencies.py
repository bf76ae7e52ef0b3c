"""Wires the configured collaborators into the services the HTTP app uses."""

import logging
from dataclasses import dataclass
from typing import Optional

from src.config import AppConfig, settings
from src.dispatch.dispatcher import ToolDispatcher
from src.integrations.google_calendar import GoogleCalendarClient
from src.integrations.phone_numbers import MockPhoneNumberAllocator
from src.integrations.sms import TwilioSmsSender
from src.integrations.vapi import VapiWorkflowClient
from src.onboarding.provisioning import Provisioner
from src.onboarding.service import OnboardingService, ReconfirmPolicy
from src.storage.client_store import ClientStore, JsonFileClientStore
from src.storage.summary_store import CallSummaryStore
from src.tools.context import ToolContext

logger = logging.getLogger(__name__)


@dataclass
class Services:
    store: ClientStore
    onboarding: OnboardingService
    dispatcher: ToolDispatcher
    calendar: GoogleCalendarClient


def build_services(config: Optional[AppConfig] = None) -> Services:
    """Build production services from configuration."""
    config = config or settings
    timeout = config.onboarding.collaborator_timeout_sec

    sms = TwilioSmsSender(
        account_sid=config.twilio.account_sid,
        auth_token=config.twilio.auth_token,
        from_number=config.twilio.from_number,
        timeout=timeout,
    )
    if not sms.configured:
        logger.warning("Twilio credentials missing; SMS sends will fail")

    store = JsonFileClientStore(
        config.onboarding.clients_db_path, max_retries=config.onboarding.store_max_retries
    )
    provisioner = Provisioner(
        VapiWorkflowClient(config.vapi.api_key, config.vapi.api_base, timeout),
        MockPhoneNumberAllocator(area_code=config.onboarding.phone_area_code),
        config.vapi,
    )
    onboarding = OnboardingService(
        store=store,
        sms=sms,
        provisioner=provisioner,
        payment_link_template=config.onboarding.payment_link_template,
        reconfirm_policy=ReconfirmPolicy(config.onboarding.reconfirm_policy),
    )
    calendar = GoogleCalendarClient(config.google, timeout)
    context = ToolContext(
        sms=sms,
        calendar=calendar,
        onboarding=onboarding,
        summaries=CallSummaryStore(config.onboarding.summaries_path),
        business=config.business,
    )
    return Services(
        store=store,
        onboarding=onboarding,
        dispatcher=ToolDispatcher(context),
        calendar=calendar,
    )
