"""
Onboarding tools: payment links and payment confirmation.

The voice assistant collects the client's details during a sales call
and calls createPaymentLink (or initiateOnboarding). confirmPayment is
normally driven by the payment webhook but is also exposed as a tool so
an operator-facing assistant can trigger it.
"""

import logging
from typing import Any

from src.errors import ToolServiceError
from src.schemas.client_schema import ClientProfile
from src.schemas.onboarding_schema import InitiationResult
from src.tools.context import ToolContext
from src.utils import format_amount

logger = logging.getLogger(__name__)


async def _initiate(ctx: ToolContext, params: dict[str, Any]) -> InitiationResult:
    profile = ClientProfile.model_validate(params)
    try:
        return await ctx.onboarding.initiate(profile)
    except ToolServiceError as exc:
        logger.error("Error creating payment link: %s", exc)
        raise ToolServiceError(f"Could not create payment link: {exc}") from exc


async def create_payment_link(ctx: ToolContext, params: dict[str, Any]) -> str:
    result = await _initiate(ctx, params)
    client = result.client
    amount = format_amount(client.amount)
    if result.notification_error:
        return (
            f"Payment link created for {client.client_name}, but the text to "
            f"{client.client_phone} failed: {result.notification_error}. "
            f"Client ID: {client.client_id}. Amount: ${amount}"
        )
    return (
        f"Payment link created and sent to {client.client_name} at {client.client_phone}. "
        f"Client ID: {client.client_id}. Amount: ${amount}"
    )


async def initiate_onboarding(ctx: ToolContext, params: dict[str, Any]) -> str:
    result = await _initiate(ctx, params)
    client = result.client
    text = (
        f"Onboarding started for {client.display_business_name}. "
        f"Client ID: {client.client_id}. Payment link: {result.payment_link}."
    )
    if result.notification_error:
        text += f" The payment link text could not be delivered: {result.notification_error}"
    else:
        text += f" The link was texted to {client.client_phone}."
    return text


async def confirm_payment(ctx: ToolContext, params: dict[str, Any]) -> str:
    result = await ctx.onboarding.confirm_payment(
        params.get("clientId"), params.get("paymentIntentId")
    )
    client = result.client
    status = client.payment_status.value
    if result.skipped:
        return f"Payment for {client.client_id} was already confirmed. Status: {status}."

    text = f"Payment confirmed for {client.client_name} (client {client.client_id}). Status: {status}."
    if result.provisioning_error:
        return f"{text} Provisioning failed: {result.provisioning_error}"
    text += f" AI phone line: {client.assigned_phone_number}."
    if result.notification_error:
        text += f" Activation text failed: {result.notification_error}"
    return text
