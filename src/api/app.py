"""
HTTP surface: the tool-call webhook, onboarding endpoints and OAuth.

Serve with ``uvicorn --factory src.api.app:create_app`` or ``python main.py``.
"""

import asyncio
import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from pydantic import ValidationError as PydanticValidationError

from src.api.dependencies import Services, build_services
from src.errors import AlreadyConfirmedError, NotFoundError, ToolServiceError, ValidationError
from src.logging_context import set_correlation_id
from src.onboarding.state_machine import InvalidTransitionError
from src.schemas.client_schema import ClientProfile
from src.schemas.onboarding_schema import (
    NotificationResult,
    PaymentConfirmedRequest,
    PaymentConfirmedResponse,
    PaymentLinkResponse,
)

logger = logging.getLogger(__name__)

HEALTH_TEXT = "AI Voice Agent Scheduler + SMS is running!"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        return None


def _resend_payload(result: NotificationResult) -> dict:
    return {
        "success": result.delivered,
        "clientId": result.client.client_id,
        "error": result.error,
    }


def create_app(services: Optional[Services] = None) -> FastAPI:
    services = services or build_services()
    app = FastAPI(title="Voice Agent Tool Service")
    app.state.services = services

    @app.get("/", response_class=PlainTextResponse)
    async def health() -> str:
        return HEALTH_TEXT

    # ------------------------------------------------------------------ #
    # Google OAuth
    # ------------------------------------------------------------------ #

    @app.get("/auth")
    async def auth() -> RedirectResponse:
        return RedirectResponse(services.calendar.authorization_url())

    @app.get("/oauth2callback", response_class=PlainTextResponse)
    async def oauth2callback(code: Optional[str] = None):
        if not code:
            return PlainTextResponse("Missing code parameter.", status_code=400)
        try:
            await asyncio.to_thread(services.calendar.exchange_code, code)
        except Exception:
            # The OAuth libraries raise a wide range of errors; all mean the same thing here
            logger.exception("Error retrieving access token")
            return PlainTextResponse("Error retrieving access token. Check logs.", status_code=500)
        return "Authorization successful! You can close this tab."

    # ------------------------------------------------------------------ #
    # Voice tool calls
    # ------------------------------------------------------------------ #

    @app.post("/tool-call")
    async def tool_call(request: Request) -> dict:
        payload = await _json_body(request)
        logger.info("Incoming /tool-call data: %s", payload)
        response = await services.dispatcher.dispatch_payload(payload)
        return response.to_payload()

    # ------------------------------------------------------------------ #
    # Onboarding
    # ------------------------------------------------------------------ #

    @app.post("/create-payment-link")
    async def create_payment_link(request: Request):
        payload = await _json_body(request)
        try:
            profile = ClientProfile.model_validate(payload or {})
            result = await services.onboarding.initiate(profile)
        except PydanticValidationError as exc:
            logger.error("Invalid payment link request: %s", exc)
            return _error(400, "Invalid request body")
        except ValidationError as exc:
            return _error(400, str(exc))
        except ToolServiceError as exc:
            logger.error("Error creating payment link: %s", exc)
            return _error(500, "Failed to create payment link")
        except Exception:
            logger.exception("Unexpected error creating payment link")
            return _error(500, "Failed to create payment link")

        client = result.client
        if result.notified:
            message = f"Payment link sent to {client.client_phone}"
        else:
            message = f"Payment link created, but the SMS to {client.client_phone} failed"
        return PaymentLinkResponse(
            client_id=client.client_id,
            payment_link=result.payment_link,
            message=message,
        ).model_dump(by_alias=True)

    @app.post("/webhook/payment-confirmed")
    async def payment_confirmed(request: Request):
        payload = await _json_body(request)
        try:
            body = PaymentConfirmedRequest.model_validate(payload or {})
        except PydanticValidationError:
            return _error(400, "Missing clientId")
        if not body.client_id:
            return _error(400, "Missing clientId")

        try:
            result = await services.onboarding.confirm_payment(
                body.client_id, body.payment_intent_id
            )
        except NotFoundError:
            return _error(404, "Client not found")
        except AlreadyConfirmedError as exc:
            return _error(409, str(exc))
        except ToolServiceError as exc:
            logger.error("Payment webhook error: %s", exc)
            return _error(500, "Webhook processing failed")
        except Exception:
            logger.exception("Unexpected payment webhook error")
            return _error(500, "Webhook processing failed")

        return PaymentConfirmedResponse(
            client_id=result.client.client_id,
            status=result.client.payment_status.value,
        ).model_dump(by_alias=True)

    # ------------------------------------------------------------------ #
    # Operator endpoints
    # ------------------------------------------------------------------ #

    @app.get("/clients/pending-activation")
    async def pending_activation() -> dict:
        return {"clients": [r.client_id for r in services.onboarding.pending_activation_notices()]}

    @app.get("/clients/{client_id}")
    async def get_client(client_id: str):
        set_correlation_id(client_id)
        try:
            return services.onboarding.get_client(client_id).to_document()
        except NotFoundError:
            return _error(404, "Client not found")

    @app.post("/clients/{client_id}/resend-payment-link")
    async def resend_payment_link(client_id: str):
        try:
            result = await services.onboarding.resend_payment_link(client_id)
        except NotFoundError:
            return _error(404, "Client not found")
        except InvalidTransitionError as exc:
            return _error(409, str(exc))
        return _resend_payload(result)

    @app.post("/clients/{client_id}/resend-activation")
    async def resend_activation(client_id: str):
        try:
            result = await services.onboarding.resend_activation(client_id)
        except NotFoundError:
            return _error(404, "Client not found")
        except InvalidTransitionError as exc:
            return _error(409, str(exc))
        return _resend_payload(result)

    return app
