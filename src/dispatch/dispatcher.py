"""
Tool-call dispatcher.

Turns one inbound ``{message: {functionCall: {...}}}`` body into exactly
one ``{results: [{toolCallId, result}]}`` envelope. The voice runtime
reads the result text aloud, so every outcome, including failures, is
delivered as text with HTTP 200:

- success:         toolCallId is the inbound id (or ``auto_<ms>``)
- unknown tool:    same id, ``No handler for function: <name>``
- handler failure: toolCallId is null, ``Error: <message>``
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from src.dispatch.registry import ToolRegistry
from src.logging_context import set_correlation_id
from src.schemas.tool_call_schema import ToolCallRequest, ToolCallResponse
from src.tools.context import ToolContext
from src.utils import epoch_millis

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """Routes function calls to tool handlers."""

    def __init__(self, context: ToolContext, registry: Optional[ToolRegistry] = None) -> None:
        self._context = context
        self._registry = registry or ToolRegistry()

    @property
    def context(self) -> ToolContext:
        return self._context

    async def dispatch(self, request: ToolCallRequest) -> ToolCallResponse:
        call = request.function_call
        tool_call_id = call.id or f"auto_{epoch_millis()}"
        set_correlation_id(tool_call_id)
        logger.info("Function call received: %s", call.name)

        handler = self._registry.resolve(call.name)
        if handler is None:
            logger.warning("No handler for function: %s", call.name)
            return ToolCallResponse.single(tool_call_id, f"No handler for function: {call.name}")

        try:
            result = await handler(self._context, call.parameters)
        except Exception as exc:
            # Any failure must still reach the caller as a result envelope
            logger.exception("Tool call error in %s", call.name)
            return ToolCallResponse.single(None, f"Error: {exc}")

        logger.info("Function %s completed", call.name)
        return ToolCallResponse.single(tool_call_id, result)

    async def dispatch_payload(self, payload: Any) -> ToolCallResponse:
        """Validate a raw JSON body, then dispatch it."""
        try:
            request = ToolCallRequest.model_validate(payload)
        except PydanticValidationError as exc:
            logger.error("Malformed tool-call body: %s", exc)
            return ToolCallResponse.single(None, "Error: malformed tool-call body")
        return await self.dispatch(request)
