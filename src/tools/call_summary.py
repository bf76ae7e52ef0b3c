"""summarizeClientCall: store what was learned on a sales call."""

import logging
from typing import Any

from src.schemas.calendar_schema import CallSummary
from src.tools.context import ToolContext
from src.utils import utc_now_iso

logger = logging.getLogger(__name__)


def _as_list(value: Any) -> list[str]:
    if not value:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(item) for item in value]


async def summarize_client_call(ctx: ToolContext, params: dict[str, Any]) -> str:
    client_name = params.get("clientName") or "Unknown"
    summary = CallSummary(
        client_name=client_name,
        business_name=params.get("businessName") or f"{client_name}'s Business",
        business_type=params.get("businessType") or "general",
        services=_as_list(params.get("services")),
        budget=str(params.get("budget") or "not specified"),
        timeline=str(params.get("timeline") or "flexible"),
        notes=str(params.get("notes") or ""),
        summarized_at=utc_now_iso(),
        client_id=params.get("clientId"),
    )
    summary_id = ctx.summaries.save(summary)
    return (
        f"Call summary created for {client_name}. Summary ID: {summary_id}. "
        f"Business: {summary.business_name}, Type: {summary.business_type}"
    )
