"""
Workflow specification submitted to Vapi when a client is provisioned.

The script is fixed; only the business name changes. Callers land on
``start``, branch to ``general_assistance``, and either finish there or
move through ``collect_contact`` and the ``sendSMS`` tool before the
``hangup_final`` end-call node.
"""

from typing import Any, Optional

from src.config import VapiConfig, settings

NOW_EXPRESSION = '{{"now" | date: "%A, %B %d, %Y at %I:%M %p", "America/New_York"}}'

NODE_NAMES = ("start", "general_assistance", "collect_contact", "sendSMS", "hangup_final")


def _conversation_node(
    config: VapiConfig,
    name: str,
    prompt: str,
    x: int,
    first_message: str = "",
    outputs: Optional[list[dict[str, Any]]] = None,
    is_start: bool = False,
) -> dict[str, Any]:
    node: dict[str, Any] = {
        "name": name,
        "type": "conversation",
        "model": {
            "model": config.model,
            "provider": config.model_provider,
            "maxTokens": config.max_tokens,
            "temperature": config.temperature,
        },
        "voice": {"voiceId": config.voice_id, "provider": config.voice_provider},
        "prompt": prompt,
        "metadata": {"position": {"x": x, "y": 0}},
        "messagePlan": {"firstMessage": first_message},
    }
    if is_start:
        node["isStart"] = True
    if outputs is not None:
        node["variableExtractionPlan"] = {"output": outputs}
    return node


def _ai_edge(source: str, target: str, prompt: str) -> dict[str, Any]:
    return {"from": source, "to": target, "condition": {"type": "ai", "prompt": prompt}}


def build_workflow_spec(business_name: str, config: Optional[VapiConfig] = None) -> dict[str, Any]:
    """Build the assistant workflow for one client's business."""
    config = config or settings.vapi

    nodes = [
        _conversation_node(
            config,
            "start",
            prompt=(
                f"You are the AI assistant for {business_name}. Current date/time is "
                f"{NOW_EXPRESSION}. Thank you for calling {business_name}. "
                "How may I help you today?"
            ),
            x=0,
            first_message=f"Hello! Thank you for calling {business_name}. How can I assist you today?",
            is_start=True,
        ),
        _conversation_node(
            config,
            "general_assistance",
            prompt=(
                f"Provide helpful assistance for {business_name}. If the caller needs to "
                "schedule an appointment or needs specific help, offer to connect them "
                "with someone or take their information for follow-up."
            ),
            x=300,
            outputs=[{
                "enum": ["schedule", "information", "support"],
                "type": "string",
                "title": "request_type",
                "description": "Type of assistance needed",
            }],
        ),
        _conversation_node(
            config,
            "collect_contact",
            prompt=(
                "Collect the caller's contact information for follow-up. Ask for their "
                "name and the best phone number to reach them."
            ),
            x=600,
            outputs=[
                {"enum": [], "type": "string", "title": "caller_name",
                 "description": "Caller's name"},
                {"enum": [], "type": "string", "title": "caller_phone",
                 "description": "Caller's phone number"},
            ],
        ),
        {
            "name": "sendSMS",
            "type": "tool",
            "toolId": config.sms_tool_id,
            "metadata": {"position": {"x": 900, "y": 0}},
        },
        {
            "name": "hangup_final",
            "type": "tool",
            "tool": {
                "type": "endCall",
                "function": {
                    "name": "end_call",
                    "parameters": {"type": "object", "required": [], "properties": {}},
                },
                "messages": [{
                    "type": "request-start",
                    "content": f"Thank you for calling {business_name}. Have a wonderful day!",
                    "blocking": True,
                }],
            },
            "metadata": {"position": {"x": 1200, "y": 0}},
        },
    ]

    edges = [
        _ai_edge("start", "general_assistance", "User needs assistance"),
        _ai_edge("general_assistance", "collect_contact", "User needs follow-up or appointment"),
        _ai_edge("collect_contact", "sendSMS", "Contact information collected"),
        _ai_edge("sendSMS", "hangup_final", "SMS sent successfully"),
        _ai_edge("general_assistance", "hangup_final", "User got the information they needed"),
    ]

    return {
        "name": f"{business_name} - AI Assistant",
        "nodes": nodes,
        "edges": edges,
        "globalPrompt": (
            f"You are the professional AI assistant for {business_name}. Be helpful, "
            "courteous, and professional. Always try to assist callers or collect their "
            "information for follow-up."
        ),
    }
