"""Inbound tool-call and outbound result envelope models."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FunctionCall(BaseModel):
    """The function the voice runtime wants invoked."""

    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    parameters: dict[str, Any] = Field(default_factory=dict)
    id: Optional[str] = None

    @field_validator("parameters", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return {} if value is None else value


class ToolCallMessage(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    function_call: FunctionCall = Field(default_factory=FunctionCall, alias="functionCall")


class ToolCallRequest(BaseModel):
    """Body posted to /tool-call: ``{message: {functionCall: {...}}}``."""

    model_config = ConfigDict(extra="ignore")

    message: ToolCallMessage = Field(default_factory=ToolCallMessage)

    @property
    def function_call(self) -> FunctionCall:
        return self.message.function_call


class ToolCallResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tool_call_id: Optional[str] = Field(default=None, alias="toolCallId")
    result: str


class ToolCallResponse(BaseModel):
    """Envelope returned to the voice runtime. Always exactly one result."""

    results: list[ToolCallResult]

    @classmethod
    def single(cls, tool_call_id: Optional[str], result: str) -> "ToolCallResponse":
        return cls(results=[ToolCallResult(tool_call_id=tool_call_id, result=result)])

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)
