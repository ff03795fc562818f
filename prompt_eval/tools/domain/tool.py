"""Tool value objects: definitions advertised to the LLM, requests, and results."""

from typing import Any

from pydantic import BaseModel, Field


class ToolDefinition(BaseModel, frozen=True):
    """A tool as advertised to the LLM: name, description, and JSON schema."""

    name: str = Field(min_length=1)
    description: str = ""
    input_schema: dict[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}}
    )


class ToolRequest(BaseModel, frozen=True):
    """One tool invocation requested by the LLM."""

    call_id: str
    tool_name: str
    parameters: dict[str, Any] = Field(default_factory=dict)


class ToolResult(BaseModel, frozen=True):
    """Outcome of one tool invocation, paired with its request by call_id."""

    call_id: str
    tool_name: str
    success: bool
    output: Any = None
    error: str | None = None
