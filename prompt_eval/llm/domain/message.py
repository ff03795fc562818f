"""LLM conversation value objects: messages, tool-use intents, usage, responses."""

from typing import Any, Literal

from pydantic import BaseModel, Field

from prompt_eval.tools.domain.tool import ToolResult


class ToolUse(BaseModel, frozen=True):
    """A tool call the LLM asked for."""

    id: str
    name: str
    input: dict[str, Any] = Field(default_factory=dict)


class TokenUsage(BaseModel, frozen=True):
    """Token counts, summed across every LLM call of a run."""

    input_tokens: int = 0
    output_tokens: int = 0

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
        )


class LLMMessage(BaseModel, frozen=True):
    """One conversation message.

    For role="assistant": tool_use carries the tool-call intents, if any.
    For role="tool": tool_results answers the preceding assistant tool_use.
    """

    role: Literal["user", "assistant", "tool"]
    content: str = ""
    tool_use: list[ToolUse] = Field(default_factory=list)
    tool_results: list[ToolResult] = Field(default_factory=list)


class LLMResponse(BaseModel, frozen=True):
    content: str = ""
    tool_use: list[ToolUse] = Field(default_factory=list)
    stop_reason: str | None = None
    usage: TokenUsage | None = None
