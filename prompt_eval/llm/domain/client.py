"""LLMClient Protocol: the opaque request/response capability used by the runner."""

from typing import Protocol

from prompt_eval.llm.domain.message import LLMMessage, LLMResponse
from prompt_eval.tools.domain.tool import ToolDefinition


class LLMClient(Protocol):
    """Structural interface satisfied by any tool-calling LLM implementation."""

    async def generate_with_tools(
        self,
        messages: list[LLMMessage],
        system_prompt: str,
        tools: list[ToolDefinition],
        max_tokens: int,
    ) -> LLMResponse: ...
