"""LiteLLMClient: LLMClient implementation using LiteLLM's OpenAI-style tool calling."""

import json
from typing import Any

import litellm

from prompt_eval.config.domain.llm import LLMConfig
from prompt_eval.llm.domain.message import LLMMessage, LLMResponse, TokenUsage, ToolUse
from prompt_eval.llm.infrastructure.errors import LLMInvocationError
from prompt_eval.tools.domain.tool import ToolDefinition

# LiteLLM normalises finish reasons to the OpenAI vocabulary.
_STOP_REASONS: dict[str, str] = {
    "tool_calls": "tool_use",
    "function_call": "tool_use",
    "stop": "end_turn",
    "length": "max_tokens",
}


class LiteLLMClient:
    """Sends the running conversation and tool catalog to any LiteLLM-supported model.

    Satisfies the LLMClient protocol structurally. Errors are wrapped in
    LLMInvocationError; no retries happen at this layer.
    """

    def __init__(self, config: LLMConfig) -> None:
        litellm.suppress_debug_info = True
        self._config = config

    async def generate_with_tools(
        self,
        messages: list[LLMMessage],
        system_prompt: str,
        tools: list[ToolDefinition],
        max_tokens: int,
    ) -> LLMResponse:
        request: dict[str, Any] = {
            "model": self._config.model,
            "temperature": self._config.temperature,
            "max_tokens": max_tokens,
            "messages": [
                {"role": "system", "content": system_prompt},
                *_to_openai_messages(messages),
            ],
        }
        if tools:
            request["tools"] = [_to_openai_tool(tool) for tool in tools]

        try:
            response = await litellm.acompletion(**request)
        except Exception as exc:
            raise LLMInvocationError(reason=str(exc)) from exc

        choice = response.choices[0]
        message = choice.message
        try:
            tool_use = [
                ToolUse(
                    id=call.id,
                    name=call.function.name,
                    input=json.loads(call.function.arguments or "{}"),
                )
                for call in (message.tool_calls or [])
            ]
        except json.JSONDecodeError as exc:
            raise LLMInvocationError(
                reason=f"tool call arguments are not valid JSON: {exc}"
            ) from exc

        usage = getattr(response, "usage", None)
        return LLMResponse(
            content=message.content or "",
            tool_use=tool_use,
            stop_reason=_stop_reason(choice.finish_reason, has_tool_use=bool(tool_use)),
            usage=TokenUsage(
                input_tokens=usage.prompt_tokens or 0,
                output_tokens=usage.completion_tokens or 0,
            )
            if usage is not None
            else None,
        )


def _stop_reason(finish_reason: str, has_tool_use: bool) -> str:
    # Some providers report "stop" while still requesting tools.
    if has_tool_use:
        return "tool_use"
    return _STOP_REASONS.get(finish_reason, finish_reason)


def _to_openai_tool(tool: ToolDefinition) -> dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": tool.name,
            "description": tool.description,
            "parameters": tool.input_schema,
        },
    }


def _to_openai_messages(messages: list[LLMMessage]) -> list[dict[str, Any]]:
    """Flatten domain messages into OpenAI chat format.

    One domain "tool" message expands into one OpenAI tool message per result.
    """
    converted: list[dict[str, Any]] = []
    for message in messages:
        if message.role == "tool":
            for result in message.tool_results:
                converted.append(
                    {
                        "role": "tool",
                        "tool_call_id": result.call_id,
                        "content": _format_tool_result(result.output, result.error),
                    }
                )
            continue

        entry: dict[str, Any] = {"role": message.role, "content": message.content}
        if message.tool_use:
            entry["tool_calls"] = [
                {
                    "id": use.id,
                    "type": "function",
                    "function": {"name": use.name, "arguments": json.dumps(use.input)},
                }
                for use in message.tool_use
            ]
        converted.append(entry)
    return converted


def _format_tool_result(output: Any, error: str | None) -> str:
    if error is not None:
        return f"Error: {error}"
    if isinstance(output, str):
        return output
    return json.dumps(output, default=str)
