"""FakeLiveExecutor: an in-memory stand-in for the platform's real tools."""

import asyncio
from typing import Any

from prompt_eval.tools.domain.tool import ToolDefinition, ToolRequest, ToolResult


class FakeLiveExecutor:
    """Answers each tool from a fixed output table and records every request.

    Tools missing from the table fail with an error result. delay_seconds
    makes every call sleep first, to exercise timeouts.

    Satisfies the ToolExecutor protocol structurally.
    """

    def __init__(
        self,
        outputs: dict[str, Any] | None = None,
        tools: list[ToolDefinition] | None = None,
        delay_seconds: float = 0.0,
    ) -> None:
        self._outputs = outputs or {}
        self._tools = (
            tools
            if tools is not None
            else [ToolDefinition(name=name) for name in self._outputs]
        )
        self._delay_seconds = delay_seconds
        self.requests: list[ToolRequest] = []

    def get_tools_for_llm(self) -> list[ToolDefinition]:
        return list(self._tools)

    def create_request(
        self, call_id: str, tool_name: str, parameters: dict[str, Any]
    ) -> ToolRequest:
        return ToolRequest(call_id=call_id, tool_name=tool_name, parameters=parameters)

    async def execute_tool(self, request: ToolRequest) -> ToolResult:
        self.requests.append(request)
        if self._delay_seconds:
            await asyncio.sleep(self._delay_seconds)
        if request.tool_name not in self._outputs:
            return ToolResult(
                call_id=request.call_id,
                tool_name=request.tool_name,
                success=False,
                error=f"unknown tool {request.tool_name}",
            )
        return ToolResult(
            call_id=request.call_id,
            tool_name=request.tool_name,
            success=True,
            output=self._outputs[request.tool_name],
        )

    async def execute_tools(self, requests: list[ToolRequest]) -> list[ToolResult]:
        return [await self.execute_tool(request) for request in requests]
