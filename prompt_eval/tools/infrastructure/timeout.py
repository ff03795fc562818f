"""TimeoutToolExecutor: decorator bounding each tool call with a hard timeout."""

import asyncio
from typing import Any

from prompt_eval.tools.domain.executor import ToolExecutor
from prompt_eval.tools.domain.tool import ToolDefinition, ToolRequest, ToolResult
from prompt_eval.tools.infrastructure.errors import ToolTimeoutError


class TimeoutToolExecutor:
    """Cancels any single tool call that runs longer than timeout_seconds.

    A timeout raises ToolTimeoutError; the call is not retried.

    Satisfies the ToolExecutor protocol structurally.
    """

    def __init__(self, inner: ToolExecutor, timeout_seconds: float) -> None:
        self._inner = inner
        self._timeout_seconds = timeout_seconds

    def get_tools_for_llm(self) -> list[ToolDefinition]:
        return self._inner.get_tools_for_llm()

    def create_request(
        self, call_id: str, tool_name: str, parameters: dict[str, Any]
    ) -> ToolRequest:
        return self._inner.create_request(call_id, tool_name, parameters)

    async def execute_tool(self, request: ToolRequest) -> ToolResult:
        try:
            return await asyncio.wait_for(
                self._inner.execute_tool(request), timeout=self._timeout_seconds
            )
        except TimeoutError as exc:
            raise ToolTimeoutError(
                tool_name=request.tool_name, timeout_seconds=self._timeout_seconds
            ) from exc

    async def execute_tools(self, requests: list[ToolRequest]) -> list[ToolResult]:
        return [await self.execute_tool(request) for request in requests]
