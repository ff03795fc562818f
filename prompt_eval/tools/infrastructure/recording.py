"""RecordingToolExecutor: decorator that logs every call made through any ToolExecutor."""

from datetime import datetime, timezone
from typing import Any

from prompt_eval.tools.domain.executor import ToolExecutor
from prompt_eval.tools.domain.recorded_call import RecordedToolCall
from prompt_eval.tools.domain.tool import ToolDefinition, ToolRequest, ToolResult


class RecordingToolExecutor:
    """Wraps a ToolExecutor and records each executed call without altering it.

    get_tools_for_llm and create_request forward to the inner executor
    unchanged. The call log and the order counter belong to this instance
    alone; never share one instance between concurrently executing runs.

    Satisfies the ToolExecutor protocol structurally.
    """

    def __init__(self, inner: ToolExecutor) -> None:
        self._inner = inner
        self._calls: list[RecordedToolCall] = []
        self._next_order = 0

    def get_tools_for_llm(self) -> list[ToolDefinition]:
        return self._inner.get_tools_for_llm()

    def create_request(
        self, call_id: str, tool_name: str, parameters: dict[str, Any]
    ) -> ToolRequest:
        return self._inner.create_request(call_id, tool_name, parameters)

    async def execute_tool(self, request: ToolRequest) -> ToolResult:
        timestamp = datetime.now(timezone.utc)
        result = await self._inner.execute_tool(request)
        self._calls.append(
            RecordedToolCall(
                tool_name=request.tool_name,
                parameters=dict(request.parameters),
                timestamp=timestamp,
                order=self._next_order,
                result=result,
            )
        )
        self._next_order += 1
        return result

    async def execute_tools(self, requests: list[ToolRequest]) -> list[ToolResult]:
        # One at a time, in request order: order values must follow the requests.
        results: list[ToolResult] = []
        for request in requests:
            results.append(await self.execute_tool(request))
        return results

    def get_recorded_calls(self) -> list[RecordedToolCall]:
        return [call.model_copy(deep=True) for call in self._calls]

    def clear_recorded_calls(self) -> None:
        self._calls = []
        self._next_order = 0

    def was_tool_called(self, tool_name: str) -> bool:
        return any(call.tool_name == tool_name for call in self._calls)

    def get_calls_for_tool(self, tool_name: str) -> list[RecordedToolCall]:
        return [
            call.model_copy(deep=True)
            for call in self._calls
            if call.tool_name == tool_name
        ]

    def get_tool_call_count(self, tool_name: str) -> int:
        return len(self.get_calls_for_tool(tool_name))
