"""MockedToolExecutor: answers tool calls from declared fixtures instead of real tools."""

from typing import Any

from prompt_eval.tools.domain.mocked_output import MockedToolOutput, MockedToolSuccess
from prompt_eval.tools.domain.tool import ToolDefinition, ToolRequest, ToolResult
from prompt_eval.tools.infrastructure.errors import MockedOutputMissingError


class MockedToolExecutor:
    """Returns the pre-declared output for each tool, keyed by tool name.

    A request for a tool without a declared output raises
    MockedOutputMissingError instead of silently succeeding.

    Satisfies the ToolExecutor protocol structurally.
    """

    def __init__(
        self,
        tools: list[ToolDefinition],
        outputs: dict[str, MockedToolOutput],
    ) -> None:
        self._tools = tools
        self._outputs = dict(outputs)

    def get_tools_for_llm(self) -> list[ToolDefinition]:
        return list(self._tools)

    def create_request(
        self, call_id: str, tool_name: str, parameters: dict[str, Any]
    ) -> ToolRequest:
        return ToolRequest(call_id=call_id, tool_name=tool_name, parameters=parameters)

    async def execute_tool(self, request: ToolRequest) -> ToolResult:
        mocked = self._outputs.get(request.tool_name)
        if mocked is None:
            raise MockedOutputMissingError(
                tool_name=request.tool_name, available=list(self._outputs)
            )
        if isinstance(mocked, MockedToolSuccess):
            return ToolResult(
                call_id=request.call_id,
                tool_name=request.tool_name,
                success=True,
                output=mocked.output,
            )
        return ToolResult(
            call_id=request.call_id,
            tool_name=request.tool_name,
            success=False,
            error=mocked.error,
        )

    async def execute_tools(self, requests: list[ToolRequest]) -> list[ToolResult]:
        return [await self.execute_tool(request) for request in requests]
