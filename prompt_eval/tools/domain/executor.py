"""ToolExecutor Protocol: structural interface for every tool execution mode."""

from typing import Any, Protocol

from prompt_eval.tools.domain.tool import ToolDefinition, ToolRequest, ToolResult


class ToolExecutor(Protocol):
    """Lists tools for the LLM and executes the tool calls it requests.

    execute_tools must run requests sequentially and return results in request
    order: result[i] answers requests[i].
    """

    def get_tools_for_llm(self) -> list[ToolDefinition]: ...

    def create_request(
        self, call_id: str, tool_name: str, parameters: dict[str, Any]
    ) -> ToolRequest: ...

    async def execute_tool(self, request: ToolRequest) -> ToolResult: ...

    async def execute_tools(self, requests: list[ToolRequest]) -> list[ToolResult]: ...
