"""RecordedToolCall: one entry of a RecordingToolExecutor's call log."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from prompt_eval.tools.domain.tool import ToolResult


class RecordedToolCall(BaseModel, frozen=True):
    """Immutable record of a tool call as it was executed during a run.

    order is an instance-local counter, not wall-clock time: it is unique and
    strictly increasing within one recording executor.
    """

    tool_name: str
    parameters: dict[str, Any]
    timestamp: datetime
    order: int
    result: ToolResult | None = None
