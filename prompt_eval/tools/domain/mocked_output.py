"""MockedToolOutput: typed fixtures for mocked tool execution, and capture snapshots."""

from typing import Any, Literal

from pydantic import BaseModel

from prompt_eval.tools.domain.recorded_call import RecordedToolCall


class MockedToolSuccess(BaseModel, frozen=True):
    success: Literal[True] = True
    output: Any = None


class MockedToolFailure(BaseModel, frozen=True):
    success: Literal[False] = False
    error: str


type MockedToolOutput = MockedToolSuccess | MockedToolFailure


def build_snapshots(calls: list[RecordedToolCall]) -> dict[str, MockedToolOutput]:
    """Condense recorded calls into one mocked output per tool name.

    Calls are visited in order so the most recent result for a tool wins.
    Calls without a result are skipped.
    """
    snapshots: dict[str, MockedToolOutput] = {}
    for call in sorted(calls, key=lambda c: c.order):
        if call.result is None:
            continue
        if call.result.success:
            snapshots[call.tool_name] = MockedToolSuccess(output=call.result.output)
        else:
            snapshots[call.tool_name] = MockedToolFailure(
                error=call.result.error or "unknown error"
            )
    return snapshots
