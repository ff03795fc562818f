"""Error types raised by tool infrastructure."""

from prompt_eval.core.errors import PromptEvalError


class MockedOutputMissingError(PromptEvalError):
    """Raised when a mocked run requests a tool that has no declared output."""

    def __init__(self, tool_name: str, available: list[str]) -> None:
        self.tool_name = tool_name
        known = ", ".join(sorted(available)) or "none"
        super().__init__(
            f"Failed to execute mocked tool: no mocked output for '{tool_name}'"
            f" (mocked tools: {known})"
        )


class LiveExecutorUnavailableError(PromptEvalError):
    """Raised when a live or capture run has no live tool executor to call."""

    def __init__(self, tool_mode: str) -> None:
        super().__init__(
            f"Failed to build tool executor: tool mode '{tool_mode}' requires a"
            " live tool executor but none was configured"
        )


class ToolTimeoutError(PromptEvalError):
    """Raised when a single tool call exceeds its hard timeout."""

    def __init__(self, tool_name: str, timeout_seconds: float) -> None:
        super().__init__(
            f"Failed to execute tool: '{tool_name}' timed out after"
            f" {timeout_seconds:g}s"
        )


class LiveExecutorImportError(PromptEvalError):
    """Raised when a 'module:attribute' live executor reference cannot be resolved."""

    def __init__(self, reference: str, reason: str) -> None:
        super().__init__(
            f"Failed to import live tool executor '{reference}': {reason}"
        )
