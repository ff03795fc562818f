"""Error types raised by LLM infrastructure."""

from prompt_eval.core.errors import PromptEvalError


class LLMInvocationError(PromptEvalError):
    """Raised when the LLM cannot be invoked or returns an unusable response."""

    def __init__(self, reason: str, retriable: bool = False) -> None:
        super().__init__(f"Failed to invoke LLM: {reason}", retriable=retriable)


class LLMTimeoutError(PromptEvalError):
    """Raised when a single LLM call exceeds its hard timeout."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(
            f"Failed to invoke LLM: no response within {timeout_seconds:g}s",
            retriable=True,
        )
