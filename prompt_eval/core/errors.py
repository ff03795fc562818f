"""Base exception class for all prompt-eval-specific errors."""


class PromptEvalError(Exception):
    """Base class for all prompt-eval errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable
