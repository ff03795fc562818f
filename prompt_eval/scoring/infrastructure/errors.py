"""Error types raised by scoring infrastructure."""

from prompt_eval.core.errors import PromptEvalError


class ElementMatchingError(PromptEvalError):
    """Raised when the semantic matcher cannot be invoked or returns an unparseable verdict."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to match response elements: {reason}")
