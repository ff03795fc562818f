"""Error types raised by prompt infrastructure."""

from prompt_eval.core.errors import PromptEvalError


class PromptNotFoundError(PromptEvalError):
    """Raised when a prompt reference or target has no prompt file."""

    def __init__(self, name: str, searched: str) -> None:
        super().__init__(f"Failed to load prompt: '{name}' not found in {searched}")
