"""Error types raised while running evaluations."""

from prompt_eval.core.errors import PromptEvalError


class AlternativePromptMissingError(PromptEvalError):
    """Raised when the alternative variant is requested but none is defined."""

    def __init__(self, evaluation_id: str) -> None:
        super().__init__(
            f"Failed to load alternative prompt: evaluation '{evaluation_id}'"
            " defines no alternative"
        )
