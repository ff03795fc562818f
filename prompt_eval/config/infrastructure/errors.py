"""Error types raised by config infrastructure."""

from pathlib import Path

from prompt_eval.core.errors import PromptEvalError


class MissingEnvVarsError(PromptEvalError):
    """Raised when one or more referenced environment variables are not set."""

    def __init__(self, missing_vars: list[str]) -> None:
        self.missing_vars = missing_vars
        var_list = ", ".join(sorted(missing_vars))
        super().__init__(
            f"Failed to load definition: missing environment variables: {var_list}"
        )


class DefinitionValidationError(PromptEvalError):
    """Raised when a definition or run config does not match its schema."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to validate {path}: {reason}")


class DefinitionLoadError(PromptEvalError):
    """Raised when a definition or config file cannot be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to load {path}: {reason}")


class ModelNotConfiguredError(PromptEvalError):
    """Raised when neither a run config file nor the command line names an LLM model."""

    def __init__(self) -> None:
        super().__init__(
            "Failed to configure run: no LLM model given; pass --model or"
            " provide a --config file with llm.model"
        )
