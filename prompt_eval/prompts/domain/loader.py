"""PromptLoader Protocol: resolves prompt references to system-prompt text."""

from typing import Protocol

from prompt_eval.config.domain.definition import PromptReference


class PromptLoader(Protocol):
    def load(self, reference: PromptReference) -> str: ...

    def load_for_target(self, target: str) -> str: ...
