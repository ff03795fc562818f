"""ElementMatcher Protocol: judges which response elements a response contains."""

from typing import Protocol

from prompt_eval.config.domain.definition import ResponseElement
from prompt_eval.scoring.domain.outcome import ElementResult


class ElementMatcher(Protocol):
    """Returns one ElementResult per element, in element order."""

    async def match(
        self, response: str, elements: list[ResponseElement]
    ) -> list[ElementResult]: ...
