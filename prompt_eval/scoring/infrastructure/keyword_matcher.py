"""KeywordElementMatcher: deterministic, offline element matching by keyword presence."""

import re

from prompt_eval.config.domain.definition import ResponseElement
from prompt_eval.scoring.domain.outcome import ElementResult

MATCH_THRESHOLD = 0.5

_WORD = re.compile(r"[a-z0-9]+")
# Description words shorter than this carry too little signal to match on.
_MIN_DESCRIPTION_WORD = 4


class KeywordElementMatcher:
    """Scores each element by the fraction of its keywords found in the response.

    Matching is case-insensitive. An element without keywords falls back to the
    significant words of its description. Satisfies ElementMatcher structurally.
    """

    async def match(
        self, response: str, elements: list[ResponseElement]
    ) -> list[ElementResult]:
        text = response.lower()
        return [self._match_one(text, element) for element in elements]

    def _match_one(self, text: str, element: ResponseElement) -> ElementResult:
        terms = [keyword.lower() for keyword in element.keywords if keyword.strip()]
        if not terms:
            terms = [
                word
                for word in _WORD.findall(element.description.lower())
                if len(word) >= _MIN_DESCRIPTION_WORD
            ]
        if not terms:
            return ElementResult(
                element_id=element.id,
                matched=False,
                confidence=0.0,
                reasoning="No keywords or description to match against",
            )

        found = [term for term in terms if term in text]
        confidence = len(found) / len(terms)
        return ElementResult(
            element_id=element.id,
            matched=confidence >= MATCH_THRESHOLD,
            confidence=confidence,
            reasoning=f"Found {len(found)} of {len(terms)} terms: {', '.join(found) or 'none'}",
        )
