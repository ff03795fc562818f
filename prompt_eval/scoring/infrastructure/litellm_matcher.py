"""LiteLLMElementMatcher: semantic element matching with an LLM via LiteLLM."""

import json
import time

import litellm
from pydantic import BaseModel, Field

from prompt_eval.config.domain.definition import ResponseElement
from prompt_eval.config.domain.llm import LLMConfig
from prompt_eval.scoring.domain.observer import MatcherObserver
from prompt_eval.scoring.domain.outcome import ElementResult
from prompt_eval.scoring.infrastructure.errors import ElementMatchingError

_SYSTEM_PROMPT = """\
You are an expert evaluator checking whether an AI assistant's response contains \
specific required elements. For each element you are given an id, a description \
of what the response should contain, and optional keywords that hint at it.

Judge each element on meaning, not wording: paraphrases count, keyword presence \
alone does not. Give a confidence between 0.0 and 1.0 that the element is present \
and a one-sentence reasoning grounded in the response text.

## Output Format

Respond with a JSON object containing:
- verdicts: list with one entry per element, each with
  - element_id: the element's id, exactly as given
  - matched: true if the element is present
  - confidence: number between 0.0 and 1.0
  - reasoning: brief explanation
"""


class ElementVerdict(BaseModel, frozen=True):
    element_id: str
    matched: bool
    confidence: float
    reasoning: str = ""


class ElementVerdicts(BaseModel, frozen=True):
    verdicts: list[ElementVerdict] = Field(default_factory=list)


class LiteLLMElementMatcher:
    """ElementMatcher that asks an LLM which elements a response contains.

    Elements the model leaves out of its verdict are reported as unmatched.
    """

    def __init__(self, config: LLMConfig, observer: MatcherObserver) -> None:
        self._config = config
        self._observer = observer

    async def match(
        self, response: str, elements: list[ResponseElement]
    ) -> list[ElementResult]:
        """Invoke the LLM and return one ElementResult per element, in input order.

        Raises:
            ElementMatchingError: if the LLM call fails or the verdict cannot
                be parsed.
        """
        if not elements:
            return []

        self._observer.matching_started(
            model=self._config.model, element_count=len(elements)
        )

        element_listing = json.dumps(
            [
                {
                    "element_id": element.id,
                    "description": element.description,
                    "keywords": element.keywords,
                }
                for element in elements
            ],
            indent=2,
        )
        user_message = (
            f"## Elements\n{element_listing}\n\n## Response\n{response}"
        )

        start = time.monotonic()
        try:
            completion = await litellm.acompletion(
                model=self._config.model,
                temperature=self._config.temperature,
                response_format=ElementVerdicts,
                messages=[
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {"role": "user", "content": user_message},
                ],
            )
        except Exception as exc:
            reason = str(exc)
            self._observer.matching_failed(model=self._config.model, reason=reason)
            raise ElementMatchingError(reason=reason) from exc

        duration_ms = int((time.monotonic() - start) * 1000)

        raw_content: str = completion.choices[0].message.content
        try:
            parsed = ElementVerdicts.model_validate_json(raw_content)
        except Exception as exc:
            reason = f"Failed to parse matcher response: {exc}"
            self._observer.matching_failed(model=self._config.model, reason=reason)
            raise ElementMatchingError(reason=reason) from exc

        by_id = {verdict.element_id: verdict for verdict in parsed.verdicts}
        results: list[ElementResult] = []
        for element in elements:
            verdict = by_id.get(element.id)
            if verdict is None:
                results.append(
                    ElementResult(
                        element_id=element.id,
                        matched=False,
                        confidence=0.0,
                        reasoning="Element missing from matcher verdict",
                    )
                )
                continue
            results.append(
                ElementResult(
                    element_id=element.id,
                    matched=verdict.matched,
                    confidence=min(1.0, max(0.0, verdict.confidence)),
                    reasoning=verdict.reasoning or None,
                )
            )

        self._observer.matching_completed(
            model=self._config.model,
            duration_ms=duration_ms,
            matched=sum(1 for result in results if result.matched),
        )
        return results
