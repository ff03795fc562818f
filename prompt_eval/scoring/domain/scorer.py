"""Scorer: turns a raw run plus declarative expectations into dimension scores.

Every scoring rule is a public, pure function so it can be tested and reused
on its own; Scorer only composes them and asks the ElementMatcher for element
confidences.
"""

import re
from typing import Any

from prompt_eval.config.domain.definition import (
    DelegationExpectations,
    EvaluationDefinition,
    ParameterExpectation,
    ResponseConstraints,
    ResponseElement,
    ToolExpectations,
)
from prompt_eval.scoring.domain.matcher import ElementMatcher
from prompt_eval.scoring.domain.outcome import (
    DelegationDecision,
    ElementResult,
    ScoringResult,
    ToolCallResult,
    ToolSelectionOutcome,
)
from prompt_eval.tools.domain.recorded_call import RecordedToolCall

FORBIDDEN_TOOL_PENALTY = 0.5
CONSTRAINT_VIOLATION_PENALTY = 0.25

# Delegation score components; an aligned decision never drops below the base.
_DELEGATION_ALIGNED_BASE = 0.85
_DELEGATION_AGENT_TYPE_BONUS = 0.10
_DELEGATION_RATIONALE_BONUS = 0.05


def _clamp(value: float) -> float:
    return min(1.0, max(0.0, value))


def score_tool_selection(
    expectations: ToolExpectations | None, calls: list[RecordedToolCall]
) -> ToolSelectionOutcome:
    """Score which tools were called against the expected and forbidden lists.

    The score is the fraction of required tools that were called, minus
    FORBIDDEN_TOOL_PENALTY for each distinct forbidden tool that was called.
    Declaring no expectations at all yields 1.0.
    """
    expected_names = (
        {tool.name for tool in expectations.expected_tools} if expectations else set()
    )
    forbidden = set(expectations.forbidden_tools) if expectations else set()

    results = [
        ToolCallResult(
            tool_name=call.tool_name,
            parameters=call.parameters,
            order=call.order,
            success=call.result.success if call.result is not None else None,
            was_expected=call.tool_name in expected_names,
            was_forbidden=call.tool_name in forbidden,
        )
        for call in calls
    ]

    if not expected_names and not forbidden:
        return ToolSelectionOutcome(score=1.0, tool_call_results=results)

    assert expectations is not None
    called = {call.tool_name for call in calls}
    required = [tool.name for tool in expectations.expected_tools if tool.required]
    score = (
        sum(1 for name in required if name in called) / len(required)
        if required
        else 1.0
    )
    score -= FORBIDDEN_TOOL_PENALTY * len(forbidden & called)
    return ToolSelectionOutcome(score=_clamp(score), tool_call_results=results)


def _strict_equals(actual: Any, expected: Any) -> bool:
    # bool is an int subclass; True must not equal 1 here.
    if isinstance(actual, bool) or isinstance(expected, bool):
        return (
            isinstance(actual, bool)
            and isinstance(expected, bool)
            and actual == expected
        )
    comparable = type(actual) is type(expected) or (
        isinstance(actual, int | float) and isinstance(expected, int | float)
    )
    return comparable and actual == expected


def _contains(actual: Any, expected: Any) -> bool:
    if expected is None:
        return False
    return str(expected).lower() in str(actual).lower()


def match_parameter_value(actual: Any, expectation: ParameterExpectation) -> bool:
    """Return True when actual satisfies the expectation's match semantics.

    "semantic" has no similarity model behind it and matches like "contains".
    """
    match_type = expectation.resolved_match_type
    if match_type == "exact":
        return _strict_equals(actual, expectation.expected)
    if match_type in ("contains", "semantic"):
        return _contains(actual, expectation.expected)
    if match_type == "regex":
        if not expectation.pattern:
            return False
        try:
            return re.search(expectation.pattern, str(actual)) is not None
        except re.error:
            return False
    # range
    if isinstance(actual, bool) or not isinstance(actual, int | float):
        return False
    if expectation.min is not None and actual < expectation.min:
        return False
    if expectation.max is not None and actual > expectation.max:
        return False
    return True


def score_parameters(
    actual: dict[str, Any], expected: dict[str, ParameterExpectation]
) -> float:
    """Fraction of expected fields present in actual and matching; 1.0 if none expected."""
    if not expected:
        return 1.0
    matched = sum(
        1
        for field, expectation in expected.items()
        if field in actual and match_parameter_value(actual[field], expectation)
    )
    return matched / len(expected)


def score_parameter_expectations(
    expectations: ToolExpectations | None, calls: list[RecordedToolCall]
) -> float:
    """Average, over expected tools declaring parameters, of their best-matching call.

    An expected tool that was never called contributes 0.
    """
    if expectations is None:
        return 1.0
    declared = [tool for tool in expectations.expected_tools if tool.parameters]
    if not declared:
        return 1.0

    total = 0.0
    for tool in declared:
        total += max(
            (
                score_parameters(call.parameters, tool.parameters)
                for call in calls
                if call.tool_name == tool.name
            ),
            default=0.0,
        )
    return total / len(declared)


def check_constraints(
    constraints: ResponseConstraints | None, response: str
) -> list[str]:
    """Return one message per violated text constraint."""
    if constraints is None:
        return []

    violations: list[str] = []
    length = len(response)
    if constraints.max_length is not None and length > constraints.max_length:
        violations.append(
            f"Response length {length} exceeds max length {constraints.max_length}"
        )
    if constraints.min_length is not None and length < constraints.min_length:
        violations.append(
            f"Response length {length} below min length {constraints.min_length}"
        )
    for pattern in constraints.forbidden_patterns:
        if pattern in response:
            violations.append(f"Response contains forbidden pattern: {pattern}")
    return violations


def score_delegation(
    expectations: DelegationExpectations, decision: DelegationDecision | None
) -> float:
    """Score a delegation decision; adding a correct signal never lowers the score."""
    delegated = decision is not None and decision.delegated
    if delegated != expectations.should_delegate:
        return 0.0
    if not expectations.should_delegate:
        return 1.0

    assert decision is not None
    score = _DELEGATION_ALIGNED_BASE

    expected_type = expectations.expected_agent_type
    if expected_type is None or (
        decision.agent_type is not None
        and decision.agent_type.lower() == expected_type.lower()
    ):
        score += _DELEGATION_AGENT_TYPE_BONUS

    keywords = expectations.delegation_rationale_should_mention
    if keywords:
        rationale = (decision.rationale or "").lower()
        mentioned = sum(1 for keyword in keywords if keyword.lower() in rationale)
        score += _DELEGATION_RATIONALE_BONUS * mentioned / len(keywords)
    else:
        score += _DELEGATION_RATIONALE_BONUS

    return _clamp(score)


def calculate_element_score(
    elements: list[ResponseElement], results: list[ElementResult]
) -> float:
    """Weighted mean of element confidences; 0 when there is nothing to check."""
    total_weight = sum(element.weight for element in elements)
    if not elements or total_weight <= 0:
        return 0.0
    confidence = {result.element_id: result.confidence for result in results}
    weighted = sum(
        confidence.get(element.id, 0.0) * element.weight for element in elements
    )
    return weighted / total_weight


def combine_scores(
    scores: dict[str, float | None], weights: dict[str, float]
) -> float:
    """Weighted mean over the dimensions that have a score; missing weights are 1.0."""
    available = {name: value for name, value in scores.items() if value is not None}
    total_weight = sum(weights.get(name, 1.0) for name in available)
    if total_weight <= 0:
        return 0.0
    weighted = sum(value * weights.get(name, 1.0) for name, value in available.items())
    return _clamp(weighted / total_weight)


class Scorer:
    """Scores one run of an EvaluationDefinition across all dimensions."""

    def __init__(self, matcher: ElementMatcher) -> None:
        self._matcher = matcher

    async def score(
        self,
        definition: EvaluationDefinition,
        response: str,
        calls: list[RecordedToolCall],
        decision: DelegationDecision | None,
    ) -> ScoringResult:
        selection = score_tool_selection(definition.tool_expectations, calls)
        parameter_score = score_parameter_expectations(
            definition.tool_expectations, calls
        )

        expectations = definition.response_expectations
        violations = check_constraints(
            expectations.constraints if expectations else None, response
        )
        required = expectations.required_elements if expectations else []
        optional = expectations.optional_elements if expectations else []
        element_results = (
            await self._matcher.match(response, required + optional)
            if required or optional
            else []
        )
        # Optional elements are reported but only required ones are scored.
        element_score = (
            calculate_element_score(required, element_results) if required else 1.0
        )
        quality = _clamp(
            element_score
            * max(0.0, 1.0 - CONSTRAINT_VIOLATION_PENALTY * len(violations))
        )

        delegation_score = (
            score_delegation(definition.delegation_expectations, decision)
            if definition.delegation_expectations is not None
            else None
        )

        weights = definition.scoring
        overall = combine_scores(
            scores={
                "tool_selection": selection.score,
                "parameters": parameter_score,
                "response_quality": quality,
                "delegation": delegation_score,
            },
            weights={
                "tool_selection": weights.tool_selection.weight,
                "parameters": weights.parameters.weight,
                "response_quality": weights.response_quality.weight,
                "delegation": weights.delegation.weight,
            },
        )

        return ScoringResult(
            tool_selection_score=selection.score,
            parameter_score=parameter_score,
            response_quality_score=quality,
            delegation_score=delegation_score,
            overall_score=overall,
            tool_call_results=selection.tool_call_results,
            element_results=element_results,
            constraint_violations=violations,
        )
