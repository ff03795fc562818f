"""Scoring value objects: annotated tool calls, element matches, delegation, totals."""

from typing import Any

from pydantic import BaseModel, Field


class ToolCallResult(BaseModel, frozen=True):
    """A recorded tool call annotated against the tool expectations."""

    tool_name: str
    parameters: dict[str, Any] = Field(default_factory=dict)
    order: int
    success: bool | None = None
    was_expected: bool = False
    was_forbidden: bool = False


class ElementResult(BaseModel, frozen=True):
    """Whether one response element was found, with the matcher's confidence."""

    element_id: str
    matched: bool
    confidence: float = Field(ge=0.0, le=1.0)
    reasoning: str | None = None


class DelegationDecision(BaseModel, frozen=True):
    """What a supervisor actually decided, parsed from its delegate tool call."""

    delegated: bool
    agent_type: str | None = None
    rationale: str | None = None


class ToolSelectionOutcome(BaseModel, frozen=True):
    score: float = Field(ge=0.0, le=1.0)
    tool_call_results: list[ToolCallResult]


class ScoringResult(BaseModel, frozen=True):
    """All dimension scores of one run; delegation_score is None when not expected."""

    tool_selection_score: float = Field(ge=0.0, le=1.0)
    parameter_score: float = Field(ge=0.0, le=1.0)
    response_quality_score: float = Field(ge=0.0, le=1.0)
    delegation_score: float | None = Field(default=None, ge=0.0, le=1.0)
    overall_score: float = Field(ge=0.0, le=1.0)
    tool_call_results: list[ToolCallResult] = Field(default_factory=list)
    element_results: list[ElementResult] = Field(default_factory=list)
    constraint_violations: list[str] = Field(default_factory=list)
