"""SingleRunResult: the scored outcome of one run of one variant."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from prompt_eval.llm.domain.message import TokenUsage
from prompt_eval.scoring.domain.outcome import (
    DelegationDecision,
    ElementResult,
    ToolCallResult,
)
from prompt_eval.tools.domain.mocked_output import MockedToolOutput

type Variant = Literal["baseline", "alternative"]


class SingleRunResult(BaseModel, frozen=True):
    """One run's raw response, annotated tool calls, and dimension scores.

    delegation_score is None when the definition declares no delegation
    expectations. captured_snapshots is only set for capture-mode runs.
    """

    run_id: str
    timestamp: datetime
    variant: Variant
    raw_response: str

    tool_calls: list[ToolCallResult] = Field(default_factory=list)
    tool_selection_score: float = Field(ge=0.0, le=1.0)
    parameter_score: float = Field(ge=0.0, le=1.0)
    response_quality_score: float = Field(ge=0.0, le=1.0)
    delegation_score: float | None = Field(default=None, ge=0.0, le=1.0)
    overall_score: float = Field(ge=0.0, le=1.0)

    element_results: list[ElementResult] = Field(default_factory=list)
    constraint_violations: list[str] = Field(default_factory=list)
    latency_ms: int = Field(ge=0)
    token_usage: TokenUsage = Field(default_factory=TokenUsage)
    delegation_decision: DelegationDecision | None = None
    captured_snapshots: dict[str, MockedToolOutput] | None = None
