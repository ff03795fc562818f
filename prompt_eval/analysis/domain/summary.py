"""Statistical value objects produced by the StatisticsEngine."""

from typing import Literal

from pydantic import BaseModel, Field

from prompt_eval.evaluation.domain.result import SingleRunResult, Variant

type EffectSizeInterpretation = Literal["negligible", "small", "medium", "large"]
type Recommendation = Literal["adopt-alternative", "keep-baseline", "inconclusive"]


class StatisticalSummary(BaseModel, frozen=True):
    """Descriptive statistics of one metric; std_dev is the N-1 sample deviation."""

    mean: float
    median: float
    std_dev: float
    min: float
    max: float
    confidence_interval: tuple[float, float]
    samples: list[float] = Field(default_factory=list)


class AggregatedResult(BaseModel, frozen=True):
    """All runs of one variant with per-metric summaries and element pass rates."""

    variant: Variant
    runs: list[SingleRunResult]
    tool_selection_score: StatisticalSummary
    response_quality_score: StatisticalSummary
    overall_score: StatisticalSummary
    latency_ms: StatisticalSummary
    element_pass_rates: dict[str, float] = Field(default_factory=dict)


class ComparisonResult(BaseModel, frozen=True):
    """Welch's t-test of overall scores, alternative against baseline.

    overall_score_difference and effect_size are positive when the
    alternative scores higher.
    """

    p_value: float
    t_statistic: float
    degrees_of_freedom: float
    is_significant: bool
    effect_size: float
    effect_size_interpretation: EffectSizeInterpretation
    overall_score_difference: float
    recommendation: Recommendation


class OutlierReport(BaseModel, frozen=True):
    indices: list[int] = Field(default_factory=list)
    method: str
    lower_fence: float | None = None
    upper_fence: float | None = None
