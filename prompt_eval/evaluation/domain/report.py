"""ComparisonReport: everything learned from running one definition's variants."""

from pydantic import BaseModel

from prompt_eval.analysis.domain.summary import (
    AggregatedResult,
    ComparisonResult,
    OutlierReport,
)


class ComparisonReport(BaseModel, frozen=True):
    """Baseline results, and when an alternative exists, its results and the test.

    improvement_percent is the percentage change of the mean overall score
    from baseline to alternative.
    """

    evaluation_id: str
    evaluation_name: str
    baseline: AggregatedResult
    alternative: AggregatedResult | None = None
    comparison: ComparisonResult | None = None
    improvement_percent: float | None = None
    baseline_outliers: OutlierReport
    alternative_outliers: OutlierReport | None = None
