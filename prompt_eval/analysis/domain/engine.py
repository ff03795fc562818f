"""StatisticsEngine: descriptive statistics, Welch's t-test, effect sizes, outliers.

Every method is total: degenerate inputs (no samples, one sample, zero
variance, zero baseline) return well-defined sentinels instead of raising or
producing NaN.
"""

import math
import statistics

from scipy import stats

from prompt_eval.analysis.domain.summary import (
    AggregatedResult,
    ComparisonResult,
    EffectSizeInterpretation,
    OutlierReport,
    Recommendation,
    StatisticalSummary,
)
from prompt_eval.evaluation.domain.result import SingleRunResult, Variant

DEFAULT_SIGNIFICANCE_LEVEL = 0.05
OUTLIER_MIN_SAMPLES = 4
IQR_MULTIPLIER = 1.5

# Keeps t, d and p finite when a group has zero variance.
_VARIANCE_FLOOR = 1e-12


def _sample_std_dev(samples: list[float]) -> float:
    """Return sample stddev for N >= 2, else 0.0."""
    if len(samples) < 2:
        return 0.0
    return statistics.stdev(samples)


class StatisticsEngine:
    """Stateless statistics over the runs of an evaluation."""

    def __init__(self, confidence_level: float = 0.95) -> None:
        self._confidence_level = confidence_level

    def summarize(self, samples: list[float]) -> StatisticalSummary:
        n = len(samples)
        if n == 0:
            return StatisticalSummary(
                mean=0.0,
                median=0.0,
                std_dev=0.0,
                min=0.0,
                max=0.0,
                confidence_interval=(0.0, 0.0),
                samples=[],
            )

        mean = statistics.mean(samples)
        std_dev = _sample_std_dev(samples)
        if n == 1:
            interval = (mean, mean)
        else:
            critical = stats.t.ppf((1 + self._confidence_level) / 2, n - 1)
            margin = float(critical) * std_dev / math.sqrt(n)
            interval = (mean - margin, mean + margin)

        return StatisticalSummary(
            mean=mean,
            median=statistics.median(samples),
            std_dev=std_dev,
            min=min(samples),
            max=max(samples),
            confidence_interval=interval,
            samples=list(samples),
        )

    def welch_t_test(
        self,
        baseline: AggregatedResult,
        alternative: AggregatedResult,
        significance_level: float = DEFAULT_SIGNIFICANCE_LEVEL,
    ) -> ComparisonResult:
        """Compare overall scores with Welch's unequal-variance t-test.

        The t statistic is baseline minus alternative, so a negative t means
        the alternative scored higher. Fewer than two samples in either group
        yields an inconclusive result with p_value 1.0.
        """
        base = baseline.overall_score.samples
        alt = alternative.overall_score.samples
        difference = alternative.overall_score.mean - baseline.overall_score.mean

        if len(base) < 2 or len(alt) < 2:
            return ComparisonResult(
                p_value=1.0,
                t_statistic=0.0,
                degrees_of_freedom=0.0,
                is_significant=False,
                effect_size=0.0,
                effect_size_interpretation="negligible",
                overall_score_difference=difference,
                recommendation="inconclusive",
            )

        n_base, n_alt = len(base), len(alt)
        mean_base, mean_alt = statistics.mean(base), statistics.mean(alt)
        var_base = max(statistics.variance(base), _VARIANCE_FLOOR)
        var_alt = max(statistics.variance(alt), _VARIANCE_FLOOR)

        se_base = var_base / n_base
        se_alt = var_alt / n_alt
        denominator = se_base**2 / (n_base - 1) + se_alt**2 / (n_alt - 1)
        dof = (
            (se_base + se_alt) ** 2 / denominator
            if denominator > 0
            else float(n_base + n_alt - 2)
        )

        if mean_base == mean_alt:
            t_statistic = 0.0
            p_value = 1.0
        else:
            t_statistic = (mean_base - mean_alt) / math.sqrt(se_base + se_alt)
            p_value = min(1.0, float(2 * stats.t.sf(abs(t_statistic), dof)))

        pooled = math.sqrt(
            ((n_base - 1) * var_base + (n_alt - 1) * var_alt) / (n_base + n_alt - 2)
        )
        effect_size = (mean_alt - mean_base) / pooled
        is_significant = p_value < significance_level

        recommendation: Recommendation
        if not is_significant or mean_alt == mean_base:
            recommendation = "inconclusive"
        elif mean_alt > mean_base:
            recommendation = "adopt-alternative"
        else:
            recommendation = "keep-baseline"

        return ComparisonResult(
            p_value=p_value,
            t_statistic=t_statistic,
            degrees_of_freedom=dof,
            is_significant=is_significant,
            effect_size=effect_size,
            effect_size_interpretation=self.interpret_effect_size(effect_size),
            overall_score_difference=difference,
            recommendation=recommendation,
        )

    def interpret_effect_size(self, d: float) -> EffectSizeInterpretation:
        magnitude = abs(d)
        if magnitude < 0.2:
            return "negligible"
        if magnitude < 0.5:
            return "small"
        if magnitude < 0.8:
            return "medium"
        return "large"

    def detect_outliers(self, samples: list[float]) -> OutlierReport:
        """Flag samples outside the Tukey fences Q1 - 1.5*IQR and Q3 + 1.5*IQR."""
        if len(samples) < OUTLIER_MIN_SAMPLES:
            return OutlierReport(
                method=f"insufficient data (n<{OUTLIER_MIN_SAMPLES})"
            )

        q1, _, q3 = statistics.quantiles(samples, n=4, method="inclusive")
        iqr = q3 - q1
        lower = q1 - IQR_MULTIPLIER * iqr
        upper = q3 + IQR_MULTIPLIER * iqr
        return OutlierReport(
            indices=[i for i, value in enumerate(samples) if value < lower or value > upper],
            method="IQR",
            lower_fence=lower,
            upper_fence=upper,
        )

    def percentage_improvement(self, baseline: float, updated: float) -> float:
        if baseline == 0:
            if updated > 0:
                return 100.0
            if updated < 0:
                return -100.0
            return 0.0
        return (updated - baseline) / baseline * 100

    def aggregate_results(
        self, runs: list[SingleRunResult], variant: Variant
    ) -> AggregatedResult:
        """Summarize each metric across runs and compute per-element pass rates.

        An element's pass rate is the number of runs in which it matched divided
        by the total number of runs, so runs that never reported it count as
        failures.
        """
        matched_counts: dict[str, int] = {}
        for run in runs:
            for element in run.element_results:
                matched_counts.setdefault(element.element_id, 0)
                if element.matched:
                    matched_counts[element.element_id] += 1

        pass_rates = {
            element_id: count / len(runs) for element_id, count in matched_counts.items()
        }

        return AggregatedResult(
            variant=variant,
            runs=list(runs),
            tool_selection_score=self.summarize(
                [run.tool_selection_score for run in runs]
            ),
            response_quality_score=self.summarize(
                [run.response_quality_score for run in runs]
            ),
            overall_score=self.summarize([run.overall_score for run in runs]),
            latency_ms=self.summarize([float(run.latency_ms) for run in runs]),
            element_pass_rates=pass_rates,
        )

    def format_summary(self, summary: StatisticalSummary) -> str:
        low, high = summary.confidence_interval
        return f"{summary.mean:.3f} ± {summary.std_dev:.3f} [{low:.3f}, {high:.3f}]"
