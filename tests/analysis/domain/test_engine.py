"""Tests for StatisticsEngine."""

from datetime import UTC, datetime

import pytest

from prompt_eval.analysis.domain.engine import StatisticsEngine
from prompt_eval.analysis.domain.summary import AggregatedResult
from prompt_eval.evaluation.domain.result import SingleRunResult, Variant
from prompt_eval.scoring.domain.outcome import ElementResult

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_run(
    overall: float,
    variant: Variant = "baseline",
    latency_ms: int = 100,
    elements: dict[str, bool] | None = None,
) -> SingleRunResult:
    return SingleRunResult(
        run_id=f"run-{overall}",
        timestamp=datetime(2026, 1, 1, tzinfo=UTC),
        variant=variant,
        raw_response="response",
        tool_selection_score=overall,
        parameter_score=1.0,
        response_quality_score=overall,
        overall_score=overall,
        latency_ms=latency_ms,
        element_results=[
            ElementResult(element_id=k, matched=v, confidence=1.0 if v else 0.0)
            for k, v in (elements or {}).items()
        ],
    )


def _aggregate(scores: list[float], variant: Variant = "baseline") -> AggregatedResult:
    engine = StatisticsEngine()
    return engine.aggregate_results([_make_run(s, variant) for s in scores], variant)


# ---------------------------------------------------------------------------
# Descriptive statistics
# ---------------------------------------------------------------------------


class TestSummarize:
    def test_empty_samples(self) -> None:
        summary = StatisticsEngine().summarize([])
        assert summary.mean == 0.0
        assert summary.std_dev == 0.0
        assert summary.confidence_interval == (0.0, 0.0)

    def test_single_sample_has_degenerate_interval(self) -> None:
        summary = StatisticsEngine().summarize([0.7])
        assert summary.mean == 0.7
        assert summary.std_dev == 0.0
        assert summary.confidence_interval == (0.7, 0.7)

    def test_sample_statistics(self) -> None:
        summary = StatisticsEngine().summarize([1.0, 2.0, 3.0, 4.0])
        assert summary.mean == pytest.approx(2.5)
        assert summary.median == pytest.approx(2.5)
        assert summary.std_dev == pytest.approx(1.2909944)
        assert summary.min == 1.0
        assert summary.max == 4.0
        assert summary.samples == [1.0, 2.0, 3.0, 4.0]

    def test_textbook_sample(self) -> None:
        summary = StatisticsEngine().summarize([2.0, 4.0, 4.0, 4.0, 5.0, 5.0, 7.0, 9.0])
        assert summary.mean == pytest.approx(5.0)
        assert summary.median == pytest.approx(4.5)
        assert summary.std_dev == pytest.approx(2.138, abs=1e-3)
        assert summary.min == 2.0
        assert summary.max == 9.0

    def test_confidence_interval_uses_t_distribution(self) -> None:
        summary = StatisticsEngine().summarize([1.0, 2.0, 3.0, 4.0])
        low, high = summary.confidence_interval
        # t(0.975, 3) = 3.1824
        margin = 3.182446 * 1.2909944 / 2
        assert low == pytest.approx(2.5 - margin, rel=1e-4)
        assert high == pytest.approx(2.5 + margin, rel=1e-4)

    def test_wider_confidence_level_widens_interval(self) -> None:
        samples = [0.2, 0.4, 0.5, 0.9]
        narrow = StatisticsEngine(confidence_level=0.80).summarize(samples)
        wide = StatisticsEngine(confidence_level=0.99).summarize(samples)
        assert wide.confidence_interval[0] < narrow.confidence_interval[0]
        assert wide.confidence_interval[1] > narrow.confidence_interval[1]


class TestFormatSummary:
    def test_format(self) -> None:
        engine = StatisticsEngine()
        assert engine.format_summary(engine.summarize([0.5])) == (
            "0.500 ± 0.000 [0.500, 0.500]"
        )


# ---------------------------------------------------------------------------
# Welch's t-test
# ---------------------------------------------------------------------------


class TestWelchTTest:
    def test_clearly_better_alternative_is_adopted(self) -> None:
        baseline = _aggregate([0.3, 0.31, 0.29, 0.32, 0.28])
        alternative = _aggregate([0.9, 0.91, 0.89, 0.92, 0.88], "alternative")

        result = StatisticsEngine().welch_t_test(baseline, alternative)

        assert result.is_significant is True
        assert result.p_value < 0.001
        assert result.t_statistic < 0
        assert result.effect_size > 0
        assert result.effect_size_interpretation == "large"
        assert result.overall_score_difference == pytest.approx(0.6)
        assert result.recommendation == "adopt-alternative"

    def test_clearly_worse_alternative_keeps_baseline(self) -> None:
        baseline = _aggregate([0.9, 0.91, 0.89, 0.92, 0.88])
        alternative = _aggregate([0.3, 0.31, 0.29, 0.32, 0.28], "alternative")

        result = StatisticsEngine().welch_t_test(baseline, alternative)

        assert result.t_statistic > 0
        assert result.effect_size < 0
        assert result.recommendation == "keep-baseline"

    def test_identical_groups_are_inconclusive(self) -> None:
        baseline = _aggregate([0.5, 0.6, 0.7])
        alternative = _aggregate([0.5, 0.6, 0.7], "alternative")

        result = StatisticsEngine().welch_t_test(baseline, alternative)

        assert result.p_value == 1.0
        assert result.t_statistic == 0.0
        assert result.recommendation == "inconclusive"

    def test_noisy_overlap_is_inconclusive(self) -> None:
        baseline = _aggregate([0.2, 0.8, 0.5, 0.4])
        alternative = _aggregate([0.3, 0.7, 0.6, 0.4], "alternative")

        result = StatisticsEngine().welch_t_test(baseline, alternative)

        assert result.is_significant is False
        assert result.recommendation == "inconclusive"

    def test_zero_variance_groups_stay_finite(self) -> None:
        baseline = _aggregate([0.5, 0.5, 0.5])
        alternative = _aggregate([0.8, 0.8, 0.8], "alternative")

        result = StatisticsEngine().welch_t_test(baseline, alternative)

        assert 0.0 <= result.p_value <= 1.0
        assert result.recommendation != "keep-baseline"

    def test_single_sample_is_inconclusive(self) -> None:
        baseline = _aggregate([0.5])
        alternative = _aggregate([0.9, 0.95], "alternative")

        result = StatisticsEngine().welch_t_test(baseline, alternative)

        assert result.p_value == 1.0
        assert result.degrees_of_freedom == 0.0
        assert result.is_significant is False
        assert result.recommendation == "inconclusive"
        assert result.overall_score_difference == pytest.approx(0.425)

    def test_stricter_significance_level(self) -> None:
        baseline = _aggregate([0.5, 0.55, 0.6, 0.52])
        alternative = _aggregate([0.6, 0.65, 0.7, 0.62], "alternative")
        engine = StatisticsEngine()

        loose = engine.welch_t_test(baseline, alternative, significance_level=0.5)
        strict = engine.welch_t_test(baseline, alternative, significance_level=1e-9)

        assert loose.p_value == strict.p_value
        assert loose.is_significant is True
        assert strict.is_significant is False


class TestInterpretEffectSize:
    @pytest.mark.parametrize(
        ("d", "expected"),
        [
            (0.1, "negligible"),
            (0.3, "small"),
            (0.6, "medium"),
            (1.0, "large"),
            (-1.5, "large"),
            (-0.3, "small"),
        ],
    )
    def test_thresholds(self, d: float, expected: str) -> None:
        assert StatisticsEngine().interpret_effect_size(d) == expected


# ---------------------------------------------------------------------------
# Outliers and improvement
# ---------------------------------------------------------------------------


class TestDetectOutliers:
    def test_flags_far_value(self) -> None:
        report = StatisticsEngine().detect_outliers([10, 11, 10, 12, 11, 10, 11, 100])
        assert report.method == "IQR"
        assert report.indices == [7]
        assert report.upper_fence is not None and report.upper_fence < 100

    def test_no_outliers(self) -> None:
        report = StatisticsEngine().detect_outliers([1.0, 2.0, 3.0, 4.0, 5.0])
        assert report.indices == []

    def test_insufficient_data(self) -> None:
        report = StatisticsEngine().detect_outliers([1, 2, 3])
        assert report.indices == []
        assert report.method == "insufficient data (n<4)"
        assert report.lower_fence is None


class TestPercentageImprovement:
    @pytest.mark.parametrize(
        ("baseline", "updated", "expected"),
        [
            (0.5, 0.75, 50.0),
            (0.8, 0.4, -50.0),
            (0.0, 0.5, 100.0),
            (0.0, 0.0, 0.0),
        ],
    )
    def test_cases(self, baseline: float, updated: float, expected: float) -> None:
        assert StatisticsEngine().percentage_improvement(baseline, updated) == (
            pytest.approx(expected)
        )


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------


class TestAggregateResults:
    def test_summaries_per_metric(self) -> None:
        runs = [_make_run(0.4, latency_ms=100), _make_run(0.6, latency_ms=300)]
        aggregated = StatisticsEngine().aggregate_results(runs, "baseline")

        assert aggregated.variant == "baseline"
        assert aggregated.runs == runs
        assert aggregated.overall_score.mean == pytest.approx(0.5)
        assert aggregated.latency_ms.mean == pytest.approx(200.0)

    def test_element_pass_rate_counts_missing_as_failure(self) -> None:
        runs = [
            _make_run(1.0, elements={"version": True, "date": True}),
            _make_run(0.5, elements={"version": True, "date": False}),
            _make_run(0.0),
            _make_run(0.5, elements={"version": False}),
        ]
        aggregated = StatisticsEngine().aggregate_results(runs, "baseline")

        assert aggregated.element_pass_rates == {
            "version": pytest.approx(0.5),
            "date": pytest.approx(0.25),
        }

    def test_no_runs(self) -> None:
        aggregated = StatisticsEngine().aggregate_results([], "alternative")
        assert aggregated.runs == []
        assert aggregated.overall_score.mean == 0.0
        assert aggregated.element_pass_rates == {}
