"""ComparisonRunner: runs baseline and alternative, then tests the difference."""

import time

from prompt_eval.analysis.domain.engine import StatisticsEngine
from prompt_eval.config.domain.definition import EvaluationDefinition
from prompt_eval.config.domain.execution import ExecutionConfig
from prompt_eval.evaluation.application.runner import EvaluationRunner, ProgressCallback
from prompt_eval.evaluation.domain.observer import EvaluationObserver
from prompt_eval.evaluation.domain.report import ComparisonReport


class ComparisonRunner:
    """Produces a ComparisonReport for one definition.

    The baseline always runs. The alternative runs only when the definition
    declares one; otherwise the report carries baseline results alone.
    """

    def __init__(
        self,
        runner: EvaluationRunner,
        engine: StatisticsEngine,
        observer: EvaluationObserver,
        execution: ExecutionConfig,
    ) -> None:
        self._runner = runner
        self._engine = engine
        self._observer = observer
        self._execution = execution

    async def compare(
        self,
        definition: EvaluationDefinition,
        on_progress: ProgressCallback | None = None,
    ) -> ComparisonReport:
        evaluation_id = definition.metadata.id
        runs = self._execution.runs
        variants = ["baseline"]
        if definition.alternative is not None:
            variants.append("alternative")

        self._observer.comparison_started(
            evaluation_id=evaluation_id,
            variants=variants,
            runs_per_variant=runs,
            max_concurrent=self._execution.max_concurrent,
        )
        started_at = time.monotonic()

        baseline_runs = await self._runner.execute_multiple_runs(
            definition=definition,
            variant="baseline",
            count=runs,
            on_progress=on_progress,
        )
        baseline = self._engine.aggregate_results(baseline_runs, "baseline")
        baseline_outliers = self._engine.detect_outliers(baseline.overall_score.samples)

        if definition.alternative is None:
            self._observer.comparison_completed(
                evaluation_id=evaluation_id,
                recommendation=None,
                improvement_percent=None,
                elapsed_seconds=time.monotonic() - started_at,
            )
            return ComparisonReport(
                evaluation_id=evaluation_id,
                evaluation_name=definition.metadata.name,
                baseline=baseline,
                baseline_outliers=baseline_outliers,
            )

        alternative_runs = await self._runner.execute_multiple_runs(
            definition=definition,
            variant="alternative",
            count=runs,
            on_progress=on_progress,
        )
        alternative = self._engine.aggregate_results(alternative_runs, "alternative")
        comparison = self._engine.welch_t_test(
            baseline,
            alternative,
            significance_level=self._execution.significance_level,
        )
        improvement = self._engine.percentage_improvement(
            baseline.overall_score.mean, alternative.overall_score.mean
        )

        self._observer.comparison_completed(
            evaluation_id=evaluation_id,
            recommendation=comparison.recommendation,
            improvement_percent=improvement,
            elapsed_seconds=time.monotonic() - started_at,
        )
        return ComparisonReport(
            evaluation_id=evaluation_id,
            evaluation_name=definition.metadata.name,
            baseline=baseline,
            alternative=alternative,
            comparison=comparison,
            improvement_percent=improvement,
            baseline_outliers=baseline_outliers,
            alternative_outliers=self._engine.detect_outliers(
                alternative.overall_score.samples
            ),
        )
