"""StructlogEvaluationObserver: production observer that delegates to structlog."""

import structlog


class StructlogEvaluationObserver:
    """Logs evaluation domain events to structlog.

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def comparison_started(
        self,
        evaluation_id: str,
        variants: list[str],
        runs_per_variant: int,
        max_concurrent: int,
    ) -> None:
        self._log.info(
            "comparison.started",
            evaluation_id=evaluation_id,
            variants=variants,
            runs_per_variant=runs_per_variant,
            max_concurrent=max_concurrent,
        )

    def comparison_completed(
        self,
        evaluation_id: str,
        recommendation: str | None,
        improvement_percent: float | None,
        elapsed_seconds: float,
    ) -> None:
        self._log.info(
            "comparison.completed",
            evaluation_id=evaluation_id,
            recommendation=recommendation,
            improvement_percent=(
                round(improvement_percent, 2)
                if improvement_percent is not None
                else None
            ),
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def batch_started(self, evaluation_id: str, variant: str, total_runs: int) -> None:
        self._log.info(
            "batch.started",
            evaluation_id=evaluation_id,
            variant=variant,
            total_runs=total_runs,
        )

    def batch_progress(
        self, evaluation_id: str, variant: str, completed: int, total: int
    ) -> None:
        self._log.info(
            "batch.progress",
            evaluation_id=evaluation_id,
            variant=variant,
            completed=completed,
            total=total,
            percent=round(100.0 * completed / total, 1) if total else 0.0,
        )

    def batch_completed(
        self,
        evaluation_id: str,
        variant: str,
        total_runs: int,
        failed_runs: int,
        elapsed_seconds: float,
    ) -> None:
        self._log.info(
            "batch.completed",
            evaluation_id=evaluation_id,
            variant=variant,
            total_runs=total_runs,
            failed_runs=failed_runs,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def run_started(
        self, evaluation_id: str, run_id: str, variant: str, tool_mode: str
    ) -> None:
        self._log.info(
            "run.started",
            evaluation_id=evaluation_id,
            run_id=run_id,
            variant=variant,
            tool_mode=tool_mode,
        )

    def run_completed(
        self,
        evaluation_id: str,
        run_id: str,
        variant: str,
        overall_score: float,
        latency_ms: int,
        tool_call_count: int,
    ) -> None:
        self._log.info(
            "run.completed",
            evaluation_id=evaluation_id,
            run_id=run_id,
            variant=variant,
            overall_score=round(overall_score, 3),
            latency_ms=latency_ms,
            tool_call_count=tool_call_count,
        )

    def run_failed(
        self, evaluation_id: str, run_id: str, variant: str, reason: str
    ) -> None:
        self._log.error(
            "run.failed",
            evaluation_id=evaluation_id,
            run_id=run_id,
            variant=variant,
            reason=reason,
        )

    def tool_iterations_exhausted(
        self, evaluation_id: str, run_id: str, max_iterations: int
    ) -> None:
        self._log.warning(
            "run.tool_iterations_exhausted",
            evaluation_id=evaluation_id,
            run_id=run_id,
            max_iterations=max_iterations,
        )

    def prompt_fallback_used(
        self, evaluation_id: str, variant: str, target: str, reason: str
    ) -> None:
        self._log.warning(
            "run.prompt_fallback_used",
            evaluation_id=evaluation_id,
            variant=variant,
            target=target,
            reason=reason,
        )

    def progress_callback_failed(
        self, evaluation_id: str, variant: str, reason: str
    ) -> None:
        self._log.warning(
            "batch.progress_callback_failed",
            evaluation_id=evaluation_id,
            variant=variant,
            reason=reason,
        )
