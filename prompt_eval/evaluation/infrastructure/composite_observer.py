"""CompositeEvaluationObserver: fans out all events to a list of observers."""

from prompt_eval.evaluation.domain.observer import EvaluationObserver


class CompositeEvaluationObserver:
    """Delegates every observer event to each observer in order.

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[EvaluationObserver]) -> None:
        self._observers = observers

    def comparison_started(
        self,
        evaluation_id: str,
        variants: list[str],
        runs_per_variant: int,
        max_concurrent: int,
    ) -> None:
        for observer in self._observers:
            observer.comparison_started(
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
        for observer in self._observers:
            observer.comparison_completed(
                evaluation_id=evaluation_id,
                recommendation=recommendation,
                improvement_percent=improvement_percent,
                elapsed_seconds=elapsed_seconds,
            )

    def batch_started(self, evaluation_id: str, variant: str, total_runs: int) -> None:
        for observer in self._observers:
            observer.batch_started(
                evaluation_id=evaluation_id, variant=variant, total_runs=total_runs
            )

    def batch_progress(
        self, evaluation_id: str, variant: str, completed: int, total: int
    ) -> None:
        for observer in self._observers:
            observer.batch_progress(
                evaluation_id=evaluation_id,
                variant=variant,
                completed=completed,
                total=total,
            )

    def batch_completed(
        self,
        evaluation_id: str,
        variant: str,
        total_runs: int,
        failed_runs: int,
        elapsed_seconds: float,
    ) -> None:
        for observer in self._observers:
            observer.batch_completed(
                evaluation_id=evaluation_id,
                variant=variant,
                total_runs=total_runs,
                failed_runs=failed_runs,
                elapsed_seconds=elapsed_seconds,
            )

    def run_started(
        self, evaluation_id: str, run_id: str, variant: str, tool_mode: str
    ) -> None:
        for observer in self._observers:
            observer.run_started(
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
        for observer in self._observers:
            observer.run_completed(
                evaluation_id=evaluation_id,
                run_id=run_id,
                variant=variant,
                overall_score=overall_score,
                latency_ms=latency_ms,
                tool_call_count=tool_call_count,
            )

    def run_failed(
        self, evaluation_id: str, run_id: str, variant: str, reason: str
    ) -> None:
        for observer in self._observers:
            observer.run_failed(
                evaluation_id=evaluation_id,
                run_id=run_id,
                variant=variant,
                reason=reason,
            )

    def tool_iterations_exhausted(
        self, evaluation_id: str, run_id: str, max_iterations: int
    ) -> None:
        for observer in self._observers:
            observer.tool_iterations_exhausted(
                evaluation_id=evaluation_id,
                run_id=run_id,
                max_iterations=max_iterations,
            )

    def prompt_fallback_used(
        self, evaluation_id: str, variant: str, target: str, reason: str
    ) -> None:
        for observer in self._observers:
            observer.prompt_fallback_used(
                evaluation_id=evaluation_id,
                variant=variant,
                target=target,
                reason=reason,
            )

    def progress_callback_failed(
        self, evaluation_id: str, variant: str, reason: str
    ) -> None:
        for observer in self._observers:
            observer.progress_callback_failed(
                evaluation_id=evaluation_id, variant=variant, reason=reason
            )
