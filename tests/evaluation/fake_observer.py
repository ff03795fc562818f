"""FakeEvaluationObserver: records evaluation domain events for assertion in tests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ComparisonStartedEvent:
    evaluation_id: str
    variants: list[str]
    runs_per_variant: int
    max_concurrent: int


@dataclass(frozen=True)
class ComparisonCompletedEvent:
    evaluation_id: str
    recommendation: str | None
    improvement_percent: float | None


@dataclass(frozen=True)
class BatchStartedEvent:
    evaluation_id: str
    variant: str
    total_runs: int


@dataclass(frozen=True)
class BatchProgressEvent:
    evaluation_id: str
    variant: str
    completed: int
    total: int


@dataclass(frozen=True)
class BatchCompletedEvent:
    evaluation_id: str
    variant: str
    total_runs: int
    failed_runs: int


@dataclass(frozen=True)
class RunStartedEvent:
    evaluation_id: str
    run_id: str
    variant: str
    tool_mode: str


@dataclass(frozen=True)
class RunCompletedEvent:
    evaluation_id: str
    run_id: str
    variant: str
    overall_score: float
    tool_call_count: int


@dataclass(frozen=True)
class RunFailedEvent:
    evaluation_id: str
    run_id: str
    variant: str
    reason: str


@dataclass(frozen=True)
class ToolIterationsExhaustedEvent:
    evaluation_id: str
    run_id: str
    max_iterations: int


@dataclass(frozen=True)
class PromptFallbackUsedEvent:
    evaluation_id: str
    variant: str
    target: str
    reason: str


@dataclass(frozen=True)
class ProgressCallbackFailedEvent:
    evaluation_id: str
    variant: str
    reason: str


class FakeEvaluationObserver:
    """Records all emitted evaluation events as typed frozen dataclasses.

    Use in tests to assert which events were emitted and with what data,
    without mocking or patching.
    """

    def __init__(self) -> None:
        self.comparisons_started: list[ComparisonStartedEvent] = []
        self.comparisons_completed: list[ComparisonCompletedEvent] = []
        self.batches_started: list[BatchStartedEvent] = []
        self.progress: list[BatchProgressEvent] = []
        self.batches_completed: list[BatchCompletedEvent] = []
        self.started: list[RunStartedEvent] = []
        self.completed: list[RunCompletedEvent] = []
        self.failed: list[RunFailedEvent] = []
        self.exhausted: list[ToolIterationsExhaustedEvent] = []
        self.fallbacks: list[PromptFallbackUsedEvent] = []
        self.callback_failures: list[ProgressCallbackFailedEvent] = []

    def comparison_started(
        self,
        evaluation_id: str,
        variants: list[str],
        runs_per_variant: int,
        max_concurrent: int,
    ) -> None:
        self.comparisons_started.append(
            ComparisonStartedEvent(
                evaluation_id=evaluation_id,
                variants=variants,
                runs_per_variant=runs_per_variant,
                max_concurrent=max_concurrent,
            )
        )

    def comparison_completed(
        self,
        evaluation_id: str,
        recommendation: str | None,
        improvement_percent: float | None,
        elapsed_seconds: float,
    ) -> None:
        self.comparisons_completed.append(
            ComparisonCompletedEvent(
                evaluation_id=evaluation_id,
                recommendation=recommendation,
                improvement_percent=improvement_percent,
            )
        )

    def batch_started(self, evaluation_id: str, variant: str, total_runs: int) -> None:
        self.batches_started.append(
            BatchStartedEvent(
                evaluation_id=evaluation_id, variant=variant, total_runs=total_runs
            )
        )

    def batch_progress(
        self, evaluation_id: str, variant: str, completed: int, total: int
    ) -> None:
        self.progress.append(
            BatchProgressEvent(
                evaluation_id=evaluation_id,
                variant=variant,
                completed=completed,
                total=total,
            )
        )

    def batch_completed(
        self,
        evaluation_id: str,
        variant: str,
        total_runs: int,
        failed_runs: int,
        elapsed_seconds: float,
    ) -> None:
        self.batches_completed.append(
            BatchCompletedEvent(
                evaluation_id=evaluation_id,
                variant=variant,
                total_runs=total_runs,
                failed_runs=failed_runs,
            )
        )

    def run_started(
        self, evaluation_id: str, run_id: str, variant: str, tool_mode: str
    ) -> None:
        self.started.append(
            RunStartedEvent(
                evaluation_id=evaluation_id,
                run_id=run_id,
                variant=variant,
                tool_mode=tool_mode,
            )
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
        self.completed.append(
            RunCompletedEvent(
                evaluation_id=evaluation_id,
                run_id=run_id,
                variant=variant,
                overall_score=overall_score,
                tool_call_count=tool_call_count,
            )
        )

    def run_failed(
        self, evaluation_id: str, run_id: str, variant: str, reason: str
    ) -> None:
        self.failed.append(
            RunFailedEvent(
                evaluation_id=evaluation_id,
                run_id=run_id,
                variant=variant,
                reason=reason,
            )
        )

    def tool_iterations_exhausted(
        self, evaluation_id: str, run_id: str, max_iterations: int
    ) -> None:
        self.exhausted.append(
            ToolIterationsExhaustedEvent(
                evaluation_id=evaluation_id,
                run_id=run_id,
                max_iterations=max_iterations,
            )
        )

    def prompt_fallback_used(
        self, evaluation_id: str, variant: str, target: str, reason: str
    ) -> None:
        self.fallbacks.append(
            PromptFallbackUsedEvent(
                evaluation_id=evaluation_id,
                variant=variant,
                target=target,
                reason=reason,
            )
        )

    def progress_callback_failed(
        self, evaluation_id: str, variant: str, reason: str
    ) -> None:
        self.callback_failures.append(
            ProgressCallbackFailedEvent(
                evaluation_id=evaluation_id, variant=variant, reason=reason
            )
        )
