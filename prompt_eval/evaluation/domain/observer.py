"""Observer port for the evaluation domain: defines events in domain language."""

from typing import Protocol


class EvaluationObserver(Protocol):
    """Observer port emitting structured events while runs execute.

    Implementations may log to structlog, render progress, or record for tests.
    """

    def comparison_started(
        self,
        evaluation_id: str,
        variants: list[str],
        runs_per_variant: int,
        max_concurrent: int,
    ) -> None: ...

    def comparison_completed(
        self,
        evaluation_id: str,
        recommendation: str | None,
        improvement_percent: float | None,
        elapsed_seconds: float,
    ) -> None: ...

    def batch_started(self, evaluation_id: str, variant: str, total_runs: int) -> None: ...

    def batch_progress(
        self, evaluation_id: str, variant: str, completed: int, total: int
    ) -> None: ...

    def batch_completed(
        self,
        evaluation_id: str,
        variant: str,
        total_runs: int,
        failed_runs: int,
        elapsed_seconds: float,
    ) -> None: ...

    def run_started(
        self, evaluation_id: str, run_id: str, variant: str, tool_mode: str
    ) -> None: ...

    def run_completed(
        self,
        evaluation_id: str,
        run_id: str,
        variant: str,
        overall_score: float,
        latency_ms: int,
        tool_call_count: int,
    ) -> None: ...

    def run_failed(
        self, evaluation_id: str, run_id: str, variant: str, reason: str
    ) -> None: ...

    def tool_iterations_exhausted(
        self, evaluation_id: str, run_id: str, max_iterations: int
    ) -> None: ...

    def prompt_fallback_used(
        self, evaluation_id: str, variant: str, target: str, reason: str
    ) -> None: ...

    def progress_callback_failed(
        self, evaluation_id: str, variant: str, reason: str
    ) -> None: ...
