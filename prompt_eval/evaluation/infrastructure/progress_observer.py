"""ProgressEvaluationObserver: live per-variant run progress and running scores on stderr."""

from __future__ import annotations

import statistics
import sys
from dataclasses import dataclass, field

from rich.console import Console, Group
from rich.live import Live
from rich.progress import (
    Progress,
    ProgressColumn,
    Task,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)
from rich.text import Text

_OVERALL = "Overall"
_BAR_WIDTH = 40

_VARIANT_STYLES: dict[str, str] = {
    "baseline": "cyan",
    "alternative": "magenta",
}

# (glyph, style) for finished, running and pending runs.
_DONE = ("█", "bright_green")
_RUNNING = ("▒", "grey50")
_PENDING = ("░", "dim white")


@dataclass
class _RowState:
    """Counters behind one progress row."""

    total: int
    done: int = 0
    running: int = 0
    failed: int = 0
    scores: list[float] = field(default_factory=list)

    @property
    def mean_score(self) -> float | None:
        return statistics.mean(self.scores) if self.scores else None


class _RunBarColumn(ProgressColumn):
    """Finished, running and pending runs as one proportional bar."""

    def render(self, task: Task) -> Text:
        total = int(task.total or 0)
        if total <= 0:
            return Text(_PENDING[0] * _BAR_WIDTH, style=_PENDING[1])
        done = min(_BAR_WIDTH, int(task.completed / total * _BAR_WIDTH))
        running = min(
            _BAR_WIDTH - done,
            int(int(task.fields.get("running", 0)) / total * _BAR_WIDTH),
        )
        bar = Text()
        bar.append(_DONE[0] * done, style=_DONE[1])
        bar.append(_RUNNING[0] * running, style=_RUNNING[1])
        bar.append(_PENDING[0] * (_BAR_WIDTH - done - running), style=_PENDING[1])
        return bar


class _RunCountColumn(ProgressColumn):
    """'done+running/total', followed by the failure count when there is one."""

    def render(self, task: Task) -> Text:
        failed = int(task.fields.get("failed", 0))
        text = Text.assemble(
            (str(int(task.completed)), _DONE[1]),
            ("+", "dim white"),
            (str(task.fields.get("running", 0)), _RUNNING[1]),
            (f"/{int(task.total or 0)}", "default"),
        )
        if failed:
            text.append(f" {failed} failed", style="red")
        return text


class _MeanScoreColumn(ProgressColumn):
    """Running mean overall score of the finished runs."""

    def render(self, task: Task) -> Text:
        mean = task.fields.get("mean_score")
        if mean is None:
            return Text("score  --  ", style="dim white")
        style = "green" if mean >= 0.8 else "yellow" if mean >= 0.5 else "red"
        return Text.assemble(("score ", "dim white"), (f"{mean:.3f}", style))


class ProgressEvaluationObserver:
    """One Rich progress row per variant plus an Overall row, rendered on stderr.

    Rows are created on comparison_started and torn down on
    comparison_completed. run_started marks a run as running, run_completed
    and run_failed record its outcome, and batch_progress moves it to done.

    With disabled=True the counters are kept but nothing is rendered.

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self, disabled: bool = False) -> None:
        self._disabled = disabled
        self._rows: dict[str, _RowState] = {}
        self._task_ids: dict[str, TaskID] = {}
        self._progress: Progress | None = None
        self._live: Live | None = None

    def done(self, key: str) -> int:
        row = self._rows.get(key)
        return row.done if row else 0

    def inflight(self, key: str) -> int:
        row = self._rows.get(key)
        return row.running if row else 0

    def failed(self, key: str) -> int:
        row = self._rows.get(key)
        return row.failed if row else 0

    def mean_score(self, key: str) -> float | None:
        row = self._rows.get(key)
        return row.mean_score if row else None

    def _label(self, name: str, width: int) -> str:
        padded = f"{name:<{width}}"
        if name == _OVERALL:
            return f"[bold]{padded}[/bold]"
        style = _VARIANT_STYLES.get(name)
        if style is None or not sys.stderr.isatty():
            return padded
        return f"[{style}]{padded}[/{style}]"

    def _apply(self, variant: str, **changes: int) -> None:
        """Add each change to the variant's row and the Overall row, then redraw."""
        for key in (variant, _OVERALL):
            row = self._rows.get(key)
            if row is None:
                continue
            for name, delta in changes.items():
                setattr(row, name, max(0, getattr(row, name) + delta))
            self._redraw(key=key, row=row)

    def _record_score(self, variant: str, score: float) -> None:
        for key in (variant, _OVERALL):
            row = self._rows.get(key)
            if row is not None:
                row.scores.append(score)
                self._redraw(key=key, row=row)

    def _redraw(self, key: str, row: _RowState) -> None:
        if self._disabled or self._progress is None or key not in self._task_ids:
            return
        self._progress.update(
            self._task_ids[key],
            completed=row.done,
            running=row.running,
            failed=row.failed,
            mean_score=row.mean_score,
        )

    def comparison_started(
        self,
        evaluation_id: str,
        variants: list[str],
        runs_per_variant: int,
        max_concurrent: int,
    ) -> None:
        self._rows = {name: _RowState(total=runs_per_variant) for name in variants}
        self._rows[_OVERALL] = _RowState(total=runs_per_variant * len(variants))
        self._task_ids = {}
        self._progress = None
        self._live = None
        if self._disabled:
            return

        console = Console(stderr=True)
        width = max(len(name) for name in self._rows)
        self._progress = Progress(
            TextColumn("{task.description}"),
            _RunBarColumn(),
            _RunCountColumn(),
            _MeanScoreColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=False,
        )
        for name, row in self._rows.items():
            self._task_ids[name] = self._progress.add_task(
                description=self._label(name=name, width=width),
                total=float(row.total),
                running=0,
                failed=0,
                mean_score=None,
            )

        legend = Text.assemble(
            f"  {evaluation_id}:  ",
            _DONE,
            " finished  ",
            _RUNNING,
            " running  ",
            _PENDING,
            " pending",
        )
        self._live = Live(
            Group(self._progress, Text(""), legend),
            console=console,
            refresh_per_second=10,
        )
        self._live.start()

    def comparison_completed(
        self,
        evaluation_id: str,
        recommendation: str | None,
        improvement_percent: float | None,
        elapsed_seconds: float,
    ) -> None:
        if self._live is not None:
            self._live.stop()
        self._task_ids = {}
        self._progress = None
        self._live = None

    def batch_started(self, evaluation_id: str, variant: str, total_runs: int) -> None:
        pass

    def batch_progress(
        self, evaluation_id: str, variant: str, completed: int, total: int
    ) -> None:
        self._apply(variant, done=1, running=-1)

    def batch_completed(
        self,
        evaluation_id: str,
        variant: str,
        total_runs: int,
        failed_runs: int,
        elapsed_seconds: float,
    ) -> None:
        pass

    def run_started(
        self, evaluation_id: str, run_id: str, variant: str, tool_mode: str
    ) -> None:
        self._apply(variant, running=1)

    def run_completed(
        self,
        evaluation_id: str,
        run_id: str,
        variant: str,
        overall_score: float,
        latency_ms: int,
        tool_call_count: int,
    ) -> None:
        self._record_score(variant, overall_score)

    def run_failed(
        self, evaluation_id: str, run_id: str, variant: str, reason: str
    ) -> None:
        self._apply(variant, failed=1)

    def tool_iterations_exhausted(
        self, evaluation_id: str, run_id: str, max_iterations: int
    ) -> None:
        pass

    def prompt_fallback_used(
        self, evaluation_id: str, variant: str, target: str, reason: str
    ) -> None:
        pass

    def progress_callback_failed(
        self, evaluation_id: str, variant: str, reason: str
    ) -> None:
        pass
