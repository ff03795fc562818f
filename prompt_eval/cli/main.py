"""CLI entrypoint for prompt-eval: typer app with run, list, and report commands."""

import asyncio
import json
import sys
import uuid
from datetime import datetime
from pathlib import Path

import structlog
import typer

from prompt_eval.analysis.domain.engine import StatisticsEngine
from prompt_eval.analysis.domain.summary import AggregatedResult
from prompt_eval.cli.output.report import (
    build_result_json,
    parse_result_json,
    render_markdown,
)
from prompt_eval.config.domain.definition import EvaluationDefinition, PromptReference
from prompt_eval.config.domain.llm import LLMConfig
from prompt_eval.config.domain.run_config import RunConfig
from prompt_eval.config.infrastructure.errors import ModelNotConfiguredError
from prompt_eval.config.infrastructure.loader import DefinitionLoader, RunConfigLoader
from prompt_eval.config.infrastructure.observer import StructlogConfigObserver
from prompt_eval.core.errors import PromptEvalError
from prompt_eval.evaluation.application.comparison import ComparisonRunner
from prompt_eval.evaluation.application.runner import EvaluationRunner
from prompt_eval.evaluation.domain.observer import EvaluationObserver
from prompt_eval.evaluation.domain.report import ComparisonReport
from prompt_eval.evaluation.infrastructure.composite_observer import (
    CompositeEvaluationObserver,
)
from prompt_eval.evaluation.infrastructure.observer import StructlogEvaluationObserver
from prompt_eval.evaluation.infrastructure.progress_observer import (
    ProgressEvaluationObserver,
)
from prompt_eval.llm.infrastructure.litellm_client import LiteLLMClient
from prompt_eval.prompts.infrastructure.file_loader import FilePromptLoader
from prompt_eval.scoring.domain.matcher import ElementMatcher
from prompt_eval.scoring.domain.scorer import Scorer
from prompt_eval.scoring.infrastructure.keyword_matcher import KeywordElementMatcher
from prompt_eval.scoring.infrastructure.litellm_matcher import LiteLLMElementMatcher
from prompt_eval.scoring.infrastructure.observer import StructlogMatcherObserver
from prompt_eval.tools.domain.executor import ToolExecutor
from prompt_eval.tools.infrastructure.importer import import_live_executor

app = typer.Typer(add_completion=False)


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _resolve_run_config(
    config_path: Path | None,
    model: str | None,
    runs: int | None,
    max_concurrent: int | None,
    prompts_dir: Path | None,
) -> RunConfig:
    """Load the optional run config file and apply command-line overrides."""
    if config_path is not None:
        config = RunConfigLoader(observer=StructlogConfigObserver()).load(
            path=config_path
        )
    elif model is not None:
        config = RunConfig(llm=LLMConfig(model=model))
    else:
        raise ModelNotConfiguredError()

    execution_updates: dict[str, int] = {}
    if runs is not None:
        execution_updates["runs"] = runs
    if max_concurrent is not None:
        execution_updates["max_concurrent"] = max_concurrent

    return RunConfig(
        llm=config.llm.model_copy(update={"model": model}) if model else config.llm,
        execution=config.execution.model_copy(update=execution_updates),
        prompts_dir=prompts_dir if prompts_dir is not None else config.prompts_dir,
    )


def _with_alternative(
    definition: EvaluationDefinition, alternative_prompt: Path | None
) -> EvaluationDefinition:
    if alternative_prompt is None:
        return definition
    reference = PromptReference(source="file", prompt=str(alternative_prompt.resolve()))
    return definition.model_copy(update={"alternative": reference})


def _output_stem(evaluation_id: str) -> str:
    """Build the output file stem: {evaluation_id}_{YYYYMMDD}_{short_id}."""
    date_str = datetime.now().strftime("%Y%m%d")
    return f"{evaluation_id}_{date_str}_{uuid.uuid4().hex[:8]}"


# ---------------------------------------------------------------------------
# ANSI helpers
# ---------------------------------------------------------------------------
_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_CYAN = "\033[36m"
_YELLOW = "\033[33m"
_GREEN = "\033[32m"
_RED = "\033[31m"
_BLUE = "\033[34m"
_WHITE = "\033[97m"

_RECOMMENDATION_COLORS: dict[str, str] = {
    "adopt-alternative": _GREEN,
    "keep-baseline": _RED,
    "inconclusive": _YELLOW,
}


def _score_color(score: float) -> str:
    if score >= 0.8:
        return _GREEN
    if score >= 0.5:
        return _YELLOW
    return _RED


def _rule(width: int = 72, color: str = _DIM) -> None:
    typer.echo(f"{color}{'─' * width}{_RESET}")


def _print_variant(
    title: str, aggregated: AggregatedResult, engine: StatisticsEngine
) -> None:
    typer.echo("")
    _rule(color=_BLUE)
    typer.echo(f"{_BLUE}{_BOLD}  {title}{_RESET}  {_DIM}{len(aggregated.runs)} runs{_RESET}")
    _rule(color=_BLUE)

    metrics = [
        ("Tool selection", aggregated.tool_selection_score),
        ("Response quality", aggregated.response_quality_score),
        ("Overall", aggregated.overall_score),
    ]
    metric_w = max(len(label) for label, _ in metrics)
    for label, summary in metrics:
        color = _score_color(score=summary.mean)
        filled = round(summary.mean * 10)
        bar = f"{color}{'█' * filled}{_DIM}{'░' * (10 - filled)}{_RESET}"
        typer.echo(
            f"  {_WHITE}{label:<{metric_w}}{_RESET}"
            f"  {color}{engine.format_summary(summary)}{_RESET}  {bar}"
        )
    latency = aggregated.latency_ms
    typer.echo(
        f"  {_DIM}{'Latency':<{metric_w}}  {latency.mean:.0f} ms"
        f" (median {latency.median:.0f} ms){_RESET}"
    )

    for element_id, rate in aggregated.element_pass_rates.items():
        color = _score_color(score=rate)
        typer.echo(f"  {_DIM}element{_RESET} {element_id}: {color}{rate:.0%}{_RESET}")


def _print_summary(
    report: ComparisonReport, output_path: Path, engine: StatisticsEngine
) -> None:
    """Print a colorized summary of a comparison report to stdout."""
    typer.echo("")
    _rule(color=_CYAN)
    typer.echo(f"{_CYAN}{_BOLD}  prompt-eval  ·  {report.evaluation_name}{_RESET}")
    _rule(color=_CYAN)
    typer.echo(f"  {_DIM}Evaluation ID{_RESET}  {_WHITE}{report.evaluation_id}{_RESET}")
    typer.echo(f"  {_DIM}Results JSON {_RESET}  {_WHITE}{output_path}{_RESET}")

    _print_variant(title="Baseline", aggregated=report.baseline, engine=engine)
    if report.alternative is not None:
        _print_variant(title="Alternative", aggregated=report.alternative, engine=engine)

    comparison = report.comparison
    if comparison is not None:
        color = _RECOMMENDATION_COLORS.get(comparison.recommendation, _WHITE)
        typer.echo("")
        _rule(color=_BLUE)
        typer.echo(
            f"  {_DIM}difference{_RESET} {comparison.overall_score_difference:+.3f}"
            f"  {_DIM}improvement{_RESET} {report.improvement_percent or 0.0:+.1f}%"
            f"  {_DIM}p{_RESET} {comparison.p_value:.4f}"
            f"  {_DIM}d{_RESET} {comparison.effect_size:.2f}"
            f" ({comparison.effect_size_interpretation})"
        )
        typer.echo(f"  {color}{_BOLD}Recommendation: {comparison.recommendation}{_RESET}")

    typer.echo("")
    _rule(color=_CYAN)
    typer.echo("")


def _build_matcher(semantic: bool, llm: LLMConfig) -> ElementMatcher:
    if semantic:
        return LiteLLMElementMatcher(config=llm, observer=StructlogMatcherObserver())
    return KeywordElementMatcher()


@app.command()
def run(
    definition_path: Path = typer.Argument(..., help="Path to an evaluation definition"),
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Run config YAML (model, execution settings)"
    ),
    runs: int | None = typer.Option(None, "--runs", "-n", min=1, help="Runs per variant"),
    model: str | None = typer.Option(None, "--model", "-m", help="LiteLLM model name"),
    max_concurrent: int | None = typer.Option(
        None, "--max-concurrent", min=1, help="Runs executing at once per variant"
    ),
    prompts_dir: Path | None = typer.Option(
        None, "--prompts-dir", help="Directory holding prompt files"
    ),
    alternative_prompt: Path | None = typer.Option(
        None, "--alternative-prompt", help="Prompt file to compare against the baseline"
    ),
    tools: str | None = typer.Option(
        None, "--tools", help="Live tool executor as 'module:attribute'"
    ),
    semantic: bool = typer.Option(
        False, "--semantic", help="Match response elements with the LLM"
    ),
    output_dir: Path = typer.Option(
        Path("./results"),
        "--output-dir",
        "-o",
        help="Directory for output files",
    ),
    log_format: str = typer.Option(
        "console",
        "--log-format",
        help="Log format: 'console' or 'json'",
    ),
) -> None:
    """Run an evaluation definition and compare its baseline and alternative prompts."""
    try:
        _configure_structlog(log_format=log_format)

        config = _resolve_run_config(
            config_path=config_path,
            model=model,
            runs=runs,
            max_concurrent=max_concurrent,
            prompts_dir=prompts_dir,
        )
        definition = DefinitionLoader(observer=StructlogConfigObserver()).load(
            path=definition_path
        )
        definition = _with_alternative(
            definition=definition, alternative_prompt=alternative_prompt
        )
        live_executor: ToolExecutor | None = (
            import_live_executor(tools) if tools is not None else None
        )

        output_dir.mkdir(parents=True, exist_ok=True)

        observers: list[EvaluationObserver] = [StructlogEvaluationObserver()]
        if log_format != "json":
            observers.append(ProgressEvaluationObserver())
        evaluation_observer = CompositeEvaluationObserver(observers=observers)

        engine = StatisticsEngine()
        runner = EvaluationRunner(
            llm_client=LiteLLMClient(config=config.llm),
            prompt_loader=FilePromptLoader(prompts_dir=config.prompts_dir),
            scorer=Scorer(matcher=_build_matcher(semantic=semantic, llm=config.llm)),
            observer=evaluation_observer,
            execution=config.execution,
            live_executor=live_executor,
        )
        comparison_runner = ComparisonRunner(
            runner=runner,
            engine=engine,
            observer=evaluation_observer,
            execution=config.execution,
        )

        report = asyncio.run(comparison_runner.compare(definition=definition))

        output_path = output_dir / f"{_output_stem(report.evaluation_id)}.json"
        output_path.write_text(
            json.dumps(build_result_json(report=report, config=config), indent=2),
            encoding="utf-8",
        )
        _print_summary(report=report, output_path=output_path, engine=engine)

    except typer.Exit:
        raise
    except KeyboardInterrupt:
        typer.echo("Evaluation interrupted.")
        sys.exit(1)
    except PromptEvalError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.")
        sys.exit(1)


@app.command("list")
def list_definitions(
    directory: Path = typer.Argument(..., help="Directory to search for definitions"),
    target: str | None = typer.Option(None, "--target", help="Only this target"),
    tags: list[str] = typer.Option([], "--tag", help="Only definitions with any tag"),
    log_format: str = typer.Option(
        "console", "--log-format", help="Log format: 'console' or 'json'"
    ),
) -> None:
    """List evaluation definitions found under a directory."""
    _configure_structlog(log_format=log_format)
    loader = DefinitionLoader(observer=StructlogConfigObserver())
    found = loader.discover(directory=directory, target=target, tags=tags or None)
    if not found:
        typer.echo("No evaluation definitions found.")
        return

    id_w = max(len(definition.metadata.id) for _, definition in found)
    for path, definition in found:
        tag_text = ", ".join(definition.metadata.tags) or "-"
        typer.echo(
            f"  {_WHITE}{definition.metadata.id:<{id_w}}{_RESET}"
            f"  {definition.metadata.name}"
            f"  {_DIM}[{definition.metadata.target}, {definition.tool_mode}]"
            f" tags: {tag_text}  {path}{_RESET}"
        )


@app.command()
def report(
    results_path: Path = typer.Argument(..., help="Results JSON written by 'run'"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write Markdown here instead of stdout"
    ),
) -> None:
    """Render a Markdown report from a results JSON file."""
    try:
        data = json.loads(results_path.read_text(encoding="utf-8"))
        comparison_report = parse_result_json(data)
    except (OSError, ValueError, KeyError) as exc:
        typer.echo(f"Failed to read results file {results_path}: {exc}")
        raise typer.Exit(code=1) from exc

    markdown = render_markdown(report=comparison_report, engine=StatisticsEngine())
    if output is None:
        typer.echo(markdown)
        return
    output.write_text(markdown, encoding="utf-8")
    typer.echo(f"Report written to {output}")


if __name__ == "__main__":
    app()
