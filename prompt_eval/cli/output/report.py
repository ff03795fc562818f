"""Result file serialization and Markdown rendering of a ComparisonReport."""

import time
from importlib.metadata import PackageNotFoundError, version
from typing import Any

from prompt_eval.analysis.domain.engine import StatisticsEngine
from prompt_eval.analysis.domain.summary import AggregatedResult, OutlierReport
from prompt_eval.config.domain.run_config import RunConfig
from prompt_eval.evaluation.domain.report import ComparisonReport

type JsonDict = dict[str, Any]

SCHEMA_VERSION = "1.0"


def _prompt_eval_version() -> str:
    try:
        return version("prompt-eval")
    except PackageNotFoundError:
        return "dev"


def build_result_json(report: ComparisonReport, config: RunConfig) -> JsonDict:
    """Wrap a report with the settings that produced it."""
    return {
        "schema_version": SCHEMA_VERSION,
        "retrieved_timestamp": str(time.time()),
        "prompt_eval_version": _prompt_eval_version(),
        "llm": config.llm.model_dump(mode="json"),
        "execution": config.execution.model_dump(mode="json"),
        "report": report.model_dump(mode="json"),
    }


def parse_result_json(data: JsonDict) -> ComparisonReport:
    """Recover the ComparisonReport from a result file's parsed JSON."""
    return ComparisonReport.model_validate(data["report"])


def _fmt(value: float | None, digits: int = 3) -> str:
    return "n/a" if value is None else f"{value:.{digits}f}"


def _summary_table(aggregated: AggregatedResult, engine: StatisticsEngine) -> list[str]:
    rows = [
        ("Tool selection", aggregated.tool_selection_score),
        ("Response quality", aggregated.response_quality_score),
        ("Overall", aggregated.overall_score),
        ("Latency (ms)", aggregated.latency_ms),
    ]
    lines = [
        "| Metric | Mean ± SD [95% CI] | Median | Min | Max |",
        "|---|---|---|---|---|",
    ]
    for label, summary in rows:
        lines.append(
            f"| {label} | {engine.format_summary(summary)} | {summary.median:.3f}"
            f" | {summary.min:.3f} | {summary.max:.3f} |"
        )
    return lines


def _element_table(aggregated: AggregatedResult) -> list[str]:
    if not aggregated.element_pass_rates:
        return []
    lines = ["", "| Element | Pass rate |", "|---|---|"]
    for element_id, rate in aggregated.element_pass_rates.items():
        lines.append(f"| {element_id} | {rate:.0%} |")
    return lines


def _outlier_line(outliers: OutlierReport | None) -> str:
    if outliers is None:
        return ""
    if not outliers.indices:
        return f"Outliers ({outliers.method}): none"
    runs = ", ".join(str(i + 1) for i in outliers.indices)
    return f"Outliers ({outliers.method}): runs {runs}"


def _variant_section(
    title: str,
    aggregated: AggregatedResult,
    outliers: OutlierReport | None,
    engine: StatisticsEngine,
) -> list[str]:
    lines = [f"## {title}", "", f"Runs: {len(aggregated.runs)}", ""]
    lines += _summary_table(aggregated=aggregated, engine=engine)
    lines += _element_table(aggregated=aggregated)
    lines += ["", _outlier_line(outliers=outliers), ""]
    return lines


def render_markdown(report: ComparisonReport, engine: StatisticsEngine) -> str:
    """Render a human-readable Markdown report, one section per variant."""
    lines = [
        f"# Evaluation report: {report.evaluation_name}",
        "",
        f"Evaluation ID: `{report.evaluation_id}`",
        "",
    ]
    lines += _variant_section(
        title="Baseline",
        aggregated=report.baseline,
        outliers=report.baseline_outliers,
        engine=engine,
    )
    if report.alternative is not None:
        lines += _variant_section(
            title="Alternative",
            aggregated=report.alternative,
            outliers=report.alternative_outliers,
            engine=engine,
        )

    if report.comparison is not None:
        comparison = report.comparison
        lines += [
            "## Comparison",
            "",
            "| Statistic | Value |",
            "|---|---|",
            f"| Overall score difference | {comparison.overall_score_difference:+.3f} |",
            f"| Improvement | {_fmt(report.improvement_percent, 1)}% |",
            f"| t statistic | {comparison.t_statistic:.3f} |",
            f"| Degrees of freedom | {comparison.degrees_of_freedom:.1f} |",
            f"| p-value | {comparison.p_value:.4f} |",
            f"| Significant | {'yes' if comparison.is_significant else 'no'} |",
            f"| Effect size (Cohen's d) | {comparison.effect_size:.3f}"
            f" ({comparison.effect_size_interpretation}) |",
            "",
            f"**Recommendation:** {comparison.recommendation}",
            "",
        ]

    runs = report.baseline.runs + (
        report.alternative.runs if report.alternative is not None else []
    )
    lines += [
        "## Runs",
        "",
        "| Run | Variant | Overall | Tools | Parameters | Quality | Delegation"
        " | Latency (ms) | Violations |",
        "|---|---|---|---|---|---|---|---|---|",
    ]
    for run in runs:
        violations = "; ".join(run.constraint_violations) or "-"
        lines.append(
            f"| {run.run_id} | {run.variant} | {run.overall_score:.3f}"
            f" | {run.tool_selection_score:.3f} | {run.parameter_score:.3f}"
            f" | {run.response_quality_score:.3f} | {_fmt(run.delegation_score)}"
            f" | {run.latency_ms} | {violations} |"
        )
    return "\n".join(lines) + "\n"
