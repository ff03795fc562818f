"""Tests for the prompt-eval CLI commands."""

import json
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog
import yaml
from typer.testing import CliRunner

from prompt_eval.cli.main import app
from tests.config.sample_definition import definition_data
from tests.llm.fake_client import ScriptedLLMClient, final

runner = CliRunner()


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


def _write_definition(path: Path, **overrides: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(definition_data(**overrides)), encoding="utf-8")
    return path


@pytest.fixture
def prompts_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "prompts"
    directory.mkdir()
    (directory / "supervisor.md").write_text("You supervise.", encoding="utf-8")
    return directory


class TestListCommand:
    def test_lists_definitions(self, tmp_path: Path) -> None:
        _write_definition(tmp_path / "evals" / "search.eval.yaml")

        result = runner.invoke(app, ["list", str(tmp_path / "evals")])

        assert result.exit_code == 0
        assert "search-basic" in result.stdout
        assert "Basic search" in result.stdout

    def test_filters_by_tag(self, tmp_path: Path) -> None:
        _write_definition(tmp_path / "evals" / "search.eval.yaml")

        result = runner.invoke(app, ["list", str(tmp_path / "evals"), "--tag", "other"])

        assert result.exit_code == 0
        assert "No evaluation definitions found." in result.stdout

    def test_empty_directory(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["list", str(tmp_path)])
        assert result.exit_code == 0
        assert "No evaluation definitions found." in result.stdout


class TestRunCommand:
    def test_requires_a_model(self, tmp_path: Path) -> None:
        path = _write_definition(tmp_path / "search.eval.yaml")

        result = runner.invoke(app, ["run", str(path), "--log-format", "json"])

        assert result.exit_code == 1
        assert "Failed to " in result.stdout

    def test_invalid_log_format(self, tmp_path: Path) -> None:
        path = _write_definition(tmp_path / "search.eval.yaml")
        result = runner.invoke(app, ["run", str(path), "--log-format", "xml"])
        assert result.exit_code == 1
        assert "Invalid log format" in result.stdout

    def test_missing_definition_file(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app,
            ["run", str(tmp_path / "absent.eval.yaml"), "-m", "gpt-4o-mini", "--log-format", "json"],
        )
        assert result.exit_code == 1

    def test_writes_results_file(self, tmp_path: Path, prompts_dir: Path) -> None:
        path = _write_definition(
            tmp_path / "search.eval.yaml",
            responseExpectations={"requiredElements": [{"id": "version", "keywords": ["3.13"]}]},
        )
        output_dir = tmp_path / "results"
        client = ScriptedLLMClient([final("Python 3.13 is the latest release.")])

        with patch("prompt_eval.cli.main.LiteLLMClient", return_value=client):
            result = runner.invoke(
                app,
                [
                    "run",
                    str(path),
                    "--model",
                    "gpt-4o-mini",
                    "--runs",
                    "2",
                    "--prompts-dir",
                    str(prompts_dir),
                    "--output-dir",
                    str(output_dir),
                    "--log-format",
                    "json",
                ],
            )

        assert result.exit_code == 0, result.output
        [results_file] = list(output_dir.glob("search-basic_*.json"))
        data = json.loads(results_file.read_text(encoding="utf-8"))
        assert data["llm"]["model"] == "gpt-4o-mini"
        assert data["execution"]["runs"] == 2
        assert len(data["report"]["baseline"]["runs"]) == 2
        assert data["report"]["alternative"] is None
        assert len(client.requests) == 2
        assert client.requests[0].system_prompt == "You supervise."

    def test_alternative_prompt_option(self, tmp_path: Path, prompts_dir: Path) -> None:
        path = _write_definition(tmp_path / "search.eval.yaml")
        alternative = tmp_path / "terse.md"
        alternative.write_text("Be terse.", encoding="utf-8")
        output_dir = tmp_path / "results"
        client = ScriptedLLMClient([final("ok")])

        with patch("prompt_eval.cli.main.LiteLLMClient", return_value=client):
            result = runner.invoke(
                app,
                [
                    "run",
                    str(path),
                    "-m",
                    "gpt-4o-mini",
                    "-n",
                    "2",
                    "--prompts-dir",
                    str(prompts_dir),
                    "-o",
                    str(output_dir),
                    "--alternative-prompt",
                    str(alternative),
                    "--log-format",
                    "json",
                ],
            )

        assert result.exit_code == 0, result.output
        assert {r.system_prompt for r in client.requests} == {"You supervise.", "Be terse."}
        assert "Recommendation: inconclusive" in result.stdout


class TestReportCommand:
    def _run_and_get_results(self, tmp_path: Path, prompts_dir: Path) -> Path:
        path = _write_definition(tmp_path / "search.eval.yaml")
        output_dir = tmp_path / "results"
        with patch(
            "prompt_eval.cli.main.LiteLLMClient",
            return_value=ScriptedLLMClient([final("ok")]),
        ):
            result = runner.invoke(
                app,
                [
                    "run",
                    str(path),
                    "-m",
                    "gpt-4o-mini",
                    "-n",
                    "2",
                    "--prompts-dir",
                    str(prompts_dir),
                    "-o",
                    str(output_dir),
                    "--log-format",
                    "json",
                ],
            )
        assert result.exit_code == 0, result.output
        [results_file] = list(output_dir.glob("*.json"))
        return results_file

    def test_prints_markdown(self, tmp_path: Path, prompts_dir: Path) -> None:
        results_file = self._run_and_get_results(tmp_path, prompts_dir)

        result = runner.invoke(app, ["report", str(results_file)])

        assert result.exit_code == 0
        assert "# Evaluation report: Basic search" in result.stdout

    def test_writes_markdown_file(self, tmp_path: Path, prompts_dir: Path) -> None:
        results_file = self._run_and_get_results(tmp_path, prompts_dir)
        output = tmp_path / "report.md"

        result = runner.invoke(app, ["report", str(results_file), "-o", str(output)])

        assert result.exit_code == 0
        assert f"Report written to {output}" in result.stdout
        assert output.read_text(encoding="utf-8").startswith("# Evaluation report:")

    def test_unreadable_results_file(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{not json", encoding="utf-8")

        result = runner.invoke(app, ["report", str(bad)])

        assert result.exit_code == 1
        assert "Failed to read results file" in result.stdout
