"""File loaders: parse YAML/JSON, interpolate env vars, validate, emit observer events."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from prompt_eval.config.domain.definition import EvaluationDefinition
from prompt_eval.config.domain.observer import ConfigObserver
from prompt_eval.config.domain.run_config import RunConfig
from prompt_eval.config.infrastructure.env_interpolation import interpolate_env
from prompt_eval.config.infrastructure.errors import (
    DefinitionLoadError,
    DefinitionValidationError,
)
from prompt_eval.core.errors import PromptEvalError

DEFINITION_SUFFIXES: tuple[str, ...] = (".eval.json", ".eval.yaml", ".eval.yml")


class DefinitionLoader:
    """Loads EvaluationDefinitions from single files or whole directories."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> EvaluationDefinition:
        """Load, interpolate, and validate one definition file.

        Raises:
            DefinitionLoadError: if the file is missing or not valid YAML/JSON.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
            DefinitionValidationError: if the schema is violated.
        """
        raw = _interpolated(path=path)
        definition = _validate(model=EvaluationDefinition, path=path, raw=raw)
        self._observer.definition_loaded(
            evaluation_id=definition.metadata.id,
            path=str(path),
            tool_mode=definition.tool_mode,
        )
        return definition

    def discover(
        self,
        directory: Path,
        target: str | None = None,
        tags: list[str] | None = None,
    ) -> list[tuple[Path, EvaluationDefinition]]:
        """Discover definition files under directory, filtered by target and tags.

        A definition matches tags when it carries at least one of them. Files
        that fail to load are reported to the observer and skipped.
        """
        found: list[tuple[Path, EvaluationDefinition]] = []
        for path in sorted(directory.rglob("*")):
            if not path.is_file() or not path.name.endswith(DEFINITION_SUFFIXES):
                continue
            try:
                definition = self.load(path=path)
            except PromptEvalError as exc:
                self._observer.definition_skipped(path=str(path), reason=str(exc))
                continue
            if target is not None and definition.metadata.target != target:
                continue
            if tags and not set(tags) & set(definition.metadata.tags):
                continue
            found.append((path, definition))
        return found


class RunConfigLoader:
    """Loads a RunConfig from a YAML or JSON file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> RunConfig:
        raw = _interpolated(path=path)
        config = _validate(model=RunConfig, path=path, raw=raw)
        self._observer.run_config_loaded(path=str(path), model=config.llm.model)
        return config


def _parse(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DefinitionLoadError(path=path, reason=str(exc)) from exc
    try:
        if path.suffix == ".json":
            return json.loads(text)
        return yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DefinitionLoadError(path=path, reason=str(exc)) from exc


def _interpolated(path: Path) -> Any:
    return interpolate_env(_parse(path=path))


def _validate[M: BaseModel](model: type[M], path: Path, raw: Any) -> M:
    if not isinstance(raw, dict):
        raise DefinitionValidationError(path=path, reason="top level must be a mapping")
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        raise DefinitionValidationError(path=path, reason=str(exc)) from exc
