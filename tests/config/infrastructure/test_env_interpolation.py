"""Tests for environment substitution over parsed definition data."""

import pytest

from prompt_eval.config.infrastructure.env_interpolation import (
    interpolate_env,
    iter_strings,
    unresolved_references,
)
from prompt_eval.config.infrastructure.errors import MissingEnvVarsError


class TestUnresolvedReferences:
    def test_empty_when_all_set(self) -> None:
        assert unresolved_references({"a": "${PE_PRESENT}"}, {"PE_PRESENT": "1"}) == []

    def test_walks_nested_lists_and_dicts(self) -> None:
        data = {"a": ["x", {"b": "${PE_ONE}"}], "c": "${PE_TWO}-${PE_ONE}"}
        assert unresolved_references(data, {}) == ["PE_ONE", "PE_TWO"]

    def test_references_with_fallback_are_resolved(self) -> None:
        assert unresolved_references("${PE_MODEL:-gpt-4o-mini}", {}) == []

    def test_non_string_scalars_are_skipped(self) -> None:
        data = {"n": 1, "f": 2.5, "b": True, "z": None}
        assert list(iter_strings(data)) == []


class TestInterpolateEnv:
    def test_substitutes_inside_strings(self) -> None:
        result = interpolate_env("https://${PE_HOST}/api", {"PE_HOST": "example.org"})
        assert result == "https://example.org/api"

    def test_preserves_structure_and_scalars(self) -> None:
        data = {"users": ["${PE_NAME}", 3], "flag": False}
        assert interpolate_env(data, {"PE_NAME": "alice"}) == {
            "users": ["alice", 3],
            "flag": False,
        }

    def test_fallback_used_only_when_unset(self) -> None:
        data = ["${PE_A:-one}", "${PE_B:-two}", "${PE_C:-}"]
        assert interpolate_env(data, {"PE_A": "set"}) == ["set", "two", ""]

    def test_text_without_references_is_unchanged(self) -> None:
        assert interpolate_env("$HOME and {braces}", {}) == "$HOME and {braces}"

    def test_all_missing_names_reported(self) -> None:
        with pytest.raises(MissingEnvVarsError) as exc_info:
            interpolate_env({"a": "${PE_X}", "b": ["${PE_Y}", "${PE_X}"]}, {})
        assert exc_info.value.missing_vars == ["PE_X", "PE_Y"]

    def test_defaults_to_process_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PE_FROM_OS", "yes")
        assert interpolate_env("${PE_FROM_OS}") == "yes"
