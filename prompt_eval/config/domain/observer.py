"""Observer port for the config domain: defines events in domain language."""

from typing import Protocol


class ConfigObserver(Protocol):
    def definition_loaded(self, evaluation_id: str, path: str, tool_mode: str) -> None: ...

    def definition_skipped(self, path: str, reason: str) -> None: ...

    def run_config_loaded(self, path: str, model: str) -> None: ...
