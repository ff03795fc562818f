"""Structlog implementation of the ConfigObserver port."""

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def definition_loaded(self, evaluation_id: str, path: str, tool_mode: str) -> None:
        self._log.info(
            "definition.loaded",
            evaluation_id=evaluation_id,
            path=path,
            tool_mode=tool_mode,
        )

    def definition_skipped(self, path: str, reason: str) -> None:
        self._log.warning("definition.skipped", path=path, reason=reason)

    def run_config_loaded(self, path: str, model: str) -> None:
        self._log.info("run_config.loaded", path=path, model=model)
