"""Structlog implementation of the MatcherObserver port."""

import structlog


class StructlogMatcherObserver:
    """Delegates element-matching events to structlog.

    Satisfies the MatcherObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def matching_started(self, model: str, element_count: int) -> None:
        self._log.info(
            "matcher.matching_started", model=model, element_count=element_count
        )

    def matching_completed(self, model: str, duration_ms: int, matched: int) -> None:
        self._log.info(
            "matcher.matching_completed",
            model=model,
            duration_ms=duration_ms,
            matched=matched,
        )

    def matching_failed(self, model: str, reason: str) -> None:
        self._log.error("matcher.matching_failed", model=model, reason=reason)
