"""MatcherObserver port: domain events emitted during semantic element matching."""

from typing import Protocol


class MatcherObserver(Protocol):
    def matching_started(self, model: str, element_count: int) -> None: ...

    def matching_completed(self, model: str, duration_ms: int, matched: int) -> None: ...

    def matching_failed(self, model: str, reason: str) -> None: ...
