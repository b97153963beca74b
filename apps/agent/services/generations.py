"""Per-rule request generations so the newest submission wins."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Dict, TypeVar

from core.errors import AnalysisSupersededError

T = TypeVar("T")


@dataclass(frozen=True)
class AnalysisTicket:
    key: str
    generation: int
    tracker: "GenerationTracker"

    def is_current(self) -> bool:
        return self.tracker.latest(self.key) == self.generation

    def ensure_current(self) -> None:
        latest = self.tracker.latest(self.key)
        if latest != self.generation:
            raise AnalysisSupersededError(self.key, self.generation, latest)

    def commit(self, write: Callable[[], T]) -> T:
        return self.tracker.commit(self, write)


class GenerationTracker:
    """Hands out increasing generations per key at submission time.

    Results are ordered by when the work was submitted, not when it finished.
    ``commit`` checks the ticket and runs the write under the same lock that
    ``issue`` takes, so no newer ticket can be handed out between the check
    and the write.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._latest: Dict[str, int] = {}

    def issue(self, key: str) -> AnalysisTicket:
        with self._lock:
            generation = self._latest.get(key, 0) + 1
            self._latest[key] = generation
        return AnalysisTicket(key=key, generation=generation, tracker=self)

    def latest(self, key: str) -> int:
        with self._lock:
            return self._latest.get(key, 0)

    def commit(self, ticket: AnalysisTicket, write: Callable[[], T]) -> T:
        """Run ``write`` only if ``ticket`` is still the latest for its key."""
        with self._lock:
            latest = self._latest.get(ticket.key, 0)
            if latest != ticket.generation:
                raise AnalysisSupersededError(ticket.key, ticket.generation, latest)
            return write()

    def forget(self, key: str) -> None:
        with self._lock:
            self._latest.pop(key, None)
