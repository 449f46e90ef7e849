"""Per-invocation time budget shared by the steps of one pipeline run."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

from meditation_media.domain.errors import StoreUnavailable


@dataclass(slots=True)
class Deadline:
    """Absolute monotonic deadline; ``None`` budget means unbounded."""

    budget_seconds: float | None
    clock: Callable[[], float] = time.monotonic
    started_at: float = field(init=False)

    def __post_init__(self) -> None:
        self.started_at = self.clock()

    def remaining(self) -> float | None:
        if self.budget_seconds is None:
            return None
        return max(0.0, self.budget_seconds - (self.clock() - self.started_at))

    def expired(self) -> bool:
        remaining = self.remaining()
        return remaining is not None and remaining <= 0.0

    def check(self, stage: str) -> None:
        if self.expired():
            raise StoreUnavailable(
                f"Invocation deadline exceeded before {stage}.",
                code="deadline_exceeded",
            )
