"""Exponential backoff schedules for retrying collaborator calls."""

from __future__ import annotations

import random
from collections.abc import Iterator
from dataclasses import dataclass, field
from random import SystemRandom


@dataclass(frozen=True)
class BackoffPolicy:
    """Retry schedule: ``base_delay * factor**n`` capped at ``max_delay`` plus jitter."""

    max_attempts: int = 5
    base_delay: float = 1.0
    factor: float = 2.0
    max_delay: float = 30.0
    jitter: float = 0.25
    rng: random.Random = field(default_factory=SystemRandom, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay <= 0:
            raise ValueError("base_delay must be > 0")
        if self.factor < 1:
            raise ValueError("factor must be >= 1")
        if self.max_delay <= 0:
            raise ValueError("max_delay must be > 0")
        if self.jitter < 0:
            raise ValueError("jitter must be >= 0")

    def attempts(self) -> Iterator[tuple[int, float]]:
        """Yield ``(attempt, delay_seconds)`` for attempts 1..max_attempts."""
        delay = self.base_delay
        for attempt in range(1, self.max_attempts + 1):
            offset = self.rng.uniform(0, delay * self.jitter) if self.jitter else 0.0
            yield attempt, min(delay + offset, self.max_delay)
            delay = min(delay * self.factor, self.max_delay)


def exponential_backoff(
    *,
    max_attempts: int = 5,
    base_delay: float = 1.0,
    factor: float = 2.0,
    max_delay: float = 30.0,
    jitter: float = 0.25,
) -> Iterator[tuple[int, float]]:
    return BackoffPolicy(
        max_attempts=max_attempts,
        base_delay=base_delay,
        factor=factor,
        max_delay=max_delay,
        jitter=jitter,
    ).attempts()
