"""Data models shared by the fetcher, aggregator and controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..errors import FetchError

KNOWN_CHECKPOINT = "highest_known_checkpoint"
SYNCED_CHECKPOINT = "highest_synced_checkpoint"

# Publish order per poll: known before synced.
TRACKED_FAMILIES: Tuple[str, ...] = (KNOWN_CHECKPOINT, SYNCED_CHECKPOINT)


@dataclass(frozen=True)
class Sample:
    """One gauge reading taken from a metric family."""
    name: str
    value: float


@dataclass(frozen=True)
class StateSnapshot:
    """Consistent copy of the convergence state.

    A value of 0 means that gauge has not been observed yet.
    """
    known_value: float = 0.0
    synced_value: float = 0.0
    last_gap: float = 0.0

    @property
    def both_observed(self) -> bool:
        return self.known_value != 0 and self.synced_value != 0

    @property
    def gap(self) -> Optional[float]:
        if not self.both_observed:
            return None
        return self.known_value - self.synced_value

    @property
    def converged(self) -> bool:
        gap = self.gap
        return gap is not None and gap <= 0


@dataclass(frozen=True)
class PollOutcome:
    """Result of one fetch attempt: the published samples or the failure."""
    samples: Tuple[Sample, ...] = ()
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, samples) -> "PollOutcome":
        return cls(samples=tuple(samples))

    @classmethod
    def failure(cls, error: FetchError) -> "PollOutcome":
        return cls(error=error)
