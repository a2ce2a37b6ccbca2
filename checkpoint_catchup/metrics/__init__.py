"""Gauge samples and the Prometheus text decoder."""

from .models import (
    KNOWN_CHECKPOINT,
    SYNCED_CHECKPOINT,
    TRACKED_FAMILIES,
    PollOutcome,
    Sample,
    StateSnapshot,
)
from .decoder import decode_samples

__all__ = [
    "KNOWN_CHECKPOINT",
    "SYNCED_CHECKPOINT",
    "TRACKED_FAMILIES",
    "PollOutcome",
    "Sample",
    "StateSnapshot",
    "decode_samples",
]
