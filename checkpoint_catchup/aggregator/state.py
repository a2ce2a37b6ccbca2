"""Convergence state holder.

Written only by the StateAggregator, read by the controller through
``snapshot()``. The lock keeps a snapshot from mixing values from two
different updates.
"""

from __future__ import annotations

import threading
from typing import Optional

from ..metrics.models import StateSnapshot


class ConvergenceState:
    """Latest known/synced gauges plus the previous gap."""

    def __init__(self):
        self._lock = threading.Lock()
        self._known = 0.0
        self._synced = 0.0
        self._last_gap = 0.0

    def snapshot(self) -> StateSnapshot:
        with self._lock:
            return StateSnapshot(
                known_value=self._known,
                synced_value=self._synced,
                last_gap=self._last_gap,
            )

    def store(
        self,
        known: Optional[float] = None,
        synced: Optional[float] = None,
        last_gap: Optional[float] = None,
    ) -> StateSnapshot:
        """Update the given fields and return the resulting snapshot."""
        with self._lock:
            if known is not None:
                self._known = known
            if synced is not None:
                self._synced = synced
            if last_gap is not None:
                self._last_gap = last_gap
            return StateSnapshot(
                known_value=self._known,
                synced_value=self._synced,
                last_gap=self._last_gap,
            )
