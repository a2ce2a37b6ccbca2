"""State aggregator: drains the sample channel into ConvergenceState.

Single consumer thread, so every mutation of the state happens in channel
delivery order and there is exactly one writer per process.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from typing import Optional

from ..display import render_status
from ..metrics.models import KNOWN_CHECKPOINT, SYNCED_CHECKPOINT, Sample
from .state import ConvergenceState

logger = logging.getLogger(__name__)


class StateAggregator:
    """Applies samples to the state and redraws the status line."""

    def __init__(
        self,
        channel: queue.Queue,
        state: ConvergenceState,
        display,
        interval_seconds: int = 1,
        redraw_delay_seconds: float = 0.005,
    ):
        self._channel = channel
        self._state = state
        self._display = display
        self._interval = interval_seconds
        self._redraw_delay = redraw_delay_seconds
        self._stop_event = threading.Event()
        self._worker: Optional[threading.Thread] = None

        self._applied = 0
        self._ignored = 0
        self._errors = 0

    def apply(self, sample: Sample) -> Optional[str]:
        """Apply one sample. Returns the rendered line, or None while a gauge is still unseen."""
        if sample.name == KNOWN_CHECKPOINT:
            snap = self._state.store(known=sample.value)
        elif sample.name == SYNCED_CHECKPOINT:
            snap = self._state.store(synced=sample.value)
        else:
            self._ignored += 1
            return None
        self._applied += 1

        if not snap.both_observed:
            return None

        gap = snap.known_value - snap.synced_value
        rate = gap - snap.last_gap
        self._state.store(last_gap=gap)

        line = render_status(gap, rate, self._interval)
        self._display.write(line)
        if self._redraw_delay > 0:
            time.sleep(self._redraw_delay)
        return line

    def start(self) -> None:
        if self._worker is not None:
            return
        self._stop_event.clear()
        self._worker = threading.Thread(
            target=self._worker_loop,
            daemon=True,
            name="state-aggregator",
        )
        self._worker.start()
        logger.info("[AGG] Started interval=%ds", self._interval)

    def stop(self, timeout: float = 5.0) -> None:
        self._stop_event.set()
        if self._worker is not None:
            self._worker.join(timeout=timeout)
            self._worker = None
        logger.info("[AGG] Stopped. %s", self.metrics)

    def _worker_loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                sample = self._channel.get(timeout=0.5)
            except queue.Empty:
                continue

            try:
                self.apply(sample)
            except Exception as e:
                self._errors += 1
                logger.error("[AGG] failed to apply sample=%s: %s", sample, e)
            finally:
                self._channel.task_done()

    @property
    def metrics(self) -> dict:
        return {
            "applied": self._applied,
            "ignored": self._ignored,
            "errors": self._errors,
            "queue_depth": self._channel.qsize(),
        }
