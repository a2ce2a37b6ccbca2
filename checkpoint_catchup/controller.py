"""Convergence controller: the main polling loop."""

from __future__ import annotations

import logging
import queue
import time
from enum import Enum
from typing import Callable, Optional

from .aggregator.state import ConvergenceState
from .config import MonitorConfig
from .display import CAUGHT_UP_MESSAGE, render_error

logger = logging.getLogger(__name__)


class ControllerState(str, Enum):
    POLLING = "polling"
    ERROR_BACKOFF = "error_backoff"
    CONVERGED = "converged"
    ABORTED = "aborted"  # max_failures reached


class IntervalTicker:
    """Fixed-cadence ticker.

    Ticks fall on ``start + n * interval``. A caller that is late skips the
    ticks it missed instead of receiving them in a burst, so the request
    rate never exceeds one per interval.
    """

    def __init__(
        self,
        interval_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._interval = float(interval_seconds)
        self._clock = clock
        self._sleep = sleep
        self._next = clock() + self._interval

    def wait(self) -> None:
        now = self._clock()
        if now < self._next:
            self._sleep(self._next - now)
            self._next += self._interval
            return
        missed = int((now - self._next) // self._interval) + 1
        self._next += missed * self._interval


class ConvergenceController:
    """Polls until the synced checkpoint reaches the known one.

    The fetcher runs in this thread; the aggregator drains the channel in
    its own thread and is the only writer of ``state``.
    """

    def __init__(
        self,
        config: MonitorConfig,
        fetcher,
        state: ConvergenceState,
        channel: queue.Queue,
        display,
        ticker: Optional[IntervalTicker] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._config = config
        self._fetcher = fetcher
        self._state = state
        self._channel = channel
        self._display = display
        self._ticker = ticker or IntervalTicker(config.interval_seconds)
        self._sleep = sleep

        self.state = ControllerState.POLLING
        self.failures = 0
        self.iterations = 0

    def step(self) -> ControllerState:
        """One iteration without the tick wait."""
        self.iterations += 1
        outcome = self._fetcher.poll(self._config.endpoint)

        if not outcome.ok:
            self.failures += 1
            self.state = ControllerState.ERROR_BACKOFF
            self._display.write(render_error(outcome.error, self.failures))
            if self._config.max_failures is not None and self.failures >= self._config.max_failures:
                logger.warning(
                    "[CTRL] giving up after %d failed polls, last error: %s",
                    self.failures, outcome.error,
                )
                self.state = ControllerState.ABORTED
                return self.state
            self._sleep(self._config.error_backoff_seconds)
            self.state = ControllerState.POLLING
            return self.state

        # Let the aggregator apply what this poll published before checking.
        self._channel.join()
        snap = self._state.snapshot()
        if snap.known_value != 0 and snap.converged:
            self.state = ControllerState.CONVERGED
        else:
            self.state = ControllerState.POLLING
        return self.state

    def run(self) -> ControllerState:
        """Loop until converged (or aborted). Never returns if the known gauge never shows up."""
        logger.info(
            "[CTRL] polling %s every %ds",
            self._config.endpoint, self._config.interval_seconds,
        )
        self._display.write("")
        while True:
            state = self.step()
            if state in (ControllerState.CONVERGED, ControllerState.ABORTED):
                break
            self._ticker.wait()

        if state is ControllerState.CONVERGED and self._state.snapshot().known_value != 0:
            self._display.write(CAUGHT_UP_MESSAGE)
        logger.info(
            "[CTRL] finished state=%s iterations=%d failures=%d",
            state.value, self.iterations, self.failures,
        )
        return state
