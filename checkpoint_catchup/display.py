"""Single redrawn status line on the terminal."""

from __future__ import annotations

import math
import threading
from typing import Optional

from rich.console import Console
from rich.live import Live
from rich.text import Text

CAUGHT_UP_MESSAGE = "Node caught up"
ERROR_MARKER = "."


def _checkpoints(value: float) -> str:
    """Whole checkpoints; non-finite readings (+Inf, NaN) are shown as is."""
    if math.isfinite(value):
        return str(int(value))
    return f"{value:g}"


def _per_second(delta: float, interval_seconds: int) -> str:
    if math.isfinite(delta):
        return str(int(delta) // interval_seconds)
    return f"{delta / interval_seconds:g}"


def render_status(gap: float, rate: float, interval_seconds: int) -> str:
    """Status line for a gap and its change since the previous gap.

    Finite values are truncated to whole checkpoints.
    """
    if rate < 0:
        speed = f"catching up at {_per_second(-rate, interval_seconds)}/s"
    else:
        speed = f"falling behind at {_per_second(rate, interval_seconds)}/s"
    return f"Catching up, {_checkpoints(gap)} checkpoints behind ({speed})"


def render_error(error: object, failures: int) -> str:
    """Error line with one marker per failure so far."""
    return f"Error fetching metrics: {error} {ERROR_MARKER * failures}"


class LiveLine:
    """One line of output redrawn in place via rich's Live.

    Used from both the controller and the aggregator thread.
    """

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console()
        self._live = Live(
            Text(""),
            console=self._console,
            auto_refresh=False,
            transient=False,
        )
        self._lock = threading.Lock()
        self._started = False
        self.last_line = ""

    def start(self) -> None:
        with self._lock:
            if not self._started:
                self._live.start()
                self._started = True

    def write(self, line: str) -> None:
        with self._lock:
            self.last_line = line
            self._live.update(Text(line), refresh=self._started)

    def stop(self) -> None:
        with self._lock:
            if self._started:
                self._live.stop()
                self._started = False
