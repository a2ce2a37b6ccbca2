import queue

import pytest

from checkpoint_catchup.aggregator import ConvergenceState


class RecordingDisplay:
    """Stand-in for LiveLine that keeps every written line."""

    def __init__(self):
        self.lines = []

    def write(self, line):
        self.lines.append(line)

    def start(self):
        pass

    def stop(self):
        pass


@pytest.fixture
def display() -> RecordingDisplay:
    return RecordingDisplay()


@pytest.fixture
def channel() -> queue.Queue:
    return queue.Queue(maxsize=2)


@pytest.fixture
def state() -> ConvergenceState:
    return ConvergenceState()


def exposition(known=None, synced=None, extra=""):
    """Build a text exposition payload with the given gauges."""
    lines = []
    if known is not None:
        lines += [
            "# HELP highest_known_checkpoint Highest known checkpoint",
            "# TYPE highest_known_checkpoint gauge",
            f"highest_known_checkpoint {known}",
        ]
    if synced is not None:
        lines += [
            "# HELP highest_synced_checkpoint Highest synced checkpoint",
            "# TYPE highest_synced_checkpoint gauge",
            f"highest_synced_checkpoint {synced}",
        ]
    if extra:
        lines.append(extra)
    return "\n".join(lines) + "\n"
