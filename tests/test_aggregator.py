"""Tests del agregador de estado."""

import pytest

from checkpoint_catchup.aggregator import StateAggregator
from checkpoint_catchup.display import render_error, render_status
from checkpoint_catchup.metrics import KNOWN_CHECKPOINT, SYNCED_CHECKPOINT, Sample


@pytest.fixture
def aggregator(channel, state, display) -> StateAggregator:
    return StateAggregator(channel, state, display, interval_seconds=1, redraw_delay_seconds=0)


class TestApply:

    def test_known_only_computes_nothing(self, aggregator, state, display):
        line = aggregator.apply(Sample(KNOWN_CHECKPOINT, 1_000_000))

        assert line is None
        snap = state.snapshot()
        assert snap.known_value == 1_000_000
        assert snap.gap is None
        assert not snap.converged
        assert display.lines == []

    def test_unknown_name_is_ignored(self, aggregator, state):
        assert aggregator.apply(Sample("go_goroutines", 12)) is None
        assert state.snapshot().known_value == 0
        assert aggregator.metrics["ignored"] == 1

    def test_gap_and_last_gap_updated(self, aggregator, state, display):
        aggregator.apply(Sample(KNOWN_CHECKPOINT, 150))
        aggregator.apply(Sample(SYNCED_CHECKPOINT, 100))

        snap = state.snapshot()
        assert snap.gap == 50
        assert snap.last_gap == 50
        assert display.lines == ["Catching up, 50 checkpoints behind (falling behind at 50/s)"]

    def test_catching_up_rate(self, aggregator, state):
        aggregator.apply(Sample(KNOWN_CHECKPOINT, 150))
        aggregator.apply(Sample(SYNCED_CHECKPOINT, 100))  # gap 50

        line = aggregator.apply(Sample(SYNCED_CHECKPOINT, 120))  # gap 30

        assert line == "Catching up, 30 checkpoints behind (catching up at 20/s)"

    def test_falling_behind_rate(self, aggregator):
        aggregator.apply(Sample(KNOWN_CHECKPOINT, 130))
        aggregator.apply(Sample(SYNCED_CHECKPOINT, 100))  # gap 30

        line = aggregator.apply(Sample(KNOWN_CHECKPOINT, 150))  # gap 50

        assert line == "Catching up, 50 checkpoints behind (falling behind at 20/s)"

    def test_rate_divided_by_interval(self, channel, state, display):
        agg = StateAggregator(channel, state, display, interval_seconds=5, redraw_delay_seconds=0)
        agg.apply(Sample(KNOWN_CHECKPOINT, 200))
        agg.apply(Sample(SYNCED_CHECKPOINT, 100))  # gap 100

        line = agg.apply(Sample(SYNCED_CHECKPOINT, 150))  # gap 50

        assert line.endswith("(catching up at 10/s)")

    def test_converged_snapshot(self, aggregator, state):
        aggregator.apply(Sample(KNOWN_CHECKPOINT, 100))
        aggregator.apply(Sample(SYNCED_CHECKPOINT, 100))

        assert state.snapshot().converged


class TestNonFiniteReadings:
    """+Inf y NaN son valores válidos en el formato de exposición."""

    def test_infinite_known_value(self, aggregator, display):
        aggregator.apply(Sample(SYNCED_CHECKPOINT, 100))

        line = aggregator.apply(Sample(KNOWN_CHECKPOINT, float("inf")))

        assert line == "Catching up, inf checkpoints behind (falling behind at inf/s)"
        assert display.lines == [line]

    def test_recovers_after_infinite_gap(self, aggregator, state):
        aggregator.apply(Sample(SYNCED_CHECKPOINT, 100))
        aggregator.apply(Sample(KNOWN_CHECKPOINT, float("inf")))

        line = aggregator.apply(Sample(KNOWN_CHECKPOINT, 200))

        assert line == "Catching up, 100 checkpoints behind (catching up at inf/s)"
        assert state.snapshot().last_gap == 100

    def test_nan_known_value(self, aggregator, state):
        aggregator.apply(Sample(SYNCED_CHECKPOINT, 100))

        line = aggregator.apply(Sample(KNOWN_CHECKPOINT, float("nan")))

        assert line == "Catching up, nan checkpoints behind (falling behind at nan/s)"
        assert not state.snapshot().converged

    def test_worker_survives_nan(self, aggregator, channel, display):
        aggregator.start()
        try:
            for sample in (
                Sample(SYNCED_CHECKPOINT, 100),
                Sample(KNOWN_CHECKPOINT, float("nan")),
                Sample(KNOWN_CHECKPOINT, 150),
                Sample(SYNCED_CHECKPOINT, 120),
            ):
                channel.put(sample)
            channel.join()
        finally:
            aggregator.stop()

        assert aggregator.metrics["errors"] == 0
        assert len(display.lines) == 3
        assert display.lines[-1].startswith("Catching up, 30 checkpoints behind")


class TestWorkerThread:

    def test_drains_channel_in_order(self, aggregator, channel, state):
        aggregator.start()
        try:
            channel.put(Sample(KNOWN_CHECKPOINT, 300))
            channel.put(Sample(SYNCED_CHECKPOINT, 280))
            channel.join()
        finally:
            aggregator.stop()

        snap = state.snapshot()
        assert snap.known_value == 300
        assert snap.synced_value == 280
        assert aggregator.metrics["applied"] == 2


class TestRendering:

    def test_render_status_truncates(self):
        assert render_status(12.9, -3.7, 1) == "Catching up, 12 checkpoints behind (catching up at 3/s)"

    def test_render_error_markers(self):
        assert render_error("boom", 3) == "Error fetching metrics: boom ..."

    def test_render_status_non_finite(self):
        assert render_status(float("inf"), float("-inf"), 2) == (
            "Catching up, inf checkpoints behind (catching up at inf/s)"
        )
