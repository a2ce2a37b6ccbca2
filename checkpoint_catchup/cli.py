"""CLI entry point for the catch-up monitor."""

from __future__ import annotations

import argparse
import logging
import os
import queue
import sys

from .aggregator import ConvergenceState, StateAggregator
from .config import get_config
from .controller import ConvergenceController, ControllerState
from .display import LiveLine
from .errors import ConfigError
from .transport import MetricsFetcher

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Watch a node catch up to the highest known checkpoint")
    p.add_argument("--addr", default=None, help="validator metrics address (env CATCHUP_ADDR)")
    p.add_argument("--interval", type=int, default=None, help="how often to check in seconds (env CATCHUP_INTERVAL)")
    p.add_argument("--max-failures", type=int, default=None, help="give up after this many failed polls (default: never)")
    p.add_argument("--log-level", default=os.getenv("CATCHUP_LOG_LEVEL", "WARNING"))
    return p


def main(argv=None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    try:
        cfg = get_config(addr=args.addr, interval=args.interval, max_failures=args.max_failures)
    except ConfigError as e:
        logger.critical("%s", e)
        sys.exit(1)

    channel: queue.Queue = queue.Queue(maxsize=cfg.channel_capacity)
    state = ConvergenceState()
    display = LiveLine()
    fetcher = MetricsFetcher(
        channel,
        header_timeout=cfg.header_timeout_seconds,
        connect_timeout=cfg.connect_timeout_seconds,
    )
    aggregator = StateAggregator(
        channel,
        state,
        display,
        interval_seconds=cfg.interval_seconds,
        redraw_delay_seconds=cfg.redraw_delay_seconds,
    )
    controller = ConvergenceController(cfg, fetcher, state, channel, display)

    display.start()
    aggregator.start()
    try:
        result = controller.run()
    except KeyboardInterrupt:
        result = None
    finally:
        display.stop()
        aggregator.stop()
        logger.info("[FETCH] %s", fetcher.stats)

    if result is None:
        sys.exit(130)
    if result is ControllerState.ABORTED:
        sys.exit(1)


if __name__ == "__main__":
    main()
