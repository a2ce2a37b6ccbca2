"""HTTP fetcher: one GET per tick, decoded samples pushed to the aggregator."""

from __future__ import annotations

import logging
import queue
from typing import List, Optional

import requests

from ..errors import (
    FetchError,
    HTTPStatusError,
    ParseError,
    RequestConstructionError,
    TransportError,
)
from ..metrics.decoder import decode_samples
from ..metrics.models import PollOutcome, Sample

logger = logging.getLogger(__name__)

_URL_ERRORS = (
    requests.exceptions.MissingSchema,
    requests.exceptions.InvalidSchema,
    requests.exceptions.InvalidURL,
    requests.exceptions.URLRequired,
)


class FetchStats:
    """Contadores del fetcher."""

    def __init__(self):
        self.polls = 0
        self.succeeded = 0
        self.failed = 0
        self.samples_published = 0

    def __str__(self) -> str:
        return (
            f"Stats: polls={self.polls} succeeded={self.succeeded} "
            f"failed={self.failed} samples_published={self.samples_published}"
        )

    def to_dict(self) -> dict:
        return {
            "polls": self.polls,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "samples_published": self.samples_published,
        }


class MetricsFetcher:
    """Fetches the metrics endpoint and publishes the tracked samples.

    Runs synchronously in the controller's thread. Each request carries
    ``Connection: close`` since the monitor never reuses a connection
    between ticks, and the read timeout bounds how long we wait for the
    response headers.
    """

    def __init__(
        self,
        channel: queue.Queue,
        header_timeout: float = 60.0,
        connect_timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self._channel = channel
        self._timeout = (connect_timeout, header_timeout)
        self._session = session or requests.Session()
        self.stats = FetchStats()

    def fetch(self, endpoint: str) -> List[Sample]:
        """GET ``endpoint`` and decode it. Raises a FetchError subclass."""
        try:
            resp = self._session.get(
                endpoint,
                headers={"Connection": "close"},
                timeout=self._timeout,
            )
        except _URL_ERRORS as e:
            raise RequestConstructionError(
                f"creating GET request for URL {endpoint!r} failed: {e}",
                endpoint=endpoint,
                cause=e,
            ) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(
                f"executing GET request for URL {endpoint!r} failed: {e}",
                endpoint=endpoint,
                cause=e,
            ) from e

        try:
            if resp.status_code != 200:
                raise HTTPStatusError(
                    f"GET request for URL {endpoint!r} returned HTTP status "
                    f"{resp.status_code} {resp.reason or ''}".rstrip(),
                    endpoint=endpoint,
                    status_code=resp.status_code,
                    reason=resp.reason or "",
                )
            try:
                body = resp.text
            except requests.exceptions.RequestException as e:
                raise TransportError(
                    f"reading response body from URL {endpoint!r} failed: {e}",
                    endpoint=endpoint,
                    cause=e,
                ) from e
            try:
                return decode_samples(body)
            except ParseError as e:
                e.endpoint = endpoint
                raise
        finally:
            resp.close()

    def poll(self, endpoint: str) -> PollOutcome:
        """One polling tick: fetch, then publish samples in decode order.

        Publishing blocks while the channel is full.
        """
        self.stats.polls += 1
        try:
            samples = self.fetch(endpoint)
        except FetchError as e:
            self.stats.failed += 1
            logger.debug("[FETCH] poll failed endpoint=%s err=%s", endpoint, e)
            return PollOutcome.failure(e)

        for sample in samples:
            self._channel.put(sample)
        self.stats.succeeded += 1
        self.stats.samples_published += len(samples)
        logger.debug("[FETCH] published %d samples", len(samples))
        return PollOutcome.success(samples)
