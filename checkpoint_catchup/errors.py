"""Error taxonomy for the catch-up monitor."""

from __future__ import annotations

from typing import Optional


class CatchupError(Exception):
    """Base class for every monitor error."""


class ConfigError(CatchupError):
    """Invalid or missing configuration. Fatal, raised before polling starts."""


class FetchError(CatchupError):
    """A single poll failed. Never fatal, the controller retries on the next tick."""

    def __init__(self, message: str, endpoint: str = "", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.endpoint = endpoint
        self.cause = cause


class RequestConstructionError(FetchError):
    """Malformed URL or the request could not be built."""


class TransportError(FetchError):
    """Network level failure (refused, timeout, DNS)."""


class HTTPStatusError(FetchError):
    """Endpoint answered with something other than 200."""

    def __init__(self, message: str, endpoint: str = "", status_code: int = 0, reason: str = ""):
        super().__init__(message, endpoint=endpoint)
        self.status_code = status_code
        self.reason = reason


class ParseError(FetchError):
    """Payload is not valid Prometheus text exposition format."""
