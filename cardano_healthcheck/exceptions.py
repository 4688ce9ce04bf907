"""Exceptions raised while checking a cardano-node.

Two families live under HealthcheckError:

- CheckError: the check could not reach a verdict (bad config, unreachable
  endpoint, missing or malformed metric). Callers report these and exit non-zero.
- InvariantViolation: the chain time settings contradict the slot arithmetic.
  This is a defect upstream of the check and must never be handled as an
  ordinary failed check.
"""

from typing import Optional


class HealthcheckError(Exception):
    """Base exception for all healthcheck errors."""


class CheckError(HealthcheckError):
    """The health check ended without a verdict."""


class ConfigError(CheckError):
    """A node configuration or genesis file could not be read or parsed."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class FetchError(CheckError):
    """The metrics endpoint could not be queried.

    Raised for transport errors, timeouts and non-2xx responses.
    """

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ParseError(FetchError):
    """The response body could not be read to the end."""


class MetricNotFound(CheckError):
    """A required metric is absent from the endpoint output."""

    def __init__(self, message: str, key: str):
        super().__init__(message)
        self.key = key


class MalformedMetric(CheckError):
    """A metric is present but its value is not usable."""

    def __init__(self, message: str, key: str, value: str):
        super().__init__(message)
        self.key = key
        self.value = value


class InvariantViolation(HealthcheckError):
    """Epoch/slot arithmetic disagrees with the chain time settings."""
