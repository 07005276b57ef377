"""
Retry policy for GitHub API calls.

Transient failures are retried with exponential backoff and jitter; anything
else fails immediately. Every request also carries a timeout, and an expired
timeout counts as transient.

Retryable:
    - timeouts and connection/transport errors
    - HTTP 5xx
    - HTTP 429, and 403 responses that are really rate limiting
      (``Retry-After`` header or a "secondary rate limit" body)

Not retryable:
    - every other 4xx (bad token, missing scope, unknown project)
    - GraphQL ``errors`` payloads on a 200 response

Example:
    >>> policy = RetryPolicy(max_retries=3, base_delay=1.0)
    >>> response = policy.call(lambda: client.post(url, json=payload))
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from typing import TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_RETRY_AFTER_SECONDS = 60.0


def is_rate_limited(response: httpx.Response) -> bool:
    """Whether a response is GitHub telling us to slow down."""
    if response.status_code == 429:
        return True
    if response.status_code != 403:
        return False
    if "retry-after" in response.headers:
        return True
    if response.headers.get("x-ratelimit-remaining") == "0":
        return True
    return "secondary rate limit" in response.text.lower()


def is_retryable_error(exception: Exception) -> bool:
    """
    Determine if an exception represents a transient, retryable failure.

    Args:
        exception: Exception raised by an httpx call

    Returns:
        True if the call should be attempted again
    """
    # HTTPStatusError is also an HTTPError, so check it first.
    if isinstance(exception, httpx.HTTPStatusError):
        response = exception.response
        return 500 <= response.status_code < 600 or is_rate_limited(response)

    if isinstance(exception, httpx.TimeoutException):
        return True

    if isinstance(exception, (httpx.TransportError, httpx.RequestError)):
        return True

    return False


def _retry_after(exception: Exception) -> float | None:
    if not isinstance(exception, httpx.HTTPStatusError):
        return None
    value = exception.response.headers.get("retry-after")
    if value is None:
        return None
    try:
        return min(max(float(value), 0.0), MAX_RETRY_AFTER_SECONDS)
    except ValueError:
        return None


class RetryPolicy:
    """
    Bounded retry with exponential backoff.

    Attributes:
        max_retries: Retries after the first attempt (0 = single attempt)
        base_delay: Delay in seconds before the first retry
        multiplier: Backoff multiplier per retry
        jitter_ratio: Random variance applied to each delay (0.2 = ±20%)
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        multiplier: float = 2.0,
        jitter_ratio: float = 0.2,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if base_delay <= 0:
            raise ValueError("base_delay must be positive")
        if multiplier < 1.0:
            raise ValueError("multiplier must be >= 1.0")
        if not 0.0 <= jitter_ratio <= 1.0:
            raise ValueError("jitter_ratio must be between 0.0 and 1.0")

        self.max_retries = max_retries
        self.base_delay = base_delay
        self.multiplier = multiplier
        self.jitter_ratio = jitter_ratio
        self._sleep = sleep

    def calculate_delay(self, attempt: int) -> float:
        """
        Delay before retry number ``attempt`` (0-indexed).

        delay = base_delay * multiplier ** attempt, ± jitter_ratio
        """
        delay = self.base_delay * (self.multiplier**attempt)
        if self.jitter_ratio:
            variance = delay * self.jitter_ratio
            delay += random.uniform(-variance, variance)
        return max(0.0, delay)

    def call(self, func: Callable[[], T], *, description: str = "request") -> T:
        """
        Invoke ``func`` until it succeeds, fails permanently, or retries run out.

        Args:
            func: Zero-argument callable performing one attempt
            description: Label used in log messages

        Returns:
            Whatever ``func`` returns

        Raises:
            The last exception raised by ``func``
        """
        attempt = 0
        while True:
            try:
                return func()
            except Exception as e:
                if not is_retryable_error(e):
                    logger.debug(
                        "%s: non-retryable error on attempt %d: %s", description, attempt + 1, e
                    )
                    raise
                if attempt >= self.max_retries:
                    if self.max_retries:
                        logger.warning(
                            "%s: max retries (%d) exceeded: %s", description, self.max_retries, e
                        )
                    raise

                delay = _retry_after(e)
                if delay is None:
                    delay = self.calculate_delay(attempt)
                logger.info(
                    "%s: retry %d/%d after %.2fs due to: %s",
                    description,
                    attempt + 1,
                    self.max_retries,
                    delay,
                    e,
                )
                self._sleep(delay)
                attempt += 1


__all__ = [
    "RetryPolicy",
    "is_rate_limited",
    "is_retryable_error",
]
