"""Retry helpers for search API requests.

Retries rate limits, transient server errors and timeouts. Everything else
(4xx, malformed bodies) fails on the first attempt.
"""

from typing import Callable

import httpx
from tenacity import RetryCallState, retry_if_exception, wait_exponential

from facetsearch.core.logging import ContextualLogger

RETRYABLE_SERVER_STATUSES = frozenset({502, 503, 504})


def should_retry_on_rate_limit(exception: BaseException) -> bool:
    """Check if exception is a 429 response."""
    return (
        isinstance(exception, httpx.HTTPStatusError) and exception.response.status_code == 429
    )


def should_retry_on_server_error(exception: BaseException) -> bool:
    """Check if exception is a transient gateway/unavailable response."""
    return (
        isinstance(exception, httpx.HTTPStatusError)
        and exception.response.status_code in RETRYABLE_SERVER_STATUSES
    )


def should_retry_on_timeout(exception: BaseException) -> bool:
    """Check if exception is a timeout or transient connection error."""
    return isinstance(
        exception,
        (
            httpx.ConnectTimeout,
            httpx.ReadTimeout,
            httpx.WriteTimeout,
            httpx.PoolTimeout,
            httpx.ConnectError,
        ),
    )


def should_retry(exception: BaseException) -> bool:
    """Combined retry condition for search API calls."""
    return (
        should_retry_on_rate_limit(exception)
        or should_retry_on_server_error(exception)
        or should_retry_on_timeout(exception)
    )


retry_if_transient = retry_if_exception(should_retry)


def wait_rate_limit_with_backoff(retry_state: RetryCallState) -> float:
    """Wait strategy that respects Retry-After for 429s, exponential backoff otherwise.

    For 429 errors the Retry-After header is honored, clamped to [1s, 120s].
    Without a usable header, and for every other retryable error, waits
    grow exponentially.

    Args:
        retry_state: tenacity retry state

    Returns:
        Number of seconds to wait before retry
    """
    exception = retry_state.outcome.exception() if retry_state.outcome else None

    if should_retry_on_rate_limit(exception):
        retry_after = exception.response.headers.get("Retry-After")
        if retry_after:
            try:
                return min(max(float(retry_after), 1.0), 120.0)
            except ValueError:
                pass
        return wait_exponential(multiplier=1, min=2, max=30)(retry_state)

    return wait_exponential(multiplier=1, min=2, max=10)(retry_state)


def log_retry_attempt(
    logger: ContextualLogger, max_attempts: int
) -> Callable[[RetryCallState], None]:
    """Create a before_sleep callback that logs retry attempts.

    Args:
        logger: Logger instance to use
        max_attempts: Attempt budget, shown in the log line

    Returns:
        Callable usable as tenacity's before_sleep
    """

    def before_sleep(retry_state: RetryCallState) -> None:
        exception = retry_state.outcome.exception() if retry_state.outcome else None
        wait_time = retry_state.next_action.sleep if retry_state.next_action else 0

        if isinstance(exception, httpx.HTTPStatusError):
            error_desc = f"HTTP {exception.response.status_code}"
        elif isinstance(exception, httpx.TimeoutException):
            error_desc = f"timeout ({type(exception).__name__})"
        elif isinstance(exception, httpx.RequestError):
            error_desc = f"connection error ({type(exception).__name__})"
        else:
            error_desc = f"{type(exception).__name__}: {exception}"

        logger.warning(
            f"Request failed ({error_desc}), retrying in {wait_time:.1f}s "
            f"(attempt {retry_state.attempt_number}/{max_attempts})"
        )

    return before_sleep
