"""
Retry decorator with exponential backoff.

Used by adapters to handle transient transport failures. API errors the
service reports (bad request, not found, conflicts...) are never retried:
they surface on first occurrence with the service's message intact.

Calls that are not safe to repeat opt out through ``retry_if``, and a
caller's ``cancel`` event (passed as a keyword argument) cuts the backoff short.
"""

import random
import time
from functools import wraps
from typing import TypeVar, Callable, ParamSpec

import httpx

from adapters.services import clear_client_cache
from logging_config import logger, log_retry
from models import WorkspaceError, ErrorKind, OperationCancelled

T = TypeVar("T")
P = ParamSpec("P")


# Exceptions that should trigger retry
RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    ConnectionError,
    TimeoutError,
    httpx.TransportError,
)

# HTTP status codes that should trigger retry
RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({
    429,  # Rate limited
    502,  # Bad gateway
    503,  # Service unavailable
    504,  # Gateway timeout
})


def _get_http_status(exception: Exception) -> int | None:
    """
    Extract HTTP status code from exception if available.

    Works with RemoteError and httpx.HTTPStatusError.
    """
    # RemoteError carries the status it was built from
    status = getattr(exception, "status", None)
    if isinstance(status, int):
        return status

    # httpx.HTTPStatusError carries the response
    response = getattr(exception, "response", None)
    if response is not None:
        status = getattr(response, "status_code", None)
        if isinstance(status, int):
            return status

    return None


def _should_retry(exception: Exception) -> bool:
    """Determine if an exception is retryable."""
    if isinstance(exception, RETRYABLE_EXCEPTIONS):
        return True

    status = _get_http_status(exception)
    if status is not None and status in RETRYABLE_STATUS_CODES:
        return True

    return False


def _convert_to_workspace_error(exception: Exception) -> WorkspaceError:
    """Convert an exception to a WorkspaceError if not already one."""
    status = _get_http_status(exception)

    # A rejected token won't get better; drop the cached client so the
    # next call re-reads configuration
    if status == 401:
        clear_client_cache()

    if isinstance(exception, WorkspaceError):
        return exception

    if status is not None:
        if status == 401:
            return WorkspaceError(ErrorKind.AUTH_EXPIRED, str(exception))
        elif status == 403:
            return WorkspaceError(ErrorKind.PERMISSION_DENIED, str(exception))
        elif status == 404:
            return WorkspaceError(ErrorKind.NOT_FOUND, str(exception))
        elif status == 429:
            return WorkspaceError(ErrorKind.RATE_LIMITED, str(exception), retryable=True)
        elif status >= 500:
            return WorkspaceError(ErrorKind.NETWORK_ERROR, str(exception), retryable=True)

    if isinstance(exception, (httpx.TimeoutException, TimeoutError)):
        return WorkspaceError(ErrorKind.TIMEOUT, str(exception), retryable=True)
    if isinstance(exception, (httpx.TransportError, ConnectionError)):
        return WorkspaceError(ErrorKind.NETWORK_ERROR, str(exception), retryable=True)

    return WorkspaceError(ErrorKind.UNKNOWN, str(exception))


def _calculate_wait_with_jitter(
    delay_ms: int,
    attempt: int,
    backoff_multiplier: float,
    jitter: float,
) -> int:
    """Exponential backoff with ±jitter fraction, never negative."""
    base = delay_ms * (backoff_multiplier ** attempt)
    if jitter:
        base *= 1 + random.uniform(-jitter, jitter)
    return max(0, int(base))


def _cancelled_target(args: tuple) -> str:
    """Path a retried call was addressing, for the cancellation message."""
    if not args:
        return ""
    return str(getattr(args[0], "path", args[0]))


def with_retry(
    max_attempts: int = 3,
    delay_ms: int = 1000,
    backoff_multiplier: float = 2.0,
    jitter: float = 0.25,
    convert_errors: bool = True,
    retry_if: Callable[..., bool] | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Retry decorator with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts
        delay_ms: Initial delay in milliseconds
        backoff_multiplier: Multiplier for exponential backoff
        jitter: Random spread applied to each wait (0.25 = ±25%)
        convert_errors: Convert exceptions to WorkspaceError on final failure
        retry_if: Called with the call's arguments; when it returns False the
            call gets a single attempt (errors are still converted)

    Returns:
        Decorated function with retry logic

    A ``cancel`` keyword argument (threading.Event) on the decorated call is
    watched during backoff: once set, retrying stops with OperationCancelled.

    Example:
        @with_retry(max_attempts=3, delay_ms=1000)
        def get_status(path: str) -> ObjectStatus:
            return _get("/get-status", path=path)
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            cancel = kwargs.get("cancel")
            attempts = max_attempts
            if retry_if is not None and not retry_if(*args, **kwargs):
                attempts = 1
            last_exception: Exception | None = None

            for attempt in range(attempts):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    last_exception = e

                    if not _should_retry(e) or attempt == attempts - 1:
                        logger.debug(
                            f"{func.__name__} failed after {attempt + 1} attempts: {e}"
                        )
                        if convert_errors:
                            converted = _convert_to_workspace_error(e)
                            if converted is e:
                                raise
                            raise converted from e
                        raise

                    wait_ms = _calculate_wait_with_jitter(
                        delay_ms, attempt, backoff_multiplier, jitter
                    )
                    log_retry(attempt + 1, attempts, wait_ms, str(e))
                    if cancel is None:
                        time.sleep(wait_ms / 1000)
                    elif cancel.is_set() or cancel.wait(wait_ms / 1000):
                        logger.debug(f"{func.__name__} cancelled during backoff: {e}")
                        raise OperationCancelled(
                            func.__name__, _cancelled_target(args)
                        ) from e

            # Should never reach here, but satisfy type checker
            assert last_exception is not None
            raise last_exception

        return wrapper

    return decorator
