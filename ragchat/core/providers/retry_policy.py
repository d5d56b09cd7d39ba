"""
Bounded retry policy for provider calls.

Provider SDKs wrap network failures in their own exception types, so an
error counts as transient when it, or any exception in its cause/context
chain, is a transient type or carries a retryable HTTP status code.

Dependencies: tenacity, httpx
System role: Shared retry configuration for embedding and generation clients
"""

import asyncio
import logging

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

# Failures worth another attempt; everything else is reported at once
TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    ConnectionError,
    TimeoutError,
    asyncio.TimeoutError,
    httpx.TransportError,
)

# Status codes reported by google-genai / google-api-core errors as `code`
TRANSIENT_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})


def find_transient_error(
    error: BaseException,
    transient_errors: tuple[type[BaseException], ...] = TRANSIENT_ERRORS,
) -> BaseException | None:
    """
    Find the transient failure behind an exception.

    Args:
        error: Exception raised by a provider call
        transient_errors: Exception types treated as transient

    Returns:
        BaseException | None: First transient exception in the chain, or None
    """
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        if isinstance(current, transient_errors):
            return current
        code = getattr(current, "code", None)
        if isinstance(code, int) and not isinstance(code, bool) and code in TRANSIENT_STATUS_CODES:
            return current
        current = current.__cause__ or current.__context__
    return None


def build_retrying(
    logger: logging.Logger,
    operation: str,
    max_attempts: int,
    initial_wait: float,
    max_wait: float,
    transient_errors: tuple[type[BaseException], ...] = TRANSIENT_ERRORS,
) -> AsyncRetrying:
    """
    Create an AsyncRetrying controller with exponential backoff and jitter.

    Args:
        logger: Logger used for retry warnings
        operation: Name used in log messages ("module:method")
        max_attempts: Total attempts including the first one
        initial_wait: First backoff in seconds (also the jitter bound)
        max_wait: Backoff ceiling in seconds
        transient_errors: Exception types that trigger another attempt

    Returns:
        AsyncRetrying: Controller that re-raises the last error when exhausted
    """

    def _log_retry(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"{operation} - Retry {retry_state.attempt_number}/{max_attempts} "
            f"after {type(error).__name__}: {error}"
        )

    return AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential_jitter(initial=initial_wait, max=max_wait, jitter=initial_wait),
        retry=retry_if_exception(lambda e: find_transient_error(e, transient_errors) is not None),
        before_sleep=_log_retry,
        reraise=True,
    )
