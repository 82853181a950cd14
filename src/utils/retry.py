"""Retry and model-fallback policy for Gemini calls.

Retryable failure classes are overload (503), internal fault (500) and rate
limiting (429 / quota / RESOURCE_EXHAUSTED). Rate limiting additionally
drives a one-shot switch to a fallback model at the orchestrator level.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from utils.errors import ErrorKind, ServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_RETRIES = 3
INITIAL_RETRY_DELAY_MS = 2000

QUOTA_MARKERS = ("quota", "exhausted", "RESOURCE_EXHAUSTED")
OVERLOAD_MARKERS = ("overloaded", "UNAVAILABLE")

SleepFn = Callable[[float], Awaitable[Any]]


def _error_status(error: BaseException) -> Optional[int]:
    """Numeric HTTP status carried by an exception, if any."""
    for attr in ("status", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def _error_text(error: BaseException) -> str:
    message = getattr(error, "message", None) or str(error)
    status = getattr(error, "status", None)
    if isinstance(status, str):
        message = f"{message} {status}"
    return message


def classify_error(error: BaseException) -> ErrorKind:
    """Classify a failure into an ErrorKind.

    ServiceError instances carry the kind assigned by the transport; anything
    else (raw SDK errors, stub errors in tests) is classified from its status
    code and message.
    """
    if isinstance(error, ServiceError):
        return error.kind

    status = _error_status(error)
    text = _error_text(error)

    if status == 429 or any(marker in text for marker in QUOTA_MARKERS):
        return ErrorKind.RATE_LIMITED
    if status == 503 or any(marker in text for marker in OVERLOAD_MARKERS):
        return ErrorKind.OVERLOADED
    if status == 500:
        return ErrorKind.INTERNAL_FAULT
    return ErrorKind.OTHER


def is_quota_error(error: BaseException) -> bool:
    """True when the failure signals quota / resource exhaustion."""
    return classify_error(error) is ErrorKind.RATE_LIMITED


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = MAX_RETRIES,
    initial_delay_ms: int = INITIAL_RETRY_DELAY_MS,
    sleep: SleepFn = asyncio.sleep,
) -> T:
    """Run an async operation with exponential backoff on transient failures.

    Args:
        operation: Zero-argument coroutine factory performing one remote call
        max_retries: Retries left after the first attempt
        initial_delay_ms: Delay before the first retry, doubled on each retry
        sleep: Awaitable sleep taking seconds

    Returns:
        The operation's result

    Raises:
        The last failure once retries are exhausted, or any non-retryable
        failure immediately.
    """
    retries = max_retries
    delay_ms = initial_delay_ms
    while True:
        try:
            return await operation()
        except Exception as e:
            kind = classify_error(e)
            if retries <= 0 or not kind.retryable:
                raise
            status = _error_status(e)
            logger.warning(
                f"Gemini API warning: {e} (kind: {kind.value}, status: {status}). "
                f"Retrying in {delay_ms}ms..."
            )
            await sleep(delay_ms / 1000)
            retries -= 1
            delay_ms *= 2


async def with_model_fallback(
    primary: Callable[[], Awaitable[T]],
    fallback: Callable[[], Awaitable[T]],
    label: str = "request",
) -> T:
    """Try the primary model; on quota exhaustion run the fallback once.

    Both callables are expected to carry their own with_retry wrap. Errors
    from the fallback propagate unchanged, as do non-quota primary errors.
    """
    try:
        return await primary()
    except Exception as e:
        if not is_quota_error(e):
            raise
        logger.warning(f"Primary model quota exhausted for {label}. Switching to fallback model...")
    return await fallback()

