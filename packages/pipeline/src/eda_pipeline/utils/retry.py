"""
utils/retry.py — Bounded retry for dataset downloads.

Only the exception types passed in retry_on trigger another attempt. The
sources pass httpx.TransportError (connection resets, read timeouts): a
4xx/5xx status is the server's answer and surfaces on the first attempt.

Usage:
    from eda_pipeline.utils.retry import with_retry

    @with_retry(max_attempts=3, base_delay=1.0, retry_on=(httpx.TransportError,))
    async def download(url: str) -> bytes:
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import structlog
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

log = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def _log_before_sleep(state: RetryCallState) -> None:
    error = state.outcome.exception() if state.outcome is not None else None
    log.warning(
        "download_retry",
        function=getattr(state.fn, "__qualname__", None),
        attempt=state.attempt_number,
        sleep_s=round(state.next_action.sleep, 2) if state.next_action else 0.0,
        error=repr(error),
    )


def with_retry(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    retry_on: type[Exception] | tuple[type[Exception], ...] = Exception,
) -> Callable[[F], F]:
    """
    Retry a sync or async callable with exponential backoff.

    Waits base_delay * 2^(n-1) seconds between attempts, capped at
    max_delay. After the last attempt the original exception is re-raised.
    """
    return retry(  # type: ignore[return-value]
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=base_delay, max=max_delay),
        retry=retry_if_exception_type(retry_on),
        before_sleep=_log_before_sleep,
        reraise=True,
    )
