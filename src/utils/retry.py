"""Fixed-delay retry helper shared by navigation and post-click verification"""

import asyncio
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar

from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)

T = TypeVar("T")


async def _sleep(seconds: float) -> None:
    await asyncio.sleep(seconds)


def _last_outcome(retry_state: RetryCallState) -> Any:
    """Re-raise the final exception, or hand back the final result"""
    outcome = retry_state.outcome
    if outcome.failed:
        raise outcome.exception()
    return outcome.result()


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    attempts: int,
    delay_seconds: float,
    until: Optional[Callable[[T], bool]] = None,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    description: str = "operation",
    correlation_id: str = "N/A"
) -> T:
    """
    Run an async operation up to `attempts` times with a fixed delay between tries.

    Args:
        operation: Zero-argument coroutine function to run
        attempts: Total number of tries (not retries)
        delay_seconds: Sleep between tries
        until: Optional predicate on the result; a falsy check triggers another try
        retry_on: Exception types that trigger another try
        description: Human-readable name for logging
        correlation_id: ID for logging context

    Returns:
        The first accepted result, or the last result if `until` never passed

    Raises:
        The last exception once the attempt budget is spent
    """
    retry_condition = retry_if_exception_type(retry_on)
    if until is not None:
        retry_condition = retry_condition | retry_if_result(lambda result: not until(result))

    def _log_retry(retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        reason = outcome.exception() if outcome.failed else "condition not met"
        logger.debug(
            f"[{correlation_id}] {description} attempt "
            f"{retry_state.attempt_number}/{attempts} failed: {reason}"
        )

    retrying = AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=wait_fixed(delay_seconds),
        sleep=_sleep,
        retry=retry_condition,
        before_sleep=_log_retry,
        retry_error_callback=_last_outcome,
    )
    return await retrying(operation)
