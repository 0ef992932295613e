"""Ordered first-success-wins evaluation of fallback strategies.

Used for both the browser launch chain and the confirmation control
selectors: candidates are plain descriptors, tried in declared order,
and the first attempt that returns a value wins.
"""

from typing import Awaitable, Callable, Generic, List, Optional, Sequence, Tuple, TypeVar

C = TypeVar("C")
R = TypeVar("R")


class StrategiesExhausted(Exception):
    """Every candidate was tried and none produced a result"""

    def __init__(self, attempts: int, failures: List[Tuple[object, BaseException]]):
        super().__init__(f"All {attempts} strategies failed")
        self.attempts = attempts
        self.failures = failures


class StrategyOutcome(Generic[C, R]):
    """Winning candidate, its result, and what failed before it"""

    def __init__(self, candidate: C, result: R, attempt: int, failures: List[Tuple[C, BaseException]]):
        self.candidate = candidate
        self.result = result
        self.attempt = attempt
        self.failures = failures


async def first_success(
    candidates: Sequence[C],
    attempt: Callable[[C], Awaitable[Optional[R]]],
    on_failure: Optional[Callable[[int, C, Optional[BaseException]], None]] = None
) -> StrategyOutcome[C, R]:
    """
    Try candidates in order until one succeeds.

    An attempt fails by raising or by returning None. Failures are
    collected as diagnostic context and never stop the chain.

    Args:
        candidates: Ordered strategy descriptors
        attempt: Coroutine function run against one candidate
        on_failure: Optional callback(attempt_number, candidate, error) per failure;
            error is None when the attempt returned nothing

    Returns:
        StrategyOutcome for the first successful candidate

    Raises:
        StrategiesExhausted: No candidate succeeded
    """
    failures: List[Tuple[C, BaseException]] = []

    for number, candidate in enumerate(candidates, start=1):
        error: Optional[BaseException] = None
        try:
            result = await attempt(candidate)
        except Exception as e:
            error = e
            result = None

        if result is not None:
            return StrategyOutcome(candidate, result, number, failures)

        if error is not None:
            failures.append((candidate, error))
        if on_failure:
            on_failure(number, candidate, error)

    raise StrategiesExhausted(len(candidates), failures)
