"""
Hetzner Robot Client - Condition Poller

This module waits out asynchronous server-side state changes by polling a
predicate with exponential backoff and a hard attempt ceiling.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from .exceptions import ConditionCancelledError, ConditionTimeoutError

logger = logging.getLogger("hrobot")

Condition = Callable[[], Union[bool, Awaitable[bool]]]


class PollState(str, Enum):
    """States a single poll call moves through."""

    CHECKING = "checking"
    WAITING = "waiting"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class PollConfig:
    """Backoff parameters; the defaults bound the total wait to roughly 15 minutes."""

    initial_delay: float = 2.0
    max_delay: float = 30.0
    max_attempts: int = 30

    def __post_init__(self):
        if self.initial_delay < 0:
            raise ValueError("initial_delay must be >= 0")
        if self.max_delay < self.initial_delay:
            raise ValueError("max_delay must be >= initial_delay")
        if self.max_attempts <= 0:
            raise ValueError("max_attempts must be > 0")

    def next_delay(self, delay: float) -> float:
        return min(delay * 2, self.max_delay)


@dataclass(frozen=True)
class PollResult:
    """Summary of a poll call that reached ``done``."""

    attempts: int
    waits: int
    waited: float


async def _evaluate(condition: Condition) -> bool:
    result = condition()
    if inspect.isawaitable(result):
        result = await result
    return bool(result)


class ConditionPoller:
    """Repeatedly evaluates a predicate until it holds.

    The first evaluation happens immediately. Predicate errors are not
    retried: they propagate unchanged on the first occurrence.
    """

    def __init__(self, config: Optional[PollConfig] = None):
        self.config = config or PollConfig()

    async def _wait(self, delay: float, cancel_event: Optional[asyncio.Event]) -> bool:
        """Sleep for ``delay``; return False if the cancel event fired first."""
        if cancel_event is None:
            await asyncio.sleep(delay)
            return True
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return True
        return False

    def _cancelled(self, description: str) -> ConditionCancelledError:
        logger.info(f"Poll {description}: {PollState.CANCELLED.value}")
        return ConditionCancelledError(f"waiting for {description} cancelled")

    async def wait(
        self,
        condition: Condition,
        *,
        cancel_event: Optional[asyncio.Event] = None,
        description: str = "condition",
    ) -> PollResult:
        """Block until ``condition`` returns true.

        Args:
            condition: Sync or async callable returning a bool
            cancel_event: Setting this event aborts any pending wait
            description: Used in log and error messages

        Returns:
            PollResult with the attempt and wait counts

        Raises:
            ConditionTimeoutError: If the attempt budget runs out
            ConditionCancelledError: If ``cancel_event`` is set
            Exception: Whatever the predicate raised, unchanged
        """
        delay = self.config.initial_delay
        waits = 0
        waited = 0.0
        state = PollState.CHECKING

        for attempt in range(1, self.config.max_attempts + 1):
            if cancel_event is not None and cancel_event.is_set():
                raise self._cancelled(description)

            try:
                ready = await _evaluate(condition)
            except Exception:
                state = PollState.FAILED
                logger.debug(f"Poll {description}: {state.value}, predicate raised on attempt {attempt}")
                raise

            if ready:
                state = PollState.DONE
                logger.debug(f"Poll {description}: {state.value} after {attempt} attempt(s)")
                return PollResult(attempts=attempt, waits=waits, waited=waited)

            # No wait after the final attempt: N attempts, N-1 waits
            if attempt == self.config.max_attempts:
                break

            state = PollState.WAITING
            logger.debug(f"Poll {description}: not ready, {state.value} {delay}s")
            if not await self._wait(delay, cancel_event):
                raise self._cancelled(description)
            waits += 1
            waited += delay
            delay = self.config.next_delay(delay)
            state = PollState.CHECKING

        state = PollState.TIMED_OUT
        logger.info(f"Poll {description}: {state.value} after {self.config.max_attempts} attempts")
        raise ConditionTimeoutError(
            f"timeout waiting for {description} after {self.config.max_attempts} attempts",
            attempts=self.config.max_attempts,
        )


async def wait_for_condition(
    condition: Condition,
    *,
    poll_config: Optional[PollConfig] = None,
    cancel_event: Optional[asyncio.Event] = None,
    description: str = "condition",
) -> PollResult:
    """Convenience wrapper around ``ConditionPoller.wait``."""
    return await ConditionPoller(poll_config).wait(
        condition, cancel_event=cancel_event, description=description
    )
