"""
Bounded polling for targets that may not exist yet.

The document hosting a snippet's source may still be loading or navigating
when resolution is requested. poll_until() calls a probe on a fixed interval,
stopping on the first hit, when a cancel predicate fires (for example the
document's collection id no longer matches the anchor's), or after a fixed
number of attempts. The probe itself must not block; the pure resolver is a
typical probe.

Author: Goncharenko Anton aka alienxs2
License: MIT
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Generic, Optional, TypeVar

import structlog

from clipanchor_core.config import settings
from clipanchor_core.exceptions import ValidationError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class PollState(str, Enum):
    """
    Terminal states of a polling run.

    Attributes:
        FOUND: Probe returned a result
        CANCELLED: Cancel predicate fired before a result
        EXHAUSTED: All attempts used without a result
    """

    FOUND = "found"
    CANCELLED = "cancelled"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class PollOutcome(Generic[T]):
    state: PollState
    attempts: int
    result: Optional[T] = None

    @property
    def found(self) -> bool:
        return self.state is PollState.FOUND


async def poll_until(
    probe: Callable[[], Optional[T]],
    interval: Optional[float] = None,
    max_attempts: Optional[int] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> PollOutcome[T]:
    """
    Call `probe` until it returns something other than None.

    Each attempt first checks `should_cancel`, then calls `probe`; the loop
    sleeps `interval` seconds between attempts, never after the last one.

    Args:
        probe: Zero-argument callable; None means "not yet"
        interval: Seconds between attempts (default settings.poll_interval_seconds)
        max_attempts: Attempt cap (default settings.poll_max_attempts)
        should_cancel: Zero-argument predicate; True stops polling early

    Returns:
        PollOutcome with the terminal state, attempts used and result

    Raises:
        ValidationError: If interval is negative or max_attempts < 1
    """
    interval = settings.poll_interval_seconds if interval is None else interval
    max_attempts = settings.poll_max_attempts if max_attempts is None else max_attempts

    if interval < 0:
        raise ValidationError(
            message=f"interval must be >= 0, got {interval}",
            error_code="VAL_003",
            details={"interval": interval},
        )
    if max_attempts < 1:
        raise ValidationError(
            message=f"max_attempts must be >= 1, got {max_attempts}",
            error_code="VAL_003",
            details={"max_attempts": max_attempts},
        )

    for attempt in range(1, max_attempts + 1):
        if should_cancel is not None and should_cancel():
            logger.debug("poll_cancelled", attempts=attempt - 1)
            return PollOutcome(state=PollState.CANCELLED, attempts=attempt - 1)

        result = probe()
        if result is not None:
            logger.debug("poll_found", attempts=attempt)
            return PollOutcome(state=PollState.FOUND, attempts=attempt, result=result)

        if attempt < max_attempts:
            await asyncio.sleep(interval)

    logger.debug("poll_exhausted", attempts=max_attempts)
    return PollOutcome(state=PollState.EXHAUSTED, attempts=max_attempts)
