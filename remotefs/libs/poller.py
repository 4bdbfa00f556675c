"""
Bounded polling used by every wait loop in the bootstrap
(peer probing, peer convergence, volume visibility, client mount).
"""
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional
from .errors import PollTimeout
from .logger import get_logger
logger = get_logger(__name__)


class PollStatus(Enum):
    """Outcome of a poll loop"""
    READY = "ready"
    TIMED_OUT = "timed_out"


@dataclass
class PollResult:
    """Outcome of poll_until with attempt count and elapsed seconds"""
    status: PollStatus
    attempts: int
    elapsed: float

    def __bool__(self):
        return self.status == PollStatus.READY

    @property
    def timed_out(self) -> bool:
        return self.status == PollStatus.TIMED_OUT


def poll_until(
    condition: Callable[[], bool],
    interval: float,
    timeout: Optional[float] = None,
    description: str = "condition",
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> PollResult:
    """
    Call condition() every interval seconds until it returns True.
    Args:
        condition: Zero-argument callable, evaluated at least once
        interval: Seconds to sleep between attempts
        timeout: Wall-clock budget measured from loop entry, None waits forever
        description: Used in log messages
        clock: Monotonic time source
        sleep: Sleep function
    Returns:
        PollResult with READY or TIMED_OUT status
    """
    start = clock()
    attempts = 0
    while True:
        attempts += 1
        if condition():
            elapsed = clock() - start
            logger.debug("%s ready after %d attempt(s) in %.1fs", description, attempts, elapsed)
            return PollResult(PollStatus.READY, attempts, elapsed)
        elapsed = clock() - start
        if timeout is not None and elapsed >= timeout:
            logger.error("Gave up waiting for %s after %.0fs", description, elapsed)
            return PollResult(PollStatus.TIMED_OUT, attempts, elapsed)
        sleep(interval)


def wait_for(
    condition: Callable[[], bool],
    interval: float,
    timeout: Optional[float] = None,
    description: str = "condition",
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> PollResult:
    """poll_until that raises PollTimeout instead of returning a timed out result."""
    result = poll_until(condition, interval, timeout, description, clock=clock, sleep=sleep)
    if result.timed_out:
        raise PollTimeout(description, timeout, result.elapsed)
    return result
