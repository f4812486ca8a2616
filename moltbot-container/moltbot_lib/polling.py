"""Bounded polling with exponential backoff.

Used where the bootstrap has to wait for something another process does,
such as a FUSE mount appearing in the mount table.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class PollResult:
    """Outcome of wait_until().

    Attributes:
        ready: True if the condition was met before the attempt budget ran out
        attempts: Number of times the condition was checked
        waited: Total seconds spent sleeping between checks
    """

    ready: bool
    attempts: int
    waited: float

    def __bool__(self) -> bool:
        return self.ready


def backoff_delays(attempts: int, initial_delay: float, factor: float = 2.0) -> list[float]:
    """Delays slept between ``attempts`` checks (one fewer than attempts)."""
    return [initial_delay * factor**i for i in range(max(attempts - 1, 0))]


def wait_until(
    condition: Callable[[], bool],
    *,
    attempts: int = 6,
    initial_delay: float = 0.5,
    factor: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
) -> PollResult:
    """Check ``condition`` until it holds or the attempt budget is spent.

    The first check happens immediately; later checks follow sleeps of
    initial_delay, initial_delay * factor, ... With the defaults the
    condition is checked 6 times over 15.5 seconds.

    Args:
        condition: Zero-argument callable returning True when ready
        attempts: Maximum number of checks
        initial_delay: First sleep in seconds
        factor: Multiplier applied to each successive sleep
        sleep: Sleep function (injectable for tests)

    Returns:
        PollResult describing whether and when the condition held
    """
    delays = backoff_delays(attempts, initial_delay, factor)
    waited = 0.0

    for attempt in range(1, attempts + 1):
        if condition():
            return PollResult(ready=True, attempts=attempt, waited=waited)
        if attempt <= len(delays):
            sleep(delays[attempt - 1])
            waited += delays[attempt - 1]

    return PollResult(ready=False, attempts=attempts, waited=waited)
