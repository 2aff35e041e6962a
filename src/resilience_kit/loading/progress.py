"""
Progress Simulation.

For operations that report no real progress, drive a loading machine's
progress along an easing curve. Simulated progress stops at 90% so the
real completion is always visible as the final jump to 100%.
"""

from __future__ import annotations

import asyncio
import time
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Sequence, Tuple

from resilience_kit.loading.state_machine import LoadingStateMachine

SIMULATED_PROGRESS_CAP = 90


class ProgressCurve(str, Enum):
    """Easing applied to elapsed/duration."""

    LINEAR = "linear"
    FAST_THEN_SLOW = "fast-then-slow"
    SLOW_THEN_FAST = "slow-then-fast"


def ease(ratio: float, curve: ProgressCurve) -> float:
    """Apply an easing curve to a ratio in [0, 1]."""
    if curve == ProgressCurve.LINEAR:
        return ratio
    if curve == ProgressCurve.FAST_THEN_SLOW:
        return 1 - (1 - ratio) ** 2
    return ratio ** 2


def message_for(
    percentage: int,
    messages: Sequence[Tuple[float, str]],
) -> Optional[str]:
    """Last message whose threshold has been reached."""
    reached = [text for threshold, text in messages if threshold <= percentage]
    return reached[-1] if reached else None


async def simulate_progress(
    machine: LoadingStateMachine,
    *,
    duration: float = 3.0,
    messages: Sequence[Tuple[float, str]] = (),
    curve: ProgressCurve = ProgressCurve.SLOW_THEN_FAST,
    interval: float = 0.1,
    sleep_func: Optional[Callable[[float], Awaitable[Any]]] = None,
    clock: Optional[Callable[[], float]] = None,
) -> int:
    """
    Advance ``machine`` progress until ``duration`` elapses.

    Stops early once the machine's session is no longer active.

    Args:
        machine: Machine whose progress to drive
        duration: Seconds to reach the cap
        messages: (threshold, message) pairs in ascending threshold order
        curve: Easing curve
        interval: Seconds between updates
        sleep_func: Injectable sleep (default asyncio.sleep)
        clock: Injectable monotonic clock (default time.monotonic)

    Returns:
        Last percentage reported
    """
    sleep = sleep_func or asyncio.sleep
    now = clock or time.monotonic
    curve = ProgressCurve(curve)
    started = now()
    percentage = 0

    while machine.is_active:
        elapsed = now() - started
        ratio = min(elapsed / duration, 1.0) if duration > 0 else 1.0
        percentage = int(ease(ratio, curve) * SIMULATED_PROGRESS_CAP)
        machine.set_progress(percentage, message_for(percentage, messages))
        if ratio >= 1.0:
            break
        await sleep(interval)

    return percentage
