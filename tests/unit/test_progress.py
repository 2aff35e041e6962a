"""
Unit Tests for Progress Simulation.
"""

from __future__ import annotations

from typing import List

import pytest

from resilience_kit.config.models import LoadingConfig
from resilience_kit.loading.progress import (
    SIMULATED_PROGRESS_CAP,
    ProgressCurve,
    ease,
    message_for,
    simulate_progress,
)
from resilience_kit.loading.state_machine import LoadingStateMachine


class ClockedSleep:
    """Sleep replacement advancing a fake clock instead of waiting."""

    def __init__(self, clock) -> None:
        self.clock = clock
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        self.clock.advance(seconds)


@pytest.fixture
def machine() -> LoadingStateMachine:
    return LoadingStateMachine(
        LoadingConfig(show_loading_after=0, min_loading_time=0, timeout=0)
    )


class TestEase:
    """Test cases for easing curves."""

    @pytest.mark.parametrize("curve", list(ProgressCurve))
    def test_endpoints(self, curve: ProgressCurve) -> None:
        assert ease(0.0, curve) == 0.0
        assert ease(1.0, curve) == 1.0

    def test_shapes(self) -> None:
        assert ease(0.5, ProgressCurve.LINEAR) == 0.5
        assert ease(0.5, ProgressCurve.FAST_THEN_SLOW) == 0.75
        assert ease(0.5, ProgressCurve.SLOW_THEN_FAST) == 0.25


class TestMessageFor:
    """Test cases for threshold messages."""

    MESSAGES = [(0, "Connecting"), (30, "Downloading"), (80, "Finishing")]

    @pytest.mark.parametrize(
        "percentage, expected",
        [(0, "Connecting"), (29, "Connecting"), (30, "Downloading"), (90, "Finishing")],
    )
    def test_last_reached_threshold(self, percentage: int, expected: str) -> None:
        assert message_for(percentage, self.MESSAGES) == expected

    def test_no_threshold_reached(self) -> None:
        assert message_for(5, [(10, "Later")]) is None


class TestSimulateProgress:
    """Test cases for simulate_progress()."""

    @pytest.mark.asyncio
    async def test_linear_progress_stops_at_cap(self, machine, clock) -> None:
        """
        SCENARIO: Linear curve, 1s duration, 250ms interval
        EXPECTED: 0, 22, 45, 67, 90 and never 100
        """
        sleep = ClockedSleep(clock)
        seen: List[float] = []
        machine.subscribe(lambda snapshot: seen.append(snapshot.progress))
        machine.start()

        last = await simulate_progress(
            machine,
            duration=1.0,
            interval=0.25,
            curve=ProgressCurve.LINEAR,
            sleep_func=sleep,
            clock=clock,
        )

        assert last == SIMULATED_PROGRESS_CAP
        assert seen[1:] == [0, 22, 45, 67, 90]
        assert sleep.delays == [0.25] * 4
        assert machine.is_loading
        machine.dispose()

    @pytest.mark.asyncio
    async def test_messages_follow_thresholds(self, machine, clock) -> None:
        machine.start()
        messages = []
        machine.subscribe(lambda snapshot: messages.append(snapshot.message))

        await simulate_progress(
            machine,
            duration=1.0,
            interval=0.5,
            curve=ProgressCurve.LINEAR,
            messages=[(0, "Starting"), (40, "Halfway")],
            sleep_func=ClockedSleep(clock),
            clock=clock,
        )

        assert messages == ["Starting", "Halfway", "Halfway"]
        machine.dispose()

    @pytest.mark.asyncio
    async def test_stops_when_session_ends(self, machine, clock) -> None:
        machine.start()

        async def finish_after_first_tick(seconds: float) -> None:
            clock.advance(seconds)
            machine.set_success()

        last = await simulate_progress(
            machine,
            duration=10.0,
            interval=1.0,
            curve=ProgressCurve.LINEAR,
            sleep_func=finish_after_first_tick,
            clock=clock,
        )

        assert last == 0
        assert machine.is_success
        assert machine.progress == 100

    @pytest.mark.asyncio
    async def test_inactive_machine_is_untouched(self, machine, clock) -> None:
        last = await simulate_progress(machine, sleep_func=ClockedSleep(clock), clock=clock)

        assert last == 0
        assert machine.progress is None
