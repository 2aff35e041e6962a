"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Sequence, Tuple

import pytest

from resilience_kit.adapters.environment import StaticEnvironmentProbe
from resilience_kit.caching.ttl_cache import TTLCache
from resilience_kit.config.models import CacheConfig, LoadingConfig, ResilienceSettings
from resilience_kit.domain.errors import EnrichedError
from resilience_kit.resilience.fallback_executor import FallbackExecutor, FallbackStrategy


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingSleep:
    """Async sleep replacement that records delays and returns at once."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class ScriptedOperation:
    """
    Zero-argument async operation replaying a script of outcomes.

    Exceptions in the script are raised, anything else is returned.
    The last outcome repeats once the script is exhausted.
    """

    def __init__(self, outcomes: Sequence[Any]) -> None:
        self._outcomes = list(outcomes)
        self.calls = 0

    async def __call__(self) -> Any:
        index = min(self.calls, len(self._outcomes) - 1)
        self.calls += 1
        outcome = self._outcomes[index]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding fixture files."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_config_path(fixtures_dir: Path) -> Path:
    """Path to sample configuration file."""
    return fixtures_dir / "sample_config.yaml"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TTLCache:
    """Cache driven by the fake clock."""
    return TTLCache(CacheConfig(), clock=clock)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def environment() -> StaticEnvironmentProbe:
    return StaticEnvironmentProbe(
        user_agent="resilience-kit-tests/1.0",
        url="https://shop.example.com/products",
        online=True,
    )


@pytest.fixture
def executor(
    cache: TTLCache,
    recording_sleep: RecordingSleep,
    environment: StaticEnvironmentProbe,
) -> FallbackExecutor:
    """Executor with an isolated cache and instant backoff."""
    return FallbackExecutor(cache, environment=environment, sleep_func=recording_sleep)


@pytest.fixture
def fallback_events() -> List[Tuple[FallbackStrategy, EnrichedError]]:
    """Collects on_fallback notifications."""
    return []


@pytest.fixture
def on_fallback(
    fallback_events: List[Tuple[FallbackStrategy, EnrichedError]],
) -> Callable[[FallbackStrategy, EnrichedError], None]:
    def record(strategy: FallbackStrategy, error: EnrichedError) -> None:
        fallback_events.append((strategy, error))

    return record


@pytest.fixture
def scripted() -> Callable[..., ScriptedOperation]:
    """Factory for scripted operations."""

    def make(*outcomes: Any) -> ScriptedOperation:
        return ScriptedOperation(outcomes)

    return make


@pytest.fixture
def fast_loading_config() -> LoadingConfig:
    """Short timings so state machine tests run quickly."""
    return LoadingConfig(show_loading_after=0.05, min_loading_time=0.1, timeout=1.0)


@pytest.fixture
def default_settings() -> ResilienceSettings:
    return ResilienceSettings()

