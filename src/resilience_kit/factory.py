"""
Factory - Build Resilience Components from Settings.

Wires the cache, executor, error handler and loading machines from a
single ResilienceSettings object; every executor call goes through the
layer's one TTLCache.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from resilience_kit.adapters.environment import NullEnvironmentProbe
from resilience_kit.caching.ttl_cache import TTLCache
from resilience_kit.config.models import ResilienceSettings
from resilience_kit.interfaces.environment_probe import EnvironmentProbe
from resilience_kit.loading.state_machine import LoadingStateMachine
from resilience_kit.resilience.error_handler import ErrorHandler, RetryConfig
from resilience_kit.resilience.fallback_executor import (
    FallbackConfig,
    FallbackExecutor,
    FallbackStrategy,
)


@dataclass
class ResilienceLayer:
    """The wired components of one resilience layer instance."""
    settings: ResilienceSettings
    environment: EnvironmentProbe
    cache: TTLCache
    executor: FallbackExecutor
    error_handler: ErrorHandler

    def fallback_config(
        self, strategy: Union[FallbackStrategy, str], **overrides: Any
    ) -> FallbackConfig:
        """FallbackConfig pre-filled with the configured defaults."""
        defaults = self.settings.fallback
        params = {
            "cache_ttl": defaults.cache_ttl_seconds,
            "max_retries": defaults.max_retries,
            "retry_delay": defaults.retry_delay_seconds,
        }
        params.update(overrides)
        return FallbackConfig(strategy=strategy, **params)

    def loading_state(
        self,
        pattern: Optional[str] = None,
        name: str = "loading",
    ) -> LoadingStateMachine:
        """New loading machine using a named pattern or the default timings."""
        config = (
            self.settings.get_loading_pattern(pattern)
            if pattern
            else self.settings.loading
        )
        return LoadingStateMachine(config, name=name, environment=self.environment)


def create_resilience_layer(
    settings: Optional[ResilienceSettings] = None,
    environment: Optional[EnvironmentProbe] = None,
) -> ResilienceLayer:
    """
    Create a fully wired resilience layer.

    Args:
        settings: Validated settings (defaults if None)
        environment: Environment probe (NullEnvironmentProbe if None)

    Returns:
        ResilienceLayer whose executor is backed by the layer's TTLCache
    """
    settings = settings or ResilienceSettings()
    environment = environment or NullEnvironmentProbe()
    cache = TTLCache(settings.cache)
    retry = settings.retry
    return ResilienceLayer(
        settings=settings,
        environment=environment,
        cache=cache,
        executor=FallbackExecutor(cache, environment=environment),
        error_handler=ErrorHandler(
            retry_config=RetryConfig(
                max_retries=retry.max_retries,
                base_delay_seconds=retry.base_delay_seconds,
                max_delay_seconds=retry.max_delay_seconds,
                exponential_base=retry.exponential_base,
            ),
            environment=environment,
        ),
    )
