"""
Fallback Executor - Named Strategies for Unreliable Operations.

Wraps a zero-argument async operation with one of six strategies:

    cache-first         cached value, else operation, else static fallback
    cache-then-network  cached value now + background refresh, else operation
    network-then-cache  operation, else cached value, else static fallback
    static-fallback     operation, else static fallback
    degraded-mode       operation, else caller-supplied degraded computation
    retry-with-backoff  operation retried with exponential backoff

Design Notes:
    - Every observed failure is enriched and passed to on_fallback once
    - on_fallback is observability only: never awaited, never raises through
    - When nothing can stand in, the original exception is re-raised
    - The cache is injected, never a module global
"""

from __future__ import annotations

import asyncio
import functools
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Optional,
    Set,
    TypeVar,
    Union,
)

from resilience_kit.caching.ttl_cache import TTLCache
from resilience_kit.domain.errors import EnrichedError
from resilience_kit.interfaces.environment_probe import EnvironmentProbe
from resilience_kit.resilience.error_classifier import enrich_exception
from resilience_kit.resilience.error_handler import (
    ErrorHandler,
    RetryConfig,
    SleepFunc,
    resolve,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]


class FallbackStrategy(str, Enum):
    """Named fallback algorithms."""

    CACHE_FIRST = "cache-first"
    CACHE_THEN_NETWORK = "cache-then-network"
    NETWORK_THEN_CACHE = "network-then-cache"
    STATIC_FALLBACK = "static-fallback"
    DEGRADED_MODE = "degraded-mode"
    RETRY_WITH_BACKOFF = "retry-with-backoff"


FallbackCallback = Callable[[FallbackStrategy, EnrichedError], None]


class _Missing:
    """Marker for an absent static fallback (None is a valid fallback)."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass
class FallbackConfig:
    """Per-call configuration for FallbackExecutor.run."""
    strategy: Union[FallbackStrategy, str]
    cache_key: Optional[str] = None
    cache_ttl: float = 300.0  # seconds; <= 0 disables caching
    static_fallback: Any = MISSING
    max_retries: int = 3
    retry_delay: float = 1.0  # seconds, doubled per attempt
    degraded_mode: Optional[Callable[[], Any]] = None
    on_fallback: Optional[FallbackCallback] = None
    error_context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Raises ValueError for unknown strategy names
        self.strategy = FallbackStrategy(self.strategy)
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.retry_delay < 0:
            raise ValueError(f"retry_delay must be >= 0, got {self.retry_delay}")

    @property
    def has_static_fallback(self) -> bool:
        return self.static_fallback is not MISSING


class FallbackExecutor:
    """
    Executes async operations under a named fallback strategy.

    Features:
        - Six strategies sharing one injected TTLCache
        - Background cache refresh for cache-then-network
        - Retry with backoff gated on retryable error kinds
    """

    def __init__(
        self,
        cache: Optional[TTLCache] = None,
        *,
        environment: Optional[EnvironmentProbe] = None,
        sleep_func: Optional[SleepFunc] = None,
    ) -> None:
        """
        Initialize fallback executor.

        Args:
            cache: Cache backing the cache strategies (a private one if None)
            environment: Probe used when enriching errors
            sleep_func: Injectable sleep for retry backoff
        """
        self.cache = cache if cache is not None else TTLCache()
        self.environment = environment
        # Backoff is retry_delay * 2**attempt, uncapped
        self._retry_handler = ErrorHandler(
            retry_config=RetryConfig(max_delay_seconds=math.inf, exponential_base=2.0),
            environment=environment,
            sleep_func=sleep_func,
        )
        self._refresh_tasks: Set[asyncio.Task] = set()
        self._strategies: Dict[
            FallbackStrategy, Callable[[Operation, FallbackConfig], Awaitable[Any]]
        ] = {
            FallbackStrategy.CACHE_FIRST: self._cache_first,
            FallbackStrategy.CACHE_THEN_NETWORK: self._cache_then_network,
            FallbackStrategy.NETWORK_THEN_CACHE: self._network_then_cache,
            FallbackStrategy.STATIC_FALLBACK: self._static_fallback,
            FallbackStrategy.DEGRADED_MODE: self._degraded_mode,
            FallbackStrategy.RETRY_WITH_BACKOFF: self._retry_with_backoff,
        }

    async def run(self, operation: Operation[T], config: FallbackConfig) -> T:
        """
        Execute ``operation`` under ``config.strategy``.

        Args:
            operation: Zero-argument callable returning an awaitable
            config: Strategy and its parameters

        Returns:
            Operation result, cached value, static fallback or degraded value

        Raises:
            Exception: The operation's original exception when no
                alternative is available
        """
        strategy = self._strategies[FallbackStrategy(config.strategy)]
        return await strategy(operation, config)

    def auto_fallback(
        self, config: FallbackConfig
    ) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
        """
        Decorate an async function so every call runs under ``config``.

        Example:
            >>> @executor.auto_fallback(FallbackConfig("static-fallback", static_fallback=[]))
            ... async def list_products(page: int) -> list: ...
        """

        def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
            @functools.wraps(func)
            async def wrapper(*args: Any, **kwargs: Any) -> T:
                return await self.run(lambda: func(*args, **kwargs), config)

            return wrapper

        return decorator

    @property
    def pending_refreshes(self) -> int:
        """Number of background refreshes still running."""
        return len(self._refresh_tasks)

    async def drain(self) -> None:
        """Wait for all background refreshes to finish."""
        while self._refresh_tasks:
            await asyncio.gather(*list(self._refresh_tasks), return_exceptions=True)

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    async def _cache_first(self, operation: Operation, config: FallbackConfig) -> Any:
        cached = self._read_cache(config)
        if cached is not None:
            return cached

        try:
            result = await operation()
        except Exception as e:
            self._observe_failure(e, config)
            if config.has_static_fallback:
                logger.warning(f"cache-first: serving static fallback for {config.cache_key}")
                return config.static_fallback
            raise

        self._write_cache(config, result)
        return result

    async def _cache_then_network(self, operation: Operation, config: FallbackConfig) -> Any:
        cached = self._read_cache(config)
        if cached is not None:
            self._schedule_refresh(operation, config)
            return cached

        try:
            result = await operation()
        except Exception as e:
            self._observe_failure(e, config)
            raise

        self._write_cache(config, result)
        return result

    async def _network_then_cache(self, operation: Operation, config: FallbackConfig) -> Any:
        try:
            result = await operation()
        except Exception as e:
            self._observe_failure(e, config)
            cached = self._read_cache(config)
            if cached is not None:
                logger.warning(f"network-then-cache: serving cached value for {config.cache_key}")
                return cached
            if config.has_static_fallback:
                logger.warning(
                    f"network-then-cache: serving static fallback for {config.cache_key}"
                )
                return config.static_fallback
            raise

        self._write_cache(config, result)
        return result

    async def _static_fallback(self, operation: Operation, config: FallbackConfig) -> Any:
        try:
            return await operation()
        except Exception as e:
            self._observe_failure(e, config)
            if config.has_static_fallback:
                logger.warning("static-fallback: serving static fallback")
                return config.static_fallback
            raise

    async def _degraded_mode(self, operation: Operation, config: FallbackConfig) -> Any:
        try:
            return await operation()
        except Exception as e:
            self._observe_failure(e, config)
            if config.degraded_mode is not None:
                logger.warning("degraded-mode: serving degraded result")
                return await resolve(config.degraded_mode())
            raise

    async def _retry_with_backoff(self, operation: Operation, config: FallbackConfig) -> Any:
        strategy = FallbackStrategy.RETRY_WITH_BACKOFF
        return await self._retry_handler.with_error_handling(
            operation,
            on_error=lambda error: self._notify(config, strategy, error),
            retries=config.max_retries,
            retry_delay=config.retry_delay,
            error_context={**config.error_context, "strategy": strategy.value},
            operation_name=f"{strategy.value}({config.cache_key or 'operation'})",
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _read_cache(self, config: FallbackConfig) -> Optional[Any]:
        if not config.cache_key:
            return None
        return self.cache.get(config.cache_key)

    def _write_cache(self, config: FallbackConfig, value: Any) -> None:
        if config.cache_key:
            self.cache.set(config.cache_key, value, config.cache_ttl)

    def _schedule_refresh(self, operation: Operation, config: FallbackConfig) -> None:
        task = asyncio.get_running_loop().create_task(self._refresh(operation, config))
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)

    async def _refresh(self, operation: Operation, config: FallbackConfig) -> None:
        try:
            result = await operation()
        except Exception as e:
            self._observe_failure(e, config, background=True)
            logger.debug(f"Background refresh for {config.cache_key} failed: {e}")
            return
        # Last write wins against any concurrent writer of the same key
        self._write_cache(config, result)
        logger.debug(f"Background refresh updated {config.cache_key}")

    def _observe_failure(
        self,
        exc: Exception,
        config: FallbackConfig,
        background: bool = False,
    ) -> EnrichedError:
        strategy = FallbackStrategy(config.strategy)
        context: Dict[str, Any] = {**config.error_context, "strategy": strategy.value}
        if config.cache_key:
            context["cache_key"] = config.cache_key
        if background:
            context["background"] = True
        enriched = enrich_exception(exc, context=context, environment=self.environment)
        logger.warning(f"{strategy.value} observed failure: {enriched}")
        self._notify(config, strategy, enriched)
        return enriched

    def _notify(
        self,
        config: FallbackConfig,
        strategy: FallbackStrategy,
        error: EnrichedError,
    ) -> None:
        if config.on_fallback is None:
            return
        try:
            config.on_fallback(strategy, error)
        except Exception:
            logger.exception(f"on_fallback hook failed for {strategy.value}")
