"""
Error Handler - Async Error Handling Wrappers.

Provides:
    - Retry with exponential backoff, gated on retryable error kinds
    - Fallback value/computation after retries are exhausted
    - Never-raising wrapper for optional operations
    - Batch handling with partial failures
    - Error reporting to a pluggable sink

Design Notes:
    - Every failure is enriched before observers see it
    - The original exception is re-raised, never a wrapper
    - Observer callbacks cannot break the operation they observe
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Generic,
    List,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
)

from resilience_kit.domain.errors import EnrichedError
from resilience_kit.interfaces.environment_probe import EnvironmentProbe
from resilience_kit.interfaces.error_reporter import ErrorReporter
from resilience_kit.resilience.error_classifier import enrich_exception, should_retry

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[Any]]
ErrorCallback = Callable[[EnrichedError], None]


@dataclass
class RetryConfig:
    """Configuration for retry logic."""
    max_retries: int = 3  # Additional attempts after the first
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 30.0
    exponential_base: float = 2.0


@dataclass
class BatchResult(Generic[T]):
    """Result of a batch of operations that may partially fail."""
    results: List[Optional[T]] = field(default_factory=list)
    errors: List[Tuple[int, EnrichedError]] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.results) - len(self.errors)

    @property
    def success_rate(self) -> float:
        """Calculate success rate (0.0 to 1.0)."""
        if not self.results:
            return 1.0
        return self.success_count / len(self.results)

    @property
    def has_failures(self) -> bool:
        return len(self.errors) > 0

    @property
    def all_failed(self) -> bool:
        return len(self.results) > 0 and self.success_count == 0


async def resolve(value: Any) -> Any:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


def notify_error(callback: Optional[ErrorCallback], error: EnrichedError) -> None:
    """Invoke an observer callback; its failures are logged, never raised."""
    if callback is None:
        return
    try:
        callback(error)
    except Exception:
        logger.exception(f"Error callback failed while handling: {error}")


def report_error(
    error: EnrichedError,
    reporter: Optional[ErrorReporter] = None,
) -> None:
    """
    Hand an enriched error to a reporting sink.

    Args:
        error: Error to report
        reporter: Sink (defaults to LoggingErrorReporter)
    """
    if reporter is None:
        from resilience_kit.adapters.logging_reporter import LoggingErrorReporter

        reporter = LoggingErrorReporter()
    try:
        reporter.report(error)
    except Exception:
        logger.exception("Error reporter failed")


class ErrorHandler:
    """
    Async error handling for remote operations.

    Features:
        - Retry with exponential backoff for network/server failures
        - Fallback after exhausted retries
        - Partial failure handling for batches
    """

    def __init__(
        self,
        retry_config: Optional[RetryConfig] = None,
        environment: Optional[EnvironmentProbe] = None,
        sleep_func: Optional[SleepFunc] = None,
    ) -> None:
        """
        Initialize error handler.

        Args:
            retry_config: Configuration for retry logic
            environment: Probe used when enriching errors
            sleep_func: Injectable sleep for tests (default asyncio.sleep)
        """
        self.retry_config = retry_config or RetryConfig()
        self.environment = environment
        self._sleep = sleep_func or asyncio.sleep

    async def with_error_handling(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        fallback: Optional[Callable[[], Any]] = None,
        on_error: Optional[ErrorCallback] = None,
        retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        error_context: Optional[Dict[str, Any]] = None,
        operation_name: str = "operation",
    ) -> T:
        """
        Execute an async operation with retry and optional fallback.

        Args:
            operation: Zero-argument callable returning an awaitable
            fallback: Called after the last failure (sync or async)
            on_error: Observer receiving every enriched failure
            retries: Additional attempts (default from RetryConfig)
            retry_delay: Base delay in seconds (default from RetryConfig)
            error_context: Extra context stored in error details
            operation_name: Name for logging

        Returns:
            Result of the operation, or of the fallback

        Raises:
            Exception: The last original exception when nothing recovered
        """
        max_retries = self.retry_config.max_retries if retries is None else retries
        if max_retries < 0:
            raise ValueError(f"retries must be >= 0, got {max_retries}")
        base_delay = (
            self.retry_config.base_delay_seconds if retry_delay is None else retry_delay
        )
        context = dict(error_context or {})

        last_exception: Exception

        for attempt in range(max_retries + 1):
            try:
                result = await operation()
                if attempt > 0:
                    logger.info(f"{operation_name} succeeded on attempt {attempt + 1}")
                return result

            except Exception as e:
                last_exception = e
                enriched = enrich_exception(
                    e,
                    context={**context, "is_retry": attempt > 0},
                    details={
                        "attempt": attempt + 1,
                        "max_attempts": max_retries + 1,
                    },
                    environment=self.environment,
                )
                notify_error(on_error, enriched)

                if attempt == max_retries:
                    logger.error(
                        f"{operation_name} failed after {attempt + 1} attempts: {e}"
                    )
                    break
                if not should_retry(enriched):
                    logger.warning(
                        f"{operation_name} failed with non-retryable "
                        f"{enriched.kind.value} error: {e}"
                    )
                    break

                delay = self._calculate_delay(attempt, base_delay)
                logger.warning(
                    f"{operation_name} failed (attempt {attempt + 1}/{max_retries + 1}), "
                    f"retrying in {delay:.2f}s: {e}"
                )
                if delay > 0:
                    await self._sleep(delay)

        if fallback is not None:
            try:
                return await resolve(fallback())
            except Exception as fallback_error:
                logger.warning(f"{operation_name} fallback failed: {fallback_error}")

        raise last_exception

    def _calculate_delay(self, attempt: int, base_delay: float) -> float:
        """Calculate delay with exponential backoff (attempt is 0-based)."""
        delay = base_delay * (self.retry_config.exponential_base ** attempt)
        return min(delay, self.retry_config.max_delay_seconds)

    async def safe_async(
        self,
        operation: Callable[[], Awaitable[T]],
        fallback_value: T,
        *,
        on_error: Optional[ErrorCallback] = None,
        error_context: Optional[Dict[str, Any]] = None,
    ) -> T:
        """
        Execute an operation that must never raise.

        Returns:
            Result of the operation, or ``fallback_value`` on any failure
        """
        try:
            return await self.with_error_handling(
                operation,
                fallback=lambda: fallback_value,
                on_error=on_error,
                retries=0,
                error_context=error_context,
            )
        except Exception:
            return fallback_value

    async def handle_batch(
        self,
        operations: Sequence[Callable[[], Awaitable[T]]],
        *,
        fail_fast: bool = False,
        on_error: Optional[Callable[[EnrichedError, int], None]] = None,
        error_context: Optional[Dict[str, Any]] = None,
        operation_name: str = "batch operation",
    ) -> BatchResult[T]:
        """
        Run operations sequentially, allowing partial failures.

        Args:
            operations: Zero-argument async callables
            fail_fast: Re-raise the first original exception
            on_error: Observer receiving (error, index)
            error_context: Extra context stored in error details
            operation_name: Name for logging

        Returns:
            BatchResult with one slot per operation (None where it failed)
        """
        result: BatchResult[T] = BatchResult()
        total = len(operations)

        for index, operation in enumerate(operations):
            try:
                result.results.append(await operation())
            except Exception as e:
                enriched = enrich_exception(
                    e,
                    context=error_context,
                    details={"operation_index": index, "total_operations": total},
                    environment=self.environment,
                )
                if on_error is not None:
                    notify_error(lambda err: on_error(err, index), enriched)
                result.results.append(None)
                result.errors.append((index, enriched))
                logger.warning(f"{operation_name} failed at index {index}: {e}")

                if fail_fast:
                    raise

        if result.has_failures:
            logger.warning(
                f"{operation_name} completed with {len(result.errors)} failures "
                f"({result.success_rate:.1%} success rate)"
            )

        return result
