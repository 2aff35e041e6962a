"""
Resilience Package - Error Classification and Fallback Execution.

This package makes unreliable remote operations behave predictably:
    - error_classifier: Typed, severity-ranked, retry-aware error records
    - ErrorHandler: Retry, fallback and batch handling for async operations
    - FallbackExecutor: Six named fallback strategies over a TTL cache

Design Principles:
    - Fail fast for errors that retrying cannot fix
    - Retry with backoff for network and server errors
    - Serve cached, static or degraded data when the source is down
    - Propagate the original exception when nothing can stand in
"""

from resilience_kit.resilience.error_classifier import (
    classify,
    enrich,
    enrich_exception,
    is_recoverable,
    severity_of,
    should_retry,
    user_facing_message,
)
from resilience_kit.resilience.error_handler import (
    BatchResult,
    ErrorHandler,
    RetryConfig,
    report_error,
)
from resilience_kit.resilience.fallback_executor import (
    MISSING,
    FallbackConfig,
    FallbackExecutor,
    FallbackStrategy,
)

__all__ = [
    "classify",
    "enrich",
    "enrich_exception",
    "is_recoverable",
    "severity_of",
    "should_retry",
    "user_facing_message",
    "BatchResult",
    "ErrorHandler",
    "RetryConfig",
    "report_error",
    "MISSING",
    "FallbackConfig",
    "FallbackExecutor",
    "FallbackStrategy",
]
