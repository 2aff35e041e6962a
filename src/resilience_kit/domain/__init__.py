"""
Domain Layer - Value Objects for the Resilience Layer.

This package contains the core domain model shared by the classifier,
the fallback executor and the loading state machine. Everything here is
pure Python plus Pydantic for validation.

Value Objects:
    - ErrorKind / Severity: Classification axes for failures
    - ErrorOrigin: Best-effort environment capture
    - EnrichedError: Immutable, severity-ranked, retry-aware error record
    - LoadingState / LoadingSnapshot: Observable loading session state

Design Principles:
    - Immutable where possible (frozen models)
    - No infrastructure dependencies
"""

from resilience_kit.domain.errors import (
    EnrichedError,
    ErrorKind,
    ErrorOrigin,
    Severity,
)
from resilience_kit.domain.loading import LoadingSnapshot, LoadingState

__all__ = [
    "EnrichedError",
    "ErrorKind",
    "ErrorOrigin",
    "Severity",
    "LoadingSnapshot",
    "LoadingState",
]
