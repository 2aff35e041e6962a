"""
Error Reporter Protocol.

Defines the sink through which enriched errors leave the resilience
layer (monitoring service, log aggregator, test spy).

Design Notes:
    - Fire-and-forget: the caller never waits on or inspects the result
    - Implementations may raise; report_error() shields callers from it
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from resilience_kit.domain.errors import EnrichedError


@runtime_checkable
class ErrorReporter(Protocol):
    """Abstract interface for error reporting sinks."""

    def report(self, error: "EnrichedError") -> None:
        """Forward an enriched error to the sink."""
        ...
