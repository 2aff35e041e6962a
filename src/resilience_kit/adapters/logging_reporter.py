"""
Logging Error Reporter.

An ErrorReporter that writes enriched errors to the standard logging
system, at a level matching their severity.
"""

from __future__ import annotations

import logging
from typing import Optional

from resilience_kit.domain.errors import EnrichedError, Severity

_LEVELS = {
    Severity.LOW: logging.INFO,
    Severity.MEDIUM: logging.WARNING,
    Severity.HIGH: logging.ERROR,
    Severity.CRITICAL: logging.CRITICAL,
}


class LoggingErrorReporter:
    """Report enriched errors through a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        """
        Initialize reporter.

        Args:
            logger: Target logger (defaults to this module's logger)
        """
        self._logger = logger or logging.getLogger(__name__)

    def report(self, error: EnrichedError) -> None:
        """Log the error with its kind, severity and flags."""
        level = _LEVELS.get(error.severity, logging.WARNING)
        self._logger.log(
            level,
            f"Error reported: {error} "
            f"(recoverable={error.recoverable}, retryable={error.retryable})",
            extra={"enriched_error": error.to_dict()},
        )
