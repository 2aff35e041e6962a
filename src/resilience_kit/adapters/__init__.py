"""
Adapters Package - Infrastructure Implementations.

This package contains concrete implementations of the abstract
interfaces defined in the interfaces package. Following the
Hexagonal Architecture (Ports & Adapters) pattern.

Environment:
    - NullEnvironmentProbe: Runtimes with no ambient information
    - StaticEnvironmentProbe: Fixed values (CLI, servers, tests)

Health:
    - HttpEndpointProbe: HEAD request via httpx

Reporting:
    - LoggingErrorReporter: Enriched errors to the logging system

Design Principles:
    - All adapters implement their respective protocols
    - Easily swappable via Dependency Injection
    - No business logic in adapters
"""

from resilience_kit.adapters.environment import (
    NullEnvironmentProbe,
    StaticEnvironmentProbe,
    is_offline,
)
from resilience_kit.adapters.http_probe import HttpEndpointProbe, check_api_health
from resilience_kit.adapters.logging_reporter import LoggingErrorReporter

__all__ = [
    "NullEnvironmentProbe",
    "StaticEnvironmentProbe",
    "is_offline",
    "HttpEndpointProbe",
    "check_api_health",
    "LoggingErrorReporter",
]
