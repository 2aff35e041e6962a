"""
Interfaces Layer - Abstract Protocols for Collaborators.

This package defines the abstract interfaces (using typing.Protocol) for
everything outside the resilience layer. High-level modules depend on
these abstractions, not on concrete implementations.

Protocols:
    - EnvironmentProbe: User agent, URL and online status
    - EndpointHealthProbe: Out-of-band endpoint liveness check
    - ErrorReporter: Sink for enriched errors

Design Principles:
    - Use typing.Protocol (not ABC) for Pythonic interfaces
    - Interface Segregation: Small, focused interfaces
    - No implementation details leak into interfaces
"""

from resilience_kit.interfaces.environment_probe import EnvironmentProbe
from resilience_kit.interfaces.error_reporter import ErrorReporter
from resilience_kit.interfaces.health_probe import EndpointHealthProbe

__all__ = ["EnvironmentProbe", "EndpointHealthProbe", "ErrorReporter"]
