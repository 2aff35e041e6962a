"""
Endpoint Health Probe Protocol.

Defines the abstract interface for an out-of-band liveness check
against a remote endpoint (a HEAD-style request).

Design Notes:
    - Returns a plain bool, never raises
    - Advisory only: callers decide what to do with the answer
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class EndpointHealthProbe(Protocol):
    """Abstract interface for endpoint health checks."""

    async def check(self, endpoint: str) -> bool:
        """
        Probe an endpoint.

        Args:
            endpoint: URL or path to probe

        Returns:
            True if the endpoint answered successfully
        """
        ...
