"""
Environment Probe Protocol.

Defines the abstract interface for ambient environment reads. The
classifier uses it to capture where an error happened, callers use it
for an advisory offline check.

The environment probe is responsible for:
    - Reporting the client identity (user agent)
    - Reporting the current location (URL, route, command line)
    - Reporting whether the network is believed reachable

Design Notes:
    - Every query may return None when the runtime has no such concept
    - Queries are synchronous and must not perform I/O
    - Advisory only: nothing in the fallback strategies is gated on it
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class EnvironmentProbe(Protocol):
    """Abstract interface for ambient environment reads."""

    def user_agent(self) -> Optional[str]:
        """Return the client identity, or None if unknown."""
        ...

    def current_url(self) -> Optional[str]:
        """Return the current location, or None if unknown."""
        ...

    def is_online(self) -> Optional[bool]:
        """
        Report network reachability.

        Returns:
            True/False when the runtime knows, None otherwise
        """
        ...
