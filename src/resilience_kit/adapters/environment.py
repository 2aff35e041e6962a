"""
Environment Probes.

Concrete EnvironmentProbe implementations for runtimes without a
browser: a null probe that knows nothing, and a static probe that
returns fixed values (CLI tools, servers, tests).
"""

from __future__ import annotations

from typing import Optional

from resilience_kit.interfaces.environment_probe import EnvironmentProbe


class NullEnvironmentProbe:
    """Probe for runtimes with no ambient environment information."""

    def user_agent(self) -> Optional[str]:
        return None

    def current_url(self) -> Optional[str]:
        return None

    def is_online(self) -> Optional[bool]:
        return None


class StaticEnvironmentProbe:
    """Probe returning values fixed at construction time."""

    def __init__(
        self,
        user_agent: Optional[str] = None,
        url: Optional[str] = None,
        online: Optional[bool] = None,
    ) -> None:
        """
        Initialize static probe.

        Args:
            user_agent: Client identity to report
            url: Location to report
            online: Reachability to report (None = unknown)
        """
        self._user_agent = user_agent
        self._url = url
        self._online = online

    def set_online(self, online: Optional[bool]) -> None:
        """Change the reported reachability."""
        self._online = online

    def user_agent(self) -> Optional[str]:
        return self._user_agent

    def current_url(self) -> Optional[str]:
        return self._url

    def is_online(self) -> Optional[bool]:
        return self._online


def is_offline(probe: Optional[EnvironmentProbe] = None) -> bool:
    """
    Check whether the environment reports being offline.

    Only an explicit ``False`` from the probe counts as offline; an
    unknown status is treated as online.
    """
    if probe is None:
        return False
    return probe.is_online() is False
