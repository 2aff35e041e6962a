"""
HTTP Endpoint Probe.

EndpointHealthProbe backed by httpx. Sends a HEAD request with caching
disabled and reports whether the endpoint answered with a 2xx status.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from resilience_kit.interfaces.health_probe import EndpointHealthProbe

logger = logging.getLogger(__name__)

DEFAULT_HEALTH_ENDPOINT = "/api/health"


class HttpEndpointProbe:
    """HEAD-request health probe using an httpx AsyncClient."""

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize HTTP probe.

        Args:
            base_url: Prefix for relative endpoints
            timeout: Request timeout in seconds
            transport: Custom httpx transport (mainly for tests)
        """
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def check(self, endpoint: str) -> bool:
        """Return True if HEAD <endpoint> succeeds with a 2xx status."""
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.head(
                    endpoint, headers={"Cache-Control": "no-cache"}
                )
        except httpx.HTTPError as e:
            logger.debug(f"Health probe for {endpoint} failed: {e}")
            return False

        healthy = response.is_success
        if not healthy:
            logger.debug(
                f"Health probe for {endpoint} returned {response.status_code}"
            )
        return healthy


async def check_api_health(
    probe: EndpointHealthProbe,
    endpoint: str = DEFAULT_HEALTH_ENDPOINT,
) -> bool:
    """
    Check whether an API endpoint is reachable.

    Args:
        probe: Probe used to perform the check
        endpoint: Endpoint to probe

    Returns:
        True if healthy, False on any failure
    """
    try:
        return await probe.check(endpoint)
    except Exception as e:
        logger.warning(f"Health probe raised for {endpoint}: {e}")
        return False
