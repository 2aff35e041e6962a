"""
Health Monitor - Advisory Health Checks for the Resilience Layer.

Provides checks a caller can run before or alongside remote calls:
    - Network: the environment reports being online
    - Endpoint: an out-of-band HEAD probe succeeds
    - Cache: the fallback cache is actually being hit

Design Notes:
    - Advisory only; nothing in the fallback strategies is gated on it
    - Returns HealthStatus with pass/warn/fail and details
    - Logs anomalies via the module logger
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from resilience_kit.adapters.http_probe import check_api_health
from resilience_kit.caching.ttl_cache import TTLCache
from resilience_kit.config.models import HealthMonitorConfig
from resilience_kit.interfaces.environment_probe import EnvironmentProbe
from resilience_kit.interfaces.health_probe import EndpointHealthProbe

logger = logging.getLogger(__name__)


class HealthCheckResult(Enum):
    """Result of a health check."""
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass
class HealthCheck:
    """Individual health check result."""
    name: str
    result: HealthCheckResult
    message: str
    value: Optional[float] = None
    threshold: Optional[float] = None


@dataclass
class HealthStatus:
    """Overall health status."""
    is_healthy: bool
    checks: List[HealthCheck] = field(default_factory=list)
    timestamp: str = ""

    def __post_init__(self) -> None:
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    def add_check(self, check: HealthCheck) -> None:
        """Add a health check result."""
        self.checks.append(check)
        if check.result == HealthCheckResult.FAIL:
            self.is_healthy = False

    @property
    def summary(self) -> Dict[str, Any]:
        """Get summary of health status."""
        return {
            "is_healthy": self.is_healthy,
            "timestamp": self.timestamp,
            "checks": {
                c.name: {
                    "result": c.result.value,
                    "message": c.message,
                    "value": c.value,
                    "threshold": c.threshold,
                }
                for c in self.checks
            },
        }


class HealthMonitor:
    """
    Monitor the health of the resilience layer's collaborators.

    Each check is skipped when its collaborator was not supplied.
    """

    def __init__(
        self,
        config: Optional[HealthMonitorConfig] = None,
        environment: Optional[EnvironmentProbe] = None,
        endpoint_probe: Optional[EndpointHealthProbe] = None,
        cache: Optional[TTLCache] = None,
    ) -> None:
        """
        Initialize health monitor.

        Args:
            config: Health monitoring configuration
            environment: Probe for online status
            endpoint_probe: Probe for endpoint liveness
            cache: Cache whose statistics to inspect
        """
        self.config = config or HealthMonitorConfig()
        self.environment = environment
        self.endpoint_probe = endpoint_probe
        self.cache = cache

    async def check(self) -> HealthStatus:
        """
        Run all enabled checks.

        Returns:
            HealthStatus with check results
        """
        status = HealthStatus(is_healthy=True)

        if not self.config.enabled:
            return status

        checks: List[HealthCheck] = []
        if self.config.check_network and self.environment is not None:
            checks.append(self._check_network(self.environment))
        if self.config.check_endpoint and self.endpoint_probe is not None:
            checks.append(await self._check_endpoint(self.endpoint_probe))
        if self.config.check_cache and self.cache is not None:
            checks.append(self._check_cache(self.cache))

        for check in checks:
            status.add_check(check)
            if check.result != HealthCheckResult.PASS:
                self._log_anomaly(check)

        return status

    def _check_network(self, environment: EnvironmentProbe) -> HealthCheck:
        """Check reported network reachability."""
        online = environment.is_online()

        if online is False:
            return HealthCheck(
                name="network",
                result=HealthCheckResult.FAIL,
                message="Environment reports being offline",
            )
        elif online is None:
            return HealthCheck(
                name="network",
                result=HealthCheckResult.WARN,
                message="Network status unknown",
            )
        else:
            return HealthCheck(
                name="network",
                result=HealthCheckResult.PASS,
                message="Network reachable",
            )

    async def _check_endpoint(self, probe: EndpointHealthProbe) -> HealthCheck:
        """Probe the configured health endpoint."""
        endpoint = self.config.endpoint
        healthy = await check_api_health(probe, endpoint)

        if healthy:
            return HealthCheck(
                name="endpoint",
                result=HealthCheckResult.PASS,
                message=f"Endpoint {endpoint} healthy",
            )
        return HealthCheck(
            name="endpoint",
            result=HealthCheckResult.FAIL,
            message=f"Endpoint {endpoint} unreachable or unhealthy",
        )

    def _check_cache(self, cache: TTLCache) -> HealthCheck:
        """Check that the cache hit rate is plausible."""
        stats = cache.get_stats()
        lookups = stats.hits + stats.misses
        threshold = self.config.warn_cache_hit_rate

        if lookups < self.config.min_cache_lookups:
            return HealthCheck(
                name="cache_hit_rate",
                result=HealthCheckResult.PASS,
                message=f"Only {lookups} cache lookups, hit rate not evaluated",
                value=stats.hit_rate,
                threshold=threshold,
            )
        elif stats.hit_rate < threshold:
            return HealthCheck(
                name="cache_hit_rate",
                result=HealthCheckResult.WARN,
                message=f"Cache hit rate {stats.hit_rate:.1%} below {threshold:.1%}",
                value=stats.hit_rate,
                threshold=threshold,
            )
        else:
            return HealthCheck(
                name="cache_hit_rate",
                result=HealthCheckResult.PASS,
                message=f"Cache hit rate {stats.hit_rate:.1%} OK",
                value=stats.hit_rate,
                threshold=threshold,
            )

    def _log_anomaly(self, check: HealthCheck) -> None:
        """Log health check anomaly."""
        log_fn = logger.error if check.result == HealthCheckResult.FAIL else logger.warning
        log_fn(f"Health check {check.name}: {check.message}")
