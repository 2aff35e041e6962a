"""
Observability Package - Health Checks.

    - HealthMonitor: Network, endpoint and cache checks
    - HealthStatus / HealthCheck / HealthCheckResult: Check results
"""

from resilience_kit.observability.health_monitor import (
    HealthCheck,
    HealthCheckResult,
    HealthMonitor,
    HealthStatus,
)

__all__ = ["HealthCheck", "HealthCheckResult", "HealthMonitor", "HealthStatus"]
