"""
Resilience Kit - Client-Side Resilience for Unreliable Operations.

Makes remote calls behave predictably for interactive applications:
failures are classified into typed, severity-ranked records, primary
operations run under named fallback strategies backed by a TTL cache,
and a timer-driven state machine governs when loading indicators show.

Architecture:
    - Hexagonal Architecture (Ports & Adapters)
    - Dependency Injection for testability (no module-level cache)
    - Strategy Pattern for fallback algorithms
    - Configuration-driven behavior via YAML

Main Components:
    - domain: EnrichedError, ErrorKind, Severity, LoadingSnapshot
    - interfaces: EnvironmentProbe, EndpointHealthProbe, ErrorReporter
    - resilience: error classifier, ErrorHandler, FallbackExecutor
    - caching: TTLCache
    - loading: LoadingStateMachine, LoadingStateGroup, simulate_progress
    - adapters: Environment probes, httpx health probe, logging reporter
    - observability: HealthMonitor
    - config: Configuration models and loaders

Example:
    >>> from resilience_kit.factory import create_resilience_layer
    >>> layer = create_resilience_layer()
    >>> config = layer.fallback_config("network-then-cache", cache_key="products", static_fallback=[])
    >>> products = await layer.executor.run(fetch_products, config)

"""

import logging

__version__ = "0.1.0"


def configure_logging(
    level: int = logging.INFO,
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
) -> None:
    """
    Configure logging for Resilience Kit.

    Call this at application startup to see log messages.
    By default, only WARNING and above are visible.

    Args:
        level: Logging level (default: INFO)
        format: Log message format

    Example:
        >>> import resilience_kit
        >>> resilience_kit.configure_logging(logging.DEBUG)
    """
    logging.basicConfig(
        level=level,
        format=format,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger("resilience_kit").setLevel(level)
