"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at load time using Pydantic. Durations
are in seconds.
"""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field


class CacheConfig(BaseModel):
    """Configuration for the TTL cache."""

    enabled: bool = True
    default_ttl_seconds: float = Field(default=300.0)
    max_entries: Optional[int] = Field(default=None, ge=1)
    log_access: bool = False


class FallbackDefaults(BaseModel):
    """Defaults applied to fallback calls that do not override them."""

    cache_ttl_seconds: float = Field(default=300.0)
    max_retries: int = Field(default=3, ge=0)
    retry_delay_seconds: float = Field(default=1.0, ge=0)


class RetrySettings(BaseModel):
    """Configuration for the standalone error handler."""

    max_retries: int = Field(default=3, ge=0)
    base_delay_seconds: float = Field(default=1.0, ge=0)
    max_delay_seconds: float = Field(default=30.0, ge=0)
    exponential_base: float = Field(default=2.0, ge=1)


class LoadingConfig(BaseModel):
    """Timing configuration for a loading state machine."""

    min_loading_time: float = Field(default=0.3, ge=0)
    timeout: float = Field(default=30.0, ge=0)  # 0 disables the timeout
    show_loading_after: float = Field(default=0.15, ge=0)

    model_config = {"frozen": True}


# Presets for common UI patterns
LOADING_PATTERNS: Dict[str, LoadingConfig] = {
    "button": LoadingConfig(min_loading_time=0.5, show_loading_after=0.0, timeout=10.0),
    "page": LoadingConfig(min_loading_time=0.2, show_loading_after=0.1, timeout=30.0),
    "form": LoadingConfig(min_loading_time=0.8, show_loading_after=0.0, timeout=15.0),
    "data": LoadingConfig(min_loading_time=0.0, show_loading_after=0.2, timeout=20.0),
    "upload": LoadingConfig(min_loading_time=0.0, show_loading_after=0.0, timeout=60.0),
}


class HealthMonitorConfig(BaseModel):
    """Configuration for health monitoring."""

    enabled: bool = True
    endpoint: str = "/api/health"
    check_network: bool = True
    check_endpoint: bool = True
    check_cache: bool = True
    warn_cache_hit_rate: float = Field(default=0.2, ge=0, le=1)
    min_cache_lookups: int = Field(default=20, ge=0)


class ResilienceSettings(BaseModel):
    """Root configuration object."""

    version: str = "1.0"
    cache: CacheConfig = Field(default_factory=CacheConfig)
    fallback: FallbackDefaults = Field(default_factory=FallbackDefaults)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    loading: LoadingConfig = Field(default_factory=LoadingConfig)
    loading_patterns: Dict[str, LoadingConfig] = Field(
        default_factory=lambda: dict(LOADING_PATTERNS),
    )
    health_monitoring: HealthMonitorConfig = Field(
        default_factory=HealthMonitorConfig,
    )

    def get_loading_pattern(self, name: str) -> LoadingConfig:
        """
        Look up a loading pattern preset.

        Raises:
            KeyError: If no pattern with that name is configured
        """
        try:
            return self.loading_patterns[name]
        except KeyError:
            raise KeyError(
                f"Unknown loading pattern '{name}', "
                f"available: {sorted(self.loading_patterns)}"
            ) from None


def get_loading_pattern(name: str) -> LoadingConfig:
    """Look up one of the built-in loading pattern presets."""
    return ResilienceSettings().get_loading_pattern(name)
