"""
Configuration Package - Models and Loaders.

This package handles all configuration aspects of the resilience layer:
    - Pydantic models for type-safe configuration
    - YAML loader with validation
    - Support for configuration profiles

Configuration Structure:
    - ResilienceSettings: Root configuration object
    - CacheConfig: TTL cache settings
    - FallbackDefaults: Defaults for fallback calls
    - RetrySettings: Standalone error handler retry settings
    - LoadingConfig: Loading state machine timings (plus named presets)
    - HealthMonitorConfig: Health check settings

Design Principles:
    - Type-safe via Pydantic
    - Validation on load (fail fast)
    - Support for profiles (e.g. mobile, server)
"""

from resilience_kit.config.loader import ConfigLoader, deep_merge, load_config
from resilience_kit.config.models import (
    LOADING_PATTERNS,
    CacheConfig,
    FallbackDefaults,
    HealthMonitorConfig,
    LoadingConfig,
    ResilienceSettings,
    RetrySettings,
    get_loading_pattern,
)

__all__ = [
    "ConfigLoader",
    "deep_merge",
    "load_config",
    "LOADING_PATTERNS",
    "CacheConfig",
    "FallbackDefaults",
    "HealthMonitorConfig",
    "LoadingConfig",
    "ResilienceSettings",
    "RetrySettings",
    "get_loading_pattern",
]
