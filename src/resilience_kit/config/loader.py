"""
Configuration Loader - YAML Loading with Validation.

Loads resilience settings from YAML files, optionally overlaid with a
named profile, and validates them using the Pydantic models.

Lookup order for load_config():
    1. Explicit ``config_path`` argument
    2. $RESILIENCE_KIT_CONFIG
    3. Built-in defaults

The profile is taken from the ``profile`` argument, else from
$RESILIENCE_KIT_PROFILE.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from resilience_kit.config.models import ResilienceSettings

logger = logging.getLogger(__name__)

CONFIG_PATH_ENV = "RESILIENCE_KIT_CONFIG"
PROFILE_ENV = "RESILIENCE_KIT_PROFILE"

DEFAULT_PROFILES_DIR = Path("config") / "profiles"


def deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge ``overlay`` into a copy of ``base``; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Loads and validates resilience settings from YAML files."""

    def __init__(
        self,
        base_path: Optional[Path] = None,
        profiles_dir: Union[str, Path] = DEFAULT_PROFILES_DIR,
    ) -> None:
        """
        Initialize config loader.

        Args:
            base_path: Base path for relative config paths
            profiles_dir: Profile directory, relative to base_path
        """
        self._base_path = base_path or Path(".")
        self._profiles_dir = Path(profiles_dir)

    def load(
        self,
        config_path: Union[str, Path],
        profile: Optional[str] = None,
    ) -> ResilienceSettings:
        """
        Load settings from a YAML file.

        Args:
            config_path: Path to YAML config file
            profile: Optional profile name to merge on top

        Returns:
            Validated ResilienceSettings object

        Raises:
            FileNotFoundError: If config file or profile doesn't exist
            ValueError: If the file does not contain a mapping
            ValidationError: If settings are invalid
        """
        path = self._resolve_path(config_path)
        raw = self._read_mapping(path)

        if profile:
            raw = deep_merge(raw, self._read_mapping(self._profile_path(profile)))
            logger.debug(f"Applied profile '{profile}' to {path}")

        settings = self.load_from_dict(raw)
        logger.info(f"Loaded resilience settings from {path}")
        return settings

    def load_from_dict(self, config_dict: Mapping[str, Any]) -> ResilienceSettings:
        """Validate settings given as a mapping."""
        return ResilienceSettings.model_validate(dict(config_dict))

    def _resolve_path(self, path: Union[str, Path]) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self._base_path / p

    def _profile_path(self, profile: str) -> Path:
        path = self._base_path / self._profiles_dir / f"{profile}.yaml"
        if not path.exists():
            raise FileNotFoundError(f"Profile not found: {profile} (looked in {path.parent})")
        return path

    @staticmethod
    def _read_mapping(path: Path) -> Dict[str, Any]:
        """Read a YAML mapping; an empty document yields an empty dict."""
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Config file {path} must contain a mapping, got {type(data).__name__}"
            )
        return data


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    profile: Optional[str] = None,
    base_path: Optional[Path] = None,
) -> ResilienceSettings:
    """
    Convenience function to load settings.

    Args:
        config_path: Path to YAML config file
        profile: Optional profile name
        base_path: Base path for resolving relative paths

    Returns:
        Validated ResilienceSettings object (defaults when no file is named)
    """
    path = config_path or os.environ.get(CONFIG_PATH_ENV)
    if not path:
        logger.debug("No settings file configured, using defaults")
        return ResilienceSettings()
    profile = profile or os.environ.get(PROFILE_ENV) or None
    return ConfigLoader(base_path=base_path).load(path, profile)
