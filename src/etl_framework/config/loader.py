"""
Configuration Loader - YAML Loading with Validation.

Loads pipeline configuration from YAML files and validates it using
Pydantic models. A profile (``profiles/<name>.yaml`` under the base path)
can be deep-merged over the base file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from etl_framework.config.models import PipelineConfig, RunOptions

PROFILES_DIR = "profiles"


class ConfigLoader:
    """Loads and validates pipeline configuration."""

    def __init__(self, base_path: Optional[Path] = None) -> None:
        """
        Initialize config loader.

        Args:
            base_path: Base path for relative config and profile paths
        """
        self._base_path = base_path or Path(".")

    def load(
        self,
        config_path: Union[str, Path],
        profile: Optional[str] = None,
    ) -> PipelineConfig:
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to YAML config file
            profile: Optional profile name to merge over the file

        Returns:
            Validated PipelineConfig

        Raises:
            FileNotFoundError: If the file or the profile doesn't exist
            ValueError: If the YAML root is not a mapping
            pydantic.ValidationError: If the config is invalid
        """
        config_dict = self._load_yaml(self._resolve_path(config_path))

        if profile:
            config_dict = self._merge_configs(config_dict, self._load_profile(profile))

        return PipelineConfig.model_validate(config_dict)

    def load_from_dict(self, config_dict: Dict[str, Any]) -> PipelineConfig:
        """Validate configuration given as a dictionary."""
        return PipelineConfig.model_validate(config_dict)

    def load_run_options(
        self,
        config_path: Union[str, Path],
        profile: Optional[str] = None,
    ) -> RunOptions:
        """Load a file and return only its ``run`` section."""
        return self.load(config_path, profile).run

    def _resolve_path(self, path: Union[str, Path]) -> Path:
        p = Path(path)
        return p if p.is_absolute() else self._base_path / p

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"Config root must be a mapping: {path}")
        return data

    def _load_profile(self, profile: str) -> Dict[str, Any]:
        profile_path = self._base_path / PROFILES_DIR / f"{profile}.yaml"
        if not profile_path.exists():
            raise FileNotFoundError(f"Profile not found: {profile}")
        return self._load_yaml(profile_path)

    def _merge_configs(
        self,
        base: Dict[str, Any],
        overlay: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Deep merge overlay into base config."""
        result = dict(base)
        for key, value in overlay.items():
            if isinstance(result.get(key), dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value
        return result


def load_config(
    config_path: Union[str, Path],
    profile: Optional[str] = None,
    base_path: Optional[Path] = None,
) -> PipelineConfig:
    """Convenience function to load configuration."""
    return ConfigLoader(base_path=base_path).load(config_path, profile)
