"""
Configuration loader for synthesis.

Sources are layered, later ones winning:
defaults < config file < ARM_SYNTH_* environment variables < explicit overrides
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from ..exceptions import InvalidConfigurationError
from .models import SynthesisConfig


class ConfigError(InvalidConfigurationError):
    """Configuration loading or validation error."""


class ConfigLoader:
    """Builds a SynthesisConfig from file, environment and overrides."""

    DEFAULT_CONFIG_FILE = Path.home() / ".config" / "arm-synth" / "config.yaml"
    ENV_PREFIX = "ARM_SYNTH_"
    CONFIG_PATH_ENV = "ARM_SYNTH_CONFIG_PATH"

    def __init__(self, config_path: Optional[Path] = None):
        """
        Args:
            config_path: YAML file to read. Defaults to $ARM_SYNTH_CONFIG_PATH,
                then ~/.config/arm-synth/config.yaml.
        """
        if config_path is None:
            env_path = os.environ.get(self.CONFIG_PATH_ENV)
            config_path = (
                Path(env_path).expanduser() if env_path else self.DEFAULT_CONFIG_FILE
            )
        self.config_path = config_path

    def load(self) -> SynthesisConfig:
        """
        Load the file (when present) and the environment.

        Raises:
            ConfigError: If a source cannot be read or the result is invalid
        """
        try:
            config_dict: dict[str, Any] = {}
            if self.config_path.exists():
                config_dict = self._read_yaml(self.config_path)
            config_dict = _deep_merge(config_dict, self._read_env())
            return SynthesisConfig.model_validate(config_dict)
        except ConfigError:
            raise
        except ValidationError as e:
            raise ConfigError(f"Configuration validation failed: {e}") from e
        except Exception as e:
            raise ConfigError(f"Failed to load configuration: {e}") from e

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return data

    def _read_env(self) -> dict[str, Any]:
        """Map ARM_SYNTH_RESOLVER__MODE=explicit to {"resolver": {"mode": "explicit"}}."""
        config: dict[str, Any] = {}
        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX) or key == self.CONFIG_PATH_ENV:
                continue
            *sections, leaf = key[len(self.ENV_PREFIX) :].lower().split("__")
            target = config
            for section in sections:
                target = target.setdefault(section, {})
            target[leaf] = _parse_env_bool(value)
        return config

    def merge_overrides(
        self, config: SynthesisConfig, overrides: dict[str, Any]
    ) -> SynthesisConfig:
        """Apply overrides on top of ``config``; None values are ignored."""
        filtered = _drop_none(overrides)
        if not filtered:
            return config
        try:
            return SynthesisConfig.model_validate(
                _deep_merge(config.model_dump(mode="json"), filtered)
            )
        except ValidationError as e:
            raise ConfigError(f"Configuration validation failed: {e}") from e


def _parse_env_bool(value: str) -> Any:
    lowered = value.lower()
    if lowered in ("true", "yes"):
        return True
    if lowered in ("false", "no"):
        return False
    # API and content versions must stay strings
    return value


def _deep_merge(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in update.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    result = {}
    for key, value in data.items():
        if isinstance(value, dict):
            value = _drop_none(value) or None
        if value is not None:
            result[key] = value
    return result


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> SynthesisConfig:
    """
    Load configuration and apply overrides.

    Raises:
        ConfigError: If configuration is invalid
    """
    loader = ConfigLoader(config_path)
    config = loader.load()
    if overrides:
        config = loader.merge_overrides(config, overrides)
    return config
