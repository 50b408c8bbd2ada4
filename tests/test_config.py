"""
Unit tests for configuration system.

Tests configuration loading, validation, merging, and error handling.
"""

import os
from pathlib import Path

import pytest
import yaml

from arm_synth.config import (
    ConfigError,
    ConfigLoader,
    DependencyMode,
    SynthesisConfig,
    TransformerConfig,
    load_config,
)
from arm_synth.exceptions import InvalidConfigurationError
from arm_synth.models.construct import DeploymentScope


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    """Keep developer environment variables out of these tests."""
    for key in list(os.environ):
        if key.startswith("ARM_SYNTH_"):
            monkeypatch.delenv(key)


class TestSynthesisConfigModel:
    """Test SynthesisConfig pydantic model validation."""

    def test_default_config(self):
        """Test creating config with all defaults."""
        config = SynthesisConfig()

        assert config.log_level == "INFO"
        assert config.transformer.fallback_api_version == "2023-01-01"
        assert config.transformer.api_versions == {}
        assert config.transformer.replace_tokens is True
        assert config.resolver.mode == DependencyMode.HEURISTIC
        assert config.template.content_version == "1.0.0.0"
        assert config.template.default_scope == DeploymentScope.RESOURCE_GROUP
        assert config.validation.enabled is True

    def test_partial_config(self):
        """Test creating config with partial settings."""
        config = SynthesisConfig(
            resolver={"mode": "explicit"},
            template={"default_scope": "tenant"},
        )

        assert config.resolver.mode == DependencyMode.EXPLICIT
        assert config.template.default_scope == DeploymentScope.TENANT
        assert config.transformer.fallback_api_version == "2023-01-01"

    def test_log_level_normalized(self):
        assert SynthesisConfig(log_level="debug").log_level == "DEBUG"

        with pytest.raises(ValueError, match="Invalid log level"):
            SynthesisConfig(log_level="LOUD")

    def test_invalid_api_versions(self):
        """Test API version validation."""
        with pytest.raises(ValueError, match="Invalid API version"):
            TransformerConfig(fallback_api_version="latest")

        with pytest.raises(ValueError, match="Invalid resource type"):
            TransformerConfig(api_versions={"virtualNetworks": "2023-04-01"})

        with pytest.raises(ValueError, match="Invalid API version"):
            TransformerConfig(
                api_versions={"Microsoft.Network/virtualNetworks": "2023"}
            )

    def test_preview_api_version_accepted(self):
        config = TransformerConfig(
            api_versions={"Microsoft.App/containerApps": "2023-11-02-preview"}
        )
        assert config.api_versions["Microsoft.App/containerApps"] == "2023-11-02-preview"

    def test_invalid_content_version(self):
        with pytest.raises(ValueError, match="Invalid content version"):
            SynthesisConfig(template={"content_version": "1.0"})

    def test_unknown_fields_rejected(self):
        """Test that unknown fields are rejected (extra=forbid)."""
        with pytest.raises(ValueError, match="Extra inputs are not permitted"):
            SynthesisConfig(unknown_field="value")


class TestConfigLoader:
    """Test ConfigLoader class."""

    @pytest.fixture
    def temp_config_dir(self, tmp_path: Path) -> Path:
        """Create temporary config directory."""
        config_dir = tmp_path / ".config" / "arm-synth"
        config_dir.mkdir(parents=True)
        return config_dir

    @pytest.fixture
    def temp_config_file(self, temp_config_dir: Path) -> Path:
        """Create temporary config file."""
        return temp_config_dir / "config.yaml"

    def test_load_nonexistent_file(self, temp_config_file: Path):
        """Test loading when file doesn't exist returns defaults."""
        config = ConfigLoader(temp_config_file).load()

        assert isinstance(config, SynthesisConfig)
        assert config.resolver.mode == DependencyMode.HEURISTIC

    def test_load_valid_file(self, temp_config_file: Path):
        """Test loading valid YAML file."""
        config_data = {
            "log_level": "warning",
            "transformer": {
                "api_versions": {"Microsoft.Web/sites": "2022-09-01"},
            },
            "resolver": {"mode": "explicit"},
        }
        with open(temp_config_file, "w") as f:
            yaml.dump(config_data, f)

        config = ConfigLoader(temp_config_file).load()

        assert config.log_level == "WARNING"
        assert config.transformer.api_versions == {"Microsoft.Web/sites": "2022-09-01"}
        assert config.resolver.mode == DependencyMode.EXPLICIT

    def test_load_empty_file(self, temp_config_file: Path):
        temp_config_file.write_text("")

        assert ConfigLoader(temp_config_file).load() == SynthesisConfig()

    def test_load_invalid_yaml(self, temp_config_file: Path):
        """Test loading invalid YAML raises error."""
        with open(temp_config_file, "w") as f:
            f.write("invalid: yaml: content:\n  - bad")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            ConfigLoader(temp_config_file).load()

    def test_load_non_mapping(self, temp_config_file: Path):
        temp_config_file.write_text("- just\n- a list\n")

        with pytest.raises(ConfigError, match="must contain a mapping"):
            ConfigLoader(temp_config_file).load()

    def test_load_invalid_schema(self, temp_config_file: Path):
        """Test loading invalid schema raises error."""
        with open(temp_config_file, "w") as f:
            yaml.dump({"resolver": {"mode": "psychic"}}, f)

        with pytest.raises(ConfigError, match="validation failed"):
            ConfigLoader(temp_config_file).load()

    def test_config_error_is_configuration_error(self, temp_config_file: Path):
        with open(temp_config_file, "w") as f:
            yaml.dump({"bogus": True}, f)

        with pytest.raises(InvalidConfigurationError) as exc_info:
            ConfigLoader(temp_config_file).load()

        assert exc_info.value.error_code == "INVALID_CONFIG"

    def test_load_from_env(self, temp_config_file: Path, monkeypatch: pytest.MonkeyPatch):
        """Test loading from environment variables."""
        monkeypatch.setenv("ARM_SYNTH_LOG_LEVEL", "debug")
        monkeypatch.setenv("ARM_SYNTH_RESOLVER__MODE", "explicit")
        monkeypatch.setenv("ARM_SYNTH_TRANSFORMER__FALLBACK_API_VERSION", "2022-01-01")
        monkeypatch.setenv("ARM_SYNTH_TRANSFORMER__REPLACE_TOKENS", "false")
        monkeypatch.setenv("ARM_SYNTH_TEMPLATE__CONTENT_VERSION", "2.0.0.0")

        config = ConfigLoader(temp_config_file).load()

        assert config.log_level == "DEBUG"
        assert config.resolver.mode == DependencyMode.EXPLICIT
        assert config.transformer.fallback_api_version == "2022-01-01"
        assert config.transformer.replace_tokens is False
        assert config.template.content_version == "2.0.0.0"

    def test_env_override_file(self, temp_config_file: Path, monkeypatch: pytest.MonkeyPatch):
        """Test environment variables override file config."""
        with open(temp_config_file, "w") as f:
            yaml.dump({"resolver": {"mode": "explicit"}, "log_level": "ERROR"}, f)

        monkeypatch.setenv("ARM_SYNTH_RESOLVER__MODE", "heuristic")

        config = ConfigLoader(temp_config_file).load()

        # Env should win, file values it does not touch survive
        assert config.resolver.mode == DependencyMode.HEURISTIC
        assert config.log_level == "ERROR"

    def test_config_path_from_env(
        self, temp_config_file: Path, monkeypatch: pytest.MonkeyPatch
    ):
        with open(temp_config_file, "w") as f:
            yaml.dump({"validation": {"enabled": False}}, f)
        monkeypatch.setenv("ARM_SYNTH_CONFIG_PATH", str(temp_config_file))

        loader = ConfigLoader()
        config = loader.load()

        assert loader.config_path == temp_config_file
        assert config.validation.enabled is False

    def test_merge_overrides(self, temp_config_file: Path):
        """Test merging explicit overrides."""
        loader = ConfigLoader(temp_config_file)
        base_config = loader.load()

        merged = loader.merge_overrides(
            base_config,
            {"template": {"default_scope": "subscription"}, "log_level": "DEBUG"},
        )

        assert merged.template.default_scope == DeploymentScope.SUBSCRIPTION
        assert merged.log_level == "DEBUG"
        assert base_config.log_level == "INFO"

    def test_overrides_ignore_none(self, temp_config_file: Path):
        """Test override values of None are ignored."""
        loader = ConfigLoader(temp_config_file)
        base_config = SynthesisConfig(resolver={"mode": "explicit"})

        merged = loader.merge_overrides(base_config, {"resolver": {"mode": None}})

        assert merged.resolver.mode == DependencyMode.EXPLICIT

    def test_invalid_override(self, temp_config_file: Path):
        loader = ConfigLoader(temp_config_file)

        with pytest.raises(ConfigError, match="validation failed"):
            loader.merge_overrides(SynthesisConfig(), {"template": {"content_version": "x"}})


class TestLoadConfig:
    def test_load_config_with_overrides(self, tmp_path: Path):
        config = load_config(
            tmp_path / "missing.yaml", overrides={"resolver": {"mode": "explicit"}}
        )

        assert config.resolver.mode == DependencyMode.EXPLICIT

    def test_load_config_defaults(self, tmp_path: Path):
        assert load_config(tmp_path / "missing.yaml") == SynthesisConfig()
