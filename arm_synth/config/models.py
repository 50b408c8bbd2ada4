"""
Configuration models for synthesis.

Provides type-safe configuration using pydantic with validation,
defaults, and schema enforcement.
"""

import re
from enum import Enum
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.construct import DeploymentScope

_API_VERSION_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}(-preview)?$")
_CONTENT_VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+\.\d+$")


class DependencyMode(str, Enum):
    """How the resolver discovers dependency edges."""

    HEURISTIC = "heuristic"
    EXPLICIT = "explicit"


class TransformerConfig(BaseModel):
    """Configuration for the resource transformer."""

    fallback_api_version: str = Field(
        default="2023-01-01",
        description="API version used when a type has no known version",
    )
    api_versions: Dict[str, str] = Field(
        default_factory=dict,
        description="Per-type API versions that take precedence over the built-in table",
    )
    replace_tokens: bool = Field(
        default=True,
        description="Replace {subscriptionId}-style placeholders with ARM expressions",
    )

    @field_validator("fallback_api_version")
    @classmethod
    def validate_fallback_api_version(cls, v: str) -> str:
        """Validate the fallback looks like an ARM API version."""
        if not _API_VERSION_PATTERN.match(v):
            raise ValueError(f"Invalid API version '{v}' (expected YYYY-MM-DD)")
        return v

    @field_validator("api_versions")
    @classmethod
    def validate_api_versions(cls, v: Dict[str, str]) -> Dict[str, str]:
        """Validate every override is a resource type mapped to an API version."""
        for resource_type, version in v.items():
            if "/" not in resource_type:
                raise ValueError(
                    f"Invalid resource type '{resource_type}' (expected Provider/type)"
                )
            if not _API_VERSION_PATTERN.match(version):
                raise ValueError(
                    f"Invalid API version '{version}' for '{resource_type}'"
                )
        return v

    model_config = ConfigDict(extra="forbid")  # Reject unknown fields


class ResolverConfig(BaseModel):
    """Configuration for the dependency resolver."""

    mode: DependencyMode = Field(
        default=DependencyMode.HEURISTIC,
        description="heuristic: all detectors; explicit: declared and parent/child edges only",
    )

    model_config = ConfigDict(extra="forbid")


class TemplateConfig(BaseModel):
    """Configuration for ARM template assembly."""

    content_version: str = Field(
        default="1.0.0.0",
        description="contentVersion written into every template",
    )
    default_scope: DeploymentScope = Field(
        default=DeploymentScope.RESOURCE_GROUP,
        description="Deployment scope used when a unit does not declare one",
    )

    @field_validator("content_version")
    @classmethod
    def validate_content_version(cls, v: str) -> str:
        """Validate content version uses four numeric parts."""
        if not _CONTENT_VERSION_PATTERN.match(v):
            raise ValueError(
                f"Invalid content version '{v}' (expected format like 1.0.0.0)"
            )
        return v

    model_config = ConfigDict(extra="forbid")


class ValidationConfig(BaseModel):
    """Configuration for pre-emission linting."""

    enabled: bool = Field(
        default=True,
        description="Lint records and templates after synthesis",
    )

    model_config = ConfigDict(extra="forbid")


class SynthesisConfig(BaseModel):
    """Root configuration for the synthesis pipeline."""

    log_level: str = Field(default="INFO", description="Logging level")
    transformer: TransformerConfig = Field(
        default_factory=TransformerConfig,
        description="Resource transformer settings",
    )
    resolver: ResolverConfig = Field(
        default_factory=ResolverConfig,
        description="Dependency resolver settings",
    )
    template: TemplateConfig = Field(
        default_factory=TemplateConfig,
        description="Template assembly settings",
    )
    validation: ValidationConfig = Field(
        default_factory=ValidationConfig,
        description="Linting settings",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one the logging module knows."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level '{v}'")
        return level

    model_config = ConfigDict(extra="forbid")
