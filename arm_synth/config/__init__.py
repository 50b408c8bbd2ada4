"""
Configuration management for synthesis.

Provides type-safe configuration loading and validation with support
for multiple configuration sources and priority-based merging.
"""

from .loader import ConfigError, ConfigLoader, load_config
from .models import (
    DependencyMode,
    ResolverConfig,
    SynthesisConfig,
    TemplateConfig,
    TransformerConfig,
    ValidationConfig,
)

__all__ = [
    "ConfigError",
    "ConfigLoader",
    "DependencyMode",
    "ResolverConfig",
    "SynthesisConfig",
    "TemplateConfig",
    "TransformerConfig",
    "ValidationConfig",
    "load_config",
]
