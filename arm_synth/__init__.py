"""
arm-synth

Compiles a tree of Azure resource constructs into in-memory Azure Resource
Manager templates: each resource becomes a canonical record, dependencies
between records are discovered and written as ``dependsOn`` resourceId()
expressions, and records are ordered for safe deployment.
"""

from .config import SynthesisConfig, load_config
from .exceptions import (
    ArmSynthError,
    CircularDependencyError,
    ConstructError,
    ShapeValidationError,
    TransformationError,
)
from .iac import DependencyResolver, ResourceTransformer
from .iac.emitters import ArmEmitter
from .iac.engine import SynthesisEngine, SynthesisResult
from .logging_config import configure_logging
from .models import (
    ABSENT,
    CanonicalRecord,
    Construct,
    DeploymentScope,
    Resource,
    Stack,
)

__version__ = "0.1.0"

__all__ = [
    "ABSENT",
    "ArmEmitter",
    "ArmSynthError",
    "CanonicalRecord",
    "CircularDependencyError",
    "Construct",
    "ConstructError",
    "DependencyResolver",
    "DeploymentScope",
    "Resource",
    "ResourceTransformer",
    "ShapeValidationError",
    "Stack",
    "SynthesisConfig",
    "SynthesisEngine",
    "SynthesisResult",
    "TransformationError",
    "configure_logging",
    "load_config",
]
