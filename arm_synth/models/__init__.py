"""Construct tree and canonical record models."""

from .construct import (
    ABSENT,
    Construct,
    DependencyTarget,
    DeploymentScope,
    Resource,
    Stack,
)
from .record import CanonicalRecord

__all__ = [
    "ABSENT",
    "CanonicalRecord",
    "Construct",
    "DependencyTarget",
    "DeploymentScope",
    "Resource",
    "Stack",
]
