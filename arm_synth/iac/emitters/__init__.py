"""Template emitters package.

Emitters register themselves by format name so callers can look them up
without importing a concrete class.
"""

from typing import Dict, Type

from .base import TemplateEmitter

# Global emitter registry
_EMITTER_REGISTRY: Dict[str, Type[TemplateEmitter]] = {}


def register_emitter(format_name: str, emitter_class: Type[TemplateEmitter]) -> None:
    """Register an emitter class for a specific format.

    Args:
        format_name: Name of the template format (e.g., 'arm')
        emitter_class: Emitter class implementing TemplateEmitter interface
    """
    _EMITTER_REGISTRY[format_name.lower()] = emitter_class


def get_emitter_registry() -> Dict[str, Type[TemplateEmitter]]:
    """Get a copy of the current emitter registry."""
    return _EMITTER_REGISTRY.copy()


def get_emitter(format_name: str) -> Type[TemplateEmitter]:
    """Get emitter class for specified format.

    Raises:
        KeyError: If format is not registered
    """
    format_key = format_name.lower()
    if format_key not in _EMITTER_REGISTRY:
        available_formats = list(_EMITTER_REGISTRY.keys())
        raise KeyError(
            f"No emitter registered for format '{format_name}'. "
            f"Available formats: {available_formats}"
        )

    return _EMITTER_REGISTRY[format_key]


# Import emitter implementations to auto-register them
from . import arm_emitter  # noqa: E402, F401
from .arm_emitter import ArmEmitter  # noqa: E402

__all__ = [
    "ArmEmitter",
    "TemplateEmitter",
    "get_emitter",
    "get_emitter_registry",
    "register_emitter",
]
