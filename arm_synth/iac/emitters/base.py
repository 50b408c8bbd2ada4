"""Base emitter class for template assembly.

This module defines the abstract base class for emitters that turn resolved
canonical records into a deployment template document.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence

from ...config.models import TemplateConfig
from ...models.construct import DeploymentScope
from ...models.record import CanonicalRecord


class TemplateEmitter(ABC):
    """Abstract base class for template emitters.

    All emitters must implement this interface so the synthesis engine can
    assemble templates without knowing the target format.
    """

    def __init__(self, config: Optional[TemplateConfig] = None) -> None:
        """Initialize emitter with optional configuration.

        Args:
            config: Optional template settings
        """
        self.config = config or TemplateConfig()

    @abstractmethod
    def build_template(
        self,
        records: Sequence[CanonicalRecord],
        scope: Optional[DeploymentScope] = None,
        parameters: Optional[Dict[str, Any]] = None,
        outputs: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Assemble the in-memory template document.

        Args:
            records: Resolved, ordered records
            scope: Deployment scope; the configured default when None
            parameters: Template parameters section
            outputs: Template outputs section

        Returns:
            Template document
        """
        raise NotImplementedError("Template assembly not yet implemented")

    @abstractmethod
    def emit_to_string(
        self,
        records: Sequence[CanonicalRecord],
        scope: Optional[DeploymentScope] = None,
        parameters: Optional[Dict[str, Any]] = None,
        outputs: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Assemble the template and serialize it."""
        raise NotImplementedError("Template serialization not yet implemented")

    @abstractmethod
    def validate_template(self, template_data: Dict[str, Any]) -> bool:
        """Validate an assembled template for correctness.

        Args:
            template_data: Template document to validate

        Returns:
            True if template is valid, False otherwise
        """
        raise NotImplementedError("Template validation not yet implemented")

    def get_format_name(self) -> str:
        """Get the format name handled by this emitter."""
        return self.__class__.__name__.replace("Emitter", "").lower()
