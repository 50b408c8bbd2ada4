"""ARM template emitter.

This module assembles Azure Resource Manager template documents from
resolved canonical records. Templates are built in memory; writing them
anywhere is up to the caller.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

from ...models.construct import DeploymentScope
from ...models.record import CanonicalRecord
from ...validation.models import ValidationSeverity
from ...validation.template_validator import validate_template as lint_template
from . import register_emitter
from .base import TemplateEmitter

logger = logging.getLogger(__name__)

SCHEMA_URLS: Dict[DeploymentScope, str] = {
    DeploymentScope.RESOURCE_GROUP: "https://schema.management.azure.com/schemas/2019-04-01/deploymentTemplate.json#",
    DeploymentScope.SUBSCRIPTION: "https://schema.management.azure.com/schemas/2018-05-01/subscriptionDeploymentTemplate.json#",
    DeploymentScope.MANAGEMENT_GROUP: "https://schema.management.azure.com/schemas/2019-08-01/managementGroupDeploymentTemplate.json#",
    DeploymentScope.TENANT: "https://schema.management.azure.com/schemas/2019-08-01/tenantDeploymentTemplate.json#",
}


class ArmEmitter(TemplateEmitter):
    """Emitter for Azure Resource Manager templates."""

    def build_template(
        self,
        records: Sequence[CanonicalRecord],
        scope: Optional[DeploymentScope] = None,
        parameters: Optional[Dict[str, Any]] = None,
        outputs: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Assemble an ARM template document.

        Resources are written in the order given, which should already be
        the deployment order produced by the dependency resolver.
        """
        scope = DeploymentScope(scope or self.config.default_scope)
        resources: List[Dict[str, Any]] = [record.to_dict() for record in records]

        template = {
            "$schema": SCHEMA_URLS[scope],
            "contentVersion": self.config.content_version,
            "parameters": dict(parameters or {}),
            "variables": {},
            "resources": resources,
            "outputs": dict(outputs or {}),
        }

        logger.info(
            f"Assembled ARM template with {len(resources)} resources "
            f"for {scope.value} scope"
        )
        return template

    def emit_to_string(
        self,
        records: Sequence[CanonicalRecord],
        scope: Optional[DeploymentScope] = None,
        parameters: Optional[Dict[str, Any]] = None,
        outputs: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Generate the ARM template as an indented JSON string."""
        template_data = self.build_template(records, scope, parameters, outputs)
        return json.dumps(template_data, indent=2)

    def validate_template(self, template_data: Dict[str, Any]) -> bool:
        """Validate an ARM template for correctness.

        Args:
            template_data: ARM template document

        Returns:
            True if the template has no errors; warnings are logged only
        """
        result = lint_template(template_data)
        for issue in result.issues:
            if issue.severity == ValidationSeverity.ERROR:
                logger.error(f"Template validation: {issue}")
            else:
                logger.warning(f"Template validation: {issue}")
        return result.is_valid


# Auto-register this emitter
register_emitter("arm", ArmEmitter)
