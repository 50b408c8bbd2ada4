"""Resource transformer for ARM template synthesis.

This module converts resource constructs into canonical records. Each
construct is transformed on its own, without looking at any other construct,
so the output depends only on the construct and the transformer's config.
"""

import logging
import re
from typing import Any, Iterable, List, Mapping, Optional

from ..config.models import TransformerConfig
from ..exceptions import TransformationError
from ..models.construct import ABSENT, Resource
from ..models.record import CanonicalRecord
from .resource_types import DEFAULT_API_VERSIONS

logger = logging.getLogger(__name__)

# Nested property wrappers ARM requires even when they hold nothing
_PRESERVED_EMPTY_KEYS = frozenset({"properties"})

_SUBSCRIPTION_ID_TOKEN = re.compile(r"\{subscriptionId\}")
_RESOURCE_GROUP_TOKEN = re.compile(r"\{resourceGroupName\}")
PLACEHOLDER_TENANT_ID = "00000000-0000-0000-0000-000000000000"


def clean_absent(value: Any) -> Any:
    """Return a copy of ``value`` with every ABSENT entry removed.

    Mappings and sequences that lose all their entries this way are removed
    too (the function returns ABSENT for them). ``None`` is kept, and so are
    containers that were already empty in the input.
    """
    if value is ABSENT:
        return ABSENT
    if isinstance(value, Mapping):
        cleaned = {}
        for key, item in value.items():
            cleaned_item = clean_absent(item)
            if cleaned_item is ABSENT:
                if key in _PRESERVED_EMPTY_KEYS and isinstance(item, Mapping):
                    cleaned[key] = {}
                continue
            cleaned[key] = cleaned_item
        if value and not cleaned:
            return ABSENT
        return cleaned
    if isinstance(value, (list, tuple)):
        items = [clean_absent(item) for item in value]
        cleaned_items = [item for item in items if item is not ABSENT]
        if value and not cleaned_items:
            return ABSENT
        return cleaned_items
    return value


def replace_tokens(value: Any, key: Optional[str] = None) -> Any:
    """Replace placeholder tokens with ARM template expressions.

    - ``{subscriptionId}`` becomes ``[subscription().subscriptionId]``
    - ``{resourceGroupName}`` becomes ``[resourceGroup().name]``
    - a ``tenantId`` holding the all-zero GUID becomes ``[subscription().tenantId]``

    Strings that already are ARM expressions (start with '[') are left alone.
    """
    if isinstance(value, str):
        if value.startswith("["):
            return value
        if key == "tenantId" and value == PLACEHOLDER_TENANT_ID:
            return "[subscription().tenantId]"
        replaced = _SUBSCRIPTION_ID_TOKEN.sub(
            "[subscription().subscriptionId]", value
        )
        return _RESOURCE_GROUP_TOKEN.sub("[resourceGroup().name]", replaced)
    if isinstance(value, Mapping):
        return {k: replace_tokens(v, k) for k, v in value.items()}
    if isinstance(value, list):
        return [replace_tokens(item) for item in value]
    return value


class ResourceTransformer:
    """Transforms resource constructs into canonical records."""

    def __init__(self, config: Optional[TransformerConfig] = None) -> None:
        self.config = config or TransformerConfig()

    def transform(self, resource: Resource) -> CanonicalRecord:
        """Transform one resource construct.

        Args:
            resource: Resource construct to transform

        Returns:
            Canonical record; the construct itself is left untouched

        Raises:
            TransformationError: If the construct is not a resource or its
                properties are not a mapping
        """
        if not isinstance(resource, Resource):
            raise TransformationError(
                f"Cannot transform {resource!r}: not a resource construct"
            )
        for field_name in ("tags", "properties", "sku", "identity"):
            value = getattr(resource, field_name)
            if value is not None and value is not ABSENT and not isinstance(value, Mapping):
                raise TransformationError(
                    f"'{field_name}' of {resource.path} must be a mapping, "
                    f"got {type(value).__name__}",
                    resource_type=resource.resource_type,
                    field_path=field_name,
                )

        record = CanonicalRecord(
            resource_type=resource.resource_type,
            api_version=self.resolve_api_version(resource),
            name=resource.name,
            location=self._scalar(resource.location),
            tags=self._container(resource.tags),
            properties=self._container(resource.properties),
            sku=self._container(resource.sku),
            kind=self._scalar(resource.kind),
            identity=self._container(resource.identity),
        )

        if self.config.replace_tokens:
            record = self._replace_record_tokens(record)

        logger.debug(f"Transformed {record.key} (apiVersion {record.api_version})")
        return record

    def transform_all(self, resources: Iterable[Resource]) -> List[CanonicalRecord]:
        """Transform resources, preserving their order."""
        records = [self.transform(resource) for resource in resources]
        logger.info(f"Transformed {len(records)} resources")
        return records

    def resolve_api_version(self, resource: Resource) -> str:
        """Pick the API version: explicit, configured, built-in, then fallback."""
        explicit = resource.api_version
        if explicit and explicit is not ABSENT:
            return explicit

        configured = self.config.api_versions.get(resource.resource_type)
        if configured:
            return configured

        known = DEFAULT_API_VERSIONS.get(resource.resource_type)
        if known:
            return known

        logger.debug(
            f"No known API version for '{resource.resource_type}', "
            f"using {self.config.fallback_api_version}"
        )
        return self.config.fallback_api_version

    @staticmethod
    def _scalar(value: Any) -> Optional[Any]:
        if value is ABSENT or value is None or value == "":
            return None
        return value

    @staticmethod
    def _container(value: Any) -> Optional[Any]:
        if value is None:
            return None
        cleaned = clean_absent(value)
        if cleaned is ABSENT or not cleaned:
            return None
        return cleaned

    @staticmethod
    def _replace_record_tokens(record: CanonicalRecord) -> CanonicalRecord:
        return CanonicalRecord(
            resource_type=record.resource_type,
            api_version=record.api_version,
            name=replace_tokens(record.name, "name"),
            location=replace_tokens(record.location, "location"),
            tags=replace_tokens(record.tags, "tags"),
            properties=replace_tokens(record.properties, "properties"),
            sku=replace_tokens(record.sku, "sku"),
            kind=record.kind,
            identity=replace_tokens(record.identity, "identity"),
        )
