"""Structural lint for assembled ARM template documents."""

import re
from typing import Any, Mapping, Set

from ..iac.resource_id_builder import parse_resource_id_expression
from .models import ValidationResult, ValidationResultBuilder
from .record_validator import find_duplicate_records, validate_record

SCHEMA_HOST = "https://schema.management.azure.com"
REQUIRED_TEMPLATE_KEYS = ("$schema", "contentVersion", "resources")

_CONTENT_VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+\.\d+$")


def validate_template(template: Mapping[str, Any]) -> ValidationResult:
    """Lint an ARM template document.

    Checks the top-level keys, the schema URL, the content version, each
    resource's required fields, duplicate ``type/name`` pairs and every
    ``dependsOn`` entry. Problems are returned, never raised.
    """
    builder = ValidationResultBuilder()

    if not isinstance(template, Mapping):
        return builder.error(
            f"Template must be an object, got {type(template).__name__}"
        ).build()

    for key in REQUIRED_TEMPLATE_KEYS:
        if key not in template:
            builder.error(
                f"Template is missing '{key}'",
                field_path=key,
                suggestion="Assemble templates with ArmEmitter.build_template",
            )

    schema = template.get("$schema")
    if schema is not None and (
        not isinstance(schema, str) or not schema.startswith(SCHEMA_HOST)
    ):
        builder.error(
            f"Schema URL must start with {SCHEMA_HOST}",
            details=f"Got {schema!r}",
            field_path="$schema",
        )

    content_version = template.get("contentVersion")
    if content_version is not None and (
        not isinstance(content_version, str)
        or not _CONTENT_VERSION_PATTERN.match(content_version)
    ):
        builder.error(
            "contentVersion must have four numeric parts",
            details=f"Got {content_version!r}",
            suggestion="Use a value like '1.0.0.0'",
            field_path="contentVersion",
        )

    resources = template.get("resources")
    if resources is None:
        return builder.build()
    if not isinstance(resources, list):
        builder.error("'resources' must be an array", field_path="resources")
        return builder.build()

    if not resources:
        builder.warning(
            "Template contains no resources",
            suggestion="Add at least one resource to the deployment unit",
            field_path="resources",
        )
        return builder.build()

    keys: Set[str] = set()
    for index, resource in enumerate(resources):
        builder.extend(validate_record(resource, path=f"resources[{index}]"))
        if isinstance(resource, Mapping):
            keys.add(f"{resource.get('type')}/{resource.get('name')}")
    builder.extend(find_duplicate_records(resources))

    for index, resource in enumerate(resources):
        if not isinstance(resource, Mapping):
            continue
        _check_depends_on(builder, resource, f"resources[{index}]", keys)

    return builder.build()


def _check_depends_on(
    builder: ValidationResultBuilder,
    resource: Mapping[str, Any],
    path: str,
    keys: Set[str],
) -> None:
    depends_on = resource.get("dependsOn")
    if depends_on is None:
        return
    resource_key = f"{resource.get('type')}/{resource.get('name')}"
    if not isinstance(depends_on, list):
        builder.error(
            "'dependsOn' must be an array",
            field_path=f"{path}.dependsOn",
            resource_key=resource_key,
        )
        return
    if not depends_on:
        builder.warning(
            "Empty 'dependsOn' array",
            suggestion="Omit the field when a resource has no dependencies",
            field_path=f"{path}.dependsOn",
            resource_key=resource_key,
        )

    for position, expression in enumerate(depends_on):
        entry_path = f"{path}.dependsOn[{position}]"
        reference = parse_resource_id_expression(expression)
        if reference is None:
            builder.error(
                "dependsOn entry is not a resourceId() expression",
                details=f"Got {expression!r}",
                suggestion="Use [resourceId('Provider/type', 'name')]",
                field_path=entry_path,
                resource_key=resource_key,
            )
            continue
        if not reference.is_well_formed:
            builder.error(
                f"resourceId() for {reference.resource_type} has the wrong "
                "number of name arguments",
                details=f"Got {len(reference.name_segments)} in {expression}",
                suggestion="Pass one name argument per level of the resource type",
                field_path=entry_path,
                resource_key=resource_key,
            )
        if reference.key == resource_key:
            builder.error(
                "Resource depends on itself",
                field_path=entry_path,
                resource_key=resource_key,
            )
        elif reference.key not in keys:
            builder.error(
                f"dependsOn references {reference.key}, which is not in the template",
                field_path=entry_path,
                resource_key=resource_key,
            )
