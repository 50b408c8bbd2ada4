"""Validation helpers for canonical records and ARM templates."""

from .models import (
    ValidationIssue,
    ValidationResult,
    ValidationResultBuilder,
    ValidationSeverity,
)
from .record_validator import find_duplicate_records, validate_record, validate_records
from .shape_validators import (
    assert_arm_resource,
    assert_arm_template_document,
    assert_valid_nsg_reference,
    assert_valid_subnet,
    assert_valid_subnet_delegation,
    has_valid_nsg_reference,
    is_arm_expression,
    is_arm_resource,
    is_arm_template_document,
    is_parameter_reference,
    is_resource_id_expression,
    is_valid_nsg_reference,
    is_valid_subnet,
    is_valid_subnet_delegation,
    is_variable_reference,
)
from .template_validator import validate_template

__all__ = [
    "ValidationIssue",
    "ValidationResult",
    "ValidationResultBuilder",
    "ValidationSeverity",
    "assert_arm_resource",
    "assert_arm_template_document",
    "assert_valid_nsg_reference",
    "assert_valid_subnet",
    "assert_valid_subnet_delegation",
    "find_duplicate_records",
    "has_valid_nsg_reference",
    "is_arm_expression",
    "is_arm_resource",
    "is_arm_template_document",
    "is_parameter_reference",
    "is_resource_id_expression",
    "is_valid_nsg_reference",
    "is_valid_subnet",
    "is_valid_subnet_delegation",
    "is_variable_reference",
    "validate_record",
    "validate_records",
    "validate_template",
]
