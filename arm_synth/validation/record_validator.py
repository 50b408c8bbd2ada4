"""Structural checks for canonical records before template emission."""

from typing import Any, Dict, List, Mapping, Sequence, Union

from ..models.record import CanonicalRecord
from .models import ValidationIssue, ValidationResult, ValidationSeverity

RecordLike = Union[CanonicalRecord, Mapping[str, Any]]

# (wire field, remediation hint)
_REQUIRED_FIELDS = (
    ("type", "Set resource_type to a value like 'Microsoft.Network/virtualNetworks'"),
    ("apiVersion", "Set api_version explicitly or add the type to the API version table"),
    ("name", "Give the resource a non-empty name"),
)


def _as_wire_dict(record: RecordLike) -> Mapping[str, Any]:
    if isinstance(record, CanonicalRecord):
        return record.to_dict()
    if isinstance(record, Mapping):
        return record
    return {}


def validate_record(record: RecordLike, path: str = "resource") -> List[ValidationIssue]:
    """Check that a record carries its required fields.

    Args:
        record: CanonicalRecord or ARM resource dict
        path: Field path prefix used in reported issues

    Returns:
        One error per missing or empty required field; empty when valid
    """
    if not isinstance(record, (CanonicalRecord, Mapping)):
        return [
            ValidationIssue(
                severity=ValidationSeverity.ERROR,
                message=f"Expected a resource object, got {type(record).__name__}",
                field_path=path,
            )
        ]

    data = _as_wire_dict(record)
    resource_key = None
    if data.get("type") and data.get("name"):
        resource_key = f"{data['type']}/{data['name']}"

    issues = []
    for field_name, suggestion in _REQUIRED_FIELDS:
        value = data.get(field_name)
        if not isinstance(value, str) or not value:
            issues.append(
                ValidationIssue(
                    severity=ValidationSeverity.ERROR,
                    message=f"Missing required field '{field_name}'",
                    details=f"Got {value!r}",
                    suggestion=suggestion,
                    field_path=f"{path}.{field_name}",
                    resource_key=resource_key,
                )
            )
    return issues


def validate_records(records: Sequence[RecordLike]) -> ValidationResult:
    """Validate every record, reporting paths like ``resources[3].name``.

    Duplicate ``type/name`` pairs are reported as errors too.
    """
    issues: List[ValidationIssue] = []
    for index, record in enumerate(records):
        issues.extend(validate_record(record, path=f"resources[{index}]"))
    issues.extend(find_duplicate_records(records))
    return ValidationResult(issues=issues)


def find_duplicate_records(records: Sequence[RecordLike]) -> List[ValidationIssue]:
    """Report every record whose ``type/name`` pair was already seen.

    Later definitions are reported; paths are ``resources[i].name``.
    """
    first_seen: Dict[str, int] = {}
    issues: List[ValidationIssue] = []
    for index, record in enumerate(records):
        if not isinstance(record, (CanonicalRecord, Mapping)):
            continue
        data = _as_wire_dict(record)
        key = f"{data.get('type')}/{data.get('name')}"
        if key not in first_seen:
            first_seen[key] = index
            continue
        issues.append(
            ValidationIssue(
                severity=ValidationSeverity.ERROR,
                message=f"Duplicate resource {key}",
                details=f"First defined at resources[{first_seen[key]}]",
                suggestion="Give each resource of a type a unique name",
                field_path=f"resources[{index}].name",
                resource_key=key,
            )
        )
    return issues
