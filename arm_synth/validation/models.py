"""Data models for synthesis validation.

Validation never raises for problems it finds in records or templates; it
collects them as issues so callers decide what to do with them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ValidationSeverity(Enum):
    """Issue severity levels."""

    ERROR = "error"  # Deployment will fail
    WARNING = "warning"  # Likely mistake, deployment may still work
    INFO = "info"


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem found in a record or template.

    Attributes:
        severity: How serious the problem is
        message: One-line description
        details: Longer explanation, if any
        suggestion: How to fix it
        field_path: Dotted path to the offending field (e.g. "resources[2].apiVersion")
        resource_key: ``type/name`` of the resource involved, when known
    """

    severity: ValidationSeverity
    message: str
    details: Optional[str] = None
    suggestion: Optional[str] = None
    field_path: Optional[str] = None
    resource_key: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "severity": self.severity.value,
            "message": self.message,
        }
        for key in ("details", "suggestion", "field_path", "resource_key"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result

    def __str__(self) -> str:
        location = f" at {self.field_path}" if self.field_path else ""
        result = f"[{self.severity.value.upper()}]{location}: {self.message}"
        if self.suggestion:
            result += f" ({self.suggestion})"
        return result


@dataclass
class ValidationResult:
    """Collected issues of one validation pass."""

    issues: List[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def is_valid(self) -> bool:
        """True when there are no errors; warnings do not count."""
        return self.error_count == 0

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        return ValidationResult(issues=self.issues + other.issues)


class ValidationResultBuilder:
    """Accumulates issues while walking a record or template."""

    def __init__(self) -> None:
        self._issues: List[ValidationIssue] = []

    def add(self, issue: ValidationIssue) -> "ValidationResultBuilder":
        self._issues.append(issue)
        return self

    def extend(self, issues: List[ValidationIssue]) -> "ValidationResultBuilder":
        self._issues.extend(issues)
        return self

    def error(self, message: str, **kwargs: Any) -> "ValidationResultBuilder":
        return self.add(ValidationIssue(ValidationSeverity.ERROR, message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> "ValidationResultBuilder":
        return self.add(ValidationIssue(ValidationSeverity.WARNING, message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> "ValidationResultBuilder":
        return self.add(ValidationIssue(ValidationSeverity.INFO, message, **kwargs))

    def build(self) -> ValidationResult:
        return ValidationResult(issues=list(self._issues))


__all__ = [
    "ValidationIssue",
    "ValidationResult",
    "ValidationResultBuilder",
    "ValidationSeverity",
]
