"""ARM resourceId() expression builder.

This module renders and parses the cross-reference expressions that appear in
``dependsOn`` arrays and in resource properties.

Patterns:
- Top-level resources: ``[resourceId('Provider/type', 'name')]``
- Child resources: ``[resourceId('Provider/parent/child', 'parent', 'child')]``

The number of name arguments always equals the number of type segments minus
one. String arguments follow the ARM expression grammar: they are wrapped in
single quotes and an embedded single quote is written twice.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from ..models.record import CanonicalRecord
from .resource_types import type_segments

logger = logging.getLogger(__name__)

_RESOURCE_ID_CALL = re.compile(r"^\[\s*resourceId\((?P<args>.*)\)\s*\]$", re.DOTALL)
_STRING_ARGUMENT = re.compile(r"\s*'((?:[^']|'')*)'\s*(?:,|$)")


class ResourceIdPattern(Enum):
    """Shapes of resourceId() references."""

    TOP_LEVEL = "top_level"
    """Two-segment type, one name argument."""

    CHILD_RESOURCE = "child"
    """Type with three or more segments, one name argument per level."""


@dataclass(frozen=True)
class ResourceIdReference:
    """A parsed resourceId() expression."""

    resource_type: str
    name_segments: Tuple[str, ...]

    @property
    def name(self) -> str:
        return "/".join(self.name_segments)

    @property
    def key(self) -> str:
        return f"{self.resource_type}/{self.name}"

    @property
    def is_well_formed(self) -> bool:
        return len(self.name_segments) == expected_name_segments(self.resource_type)


def expected_name_segments(resource_type: str) -> int:
    """Number of name arguments a resourceId() call needs for ``resource_type``."""
    return max(type_segments(resource_type) - 1, 1)


def detect_pattern(resource_type: str) -> ResourceIdPattern:
    if type_segments(resource_type) >= 3:
        return ResourceIdPattern.CHILD_RESOURCE
    return ResourceIdPattern.TOP_LEVEL


def _quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


class ResourceIdExpressionBuilder:
    """Builds resourceId() expressions, dispatching on the reference pattern."""

    def __init__(self) -> None:
        self._builders: Dict[ResourceIdPattern, Callable[[str, str], str]] = {
            ResourceIdPattern.TOP_LEVEL: self._build_top_level,
            ResourceIdPattern.CHILD_RESOURCE: self._build_child,
        }

    def build(self, resource_type: str, name: str) -> str:
        """Render the reference expression for a resource.

        The pattern is chosen from the name: a name without '/' is rendered
        with one argument even when the type is hierarchical, so the output
        always mirrors what the record itself declares.
        """
        pattern = (
            ResourceIdPattern.CHILD_RESOURCE
            if "/" in name
            else ResourceIdPattern.TOP_LEVEL
        )
        if pattern is not detect_pattern(resource_type):
            logger.debug(
                f"Name '{name}' does not match the nesting depth of '{resource_type}'"
            )
        return self._builders[pattern](resource_type, name)

    def build_for(self, record: CanonicalRecord) -> str:
        return self.build(record.resource_type, record.name)

    def _build_top_level(self, resource_type: str, name: str) -> str:
        return f"[resourceId({_quote(resource_type)}, {_quote(name)})]"

    def _build_child(self, resource_type: str, name: str) -> str:
        name_args = ", ".join(_quote(part) for part in name.split("/"))
        return f"[resourceId({_quote(resource_type)}, {name_args})]"


_default_builder = ResourceIdExpressionBuilder()


def build_resource_id_expression(resource_type: str, name: str) -> str:
    """Render ``[resourceId('type', 'seg1', ...)]`` for a type and name."""
    return _default_builder.build(resource_type, name)


def parse_resource_id_expression(expression: str) -> Optional[ResourceIdReference]:
    """Parse a resourceId() expression made only of string literal arguments.

    Returns None for anything else, including expressions with nested
    function calls as arguments.
    """
    if not isinstance(expression, str):
        return None
    match = _RESOURCE_ID_CALL.match(expression.strip())
    if not match:
        return None

    args_text = match.group("args")
    args = []
    position = 0
    while position < len(args_text):
        arg_match = _STRING_ARGUMENT.match(args_text, position)
        if not arg_match:
            return None
        args.append(arg_match.group(1).replace("''", "'"))
        position = arg_match.end()

    if len(args) < 2:
        return None
    return ResourceIdReference(resource_type=args[0], name_segments=tuple(args[1:]))
