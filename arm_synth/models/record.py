"""Canonical wire-format record produced for each resource construct."""

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

# Order in which fields appear in the emitted ARM resource object
_WIRE_FIELDS = (
    ("resource_type", "type"),
    ("api_version", "apiVersion"),
    ("name", "name"),
    ("location", "location"),
    ("tags", "tags"),
    ("sku", "sku"),
    ("kind", "kind"),
    ("identity", "identity"),
    ("properties", "properties"),
    ("depends_on", "dependsOn"),
)


@dataclass(frozen=True)
class CanonicalRecord:
    """One ARM resource in canonical form.

    ``resource_type`` plus ``name`` identify the record within one synthesis
    run. ``depends_on`` is only ever set by the dependency resolver.
    """

    resource_type: str
    api_version: str
    name: str
    location: Optional[str] = None
    tags: Optional[Mapping[str, Any]] = None
    properties: Optional[Mapping[str, Any]] = None
    sku: Optional[Mapping[str, Any]] = None
    kind: Optional[str] = None
    identity: Optional[Mapping[str, Any]] = None
    depends_on: Optional[Tuple[str, ...]] = None

    @property
    def key(self) -> str:
        """Dependency graph node key."""
        return f"{self.resource_type}/{self.name}"

    @property
    def name_segments(self) -> Tuple[str, ...]:
        return tuple(self.name.split("/"))

    @property
    def is_child(self) -> bool:
        """True for hierarchical types such as provider/parentType/childType."""
        return len(self.resource_type.split("/")) >= 3

    def with_depends_on(self, expressions: Optional[Iterable[str]]) -> "CanonicalRecord":
        depends_on = tuple(expressions) if expressions is not None else ()
        return replace(self, depends_on=depends_on or None)

    def to_dict(self) -> Dict[str, Any]:
        """Render the ARM resource object, omitting unset fields."""
        result: Dict[str, Any] = {}
        for attr, wire_name in _WIRE_FIELDS:
            value = getattr(self, attr)
            if value is None:
                continue
            if attr == "depends_on":
                value = list(value)
            result[wire_name] = value
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CanonicalRecord":
        depends_on = data.get("dependsOn")
        return cls(
            resource_type=data.get("type", ""),
            api_version=data.get("apiVersion", ""),
            name=data.get("name", ""),
            location=data.get("location"),
            tags=data.get("tags"),
            properties=data.get("properties"),
            sku=data.get("sku"),
            kind=data.get("kind"),
            identity=data.get("identity"),
            depends_on=tuple(depends_on) if depends_on else None,
        )
