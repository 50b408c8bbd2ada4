"""Fixed dependency rules between well-known ARM resource types."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

from . import resource_types as rt


@dataclass(frozen=True)
class CrossTypeRule:
    """``source_type`` records depend on ``target_type`` records.

    With ``reference_path`` set, the edge is only added when the target's name
    appears in the string found at that path inside the source's properties.
    Without it, every source depends on every target of the given type.
    """

    source_type: str
    target_type: str
    reference_path: Optional[Tuple[str, ...]] = None

    def matches(self, properties: Optional[Mapping[str, Any]], target_name: str) -> bool:
        if self.reference_path is None:
            return True
        value: Any = properties or {}
        for part in self.reference_path:
            if not isinstance(value, Mapping):
                return False
            value = value.get(part)
        return isinstance(value, str) and bool(target_name) and target_name in value


@dataclass(frozen=True)
class InlineNesting:
    """A child type that parents may declare inline under ``property_name``."""

    parent_type: str
    child_type: str
    property_name: str

    def inline_child_names(self, properties: Optional[Mapping[str, Any]]) -> Tuple[str, ...]:
        """Names of the children declared inline in a parent's properties."""
        children = (properties or {}).get(self.property_name)
        if not isinstance(children, (list, tuple)):
            return ()
        return tuple(
            child["name"]
            for child in children
            if isinstance(child, Mapping) and isinstance(child.get("name"), str) and child["name"]
        )


DEFAULT_CROSS_TYPE_RULES: Tuple[CrossTypeRule, ...] = (
    CrossTypeRule(rt.VIRTUAL_MACHINE, rt.SUBNET),
    CrossTypeRule(rt.VIRTUAL_MACHINE, rt.NETWORK_INTERFACE),
    CrossTypeRule(rt.WEB_SITE, rt.SERVER_FARM),
    CrossTypeRule(
        rt.SUBNET,
        rt.NETWORK_SECURITY_GROUP,
        reference_path=("networkSecurityGroup", "id"),
    ),
)

DEFAULT_INLINE_NESTINGS: Tuple[InlineNesting, ...] = (
    InlineNesting(rt.VIRTUAL_NETWORK, rt.SUBNET, "subnets"),
    InlineNesting(rt.NETWORK_SECURITY_GROUP, rt.SECURITY_RULE, "securityRules"),
)
