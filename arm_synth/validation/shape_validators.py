"""Shape predicates for nested ARM structures.

Resource constructs use these to reject property bags the ARM API would
refuse, most commonly nested entries missing their ``properties`` wrapper.
Each ``is_*`` predicate returns a bool; the paired ``assert_*`` form raises
ShapeValidationError (a TypeError) with a message showing the correct shape.
"""

from typing import Any, Mapping

from ..exceptions import ShapeValidationError

SUBNET_DELEGATION_SHAPE_MESSAGE = (
    "Invalid subnet delegation structure. Must include properties wrapper with serviceName. "
    'Correct format: { name: "...", properties: { serviceName: "..." } }'
)
SUBNET_SHAPE_MESSAGE = (
    "Invalid subnet structure. Must include properties wrapper with addressPrefix. "
    'Correct format: { name: "...", properties: { addressPrefix: "..." } }'
)
NSG_REFERENCE_SHAPE_MESSAGE = (
    "Invalid network security group reference. The id must be an ARM expression. "
    "Correct format: { id: \"[resourceId('Microsoft.Network/networkSecurityGroups', '...')]\" }"
)


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and len(value) > 0


def is_arm_resource(obj: Any) -> bool:
    return isinstance(obj, Mapping) and all(
        _non_empty_str(obj.get(key)) for key in ("type", "apiVersion", "name")
    )


def is_arm_template_document(obj: Any) -> bool:
    return (
        isinstance(obj, Mapping)
        and _non_empty_str(obj.get("$schema"))
        and _non_empty_str(obj.get("contentVersion"))
        and isinstance(obj.get("resources"), list)
    )


def is_arm_expression(value: Any) -> bool:
    """True for bracket-delimited template expressions such as ``[concat(...)]``."""
    return (
        isinstance(value, str)
        and len(value) > 2
        and value.startswith("[")
        and value.endswith("]")
    )


def _expression_call(value: Any, function: str) -> bool:
    if not is_arm_expression(value):
        return False
    return value[1:-1].strip().startswith(f"{function}(")


def is_resource_id_expression(value: Any) -> bool:
    return _expression_call(value, "resourceId")


def is_parameter_reference(value: Any) -> bool:
    return _expression_call(value, "parameters")


def is_variable_reference(value: Any) -> bool:
    return _expression_call(value, "variables")


def is_valid_subnet_delegation(obj: Any) -> bool:
    """A delegation needs a name and ``properties.serviceName``."""
    if not isinstance(obj, Mapping) or not _non_empty_str(obj.get("name")):
        return False
    properties = obj.get("properties")
    return isinstance(properties, Mapping) and _non_empty_str(
        properties.get("serviceName")
    )


def is_valid_subnet(obj: Any) -> bool:
    """An inline subnet needs a name and ``properties.addressPrefix``.

    Any delegations it declares must be well-formed too.
    """
    if not isinstance(obj, Mapping) or not _non_empty_str(obj.get("name")):
        return False
    properties = obj.get("properties")
    if not isinstance(properties, Mapping):
        return False
    if not _non_empty_str(properties.get("addressPrefix")):
        return False
    delegations = properties.get("delegations")
    if isinstance(delegations, list):
        return all(is_valid_subnet_delegation(d) for d in delegations)
    return True


def is_valid_nsg_reference(ref: Any) -> bool:
    """The ``id`` of a security group reference must be an expression, not a literal ID."""
    return isinstance(ref, Mapping) and is_arm_expression(ref.get("id"))


def has_valid_nsg_reference(subnet: Any) -> bool:
    if not is_valid_subnet(subnet):
        return False
    reference = subnet["properties"].get("networkSecurityGroup")
    if not reference:
        return True
    return is_valid_nsg_reference(reference)


def assert_arm_resource(obj: Any) -> None:
    if not is_arm_resource(obj):
        raise ShapeValidationError("Object is not a valid ARM resource")


def assert_arm_template_document(obj: Any) -> None:
    if not is_arm_template_document(obj):
        raise ShapeValidationError("Object is not a valid ARM template document")


def assert_valid_subnet_delegation(obj: Any) -> None:
    if not is_valid_subnet_delegation(obj):
        raise ShapeValidationError(SUBNET_DELEGATION_SHAPE_MESSAGE)


def assert_valid_subnet(obj: Any) -> None:
    if not is_valid_subnet(obj):
        raise ShapeValidationError(SUBNET_SHAPE_MESSAGE)


def assert_valid_nsg_reference(ref: Any) -> None:
    if not is_valid_nsg_reference(ref):
        raise ShapeValidationError(
            NSG_REFERENCE_SHAPE_MESSAGE, field_path="networkSecurityGroup.id"
        )
