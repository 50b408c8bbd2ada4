"""Construct tree model.

Constructs are the user-authored side of synthesis: a tree of nodes where
``Resource`` nodes describe one ARM resource each and ``Stack`` nodes mark the
boundary of one deployment unit. The synthesis pipeline only reads this tree.
"""

import logging
from enum import Enum
from typing import (
    Any,
    Dict,
    Iterator,
    List,
    Optional,
    Protocol,
    Tuple,
    runtime_checkable,
)

from ..exceptions import ConstructError

logger = logging.getLogger(__name__)


class _Absent:
    """Marker for a value that was never provided.

    ``None`` is a real JSON null and is kept by synthesis; ``ABSENT`` is
    removed wherever it appears.
    """

    _instance: Optional["_Absent"] = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Absent":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "_Absent":
        return self

    def __reduce__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


class DeploymentScope(str, Enum):
    """Target scope of one ARM deployment."""

    RESOURCE_GROUP = "resource_group"
    SUBSCRIPTION = "subscription"
    MANAGEMENT_GROUP = "management_group"
    TENANT = "tenant"


@runtime_checkable
class DependencyTarget(Protocol):
    """Accessor surface of anything another construct may depend on."""

    @property
    def resource_type(self) -> str: ...

    @property
    def name(self) -> str: ...

    @property
    def location(self) -> Any: ...


class Construct:
    """A node in the construct tree."""

    def __init__(self, scope: Optional["Construct"], construct_id: str) -> None:
        if not construct_id:
            raise ConstructError("Construct id must be a non-empty string")
        self.construct_id = construct_id
        self.parent = scope
        self._children: List["Construct"] = []
        self._dependencies: List["Construct"] = []
        if scope is not None:
            scope._add_child(self)

    def _add_child(self, child: "Construct") -> None:
        if any(c.construct_id == child.construct_id for c in self._children):
            raise ConstructError(
                f"There is already a construct with id '{child.construct_id}' "
                f"in '{self.path}'",
                construct_path=self.path,
            )
        self._children.append(child)

    @property
    def children(self) -> Tuple["Construct", ...]:
        return tuple(self._children)

    @property
    def path(self) -> str:
        """Construct ids from the root down to this node, joined by '/'."""
        ids = []
        node: Optional[Construct] = self
        while node is not None:
            ids.append(node.construct_id)
            node = node.parent
        return "/".join(reversed(ids))

    @property
    def dependencies(self) -> Tuple["Construct", ...]:
        return tuple(self._dependencies)

    def add_dependency(self, *targets: "Construct") -> None:
        """Declare that this construct must be deployed after ``targets``."""
        for target in targets:
            if target is self:
                logger.debug(f"Ignoring self-dependency on '{self.path}'")
                continue
            if target not in self._dependencies:
                self._dependencies.append(target)

    def walk(self) -> Iterator["Construct"]:
        """Yield this construct and its descendants in depth-first pre-order."""
        stack: List[Construct] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node._children))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.path!r})"


class Stack(Construct):
    """Root of one deployment unit."""

    def __init__(
        self,
        scope: Optional[Construct],
        construct_id: str,
        deployment_scope: DeploymentScope = DeploymentScope.RESOURCE_GROUP,
    ) -> None:
        super().__init__(scope, construct_id)
        self.deployment_scope = DeploymentScope(deployment_scope)

    def resources(self) -> List["Resource"]:
        """Resources owned by this stack, excluding those of nested stacks."""
        found: List[Resource] = []
        stack: List[Construct] = list(reversed(self._children))
        while stack:
            node = stack.pop()
            if isinstance(node, Stack):
                continue
            if isinstance(node, Resource):
                found.append(node)
            stack.extend(reversed(node._children))
        return found


class Resource(Construct):
    """A construct describing a single ARM resource.

    Optional fields accept ``None`` or ``ABSENT``; both mean the field is not
    emitted at the top level. Inside ``properties`` a ``None`` value is kept as
    an explicit null.
    """

    def __init__(
        self,
        scope: Optional[Construct],
        construct_id: str,
        *,
        resource_type: str,
        name: str,
        api_version: Any = None,
        location: Any = None,
        tags: Any = None,
        properties: Any = None,
        sku: Any = None,
        kind: Any = None,
        identity: Any = None,
    ) -> None:
        super().__init__(scope, construct_id)
        self._resource_type = resource_type
        self._name = name
        self.api_version = api_version
        self._location = location
        self.tags = tags
        self.properties = properties
        self.sku = sku
        self.kind = kind
        self.identity = identity

    @property
    def resource_type(self) -> str:
        return self._resource_type

    @property
    def name(self) -> str:
        return self._name

    @property
    def location(self) -> Any:
        return self._location
