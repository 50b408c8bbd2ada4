"""Resource transformation and dependency resolution for ARM synthesis.

The emitters and the synthesis engine live in ``arm_synth.iac.emitters`` and
``arm_synth.iac.engine``.
"""

from .dependency_graph import DependencyGraph
from .dependency_resolver import DependencyResolver
from .dependency_rules import (
    DEFAULT_CROSS_TYPE_RULES,
    DEFAULT_INLINE_NESTINGS,
    CrossTypeRule,
    InlineNesting,
)
from .resource_id_builder import (
    ResourceIdExpressionBuilder,
    ResourceIdReference,
    build_resource_id_expression,
    expected_name_segments,
    parse_resource_id_expression,
)
from .resource_transformer import ResourceTransformer

__all__ = [
    "DEFAULT_CROSS_TYPE_RULES",
    "DEFAULT_INLINE_NESTINGS",
    "CrossTypeRule",
    "DependencyGraph",
    "DependencyResolver",
    "InlineNesting",
    "ResourceIdExpressionBuilder",
    "ResourceIdReference",
    "ResourceTransformer",
    "build_resource_id_expression",
    "expected_name_segments",
    "parse_resource_id_expression",
]
