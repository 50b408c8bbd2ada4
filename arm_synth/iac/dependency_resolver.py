"""Dependency resolver for ARM template synthesis.

Discovers the dependencies between all records of one deployment unit,
rejects cycles, writes ``dependsOn`` resourceId() expressions and orders the
records so that every resource follows the resources it depends on.

Edges come from several independent detectors whose results are unioned:

- textual containment of another record's name in a record's properties
- parent/child naming of hierarchical resource types
- fixed cross-type rules (see ``dependency_rules``)
- redirection to the parent when a child type is only declared inline
- explicit dependencies declared on the originating constructs
"""

import json
import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..config.models import DependencyMode, ResolverConfig
from ..exceptions import CircularDependencyError, DependencyResolutionError
from ..models.construct import Construct, DependencyTarget
from ..models.record import CanonicalRecord
from .dependency_graph import DependencyGraph
from .dependency_rules import (
    DEFAULT_CROSS_TYPE_RULES,
    DEFAULT_INLINE_NESTINGS,
    CrossTypeRule,
    InlineNesting,
)
from .resource_id_builder import (
    ResourceIdExpressionBuilder,
    parse_resource_id_expression,
)
from .resource_types import parent_resource_name, parent_resource_type

logger = logging.getLogger(__name__)


class DependencyResolver:
    """Resolves dependencies between canonical records.

    The graph built by the last ``resolve`` call is kept on ``self.graph``;
    nothing else survives between calls.
    """

    def __init__(
        self,
        config: Optional[ResolverConfig] = None,
        rules: Sequence[CrossTypeRule] = DEFAULT_CROSS_TYPE_RULES,
        inline_nestings: Sequence[InlineNesting] = DEFAULT_INLINE_NESTINGS,
    ) -> None:
        self.config = config or ResolverConfig()
        self.rules = tuple(rules)
        self.inline_nestings = tuple(inline_nestings)
        self.graph: Optional[DependencyGraph] = None
        self._id_builder = ResourceIdExpressionBuilder()

    @property
    def strict(self) -> bool:
        return self.config.mode == DependencyMode.EXPLICIT

    def resolve(
        self,
        records: Sequence[CanonicalRecord],
        constructs: Optional[Sequence[Construct]] = None,
    ) -> List[CanonicalRecord]:
        """Compute dependencies and annotate every record's ``dependsOn``.

        Args:
            records: Records of one deployment unit
            constructs: Originating constructs, ``constructs[i]`` for ``records[i]``

        Returns:
            Records in input order with ``dependsOn`` rewritten. Any
            ``dependsOn`` already present on the input is discarded.

        Raises:
            CircularDependencyError: If the dependency graph has a cycle
            DependencyResolutionError: If records and constructs differ in length
        """
        records = list(records)
        if constructs is not None and len(constructs) != len(records):
            raise DependencyResolutionError(
                f"Got {len(records)} records but {len(constructs)} constructs",
                error_code="RECORD_CONSTRUCT_MISMATCH",
            )

        graph, external_references = self._build(records, constructs)
        self.graph = graph

        cycle = graph.find_cycle()
        if cycle:
            logger.error(f"Circular dependency detected: {' → '.join(cycle)}")
            raise CircularDependencyError(cycle)

        missing_child_types = self._missing_inline_child_types(records)

        resolved: Dict[str, CanonicalRecord] = {}
        for record in records:
            resolved[record.key] = self._add_depends_on(
                graph.record(record.key),
                graph,
                external_references.get(record.key, []),
                missing_child_types,
            )

        edge_count = graph.nx_graph.number_of_edges()
        logger.info(
            f"Resolved {edge_count} dependencies across {len(resolved)} resources"
        )
        return list(resolved.values())

    def build_graph(
        self,
        records: Sequence[CanonicalRecord],
        constructs: Optional[Sequence[Construct]] = None,
    ) -> DependencyGraph:
        """Build the dependency graph without checking it for cycles."""
        graph, _ = self._build(list(records), constructs)
        return graph

    def topological_sort(
        self,
        records: Sequence[CanonicalRecord],
        graph: Optional[DependencyGraph] = None,
    ) -> List[CanonicalRecord]:
        """Order records so each one follows all of its dependencies.

        Uses ``graph`` when given, else the graph of the last ``resolve``,
        else a graph built from ``records``. Cycles are not re-checked, so
        call ``resolve`` first.
        """
        records = list(records)
        if graph is None:
            graph = self.graph
        if graph is None:
            graph = self.build_graph(records)

        by_key: Dict[str, CanonicalRecord] = {}
        for record in records:
            by_key[record.key] = record

        ordered_keys = graph.topological_order(by_key.keys())
        return [by_key[key] for key in ordered_keys]

    def _build(
        self,
        records: List[CanonicalRecord],
        constructs: Optional[Sequence[Construct]],
    ) -> Tuple[DependencyGraph, Dict[str, List[str]]]:
        graph = DependencyGraph()
        for record in records:
            graph.add_record(record)

        # Duplicates collapse onto one node; the last definition wins
        unique = [graph.record(key) for key in graph.keys()]
        texts = {record.key: self._properties_text(record) for record in unique}

        for record in unique:
            for candidate in unique:
                if candidate.key == record.key:
                    continue
                if self._depends_on_candidate(record, candidate, texts[record.key]):
                    graph.add_dependency(record.key, candidate.key)

        if not self.strict:
            self._add_inline_redirects(graph, unique, texts)

        external_references = self._add_explicit_dependencies(
            graph, records, constructs
        )

        logger.debug(
            f"Built dependency graph: {len(graph)} nodes, "
            f"{graph.nx_graph.number_of_edges()} edges"
        )
        return graph, external_references

    def _depends_on_candidate(
        self, record: CanonicalRecord, candidate: CanonicalRecord, text: str
    ) -> bool:
        if self._is_parent(record, candidate):
            return True
        if self.strict:
            return False
        if candidate.name and candidate.name in text:
            return True
        for rule in self.rules:
            if (
                rule.source_type == record.resource_type
                and rule.target_type == candidate.resource_type
                and rule.matches(record.properties, candidate.name)
            ):
                return True
        return False

    @staticmethod
    def _is_parent(record: CanonicalRecord, candidate: CanonicalRecord) -> bool:
        parent_type = parent_resource_type(record.resource_type)
        if parent_type is None or candidate.resource_type != parent_type:
            return False
        return parent_resource_name(record.name) == candidate.name

    def _add_inline_redirects(
        self,
        graph: DependencyGraph,
        records: List[CanonicalRecord],
        texts: Dict[str, str],
    ) -> None:
        """Point references to inline-only children at their parent record."""
        present_types = {record.resource_type for record in records}

        for nesting in self.inline_nestings:
            if nesting.child_type in present_types:
                continue

            child_path = nesting.child_type.split("/", 1)[-1]
            parents = [r for r in records if r.resource_type == nesting.parent_type]

            for parent in parents:
                inline_names = nesting.inline_child_names(parent.properties)
                for record in records:
                    if record.key == parent.key or record.resource_type == nesting.parent_type:
                        continue
                    text = texts[record.key]
                    references_type = child_path in text and bool(parent.name) and parent.name in text
                    references_child = any(name in text for name in inline_names)
                    if references_type or references_child:
                        if graph.add_dependency(record.key, parent.key):
                            logger.debug(
                                f"{record.key} references an inline {nesting.child_type} "
                                f"of {parent.key}; depending on the parent"
                            )

    def _add_explicit_dependencies(
        self,
        graph: DependencyGraph,
        records: List[CanonicalRecord],
        constructs: Optional[Sequence[Construct]],
    ) -> Dict[str, List[str]]:
        """Add construct-declared edges.

        Returns rendered references to targets outside this deployment,
        keyed by the depending record.
        """
        external: Dict[str, List[str]] = {}
        if not constructs:
            return external

        keys_by_name: Dict[str, List[str]] = {}
        for key in graph.keys():
            keys_by_name.setdefault(graph.record(key).name, []).append(key)

        for record, construct in zip(records, constructs):
            for target in construct.dependencies:
                if not isinstance(target, DependencyTarget):
                    logger.debug(
                        f"Ignoring dependency of {record.key} on {target!r}: "
                        "not a resource"
                    )
                    continue

                matches = keys_by_name.get(target.name, [])
                if not matches:
                    logger.warning(
                        f"{record.key} depends on '{target.name}', which is not "
                        "part of this deployment"
                    )
                    external.setdefault(record.key, []).append(
                        self._id_builder.build(target.resource_type, target.name)
                    )
                    continue

                same_type = f"{target.resource_type}/{target.name}"
                target_key = same_type if same_type in matches else matches[0]
                graph.add_dependency(record.key, target_key)

        return external

    def _missing_inline_child_types(self, records: List[CanonicalRecord]) -> Set[str]:
        present_types = {record.resource_type for record in records}
        return {
            nesting.child_type
            for nesting in self.inline_nestings
            if nesting.child_type not in present_types
        }

    def _add_depends_on(
        self,
        record: CanonicalRecord,
        graph: DependencyGraph,
        external_references: List[str],
        missing_child_types: Set[str],
    ) -> CanonicalRecord:
        rendered = [
            self._id_builder.build_for(graph.record(dependency_key))
            for dependency_key in graph.dependencies(record.key)
        ]
        rendered.extend(external_references)

        expressions: List[str] = []
        for expression in rendered:
            if expression in expressions:
                continue
            reference = parse_resource_id_expression(expression)
            if reference is not None and reference.resource_type in missing_child_types:
                # Inline children are deployed with their parent
                logger.debug(
                    f"Dropping {expression} from {record.key}: no "
                    f"{reference.resource_type} records in this deployment"
                )
                continue
            expressions.append(expression)

        return record.with_depends_on(expressions)

    @staticmethod
    def _properties_text(record: CanonicalRecord) -> str:
        if not record.properties:
            return ""
        return json.dumps(record.properties, default=str, ensure_ascii=False)
