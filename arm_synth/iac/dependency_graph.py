"""Per-run dependency graph over canonical records.

Nodes are keyed by ``resource_type/name`` and carry the record as the
``record`` node attribute. An edge ``a -> b`` means ``a`` depends on ``b``,
so successors are dependencies and predecessors are dependents.
"""

import logging
from typing import Iterable, Iterator, List, Optional, Set

import networkx as nx

from ..models.record import CanonicalRecord

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Directed dependency graph backed by a networkx DiGraph.

    networkx keeps adjacency in insertion order, which makes every traversal
    here deterministic for a fixed input.
    """

    def __init__(self) -> None:
        self._graph = nx.DiGraph()

    @classmethod
    def from_records(cls, records: Iterable[CanonicalRecord]) -> "DependencyGraph":
        graph = cls()
        for record in records:
            graph.add_record(record)
        return graph

    @property
    def nx_graph(self) -> nx.DiGraph:
        return self._graph

    def add_record(self, record: CanonicalRecord) -> str:
        key = record.key
        if key in self._graph:
            logger.warning(
                f"Duplicate resource {key}; the later definition replaces the earlier one"
            )
            self._graph.nodes[key]["record"] = record
        else:
            self._graph.add_node(key, record=record)
        return key

    def add_dependency(self, from_key: str, to_key: str) -> bool:
        """Add an edge; returns False when it is a self edge or a node is unknown."""
        if from_key == to_key:
            return False
        if from_key not in self._graph or to_key not in self._graph:
            logger.debug(f"Ignoring dependency {from_key} -> {to_key}: unknown node")
            return False
        self._graph.add_edge(from_key, to_key)
        return True

    def record(self, key: str) -> CanonicalRecord:
        return self._graph.nodes[key]["record"]

    def dependencies(self, key: str) -> List[str]:
        return list(self._graph.successors(key))

    def dependents(self, key: str) -> List[str]:
        return list(self._graph.predecessors(key))

    def keys(self) -> List[str]:
        return list(self._graph.nodes)

    def records(self) -> Iterator[CanonicalRecord]:
        for key in self._graph.nodes:
            yield self.record(key)

    def __contains__(self, key: object) -> bool:
        return key in self._graph

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def find_cycle(self) -> Optional[List[str]]:
        """Depth-first search for a cycle.

        Returns:
            Node keys from the first repeated node back to itself, in
            traversal order (``[a, b, c, a]``), or None for an acyclic graph.
        """
        visited: Set[str] = set()

        for start in self._graph.nodes:
            if start in visited:
                continue

            path: List[str] = [start]
            on_stack: Set[str] = {start}
            stack = [iter(self._graph.successors(start))]
            visited.add(start)

            while stack:
                node = next(stack[-1], None)
                if node is None:
                    stack.pop()
                    on_stack.discard(path.pop())
                    continue
                if node in on_stack:
                    return path[path.index(node) :] + [node]
                if node in visited:
                    continue
                visited.add(node)
                on_stack.add(node)
                path.append(node)
                stack.append(iter(self._graph.successors(node)))

        return None

    def topological_order(self, keys: Iterable[str]) -> List[str]:
        """Order ``keys`` so every key follows all of its dependencies.

        Independent keys keep their relative order from ``keys``. Dependencies
        reached through the graph but missing from ``keys`` are not emitted.
        Cycles are not reported; a back edge is simply skipped.
        """
        requested = list(keys)
        wanted = set(requested)
        visited: Set[str] = set()
        ordered: List[str] = []

        for start in requested:
            if start in visited:
                continue
            visited.add(start)
            if start not in self._graph:
                ordered.append(start)
                continue

            path = [start]
            stack = [iter(self._graph.successors(start))]
            while stack:
                node = next(stack[-1], None)
                if node is None:
                    stack.pop()
                    done = path.pop()
                    if done in wanted:
                        ordered.append(done)
                    continue
                if node in visited:
                    continue
                visited.add(node)
                path.append(node)
                stack.append(iter(self._graph.successors(node)))

        return ordered
