"""
Versioned dependency graph with Tarjan's algorithm for cycle detection.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Set, Tuple

from .faults import DependencyCycleFault

logger = logging.getLogger("librarium.graph")


@dataclass(frozen=True)
class DependencyEdge:
    """A consumer's requirement on another library's minimum version."""

    consumer: str
    dependency: str
    min_version: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "dependency": self.dependency,
            "min_version": self.min_version,
        }


class DependencyGraph:
    """
    Ordered dependency edges keyed by consumer.

    Edges are kept in registration order and never deduplicated. An edge may
    name a dependency that is not registered anywhere yet; the graph only
    records requirements, the registry decides whether they are met.

    Not thread-safe on its own: ``LibraryRegistry`` guards it with its lock.
    """

    def __init__(self):
        self._edges: Dict[str, List[DependencyEdge]] = {}

    def add_edge(self, consumer: str, dependency: str, min_version: int) -> DependencyEdge:
        """
        Append an edge.

        Args:
            consumer: Library that has the requirement
            dependency: Library it requires
            min_version: Lowest acceptable version of ``dependency``

        Returns:
            The recorded edge
        """
        edge = DependencyEdge(consumer=consumer, dependency=dependency, min_version=min_version)
        self._edges.setdefault(consumer, []).append(edge)
        logger.debug("Edge %s -> %s (>= %d)", consumer, dependency, min_version)
        return edge

    def edges(self, consumer: str) -> List[DependencyEdge]:
        """Edges of ``consumer`` in registration order (copy)."""
        return list(self._edges.get(consumer, ()))

    def has_edges(self, consumer: str) -> bool:
        return bool(self._edges.get(consumer))

    def get_dependencies(self, consumer: str) -> List[str]:
        """Distinct dependency names of ``consumer``, first occurrence order."""
        seen: Dict[str, None] = {}
        for edge in self._edges.get(consumer, ()):
            seen.setdefault(edge.dependency, None)
        return list(seen)

    def get_dependents(self, name: str) -> List[str]:
        """Consumers with at least one edge on ``name``."""
        return [
            consumer
            for consumer, edges in self._edges.items()
            if any(edge.dependency == name for edge in edges)
        ]

    def nodes(self) -> List[str]:
        """Every name appearing as consumer or dependency, insertion order."""
        seen: Dict[str, None] = {}
        for consumer, edges in self._edges.items():
            seen.setdefault(consumer, None)
            for edge in edges:
                seen.setdefault(edge.dependency, None)
        return list(seen)

    def _adjacency(self) -> Dict[str, List[str]]:
        adjacency: Dict[str, List[str]] = {name: [] for name in self.nodes()}
        for consumer in self._edges:
            adjacency[consumer] = self.get_dependencies(consumer)
        return adjacency

    def find_cycle(self) -> Optional[List[str]]:
        """
        Find cycle in graph using Tarjan's algorithm.

        Returns:
            List of node names forming a cycle, or None if acyclic
        """
        adjacency = self._adjacency()

        index_counter = 0
        stack: List[str] = []
        lowlinks: Dict[str, int] = {}
        index: Dict[str, int] = {}
        on_stack: Set[str] = set()

        def visit(node_name: str) -> None:
            nonlocal index_counter
            index[node_name] = index_counter
            lowlinks[node_name] = index_counter
            index_counter += 1
            stack.append(node_name)
            on_stack.add(node_name)

        # Iterative DFS: work stack of (node, remaining deps)
        for root in adjacency:
            if root in index:
                continue

            visit(root)
            work: List[Tuple[str, Iterator[str]]] = [(root, iter(adjacency[root]))]

            while work:
                node_name, deps = work[-1]
                descended = False

                for dep_name in deps:
                    if dep_name not in index:
                        visit(dep_name)
                        work.append((dep_name, iter(adjacency[dep_name])))
                        descended = True
                        break
                    if dep_name in on_stack:
                        lowlinks[node_name] = min(lowlinks[node_name], index[dep_name])

                if descended:
                    continue

                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlinks[parent] = min(lowlinks[parent], lowlinks[node_name])

                # Root of an SCC: pop it
                if lowlinks[node_name] == index[node_name]:
                    component: List[str] = []
                    while True:
                        w = stack.pop()
                        on_stack.remove(w)
                        component.append(w)
                        if w == node_name:
                            break

                    # Self-edges are cycles of length one
                    if len(component) > 1 or node_name in adjacency[node_name]:
                        return list(reversed(component))

        return None

    def topological_sort(self) -> List[str]:
        """
        Compute dependency-first order of every node.

        Returns:
            Node names, dependencies before their consumers

        Raises:
            DependencyCycleFault: If the edges form a cycle
        """
        cycle = self.find_cycle()
        if cycle:
            raise DependencyCycleFault(cycle)

        adjacency = self._adjacency()

        # Kahn's algorithm over reverse edges
        in_degree: Dict[str, int] = {name: 0 for name in adjacency}
        for deps in adjacency.values():
            for dep in deps:
                in_degree[dep] += 1

        queue = deque(name for name, degree in in_degree.items() if degree == 0)
        result: List[str] = []

        while queue:
            node_name = queue.popleft()
            result.append(node_name)
            for dep_name in adjacency[node_name]:
                in_degree[dep_name] -= 1
                if in_degree[dep_name] == 0:
                    queue.append(dep_name)

        return list(reversed(result))

    def clear(self) -> None:
        self._edges.clear()

    def to_dict(self) -> Dict[str, List[Dict[str, object]]]:
        """Export edges as ``{consumer: [{dependency, min_version}, ...]}``."""
        return {
            consumer: [edge.to_dict() for edge in edges]
            for consumer, edges in self._edges.items()
        }

    def __len__(self) -> int:
        """Number of consumers with recorded edges."""
        return len(self._edges)

    def __contains__(self, consumer: str) -> bool:
        return consumer in self._edges

    def __repr__(self) -> str:
        edge_count = sum(len(edges) for edges in self._edges.values())
        return f"DependencyGraph({len(self._edges)} consumers, {edge_count} edges)"
