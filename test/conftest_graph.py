#!/usr/bin/env python3
"""Graph-specific test fixtures for dependency analysis."""

from typing import Callable, Iterable, List, Optional, Tuple

import pytest

from depmap.project_graph import DependencyEdge, DependencyGraph, DependencyKind, ProjectNode

EdgeSpec = Tuple[str, str, int]


def _node(name: str, collection: str = "") -> ProjectNode:
    return ProjectNode(name, f"src/{name}/{name}.csproj", "net48", collection)


@pytest.fixture
def graph_factory() -> Callable[..., DependencyGraph]:
    """Return a builder for graphs described as (source, target, weight) tuples.

    Vertices are added in first-mention order, then any names passed in
    ``extra_nodes``. ``collections`` maps a project name to its solution.
    """
    def _build(
        edges: Iterable[EdgeSpec],
        extra_nodes: Optional[List[str]] = None,
        collections: Optional[dict] = None,
        binary_targets: Optional[List[str]] = None,
    ) -> DependencyGraph:
        collections = collections or {}
        binary_targets = binary_targets or []
        graph = DependencyGraph()
        nodes = {}

        def get(name: str) -> ProjectNode:
            if name not in nodes:
                nodes[name] = _node(name, collections.get(name, ""))
                graph.add_vertex(nodes[name])
            return nodes[name]

        edge_list = list(edges)
        for source, target, _ in edge_list:
            get(source)
            get(target)
        for name in extra_nodes or []:
            get(name)
        for source, target, weight in edge_list:
            kind = DependencyKind.BINARY_REFERENCE if target in binary_targets else DependencyKind.PROJECT_REFERENCE
            graph.add_edge(DependencyEdge(nodes[source], nodes[target], kind, weight))
        return graph

    return _build


@pytest.fixture
def triangle_graph(graph_factory: Callable[..., DependencyGraph]) -> DependencyGraph:
    """A -> B -> C -> A, every edge weight 7."""
    return graph_factory([("A", "B", 7), ("B", "C", 7), ("C", "A", 7)])


@pytest.fixture
def two_cycle_graph(graph_factory: Callable[..., DependencyGraph]) -> DependencyGraph:
    """A -> B (5), B -> A (15)."""
    return graph_factory([("A", "B", 5), ("B", "A", 15)])


@pytest.fixture
def acyclic_ten_graph(graph_factory: Callable[..., DependencyGraph]) -> DependencyGraph:
    """Ten disconnected projects P0..P9."""
    return graph_factory([], extra_nodes=[f"P{i}" for i in range(10)])


@pytest.fixture
def mixed_cycles_graph(graph_factory: Callable[..., DependencyGraph]) -> DependencyGraph:
    """Two cycles plus an acyclic tail.

    Cycle 1: A <-> B (weights 4 and 9)
    Cycle 2: C -> D -> E -> F -> C (weights 4, 6, 8, 10)
    Tail:    F -> G, G -> H
    """
    return graph_factory(
        [
            ("A", "B", 4),
            ("B", "A", 9),
            ("C", "D", 4),
            ("D", "E", 6),
            ("E", "F", 8),
            ("F", "C", 10),
            ("F", "G", 1),
            ("G", "H", 1),
        ]
    )
