#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************
"""Project dependency graph model backed by NetworkX.

Vertices are ProjectNode instances identified by their canonical path
(case-insensitive). Edges are DependencyEdge instances stored as the ``edge``
attribute of a networkx.DiGraph edge, so at most one edge exists per ordered
(source, target) pair. Repeated references between the same pair are merged
and keep the maximum coupling weight.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import networkx as nx

from depmap.constants import (
    DEFAULT_COUPLING_WEIGHT,
    MEDIUM_COUPLING_MAX,
    WEAK_COUPLING_MAX,
    GraphIntegrityError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class DependencyKind(Enum):
    """How a project refers to its dependency."""

    PROJECT_REFERENCE = "project"
    BINARY_REFERENCE = "binary"

    @property
    def display_name(self) -> str:
        return "Project Reference" if self is DependencyKind.PROJECT_REFERENCE else "Binary Reference"


class CouplingStrength(Enum):
    """Coupling bands derived from the method-call count of a reference."""

    WEAK = "weak"
    MEDIUM = "medium"
    STRONG = "strong"


def classify_coupling(weight: int) -> CouplingStrength:
    """Classify a coupling weight: 0-5 weak, 6-20 medium, 21+ strong."""
    if weight <= WEAK_COUPLING_MAX:
        return CouplingStrength.WEAK
    if weight <= MEDIUM_COUPLING_MAX:
        return CouplingStrength.MEDIUM
    return CouplingStrength.STRONG


@dataclass(frozen=True, eq=False)
class ProjectNode:
    """A project in the dependency graph.

    Attributes:
        name: Display name (e.g., "Contoso.Billing")
        path: Canonical project path, the identity key
        platform: Target framework tag (e.g., "net48", "net8.0")
        collection: Owning solution name, empty when unknown
    """

    name: str
    path: str
    platform: str = ""
    collection: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValidationError("Project name must be a non-empty string")
        if not isinstance(self.path, str) or not self.path.strip():
            raise ValidationError(f"Project '{self.name}' must have a non-empty path")

    @property
    def key(self) -> str:
        """Case-insensitive identity key."""
        return self.path.lower()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProjectNode):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __repr__(self) -> str:
        return f"ProjectNode({self.name!r}, {self.path!r})"


@dataclass(frozen=True)
class DependencyEdge:
    """A directed reference from source to target.

    Attributes:
        source: Referencing project
        target: Referenced project or binary
        kind: Project or binary reference
        weight: Coupling weight (method calls across the reference), 1 when unknown
    """

    source: ProjectNode
    target: ProjectNode
    kind: DependencyKind = DependencyKind.PROJECT_REFERENCE
    weight: int = DEFAULT_COUPLING_WEIGHT

    def __post_init__(self) -> None:
        if self.source is None or self.target is None:
            raise ValidationError("Dependency edge requires both source and target")
        if isinstance(self.weight, bool) or not isinstance(self.weight, int) or self.weight < 0:
            raise ValidationError(f"Coupling weight must be a non-negative integer, got {self.weight!r}")

    @property
    def coupling_strength(self) -> CouplingStrength:
        return classify_coupling(self.weight)

    @property
    def is_cross_collection(self) -> bool:
        """True if both endpoints have a collection and the collections differ."""
        source_collection = self.source.collection
        target_collection = self.target.collection
        if not source_collection or not target_collection:
            return False
        return source_collection.lower() != target_collection.lower()

    def __str__(self) -> str:
        return f"{self.source.name} → {self.target.name}"


class DependencyGraph:
    """Directed project graph with outgoing and incoming edge lookup.

    Vertices iterate in insertion order. Edges iterate grouped by source
    vertex (insertion order), then by the order their targets were added.
    """

    def __init__(self) -> None:
        self._graph: "nx.DiGraph[ProjectNode]" = nx.DiGraph()
        self._by_key: Dict[str, ProjectNode] = {}

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __contains__(self, node: object) -> bool:
        return isinstance(node, ProjectNode) and self._graph.has_node(node)

    @property
    def vertex_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    @property
    def vertices(self) -> List[ProjectNode]:
        return list(self._graph.nodes())

    @property
    def edges(self) -> List[DependencyEdge]:
        return [data["edge"] for _, _, data in self._graph.edges(data=True)]

    def add_vertex(self, node: ProjectNode) -> bool:
        """Add a project to the graph.

        Args:
            node: Project to add

        Returns:
            True if the project was newly inserted, False if already present

        Raises:
            ValidationError: If node is None
        """
        if node is None:
            raise ValidationError("Cannot add a null vertex")
        if self._graph.has_node(node):
            return False
        self._graph.add_node(node)
        self._by_key[node.key] = node
        return True

    def add_edge(self, edge: DependencyEdge) -> bool:
        """Add a dependency edge between two existing vertices.

        A second edge for the same ordered pair is merged into the first: the
        maximum weight wins and a project reference outranks a binary one.

        Returns:
            True if a new edge was inserted, False if merged into an existing one

        Raises:
            ValidationError: If edge is None
            GraphIntegrityError: If either endpoint is not a vertex of this graph
        """
        if edge is None:
            raise ValidationError("Cannot add a null edge")
        for endpoint in (edge.source, edge.target):
            if not self._graph.has_node(endpoint):
                raise GraphIntegrityError(f"Edge {edge} refers to unknown vertex '{endpoint.path}'")

        if self._graph.has_edge(edge.source, edge.target):
            existing: DependencyEdge = self._graph.edges[edge.source, edge.target]["edge"]
            kind = existing.kind
            if edge.kind is DependencyKind.PROJECT_REFERENCE:
                kind = DependencyKind.PROJECT_REFERENCE
            merged = DependencyEdge(existing.source, existing.target, kind, max(existing.weight, edge.weight))
            self._graph.edges[edge.source, edge.target]["edge"] = merged
            logger.debug("Merged duplicate reference %s (weight %d)", merged, merged.weight)
            return False

        self._graph.add_edge(edge.source, edge.target, edge=edge)
        return True

    def get_vertex(self, path: str) -> Optional[ProjectNode]:
        """Look up a vertex by canonical path (case-insensitive)."""
        if path is None:
            raise ValidationError("Path must not be null")
        return self._by_key.get(path.lower())

    def get_edge(self, source: ProjectNode, target: ProjectNode) -> Optional[DependencyEdge]:
        if source is None or target is None:
            raise ValidationError("Source and target must not be null")
        if not self._graph.has_edge(source, target):
            return None
        edge: DependencyEdge = self._graph.edges[source, target]["edge"]
        return edge

    def _require_vertex(self, node: ProjectNode) -> None:
        if node is None:
            raise ValidationError("Vertex must not be null")
        if not self._graph.has_node(node):
            raise GraphIntegrityError(f"Unknown vertex '{node.path}'")

    def out_edges(self, node: ProjectNode) -> List[DependencyEdge]:
        """Edges leaving node (its dependencies)."""
        self._require_vertex(node)
        return [data["edge"] for _, _, data in self._graph.out_edges(node, data=True)]

    def in_edges(self, node: ProjectNode) -> List[DependencyEdge]:
        """Edges entering node (its dependents)."""
        self._require_vertex(node)
        return [data["edge"] for _, _, data in self._graph.in_edges(node, data=True)]

    def out_degree(self, node: ProjectNode) -> int:
        self._require_vertex(node)
        return int(self._graph.out_degree(node))

    def in_degree(self, node: ProjectNode) -> int:
        self._require_vertex(node)
        return int(self._graph.in_degree(node))

    def is_out_edges_empty(self, node: ProjectNode) -> bool:
        return self.out_degree(node) == 0

    def is_in_edges_empty(self, node: ProjectNode) -> bool:
        return self.in_degree(node) == 0

    def find_orphans(self) -> List[ProjectNode]:
        """Projects with no dependencies and no dependents."""
        return [node for node in self._graph.nodes() if self._graph.in_degree(node) == 0 and self._graph.out_degree(node) == 0]

    def copy_vertices(self) -> "DependencyGraph":
        """Return a new graph with the same vertices and no edges."""
        copy = DependencyGraph()
        copy._graph.add_nodes_from(self._graph.nodes())
        copy._by_key = dict(self._by_key)
        return copy

    def vertex_order(self) -> Dict[ProjectNode, int]:
        """Map each vertex to its insertion index."""
        return {node: index for index, node in enumerate(self._graph.nodes())}

    def to_networkx(self) -> Any:
        """Read-only NetworkX view of the underlying graph."""
        return self._graph.copy(as_view=True)
