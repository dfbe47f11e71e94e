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
"""Circular dependency detection using strongly connected components."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

import networkx as nx

from depmap.cancellation import CancellationToken, check_cancelled
from depmap.constants import InconsistentDataError, ValidationError
from depmap.project_graph import DependencyEdge, DependencyGraph, ProjectNode

logger = logging.getLogger(__name__)


@dataclass
class CycleInfo:
    """A circular dependency group (SCC with at least two projects).

    Attributes:
        cycle_id: 1-based identifier, stable for an unchanged graph
        projects: Members in graph insertion order
        weak_edges: Minimum-coupling intra-cycle edges, None until identified
        weak_coupling_score: Weight shared by weak_edges
    """

    cycle_id: int
    projects: List[ProjectNode]
    weak_edges: Optional[List[DependencyEdge]] = None
    weak_coupling_score: Optional[int] = None

    def __post_init__(self) -> None:
        if self.cycle_id < 1:
            raise ValidationError(f"Cycle id must be positive, got {self.cycle_id}")
        if self.projects is None or len(self.projects) < 2:
            raise ValidationError("A cycle must contain at least two projects")

    @property
    def size(self) -> int:
        return len(self.projects)

    def contains(self, node: ProjectNode) -> bool:
        return node in self.projects


@dataclass(frozen=True)
class CycleStatistics:
    """Summary of cycle participation across the analyzed projects."""

    total_cycles: int
    largest_cycle_size: int
    projects_in_cycles: int
    total_projects: int

    @property
    def participation_rate(self) -> float:
        """Percentage of analyzed projects that sit in some cycle."""
        if self.total_projects == 0:
            return 0.0
        return self.projects_in_cycles * 100.0 / self.total_projects


def detect_cycles(graph: DependencyGraph, cancel_token: Optional[CancellationToken] = None) -> List[CycleInfo]:
    """Find every circular dependency group in the graph.

    Runs one SCC decomposition over the whole graph. Single-project components,
    including self-referencing projects, are not cycles. Cycle ids follow the
    insertion index of each cycle's earliest member, so repeated runs over an
    unchanged graph give identical ids.

    Args:
        graph: Graph to analyze (usually framework-filtered)
        cancel_token: Optional cancellation token

    Returns:
        Cycles ordered by id

    Raises:
        ValidationError: If graph is None
        OperationCancelledError: If cancelled; no partial result is returned
    """
    if graph is None:
        raise ValidationError("Graph must not be null")

    check_cancelled(cancel_token, "cycle detection")

    components = [component for component in nx.strongly_connected_components(graph.to_networkx()) if len(component) > 1]

    check_cancelled(cancel_token, "cycle detection")

    order = graph.vertex_order()
    members = [sorted(component, key=order.__getitem__) for component in components]
    members.sort(key=lambda projects: order[projects[0]])

    cycles = [CycleInfo(cycle_id=index, projects=projects) for index, projects in enumerate(members, 1)]

    if cycles:
        logger.info("Detected %d circular dependency groups (largest: %d projects)", len(cycles), max(c.size for c in cycles))
    else:
        logger.info("No circular dependencies detected")
    return cycles


def cycle_membership(cycles: List[CycleInfo]) -> Dict[ProjectNode, int]:
    """Map each project in a cycle to its cycle id."""
    membership: Dict[ProjectNode, int] = {}
    for cycle in cycles:
        for project in cycle.projects:
            membership[project] = cycle.cycle_id
    return membership


def is_cycle_edge(edge: DependencyEdge, membership: Dict[ProjectNode, int]) -> bool:
    """True if both endpoints are distinct members of the same cycle."""
    if edge.source == edge.target:
        return False
    source_cycle = membership.get(edge.source)
    return source_cycle is not None and source_cycle == membership.get(edge.target)


def calculate_cycle_statistics(cycles: List[CycleInfo], total_projects: int) -> CycleStatistics:
    """Summarize cycles against the number of analyzed projects.

    Args:
        cycles: Detected cycles
        total_projects: Number of projects analyzed

    Returns:
        CycleStatistics

    Raises:
        ValidationError: If cycles is None or total_projects is negative
        InconsistentDataError: If fewer projects were analyzed than appear in cycles
    """
    if cycles is None:
        raise ValidationError("Cycle list must not be null")
    if total_projects < 0:
        raise ValidationError(f"Total projects must be non-negative, got {total_projects}")

    distinct: Set[ProjectNode] = set()
    for cycle in cycles:
        distinct.update(cycle.projects)

    if total_projects < len(distinct):
        raise InconsistentDataError(f"Total projects ({total_projects}) is smaller than the {len(distinct)} projects found in cycles")

    largest = max((cycle.size for cycle in cycles), default=0)
    stats = CycleStatistics(
        total_cycles=len(cycles),
        largest_cycle_size=largest,
        projects_in_cycles=len(distinct),
        total_projects=total_projects,
    )
    logger.debug("Cycle participation: %d/%d projects (%.1f%%)", stats.projects_in_cycles, total_projects, stats.participation_rate)
    return stats
