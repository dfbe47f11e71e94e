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
"""Find the weakest coupling links inside each circular dependency."""

import logging
from typing import Dict, List, Optional, Tuple

from depmap.cancellation import CancellationToken, check_cancelled
from depmap.constants import ValidationError
from depmap.cycle_detection import CycleInfo
from depmap.project_graph import DependencyEdge, DependencyGraph

logger = logging.getLogger(__name__)


def intra_cycle_edges(graph: DependencyGraph, cycle: CycleInfo) -> List[DependencyEdge]:
    """Edges between two distinct members of the cycle, in graph edge order."""
    members = set(cycle.projects)
    edges = []
    for project in cycle.projects:
        if project not in graph:
            continue
        for edge in graph.out_edges(project):
            if edge.target != edge.source and edge.target in members:
                edges.append(edge)
    return edges


def identify_weak_edges(graph: DependencyGraph, cycles: List[CycleInfo], cancel_token: Optional[CancellationToken] = None) -> List[str]:
    """Attach the minimum-coupling edges to every cycle.

    All edges sharing the minimum weight are kept; any of them is an equally
    valid cut point. A cycle without intra-cycle edges keeps ``weak_edges``
    as None and produces a warning.

    Args:
        graph: Graph the cycles were detected on
        cycles: Cycles to annotate (modified in place once all are computed)
        cancel_token: Optional cancellation token

    Returns:
        Warning messages for skipped cycles

    Raises:
        ValidationError: If graph or cycles is None
        OperationCancelledError: If cancelled; no cycle is modified in that case
    """
    if graph is None:
        raise ValidationError("Graph must not be null")
    if cycles is None:
        raise ValidationError("Cycle list must not be null")

    results: Dict[int, Tuple[List[DependencyEdge], int]] = {}
    warnings: List[str] = []

    for cycle in cycles:
        check_cancelled(cancel_token, "weak edge identification")

        edges = intra_cycle_edges(graph, cycle)
        if not edges:
            message = f"Cycle {cycle.cycle_id} has no intra-cycle edges, skipping weak edge analysis"
            logger.warning(message)
            warnings.append(message)
            continue

        minimum = min(edge.weight for edge in edges)
        results[cycle.cycle_id] = ([edge for edge in edges if edge.weight == minimum], minimum)

    for cycle in cycles:
        if cycle.cycle_id in results:
            cycle.weak_edges, cycle.weak_coupling_score = results[cycle.cycle_id]
            logger.debug("Cycle %d: %d weak edge(s) with coupling %d", cycle.cycle_id, len(cycle.weak_edges), cycle.weak_coupling_score)
        else:
            cycle.weak_edges = None
            cycle.weak_coupling_score = None

    logger.info("Identified weak edges for %d of %d cycles", len(results), len(cycles))
    return warnings
