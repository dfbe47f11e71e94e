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
"""Normalize raw per-project measurements into 0-100 extraction metrics.

Each normalizer maps one raw input onto the 0-100 scale the extraction scorer
expects, where higher always means harder to extract.
"""

import re
import math
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from depmap.constants import MAX_SCORE, NEUTRAL_METRIC_SCORE, ValidationError
from depmap.graph_builder import ProjectInfo
from depmap.project_graph import DependencyGraph, ProjectNode

logger = logging.getLogger(__name__)

# Tech debt per target framework: 100 = oldest supported, 0 = current
FRAMEWORK_DEBT_SCORES: Dict[str, float] = {
    "net20": 100.0,
    "net35": 100.0,
    "net40": 90.0,
    "net45": 80.0,
    "net451": 75.0,
    "net452": 70.0,
    "net46": 65.0,
    "net461": 60.0,
    "net462": 55.0,
    "net47": 50.0,
    "net471": 45.0,
    "net472": 40.0,
    "net48": 40.0,
    "net481": 40.0,
    "netstandard1.0": 70.0,
    "netstandard1.1": 70.0,
    "netstandard1.2": 70.0,
    "netstandard1.3": 70.0,
    "netstandard1.4": 70.0,
    "netstandard1.5": 70.0,
    "netstandard1.6": 70.0,
    "netstandard2.0": 50.0,
    "netstandard2.1": 35.0,
    "netcoreapp2.1": 45.0,
    "netcoreapp3.1": 30.0,
    "net5.0": 20.0,
    "net6.0": 10.0,
    "net7.0": 5.0,
    "net8.0": 0.0,
    "net9.0": 0.0,
}

_LEGACY_VERSION = re.compile(r"^v(\d)\.(\d)(?:\.(\d))?$")
_DOTTED_LEGACY = re.compile(r"^net([1-4])\.(\d)(?:\.(\d))?$")
_SHORT_MODERN = re.compile(r"^net(\d{1,2})$")


@dataclass(frozen=True)
class CouplingMetric:
    """Reference counts for one project and the resulting 0-100 metric."""

    incoming: int
    outgoing: int
    total: int
    normalized: float


@dataclass(frozen=True)
class ProjectMetrics:
    """The four normalized inputs of an extraction score.

    Attributes:
        coupling: 0-100, None when coupling could not be measured
        complexity: 0-100
        tech_debt: 0-100
        external_exposure: 0-100
        external_api_count: Raw endpoint count, kept for reporting
    """

    coupling: Optional[float]
    complexity: float
    tech_debt: float
    external_exposure: float
    external_api_count: int = 0


def calculate_coupling_metrics(graph: DependencyGraph) -> Dict[ProjectNode, CouplingMetric]:
    """Compute coupling for every vertex.

    Incoming references count double because dependents must change when a
    project moves. The raw total is scaled against the largest total in the
    graph; a graph without references scores 0 everywhere.
    """
    if graph is None:
        raise ValidationError("Graph must not be null")

    raw: Dict[ProjectNode, CouplingMetric] = {}
    for node in graph.vertices:
        incoming = graph.in_degree(node)
        outgoing = graph.out_degree(node)
        raw[node] = CouplingMetric(incoming, outgoing, incoming * 2 + outgoing, 0.0)

    max_total = max((metric.total for metric in raw.values()), default=0)
    if max_total == 0:
        return raw

    return {node: CouplingMetric(m.incoming, m.outgoing, m.total, m.total * MAX_SCORE / max_total) for node, m in raw.items()}


def normalize_complexity(average_complexity: Optional[float]) -> float:
    """Map average cyclomatic complexity per method to 0-100.

    Bands: up to 7 is simple (0-33), up to 15 moderate (33-66), up to 25
    complex (66-90), anything above climbs toward 100. Unknown complexity
    returns the neutral score.
    """
    if average_complexity is None or math.isnan(average_complexity):
        return NEUTRAL_METRIC_SCORE
    if average_complexity <= 0:
        return 0.0
    if average_complexity <= 7:
        return average_complexity / 7.0 * 33.0
    if average_complexity <= 15:
        return 33.0 + (average_complexity - 7.0) / 8.0 * 33.0
    if average_complexity <= 25:
        return 66.0 + (average_complexity - 15.0) / 10.0 * 24.0
    return min(MAX_SCORE, 90.0 + (average_complexity - 25.0))


def normalize_framework_tag(tag: Optional[str]) -> str:
    """Canonical form of a target framework tag.

    Examples:
        >>> normalize_framework_tag("v4.7.2")
        'net472'
        >>> normalize_framework_tag("net4.8")
        'net48'
        >>> normalize_framework_tag("net6")
        'net6.0'
    """
    if not tag:
        return ""
    # Multi-targeting lists keep the first framework
    normalized = tag.strip().split(";")[0].strip().lower()

    legacy = _LEGACY_VERSION.match(normalized) or _DOTTED_LEGACY.match(normalized)
    if legacy:
        return "net" + "".join(part for part in legacy.groups() if part)

    short = _SHORT_MODERN.match(normalized)
    if short and int(short.group(1)) >= 5:
        return f"net{short.group(1)}.0"
    return normalized


def calculate_tech_debt(tag: Optional[str]) -> float:
    """Tech debt score for a target framework, neutral when unknown."""
    normalized = normalize_framework_tag(tag)
    score = FRAMEWORK_DEBT_SCORES.get(normalized)
    if score is None:
        if normalized:
            logger.debug("Unknown target framework '%s', using neutral tech debt score", tag)
        return NEUTRAL_METRIC_SCORE
    return score


def normalize_external_endpoints(count: int) -> float:
    """Stepped exposure score: 0, 1-5, 6-15 and 16+ endpoints."""
    if count is None or count < 0:
        raise ValidationError(f"Endpoint count must be a non-negative integer, got {count!r}")
    if count == 0:
        return 0.0
    if count <= 5:
        return 33.0
    if count <= 15:
        return 66.0
    return MAX_SCORE


def collect_project_metrics(
    graph: DependencyGraph,
    projects: List[ProjectInfo],
) -> Dict[ProjectNode, ProjectMetrics]:
    """Gather normalized metrics for every dataset project present in graph.

    Projects flagged as not coupling-measured get a None coupling metric.

    Args:
        graph: Filtered dependency graph
        projects: ProjectInfo records from the dataset

    Returns:
        Mapping of project vertex to its metrics, in dataset order
    """
    if graph is None or projects is None:
        raise ValidationError("Graph and project list must not be null")

    coupling = calculate_coupling_metrics(graph)
    metrics: Dict[ProjectNode, ProjectMetrics] = {}
    for project in projects:
        node = graph.get_vertex(project.path)
        if node is None or node in metrics:
            continue
        coupling_metric = coupling.get(node) if project.coupling_measured else None
        metrics[node] = ProjectMetrics(
            coupling=coupling_metric.normalized if coupling_metric is not None else None,
            complexity=normalize_complexity(project.complexity),
            tech_debt=calculate_tech_debt(project.platform),
            external_exposure=normalize_external_endpoints(project.external_endpoints),
            external_api_count=project.external_endpoints,
        )
    return metrics
