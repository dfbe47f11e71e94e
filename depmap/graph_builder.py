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
"""Build a DependencyGraph from a normalized project dataset.

The dataset is a JSON document produced by whatever tool walked the solution
files. Expected shape::

    {
      "name": "Contoso",
      "coupling_available": true,
      "projects": [
        {
          "name": "Contoso.Billing",
          "path": "src/Billing/Contoso.Billing.csproj",
          "platform": "net48",
          "collection": "Contoso",
          "complexity": 6.5,
          "external_endpoints": 3,
          "references": [
            {"target": "Contoso.Core", "kind": "project", "coupling": 12},
            {"target": "System.Data", "kind": "binary"}
          ]
        }
      ]
    }

Project references resolve by path first, then by display name (both
case-insensitive). Binary references become external vertices keyed by
assembly name. References that resolve to nothing are logged and skipped.
"""

import os
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from depmap.constants import DEFAULT_COUPLING_WEIGHT, DatasetError, ValidationError
from depmap.project_graph import DependencyEdge, DependencyGraph, DependencyKind, ProjectNode

logger = logging.getLogger(__name__)

_KIND_ALIASES: Dict[str, DependencyKind] = {
    "project": DependencyKind.PROJECT_REFERENCE,
    "projectreference": DependencyKind.PROJECT_REFERENCE,
    "binary": DependencyKind.BINARY_REFERENCE,
    "binaryreference": DependencyKind.BINARY_REFERENCE,
    "reference": DependencyKind.BINARY_REFERENCE,
}


@dataclass
class ReferenceInfo:
    """A declared reference of a project.

    Attributes:
        target: Referenced project path or name, or assembly name for binaries
        kind: Project or binary reference
        coupling: Method calls across the reference, None when not measured
    """

    target: str
    kind: DependencyKind = DependencyKind.PROJECT_REFERENCE
    coupling: Optional[int] = None


@dataclass
class ProjectInfo:
    """One project as supplied by the dataset, with its scoring inputs.

    ``coupling_measured`` is False when coupling analysis failed for this
    project; its extraction score then leaves the coupling metric out.
    """

    name: str
    path: str
    platform: str = ""
    collection: str = ""
    complexity: Optional[float] = None
    external_endpoints: int = 0
    references: List[ReferenceInfo] = field(default_factory=list)
    coupling_measured: bool = True

    def to_node(self) -> ProjectNode:
        return ProjectNode(self.name, self.path, self.platform, self.collection)


@dataclass
class ProjectDataset:
    """All projects of one analysis run.

    Attributes:
        name: Dataset name, used to name output files
        projects: Projects in declaration order
        coupling_available: False when semantic coupling analysis did not run
    """

    name: str
    projects: List[ProjectInfo]
    coupling_available: bool = False


@dataclass
class GraphBuildResult:
    graph: DependencyGraph
    warnings: List[str] = field(default_factory=list)


def _parse_kind(value: Any, project_name: str) -> DependencyKind:
    if value is None:
        return DependencyKind.PROJECT_REFERENCE
    if isinstance(value, DependencyKind):
        return value
    kind = _KIND_ALIASES.get(str(value).replace("_", "").replace(" ", "").lower())
    if kind is None:
        raise DatasetError(f"Project '{project_name}' has a reference of unknown kind '{value}'")
    return kind


def _parse_reference(raw: Any, project_name: str) -> ReferenceInfo:
    if isinstance(raw, str):
        return ReferenceInfo(target=raw)
    if not isinstance(raw, dict):
        raise DatasetError(f"Project '{project_name}' has a malformed reference: {raw!r}")

    target = raw.get("target") or raw.get("path") or raw.get("name")
    if not isinstance(target, str) or not target.strip():
        raise DatasetError(f"Project '{project_name}' has a reference without a target")

    coupling = raw.get("coupling")
    if coupling is not None and (isinstance(coupling, bool) or not isinstance(coupling, int) or coupling < 0):
        raise DatasetError(f"Reference {project_name} -> {target} has invalid coupling {coupling!r}")

    return ReferenceInfo(target=target, kind=_parse_kind(raw.get("kind"), project_name), coupling=coupling)


def _parse_project(raw: Any, index: int) -> ProjectInfo:
    if not isinstance(raw, dict):
        raise DatasetError(f"Project entry #{index} is not an object")

    name = raw.get("name")
    path = raw.get("path") or name
    if not isinstance(name, str) or not name.strip():
        raise DatasetError(f"Project entry #{index} has no name")
    if not isinstance(path, str) or not path.strip():
        raise DatasetError(f"Project '{name}' has no path")

    complexity = raw.get("complexity")
    if complexity is not None and (isinstance(complexity, bool) or not isinstance(complexity, (int, float))):
        raise DatasetError(f"Project '{name}' has non-numeric complexity {complexity!r}")

    endpoints = raw.get("external_endpoints", 0)
    if isinstance(endpoints, bool) or not isinstance(endpoints, int) or endpoints < 0:
        raise DatasetError(f"Project '{name}' has invalid external_endpoints {endpoints!r}")

    references = [_parse_reference(ref, name) for ref in raw.get("references") or []]

    return ProjectInfo(
        name=name,
        path=path,
        platform=raw.get("platform") or "",
        collection=raw.get("collection") or "",
        complexity=float(complexity) if complexity is not None else None,
        external_endpoints=endpoints,
        references=references,
        coupling_measured=bool(raw.get("coupling_available", True)),
    )


def parse_dataset(data: Dict[str, Any], default_name: str = "analysis") -> ProjectDataset:
    """Validate a decoded dataset document.

    Raises:
        DatasetError: If required fields are missing or have the wrong type
    """
    if not isinstance(data, dict):
        raise DatasetError("Dataset must be a JSON object")
    projects_raw = data.get("projects")
    if not isinstance(projects_raw, list):
        raise DatasetError("Dataset must contain a 'projects' list")

    projects = [_parse_project(raw, index) for index, raw in enumerate(projects_raw, 1)]
    name = data.get("name") or default_name
    return ProjectDataset(name=str(name), projects=projects, coupling_available=bool(data.get("coupling_available", False)))


def load_dataset(path: str) -> ProjectDataset:
    """Load a project dataset from a JSON file.

    Args:
        path: Path to the dataset file

    Returns:
        Parsed ProjectDataset; its name defaults to the file stem

    Raises:
        DatasetError: If the file is missing, unreadable or malformed
    """
    if not os.path.isfile(path):
        raise DatasetError(f"Dataset file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise DatasetError(f"Dataset file {path} is not valid JSON: {e}") from e
    except OSError as e:
        raise DatasetError(f"Cannot read dataset file {path}: {e}") from e

    default_name = os.path.splitext(os.path.basename(path))[0]
    dataset = parse_dataset(data, default_name)
    logger.info("Loaded %d projects from %s", len(dataset.projects), path)
    return dataset


def build_graph(dataset: ProjectDataset) -> GraphBuildResult:
    """Build the dependency graph for a dataset.

    Duplicate project paths keep the first declaration. Edge weights come from
    the reference coupling when the dataset says coupling is available,
    otherwise every edge weighs 1.

    Returns:
        GraphBuildResult with the graph and data-integrity warnings
    """
    if dataset is None:
        raise ValidationError("Dataset must not be null")

    result = GraphBuildResult(graph=DependencyGraph())
    graph = result.graph
    by_path: Dict[str, ProjectNode] = {}
    by_name: Dict[str, ProjectNode] = {}
    accepted: List[Tuple[ProjectInfo, ProjectNode]] = []

    for project in dataset.projects:
        node = project.to_node()
        if not graph.add_vertex(node):
            message = f"Duplicate project path '{project.path}' ignored"
            logger.warning(message)
            result.warnings.append(message)
            continue
        by_path[node.key] = node
        by_name.setdefault(node.name.lower(), node)
        accepted.append((project, node))

    for project, source in accepted:
        for ref in project.references:
            weight = DEFAULT_COUPLING_WEIGHT
            if dataset.coupling_available and ref.coupling is not None:
                weight = ref.coupling

            target = by_path.get(ref.target.lower()) or by_name.get(ref.target.lower())
            if target is None and ref.kind is DependencyKind.BINARY_REFERENCE:
                target = ProjectNode(ref.target, ref.target)
                graph.add_vertex(target)
                by_path[target.key] = target
            if target is None:
                message = f"Project '{project.name}' references unknown project '{ref.target}', skipped"
                logger.warning(message)
                result.warnings.append(message)
                continue

            graph.add_edge(DependencyEdge(source, target, ref.kind, weight))

    logger.info("Built dependency graph: %d vertices, %d edges", graph.vertex_count, graph.edge_count)
    return result
