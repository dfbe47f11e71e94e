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
"""Export utilities for writing analysis results to various file formats.

CSV files are written UTF-8 with a byte order mark and CRLF line endings so
they open correctly in spreadsheet applications.
"""

import os
import csv
import json
import logging
from typing import Dict, List, Optional

import networkx as nx
from networkx.readwrite import json_graph

from depmap.constants import (
    CYCLE_ANALYSIS_SUFFIX,
    DEPENDENCY_MATRIX_SUFFIX,
    EXTRACTION_SCORES_SUFFIX,
    SUPPORTED_GRAPH_FORMATS,
    ExportError,
    ValidationError,
)
from depmap.cycle_detection import CycleInfo, cycle_membership
from depmap.dot_generator import sanitize_file_name
from depmap.extraction_scoring import ExtractionScore
from depmap.project_graph import DependencyGraph, ProjectNode
from depmap.recommendations import CycleBreakingSuggestion

logger = logging.getLogger(__name__)

EXTRACTION_SCORE_COLUMNS = ["Project Name", "Extraction Score", "Coupling Metric", "Complexity Metric", "Tech Debt Score", "External APIs"]
CYCLE_ANALYSIS_COLUMNS = ["Cycle ID", "Cycle Size", "Projects Involved", "Suggested Break Point", "Coupling Score"]
DEPENDENCY_MATRIX_COLUMNS = ["Source Project", "Target Project", "Dependency Type", "Coupling Score"]


def _write_csv(path: str, header: List[str], rows: List[List[object]]) -> None:
    try:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w", newline="", encoding="utf-8-sig") as f:
            writer = csv.writer(f, lineterminator="\r\n")
            writer.writerow(header)
            writer.writerows(rows)
    except OSError as e:
        logger.error("Failed to export CSV: %s", e)
        raise ExportError(f"Failed to write {path}: {e}") from e
    logger.info("Exported %d rows to %s", len(rows), path)


def export_extraction_scores(scores: List[ExtractionScore], output_dir: str, name: str) -> str:
    """Write ``<name>-extraction-scores.csv``, easiest project first.

    Returns:
        Path of the written file
    """
    if scores is None:
        raise ValidationError("Score list must not be null")

    rows: List[List[object]] = []
    for score in sorted(scores, key=lambda s: (s.final_score, s.project.name.lower(), s.project.key)):
        if score.coupling_metric is None:
            logger.warning("Coupling metric unavailable for %s, exporting N/A", score.project_name)
            coupling = "N/A"
        else:
            coupling = f"{score.coupling_metric:.1f}"
        rows.append(
            [
                score.project_name,
                f"{score.final_score:.1f}",
                coupling,
                f"{score.complexity_metric:.1f}",
                f"{score.tech_debt_score:.1f}",
                score.external_api_count,
            ]
        )

    path = os.path.join(output_dir, sanitize_file_name(name) + EXTRACTION_SCORES_SUFFIX)
    _write_csv(path, EXTRACTION_SCORE_COLUMNS, rows)
    return path


def export_cycle_analysis(cycles: List[CycleInfo], suggestions: List[CycleBreakingSuggestion], output_dir: str, name: str) -> str:
    """Write ``<name>-cycle-analysis.csv``, one row per cycle.

    Each row shows the best-ranked suggestion of its cycle, or N/A when the
    cycle has none.
    """
    if cycles is None or suggestions is None:
        raise ValidationError("Cycles and suggestions must not be null")

    best: Dict[int, CycleBreakingSuggestion] = {}
    for suggestion in suggestions:
        current = best.get(suggestion.cycle_id)
        if current is None or suggestion.rank < current.rank:
            best[suggestion.cycle_id] = suggestion

    rows: List[List[object]] = []
    for cycle in sorted(cycles, key=lambda c: c.cycle_id):
        members = ", ".join(project.name for project in cycle.projects)
        suggestion = best.get(cycle.cycle_id)
        if suggestion is None:
            rows.append([cycle.cycle_id, cycle.size, members, "N/A", 0])
        else:
            rows.append([cycle.cycle_id, cycle.size, members, suggestion.break_point, suggestion.coupling_score])

    path = os.path.join(output_dir, sanitize_file_name(name) + CYCLE_ANALYSIS_SUFFIX)
    _write_csv(path, CYCLE_ANALYSIS_COLUMNS, rows)
    return path


def export_dependency_matrix(graph: DependencyGraph, output_dir: str, name: str) -> str:
    """Write ``<name>-dependency-matrix.csv`` sorted by source then target name."""
    if graph is None:
        raise ValidationError("Graph must not be null")

    edges = sorted(graph.edges, key=lambda e: (e.source.name.lower(), e.target.name.lower(), e.source.key, e.target.key))
    rows: List[List[object]] = [[e.source.name, e.target.name, e.kind.display_name, e.weight] for e in edges]

    path = os.path.join(output_dir, sanitize_file_name(name) + DEPENDENCY_MATRIX_SUFFIX)
    _write_csv(path, DEPENDENCY_MATRIX_COLUMNS, rows)
    return path


def build_export_graph(
    graph: DependencyGraph,
    cycles: Optional[List[CycleInfo]] = None,
    scores: Optional[List[ExtractionScore]] = None,
) -> "nx.DiGraph[str]":
    """Flatten the dependency graph into a NetworkX graph with plain attributes.

    Node attributes: label, path, collection, platform, in_cycle, cycle_id and
    extraction_score/difficulty when scored. Edge attributes: kind, coupling,
    coupling_strength, cross_collection.
    """
    membership = cycle_membership(cycles or [])
    score_by_node: Dict[ProjectNode, ExtractionScore] = {s.project: s for s in scores or []}

    export: "nx.DiGraph[str]" = nx.DiGraph()
    for node in graph.vertices:
        attrs: Dict[str, object] = {
            "label": node.name,
            "path": node.path,
            "collection": node.collection,
            "platform": node.platform,
            "in_cycle": node in membership,
            "cycle_id": membership.get(node, 0),
        }
        score = score_by_node.get(node)
        if score is not None:
            attrs["extraction_score"] = round(score.final_score, 1)
            attrs["difficulty"] = score.difficulty.value
        export.add_node(node.path, **attrs)

    for edge in graph.edges:
        export.add_edge(
            edge.source.path,
            edge.target.path,
            kind=edge.kind.value,
            coupling=edge.weight,
            coupling_strength=edge.coupling_strength.value,
            cross_collection=edge.is_cross_collection,
        )
    return export


def export_graph(
    filename: str,
    graph: DependencyGraph,
    cycles: Optional[List[CycleInfo]] = None,
    scores: Optional[List[ExtractionScore]] = None,
) -> str:
    """Export the graph with analysis attributes.

    Supports: GraphML (.graphml), JSON node-link (.json)

    Raises:
        ValidationError: If the extension is not supported
        ExportError: If the file cannot be written
    """
    ext = os.path.splitext(filename)[1].lower()
    if ext not in SUPPORTED_GRAPH_FORMATS:
        raise ValidationError(f"Unsupported graph format '{ext}'. Supported: {', '.join(SUPPORTED_GRAPH_FORMATS)}")

    export = build_export_graph(graph, cycles, scores)
    try:
        os.makedirs(os.path.dirname(filename) or ".", exist_ok=True)
        if ext == ".graphml":
            nx.write_graphml(export, filename)
        else:
            with open(filename, "w", encoding="utf-8") as f:
                json.dump(json_graph.node_link_data(export), f, indent=2)
    except OSError as e:
        logger.error("Failed to export graph: %s", e)
        raise ExportError(f"Failed to write {filename}: {e}") from e

    logger.info("Exported graph (%d nodes, %d edges) to %s", export.number_of_nodes(), export.number_of_edges(), filename)
    return filename
