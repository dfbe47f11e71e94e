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
"""Serialize a dependency graph to Graphviz DOT with analysis overlays.

Node fill is chosen per solution from a fixed palette, or from the extraction
difficulty heat map when scores are supplied. Edges are colored by the first
matching rule:

1. one of the top-N suggested break points (orange, bold)
2. inside a detected cycle (red)
3. crossing solutions (color of the source solution)
4. everything else (default black)

Nodes and edges are written in a fixed sort order, so identical input always
produces identical text.
"""

import os
import re
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from depmap.constants import (
    DEFAULT_MAX_BREAK_POINTS,
    DOT_FILE_SUFFIX,
    EASY_SCORE_MAX,
    MEDIUM_SCORE_MAX,
    ConfigurationError,
    DotGenerationError,
    ValidationError,
)
from depmap.cycle_detection import CycleInfo, cycle_membership, is_cycle_edge
from depmap.extraction_scoring import ExtractionScore
from depmap.project_graph import DependencyEdge, DependencyGraph, ProjectNode
from depmap.recommendations import CycleBreakingSuggestion

logger = logging.getLogger(__name__)

NODE_PALETTE = ["lightblue", "lightgreen", "lightyellow", "lightpink", "lightcyan", "lavender", "wheat", "lightgray"]
EDGE_PALETTE = ["blue", "green", "purple", "brown", "darkcyan", "darkgoldenrod"]

BREAK_EDGE_ATTRS = 'color="orange", style="bold", penwidth=3'
CYCLE_EDGE_ATTRS = 'color="red", penwidth=2'

HEAT_EASY = "lightgreen"
HEAT_MEDIUM = "yellow"
HEAT_HARD = "lightcoral"

_INT32_MASK = 0xFFFFFFFF


@dataclass(frozen=True)
class VisualizationConfiguration:
    """Rendering options.

    Attributes:
        max_break_points: How many top-ranked suggestions get highlighted
        show_score_labels: Append the rounded score to node labels
    """

    max_break_points: int = DEFAULT_MAX_BREAK_POINTS
    show_score_labels: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.max_break_points, bool) or not isinstance(self.max_break_points, int) or self.max_break_points < 0:
            raise ConfigurationError(f"max_break_points must be a non-negative integer, got {self.max_break_points!r}")


def stable_hash(text: str) -> int:
    """Character-additive 32-bit signed hash of the upper-cased text.

    Computes ``h = h * 31 + ord(c)`` with two's-complement wraparound, so the
    result is the same on every platform and interpreter run.
    """
    value = 0
    for char in text.upper():
        value = (value * 31 + ord(char)) & _INT32_MASK
    if value >= 0x80000000:
        value -= 0x100000000
    return value


def palette_color(collection: str, palette: List[str]) -> str:
    return palette[abs(stable_hash(collection or "")) % len(palette)]


def heat_map_color(score: float) -> str:
    if score <= EASY_SCORE_MAX:
        return HEAT_EASY
    if score <= MEDIUM_SCORE_MAX:
        return HEAT_MEDIUM
    return HEAT_HARD


def escape_dot_string(text: str) -> str:
    """Escape text for use inside a double-quoted DOT string (backslash first)."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def quote_dot_id(text: str) -> str:
    return f'"{escape_dot_string(text)}"'


def _node_sort_key(node: ProjectNode) -> Tuple[str, str]:
    return (node.name.lower(), node.key)


def _edge_sort_key(edge: DependencyEdge) -> Tuple[str, str, str, str]:
    return (edge.source.name.lower(), edge.target.name.lower(), edge.source.key, edge.target.key)


def _break_point_pairs(suggestions: Optional[List[CycleBreakingSuggestion]], limit: int) -> Set[Tuple[str, str]]:
    if not suggestions or limit == 0:
        return set()
    top = sorted(suggestions, key=lambda s: s.rank)[:limit]
    return {(s.source.key, s.target.key) for s in top}


def _edge_attributes(edge: DependencyEdge, break_points: Set[Tuple[str, str]], membership: Dict[ProjectNode, int]) -> str:
    if (edge.source.key, edge.target.key) in break_points:
        return BREAK_EDGE_ATTRS
    if is_cycle_edge(edge, membership):
        return CYCLE_EDGE_ATTRS
    if edge.is_cross_collection:
        return f'color="{palette_color(edge.source.collection, EDGE_PALETTE)}"'
    return ""


def generate_dot(
    graph: DependencyGraph,
    cycles: Optional[List[CycleInfo]] = None,
    suggestions: Optional[List[CycleBreakingSuggestion]] = None,
    scores: Optional[List[ExtractionScore]] = None,
    config: Optional[VisualizationConfiguration] = None,
) -> str:
    """Build DOT text for the graph.

    Args:
        graph: Graph to serialize
        cycles: Detected cycles, colors intra-cycle edges
        suggestions: Ranked suggestions, the top N are highlighted
        scores: Extraction scores, switches node fill to the heat map
        config: Visualization options

    Returns:
        DOT source text ending in a newline

    Raises:
        ValidationError: If graph is None
    """
    if graph is None:
        raise ValidationError("Graph must not be null")
    config = config or VisualizationConfiguration()

    membership = cycle_membership(cycles or [])
    break_points = _break_point_pairs(suggestions, config.max_break_points)
    score_by_node: Dict[ProjectNode, float] = {s.project: s.final_score for s in scores or []}

    lines = [
        "digraph dependencies {",
        "    rankdir=LR;",
        "    nodesep=0.5;",
        "    ranksep=1.0;",
        "    node [shape=box, style=filled, fillcolor=lightblue];",
        "    edge [color=black, arrowhead=normal];",
    ]

    if membership or break_points or score_by_node:
        lines.append("")
        lines.append("    // Legend:")
        if break_points:
            lines.append(f"    //   orange bold edge = top {len(break_points)} suggested break points")
        if membership:
            lines.append("    //   red edge = dependency inside a cycle")
        if score_by_node:
            lines.append(f"    //   {HEAT_EASY} = easy (0-33), {HEAT_MEDIUM} = medium (34-66), {HEAT_HARD} = hard (67-100)")

    lines.append("")
    for node in sorted(graph.vertices, key=_node_sort_key):
        label = escape_dot_string(node.name)
        score = score_by_node.get(node)
        if score is not None:
            # Band and label share the rounded score
            shown = round(score)
            fill = heat_map_color(shown)
            if config.show_score_labels:
                label += f"\\nScore: {shown}"
        else:
            fill = palette_color(node.collection, NODE_PALETTE)
        lines.append(f'    {quote_dot_id(node.path)} [label="{label}", fillcolor="{fill}"];')

    lines.append("")
    for edge in sorted(graph.edges, key=_edge_sort_key):
        attrs = _edge_attributes(edge, break_points, membership)
        suffix = f" [{attrs}]" if attrs else ""
        lines.append(f"    {quote_dot_id(edge.source.path)} -> {quote_dot_id(edge.target.path)}{suffix};")

    lines.append("}")
    logger.debug("Generated DOT with %d nodes and %d edges", graph.vertex_count, graph.edge_count)
    return "\n".join(lines) + "\n"


def sanitize_file_name(name: str) -> str:
    """Replace characters that are unsafe in file names with underscores."""
    sanitized = re.sub(r"[^A-Za-z0-9._-]", "_", name or "").strip("._")
    return sanitized or "analysis"


def write_dot_file(dot_text: str, output_dir: str, name: str) -> str:
    """Write DOT text to ``<output_dir>/<name>-dependencies.dot``.

    Returns:
        Path of the written file

    Raises:
        DotGenerationError: If the file cannot be written
    """
    path = os.path.join(output_dir, sanitize_file_name(name) + DOT_FILE_SUFFIX)
    try:
        os.makedirs(output_dir, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            f.write(dot_text)
    except OSError as e:
        raise DotGenerationError(f"Failed to write DOT file {path}: {e}") from e
    logger.info("Wrote DOT graph to %s", path)
    return path
