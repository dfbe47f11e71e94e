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
"""Plain-text analysis report."""

import os
import logging
from datetime import datetime
from typing import List, Optional

from depmap.constants import MAX_RECOMMENDATIONS_DISPLAY, REPORT_WIDTH, TEXT_REPORT_SUFFIX, ExportError, ValidationError
from depmap.cycle_detection import CycleInfo, CycleStatistics
from depmap.dot_generator import sanitize_file_name
from depmap.extraction_scoring import RankedExtractionCandidates
from depmap.framework_filter import FilterConfiguration, is_framework_reference
from depmap.project_graph import DependencyGraph
from depmap.recommendations import CycleBreakingSuggestion

logger = logging.getLogger(__name__)


def _percent(part: int, whole: int) -> str:
    if whole == 0:
        return "0.0%"
    return f"{part * 100.0 / whole:.1f}%"


def _section(lines: List[str], title: str) -> None:
    lines.append("")
    lines.append(title)
    lines.append("-" * REPORT_WIDTH)


def generate_text_report(
    name: str,
    total_projects: int,
    graph: DependencyGraph,
    filter_config: FilterConfiguration,
    cycles: Optional[List[CycleInfo]] = None,
    statistics: Optional[CycleStatistics] = None,
    suggestions: Optional[List[CycleBreakingSuggestion]] = None,
    candidates: Optional[RankedExtractionCandidates] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    """Build the report text.

    Args:
        name: Solution or dataset name
        total_projects: Number of projects declared in the dataset
        graph: Unfiltered graph, used for the reference overview
        filter_config: Filter used to classify framework references
        cycles: Detected cycles
        statistics: Cycle statistics
        suggestions: Ranked cycle-breaking suggestions
        candidates: Ranked extraction candidates
        generated_at: Report timestamp (defaults to now)

    Returns:
        Report text ending in a newline
    """
    if graph is None or filter_config is None:
        raise ValidationError("Graph and filter configuration must not be null")
    generated_at = generated_at or datetime.now()
    separator = "=" * REPORT_WIDTH

    lines = [
        separator,
        f"{name} Analysis Report".center(REPORT_WIDTH).rstrip(),
        separator,
        "",
        f"Solution: {name}",
        f"Analysis Date: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
        f"Total Projects: {total_projects}",
    ]

    edges = graph.edges
    total_refs = len(edges)
    framework_refs = sum(1 for e in edges if is_framework_reference(e.target.name, filter_config))
    custom_refs = total_refs - framework_refs
    cross_refs = sum(1 for e in edges if e.is_cross_collection)

    _section(lines, "DEPENDENCY OVERVIEW")
    lines.append(f"Total References: {total_refs}")
    lines.append(f"  Framework References: {framework_refs} ({_percent(framework_refs, total_refs)})")
    lines.append(f"  Custom References: {custom_refs} ({_percent(custom_refs, total_refs)})")
    lines.append(f"Cross-Solution References: {cross_refs}")

    if cycles is not None:
        _section(lines, "CYCLE DETECTION")
        if not cycles:
            lines.append("No circular dependencies detected.")
        else:
            if statistics is not None:
                lines.append(f"Circular Dependency Chains: {statistics.total_cycles}")
                lines.append(f"Projects in Cycles: {statistics.projects_in_cycles} ({statistics.participation_rate:.1f}%)")
                lines.append(f"Largest Cycle Size: {statistics.largest_cycle_size} projects")
            lines.append("")
            for cycle in cycles:
                lines.append(f"  Cycle {cycle.cycle_id} ({cycle.size} projects): {', '.join(p.name for p in cycle.projects)}")

    if candidates is not None:
        stats = candidates.statistics
        _section(lines, "EXTRACTION DIFFICULTY")
        lines.append(f"Projects Scored: {stats.total_projects}")
        lines.append(f"  Easy (0-33): {stats.easy_count} ({_percent(stats.easy_count, stats.total_projects)})")
        lines.append(f"  Medium (34-66): {stats.medium_count} ({_percent(stats.medium_count, stats.total_projects)})")
        lines.append(f"  Hard (67-100): {stats.hard_count} ({_percent(stats.hard_count, stats.total_projects)})")
        lines.append(f"Mean Score: {stats.mean_score:.1f}  Median: {stats.median_score:.1f}  90th Percentile: {stats.p90_score:.1f}")
        if candidates.easiest:
            lines.append("")
            lines.append("Easiest Candidates:")
            for index, score in enumerate(candidates.easiest, 1):
                lines.append(f"  {index:2d}. {score.project_name} (score {score.final_score:.1f})")
        if candidates.hardest:
            lines.append("")
            lines.append("Hardest Candidates:")
            for index, score in enumerate(candidates.hardest, 1):
                lines.append(f"  {index:2d}. {score.project_name} (score {score.final_score:.1f})")

    if suggestions is not None:
        _section(lines, "CYCLE-BREAKING RECOMMENDATIONS")
        if not suggestions:
            lines.append("No cycle-breaking recommendations.")
        else:
            shown = suggestions[:MAX_RECOMMENDATIONS_DISPLAY]
            lines.append(f"Top {len(shown)} of {len(suggestions)} suggestions:")
            for suggestion in shown:
                lines.append(f"  {suggestion.rank:2d}. {suggestion.break_point} (cycle {suggestion.cycle_id})")
                lines.append(f"      {suggestion.rationale}")

    lines.append("")
    lines.append(separator)
    return "\n".join(lines) + "\n"


def write_text_report(report: str, output_dir: str, name: str) -> str:
    """Write ``<name>-analysis-report.txt`` (UTF-8, no BOM)."""
    path = os.path.join(output_dir, sanitize_file_name(name) + TEXT_REPORT_SUFFIX)
    try:
        os.makedirs(output_dir, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(report)
    except OSError as e:
        raise ExportError(f"Failed to write {path}: {e}") from e
    logger.info("Wrote text report to %s", path)
    return path
