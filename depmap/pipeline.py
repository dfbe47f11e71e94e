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
"""End-to-end analysis pipeline.

    dataset -> graph -> framework filter -> cycles -> weak edges
            -> recommendations -> extraction scores -> DOT

The analysis itself performs no I/O; write_outputs() handles files.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from depmap.analysis_config import AnalysisConfiguration
from depmap.cancellation import CancellationToken
from depmap.constants import ValidationError
from depmap.cycle_detection import CycleInfo, CycleStatistics, calculate_cycle_statistics, detect_cycles
from depmap.dot_generator import generate_dot, write_dot_file
from depmap.export_utils import export_cycle_analysis, export_dependency_matrix, export_extraction_scores
from depmap.extraction_scoring import ExtractionScoreCalculator, RankedExtractionCandidates, generate_ranked_candidates
from depmap.framework_filter import filter_graph
from depmap.graph_builder import ProjectDataset, build_graph
from depmap.metric_utils import collect_project_metrics
from depmap.project_graph import DependencyGraph
from depmap.recommendations import CycleBreakingSuggestion, generate_recommendations
from depmap.report_utils import generate_text_report, write_text_report
from depmap.weak_edges import identify_weak_edges

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Everything one analysis run produced.

    Attributes:
        name: Dataset name
        total_projects: Projects declared in the dataset
        graph: Graph before framework filtering
        filtered_graph: Graph the analysis ran on
        cycles: Cycles with weak edges attached
        cycle_statistics: Participation summary
        suggestions: Ranked cycle-breaking suggestions
        candidates: Ranked extraction scores
        dot: DOT text of the filtered graph with overlays
        warnings: Data-integrity warnings collected along the way
    """

    name: str
    total_projects: int
    graph: DependencyGraph
    filtered_graph: DependencyGraph
    cycles: List[CycleInfo]
    cycle_statistics: CycleStatistics
    suggestions: List[CycleBreakingSuggestion]
    candidates: RankedExtractionCandidates
    dot: str
    warnings: List[str] = field(default_factory=list)


def analyze_dataset(
    dataset: ProjectDataset,
    config: Optional[AnalysisConfiguration] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> AnalysisResult:
    """Run the full analysis over a dataset.

    Args:
        dataset: Normalized project dataset
        config: Analysis configuration (defaults if None)
        cancel_token: Optional cancellation token shared by all steps

    Returns:
        AnalysisResult

    Raises:
        ValidationError: If dataset is None
        OperationCancelledError: If cancelled at any step
    """
    if dataset is None:
        raise ValidationError("Dataset must not be null")
    config = config or AnalysisConfiguration()

    build = build_graph(dataset)
    warnings = list(build.warnings)

    filtered = filter_graph(build.graph, config.filters, cancel_token)
    cycles = detect_cycles(filtered, cancel_token)
    warnings.extend(identify_weak_edges(filtered, cycles, cancel_token))
    suggestions = generate_recommendations(cycles, config.recommendations, cancel_token)
    statistics = calculate_cycle_statistics(cycles, filtered.vertex_count)

    metrics = collect_project_metrics(filtered, dataset.projects)
    scores = ExtractionScoreCalculator(config.weights).calculate_all(metrics, cancel_token)
    candidates = generate_ranked_candidates(scores)

    dot = generate_dot(filtered, cycles, suggestions, scores, config.visualization)

    logger.info(
        "Analysis of %s complete: %d projects, %d cycles, %d suggestions, %d warnings",
        dataset.name,
        len(dataset.projects),
        len(cycles),
        len(suggestions),
        len(warnings),
    )
    return AnalysisResult(
        name=dataset.name,
        total_projects=len(dataset.projects),
        graph=build.graph,
        filtered_graph=filtered,
        cycles=cycles,
        cycle_statistics=statistics,
        suggestions=suggestions,
        candidates=candidates,
        dot=dot,
        warnings=warnings,
    )


def write_outputs(
    result: AnalysisResult,
    output_dir: str,
    config: Optional[AnalysisConfiguration] = None,
    generated_at: Optional[datetime] = None,
) -> List[str]:
    """Write the DOT file, the three CSV tables and the text report.

    Returns:
        Paths of the written files
    """
    config = config or AnalysisConfiguration()
    report = generate_text_report(
        result.name,
        result.total_projects,
        result.graph,
        config.filters,
        cycles=result.cycles,
        statistics=result.cycle_statistics,
        suggestions=result.suggestions,
        candidates=result.candidates,
        generated_at=generated_at,
    )
    return [
        write_dot_file(result.dot, output_dir, result.name),
        export_extraction_scores(result.candidates.all_scores, output_dir, result.name),
        export_cycle_analysis(result.cycles, result.suggestions, output_dir, result.name),
        export_dependency_matrix(result.filtered_graph, output_dir, result.name),
        write_text_report(report, output_dir, result.name),
    ]
