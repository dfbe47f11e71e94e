#!/usr/bin/env python3
"""Tests for depmap/report_utils.py"""

import os
from datetime import datetime
from typing import Callable

from depmap.cycle_detection import calculate_cycle_statistics, detect_cycles
from depmap.extraction_scoring import ExtractionScoreCalculator, generate_ranked_candidates
from depmap.framework_filter import FilterConfiguration
from depmap.metric_utils import ProjectMetrics
from depmap.project_graph import DependencyGraph
from depmap.recommendations import generate_recommendations
from depmap.report_utils import generate_text_report, write_text_report
from depmap.weak_edges import identify_weak_edges

GENERATED_AT = datetime(2024, 3, 1, 9, 30, 0)


class TestGenerateTextReport:
    """Tests for generate_text_report."""

    def test_header(self, triangle_graph: DependencyGraph) -> None:
        """The header names the solution, date and project count."""
        report = generate_text_report("Contoso", 3, triangle_graph, FilterConfiguration(), generated_at=GENERATED_AT)
        lines = report.splitlines()

        assert lines[0] == "=" * 80
        assert lines[1].strip() == "Contoso Analysis Report"
        assert "Solution: Contoso" in lines
        assert "Analysis Date: 2024-03-01 09:30:00" in lines
        assert "Total Projects: 3" in lines

    def test_reference_overview(self, graph_factory: Callable[..., DependencyGraph]) -> None:
        """Framework, custom and cross-solution references are counted."""
        graph = graph_factory(
            [("App", "System.Core", 1), ("App", "Lib", 1), ("App", "Shared", 1), ("Lib", "mscorlib", 1)],
            collections={"App": "Contoso", "Lib": "Contoso", "Shared": "Fabrikam"},
        )

        report = generate_text_report("Contoso", 3, graph, FilterConfiguration(), generated_at=GENERATED_AT)

        assert "Total References: 4" in report
        assert "  Framework References: 2 (50.0%)" in report
        assert "  Custom References: 2 (50.0%)" in report
        assert "Cross-Solution References: 1" in report

    def test_full_report(self, mixed_cycles_graph: DependencyGraph) -> None:
        """Cycles, difficulty and recommendations each get a section."""
        cycles = detect_cycles(mixed_cycles_graph)
        identify_weak_edges(mixed_cycles_graph, cycles)
        suggestions = generate_recommendations(cycles)
        statistics = calculate_cycle_statistics(cycles, mixed_cycles_graph.vertex_count)
        calculator = ExtractionScoreCalculator()
        scores = [calculator.calculate(node, ProjectMetrics(20.0, 20.0, 20.0, 20.0)) for node in mixed_cycles_graph.vertices]

        report = generate_text_report(
            "Contoso",
            8,
            mixed_cycles_graph,
            FilterConfiguration(),
            cycles=cycles,
            statistics=statistics,
            suggestions=suggestions,
            candidates=generate_ranked_candidates(scores),
            generated_at=GENERATED_AT,
        )

        assert "CYCLE DETECTION" in report
        assert "Circular Dependency Chains: 2" in report
        assert "Projects in Cycles: 6 (75.0%)" in report
        assert "  Cycle 2 (4 projects): C, D, E, F" in report
        assert "EXTRACTION DIFFICULTY" in report
        assert "  Easy (0-33): 8 (100.0%)" in report
        assert "CYCLE-BREAKING RECOMMENDATIONS" in report
        assert "   1. C → D (cycle 2)" in report
        assert "Weakest link in 4-project cycle, only 4 method calls" in report

    def test_no_cycles(self, acyclic_ten_graph: DependencyGraph) -> None:
        """An acyclic graph reports no cycles and no recommendations."""
        report = generate_text_report(
            "Clean", 10, acyclic_ten_graph, FilterConfiguration(), cycles=[], suggestions=[], generated_at=GENERATED_AT
        )

        assert "No circular dependencies detected." in report
        assert "No cycle-breaking recommendations." in report

    def test_optional_sections_omitted(self, triangle_graph: DependencyGraph) -> None:
        """Sections without data are left out."""
        report = generate_text_report("Contoso", 3, triangle_graph, FilterConfiguration(), generated_at=GENERATED_AT)

        assert "CYCLE DETECTION" not in report
        assert "EXTRACTION DIFFICULTY" not in report


class TestWriteTextReport:
    """Tests for write_text_report."""

    def test_write(self, temp_dir: str) -> None:
        """The report is written without a BOM."""
        path = write_text_report("report\n", temp_dir, "Contoso")

        assert os.path.basename(path) == "Contoso-analysis-report.txt"
        with open(path, "rb") as f:
            assert f.read() == b"report\n"
