#!/usr/bin/env python3
"""Tests for depmap/export_utils.py"""

import csv
import json
import os
import pytest
from typing import Callable, List

import networkx as nx

from depmap.constants import ValidationError
from depmap.cycle_detection import CycleInfo, detect_cycles
from depmap.export_utils import (
    CYCLE_ANALYSIS_COLUMNS,
    DEPENDENCY_MATRIX_COLUMNS,
    EXTRACTION_SCORE_COLUMNS,
    build_export_graph,
    export_cycle_analysis,
    export_dependency_matrix,
    export_extraction_scores,
    export_graph,
)
from depmap.extraction_scoring import ExtractionScoreCalculator
from depmap.metric_utils import ProjectMetrics
from depmap.project_graph import DependencyGraph, ProjectNode
from depmap.recommendations import generate_recommendations
from depmap.weak_edges import identify_weak_edges


def _read_rows(path: str) -> List[List[str]]:
    with open(path, newline="", encoding="utf-8-sig") as f:
        return list(csv.reader(f))


def _annotated(graph: DependencyGraph) -> List[CycleInfo]:
    cycles = detect_cycles(graph)
    identify_weak_edges(graph, cycles)
    return cycles


class TestCsvFormat:
    """CSV files open cleanly in spreadsheets."""

    def test_bom_and_crlf(self, temp_dir: str, triangle_graph: DependencyGraph) -> None:
        """Files start with a UTF-8 BOM and use CRLF line endings."""
        path = export_dependency_matrix(triangle_graph, temp_dir, "Contoso")

        with open(path, "rb") as f:
            raw = f.read()

        assert raw.startswith(b"\xef\xbb\xbf")
        assert raw.count(b"\r\n") == 4
        assert b"\n" not in raw.replace(b"\r\n", b"")

    def test_commas_and_quotes_are_quoted(self, temp_dir: str) -> None:
        """Values with delimiters survive a round trip through a CSV reader."""
        graph = DependencyGraph()
        a = ProjectNode('Legacy, "Core"', "legacy.csproj")
        graph.add_vertex(a)
        score = ExtractionScoreCalculator().calculate(a, ProjectMetrics(1.0, 1.0, 1.0, 1.0))

        path = export_extraction_scores([score], temp_dir, "x")

        assert _read_rows(path)[1][0] == 'Legacy, "Core"'


class TestExtractionScores:
    """Tests for export_extraction_scores."""

    def test_rows_sorted_and_formatted(self, temp_dir: str) -> None:
        """Rows run easiest first with one decimal place."""
        calculator = ExtractionScoreCalculator()
        scores = [
            calculator.calculate(ProjectNode("Hard", "h"), ProjectMetrics(90.0, 80.0, 70.0, 100.0, 40)),
            calculator.calculate(ProjectNode("Easy", "e"), ProjectMetrics(5.0, 10.0, 0.0, 0.0, 0)),
        ]

        rows = _read_rows(export_extraction_scores(scores, temp_dir, "Contoso"))

        assert rows[0] == EXTRACTION_SCORE_COLUMNS
        assert rows[1] == ["Easy", "5.0", "5.0", "10.0", "0.0", "0"]
        assert rows[2][0] == "Hard"
        assert rows[2][5] == "40"

    def test_missing_coupling_is_na(self, temp_dir: str) -> None:
        """Unavailable coupling is written as N/A."""
        score = ExtractionScoreCalculator().calculate(ProjectNode("A", "a"), ProjectMetrics(None, 10.0, 10.0, 10.0))

        rows = _read_rows(export_extraction_scores([score], temp_dir, "Contoso"))

        assert rows[1][2] == "N/A"

    def test_file_name(self, temp_dir: str) -> None:
        """The file is named after the dataset."""
        path = export_extraction_scores([], temp_dir, "Contoso Suite")

        assert os.path.basename(path) == "Contoso_Suite-extraction-scores.csv"
        assert _read_rows(path) == [EXTRACTION_SCORE_COLUMNS]


class TestCycleAnalysis:
    """Tests for export_cycle_analysis."""

    def test_one_row_per_cycle(self, temp_dir: str, mixed_cycles_graph: DependencyGraph) -> None:
        """Each cycle lists its members and best-ranked break point."""
        cycles = _annotated(mixed_cycles_graph)
        suggestions = generate_recommendations(cycles)

        rows = _read_rows(export_cycle_analysis(cycles, suggestions, temp_dir, "Contoso"))

        assert rows[0] == CYCLE_ANALYSIS_COLUMNS
        assert rows[1] == ["1", "2", "A, B", "A → B", "4"]
        assert rows[2] == ["2", "4", "C, D, E, F", "C → D", "4"]

    def test_cycle_without_suggestion(self, temp_dir: str, triangle_graph: DependencyGraph) -> None:
        """Cycles with no suggestion show N/A and zero coupling."""
        cycles = detect_cycles(triangle_graph)

        rows = _read_rows(export_cycle_analysis(cycles, [], temp_dir, "Contoso"))

        assert rows[1][3:] == ["N/A", "0"]

    def test_null_inputs(self, temp_dir: str) -> None:
        """None inputs are rejected."""
        with pytest.raises(ValidationError):
            export_cycle_analysis(None, [], temp_dir, "x")  # type: ignore[arg-type]


class TestDependencyMatrix:
    """Tests for export_dependency_matrix."""

    def test_rows(self, temp_dir: str, graph_factory: Callable[..., DependencyGraph]) -> None:
        """Every edge is listed with kind and coupling, sorted by name."""
        graph = graph_factory([("B", "A", 3), ("A", "Lib", 1)], binary_targets=["Lib"])

        rows = _read_rows(export_dependency_matrix(graph, temp_dir, "Contoso"))

        assert rows[0] == DEPENDENCY_MATRIX_COLUMNS
        assert rows[1:] == [["A", "Lib", "Binary Reference", "1"], ["B", "A", "Project Reference", "3"]]


class TestExportGraph:
    """Tests for graph export with analysis attributes."""

    def test_export_graph_attributes(self, mixed_cycles_graph: DependencyGraph) -> None:
        """Nodes carry cycle membership, edges carry coupling."""
        cycles = detect_cycles(mixed_cycles_graph)

        export = build_export_graph(mixed_cycles_graph, cycles)

        assert export.nodes["src/C/C.csproj"]["cycle_id"] == 2
        assert export.nodes["src/G/G.csproj"]["in_cycle"] is False
        assert export.edges["src/F/F.csproj", "src/C/C.csproj"]["coupling"] == 10
        assert export.edges["src/F/F.csproj", "src/C/C.csproj"]["coupling_strength"] == "medium"

    def test_graphml(self, temp_dir: str, triangle_graph: DependencyGraph) -> None:
        """GraphML output can be read back by NetworkX."""
        path = export_graph(os.path.join(temp_dir, "graph.graphml"), triangle_graph, detect_cycles(triangle_graph))

        loaded = nx.read_graphml(path)

        assert loaded.number_of_nodes() == 3
        assert loaded.number_of_edges() == 3
        assert loaded.nodes["src/A/A.csproj"]["label"] == "A"

    def test_json(self, temp_dir: str, triangle_graph: DependencyGraph) -> None:
        """JSON output is node-link data."""
        path = export_graph(os.path.join(temp_dir, "graph.json"), triangle_graph)

        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        assert len(data["nodes"]) == 3
        assert data["directed"] is True

    def test_unsupported_format(self, temp_dir: str, triangle_graph: DependencyGraph) -> None:
        """Unknown extensions are rejected."""
        with pytest.raises(ValidationError, match="Unsupported graph format"):
            export_graph(os.path.join(temp_dir, "graph.gexf"), triangle_graph)
