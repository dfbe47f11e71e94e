#!/usr/bin/env python3
"""Tests for depmap/recommendations.py"""

import pytest
from typing import Callable, List

from depmap.cancellation import CancellationToken
from depmap.constants import ConfigurationError, OperationCancelledError, ValidationError
from depmap.cycle_detection import CycleInfo, detect_cycles
from depmap.project_graph import DependencyGraph
from depmap.recommendations import (
    CycleBreakingSuggestion,
    RecommendationConfiguration,
    build_rationale,
    describe_coupling,
    generate_recommendations,
)
from depmap.weak_edges import identify_weak_edges


def _annotated(graph: DependencyGraph) -> List[CycleInfo]:
    cycles = detect_cycles(graph)
    identify_weak_edges(graph, cycles)
    return cycles


class TestRationale:
    """Tests for rationale text."""

    @pytest.mark.parametrize(
        "coupling,expected",
        [
            (1, "only 1 method call"),
            (2, "just 2 method calls"),
            (3, "only 3 method calls"),
            (5, "only 5 method calls"),
            (6, "6 method calls"),
            (40, "40 method calls"),
        ],
    )
    def test_coupling_phrases(self, coupling: int, expected: str) -> None:
        """Coupling wording changes with the call count."""
        assert describe_coupling(coupling) == expected

    def test_large_cycle(self) -> None:
        """An 8-project cycle is large under the default thresholds."""
        assert build_rationale(8, 3) == "Weakest link in large 8-project cycle, only 3 method calls"

    def test_critical_cycle(self) -> None:
        """Cycles at the critical threshold are flagged critical."""
        assert build_rationale(12, 1).startswith("Weakest link in critical 12-project cycle")

    def test_medium_and_small_cycles(self) -> None:
        """Medium cycles get no adjective, small ones are labelled small."""
        assert build_rationale(4, 7) == "Weakest link in 4-project cycle, 7 method calls"
        assert build_rationale(2, 2) == "Weakest link in small 2-project cycle, just 2 method calls"

    def test_custom_thresholds(self) -> None:
        """Thresholds come from the configuration."""
        config = RecommendationConfiguration(critical_cycle_threshold=3, large_cycle_threshold=3, medium_cycle_threshold=2)

        assert "critical 3-project cycle" in build_rationale(3, 1, config)


class TestRecommendationConfiguration:
    """Tests for threshold validation."""

    def test_thresholds_must_be_ordered(self) -> None:
        """critical >= large >= medium is required."""
        with pytest.raises(ConfigurationError):
            RecommendationConfiguration(critical_cycle_threshold=4, large_cycle_threshold=6)

    def test_thresholds_must_be_at_least_two(self) -> None:
        """No cycle has fewer than two projects."""
        with pytest.raises(ConfigurationError):
            RecommendationConfiguration(medium_cycle_threshold=1)


class TestGenerateRecommendations:
    """Tests for generate_recommendations."""

    def test_triangle_gives_three_suggestions(self, triangle_graph: DependencyGraph) -> None:
        """Equal weights make every triangle edge a suggestion."""
        suggestions = generate_recommendations(_annotated(triangle_graph))

        assert len(suggestions) == 3
        assert [s.break_point for s in suggestions] == ["A → B", "B → C", "C → A"]
        assert all(s.coupling_score == 7 and s.cycle_size == 3 for s in suggestions)

    def test_two_cycle_suggests_weaker_direction(self, two_cycle_graph: DependencyGraph) -> None:
        """A <-> B (5/15) suggests A -> B."""
        suggestions = generate_recommendations(_annotated(two_cycle_graph))

        assert len(suggestions) == 1
        assert suggestions[0].break_point == "A → B"
        assert suggestions[0].coupling_score == 5
        assert suggestions[0].rank == 1

    def test_larger_cycle_first_on_equal_weight(self, mixed_cycles_graph: DependencyGraph) -> None:
        """With equal coupling the larger cycle ranks higher."""
        suggestions = generate_recommendations(_annotated(mixed_cycles_graph))

        assert [s.break_point for s in suggestions] == ["C → D", "A → B"]
        assert [s.cycle_id for s in suggestions] == [2, 1]

    def test_ranks_are_dense_and_ordered(self, graph_factory: Callable[..., DependencyGraph]) -> None:
        """Ranks run 1..N and follow weight, then size, then names."""
        graph = graph_factory(
            [
                ("A", "B", 3), ("B", "A", 3),
                ("C", "D", 1), ("D", "E", 1), ("E", "C", 2),
                ("F", "G", 3), ("G", "H", 3), ("H", "F", 3),
            ]
        )

        suggestions = generate_recommendations(_annotated(graph))

        assert [s.rank for s in suggestions] == list(range(1, len(suggestions) + 1))
        keys = [(s.coupling_score, -s.cycle_size, s.source.name.lower(), s.target.name.lower()) for s in suggestions]
        assert keys == sorted(keys)
        assert suggestions[0].break_point == "C → D"

    def test_repeated_runs_identical(self, mixed_cycles_graph: DependencyGraph) -> None:
        """Ranking is deterministic."""
        cycles = _annotated(mixed_cycles_graph)

        assert generate_recommendations(cycles) == generate_recommendations(cycles)

    def test_cycles_without_weak_edges_contribute_nothing(self, triangle_graph: DependencyGraph) -> None:
        """Unannotated cycles produce no suggestions."""
        assert generate_recommendations(detect_cycles(triangle_graph)) == []

    def test_suggestion_is_frozen(self, two_cycle_graph: DependencyGraph) -> None:
        """Suggestions are immutable records."""
        suggestion = generate_recommendations(_annotated(two_cycle_graph))[0]

        assert isinstance(suggestion, CycleBreakingSuggestion)
        with pytest.raises(Exception):
            suggestion.rank = 5  # type: ignore[misc]

    def test_null_cycles(self) -> None:
        """None input is rejected."""
        with pytest.raises(ValidationError):
            generate_recommendations(None)  # type: ignore[arg-type]

    def test_cancelled(self, triangle_graph: DependencyGraph) -> None:
        """A cancelled token aborts ranking."""
        cycles = _annotated(triangle_graph)
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelledError):
            generate_recommendations(cycles, cancel_token=token)
