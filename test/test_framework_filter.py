#!/usr/bin/env python3
"""Tests for depmap/framework_filter.py"""

import pytest
from typing import Callable

from depmap.cancellation import CancellationToken
from depmap.constants import ConfigurationError, OperationCancelledError, ValidationError
from depmap.framework_filter import FilterConfiguration, filter_graph, is_framework_reference, matches_pattern
from depmap.project_graph import DependencyGraph


class TestMatchesPattern:
    """Tests for pattern matching."""

    def test_prefix_pattern(self) -> None:
        """A trailing star matches by prefix, case-insensitively."""
        assert matches_pattern("System.Core", "System.*")
        assert matches_pattern("system.core", "SYSTEM.*")
        assert not matches_pattern("MySystem.Core", "System.*")

    def test_exact_pattern(self) -> None:
        """Without a star only the exact name matches."""
        assert matches_pattern("X", "X")
        assert matches_pattern("mscorlib", "MSCORLIB")
        assert not matches_pattern("Xylophone", "X")

    def test_empty_and_null_patterns_never_match(self) -> None:
        """Empty or None patterns match nothing."""
        assert not matches_pattern("System", "")
        assert not matches_pattern("System", None)


class TestFilterConfiguration:
    """Tests for FilterConfiguration validation."""

    def test_defaults(self) -> None:
        """The default block list covers the platform assemblies."""
        config = FilterConfiguration()

        assert config.block_list == ("Microsoft.*", "System.*", "mscorlib", "netstandard")
        assert config.allow_list == ()

    def test_null_entries_dropped(self) -> None:
        """None and blank entries are removed."""
        config = FilterConfiguration(block_list=["System.*", None, "  "], allow_list=None)  # type: ignore[list-item,arg-type]

        assert config.block_list == ("System.*",)
        assert config.allow_list == ()

    def test_non_string_pattern_rejected(self) -> None:
        """Malformed patterns fail at configuration time."""
        with pytest.raises(ConfigurationError):
            FilterConfiguration(block_list=[42])  # type: ignore[list-item]

    def test_allow_precedes_block(self) -> None:
        """Allow list wins over block list."""
        config = FilterConfiguration(block_list=["System.*"], allow_list=["System.Utilities"])

        assert not is_framework_reference("System.Utilities", config)
        assert is_framework_reference("System.Core", config)


class TestFilterGraph:
    """Tests for filter_graph."""

    def test_allow_list_scenario(self, graph_factory: Callable[..., DependencyGraph]) -> None:
        """Block System.*, allow System.Utilities: only the System.Core edge goes."""
        graph = graph_factory([("App", "System.Utilities", 1), ("App", "System.Core", 1), ("App", "Lib", 1)])
        config = FilterConfiguration(block_list=["System.*"], allow_list=["System.Utilities"])

        filtered = filter_graph(graph, config)

        targets = sorted(e.target.name for e in filtered.edges)
        assert targets == ["Lib", "System.Utilities"]

    def test_vertices_are_kept(self, graph_factory: Callable[..., DependencyGraph]) -> None:
        """Blocked targets stay as vertices."""
        graph = graph_factory([("App", "System.Core", 1)])

        filtered = filter_graph(graph, FilterConfiguration())

        assert filtered.vertex_count == 2
        assert filtered.edge_count == 0

    def test_empty_block_list_is_identity(self, graph_factory: Callable[..., DependencyGraph]) -> None:
        """No block patterns means no edge is removed."""
        graph = graph_factory([("App", "System.Core", 1), ("App", "Microsoft.Extensions", 1)])

        filtered = filter_graph(graph, FilterConfiguration(block_list=[]))

        assert filtered.edge_count == 2

    def test_filter_is_idempotent(self, graph_factory: Callable[..., DependencyGraph]) -> None:
        """Filtering twice removes nothing more the second time."""
        graph = graph_factory([("App", "System.Core", 1), ("App", "Lib", 3), ("Lib", "mscorlib", 1), ("Lib", "netstandard", 1)])
        config = FilterConfiguration()

        once = filter_graph(graph, config)
        twice = filter_graph(once, config)

        assert once.edge_count == 1
        assert twice.edge_count == once.edge_count
        assert twice.edges == once.edges

    def test_input_graph_untouched(self, graph_factory: Callable[..., DependencyGraph]) -> None:
        """The source graph is not modified."""
        graph = graph_factory([("App", "System.Core", 1)])

        filter_graph(graph, FilterConfiguration())

        assert graph.edge_count == 1

    def test_null_arguments(self, triangle_graph: DependencyGraph) -> None:
        """None graph or config is rejected."""
        with pytest.raises(ValidationError):
            filter_graph(None, FilterConfiguration())  # type: ignore[arg-type]
        with pytest.raises(ValidationError):
            filter_graph(triangle_graph, None)  # type: ignore[arg-type]

    def test_cancelled_token(self, triangle_graph: DependencyGraph) -> None:
        """A cancelled token aborts filtering."""
        token = CancellationToken()
        token.cancel()

        with pytest.raises(OperationCancelledError):
            filter_graph(triangle_graph, FilterConfiguration(), token)
