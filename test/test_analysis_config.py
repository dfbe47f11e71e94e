#!/usr/bin/env python3
"""Tests for depmap/analysis_config.py"""

import pytest
from typing import Any, Callable

from depmap.analysis_config import AnalysisConfiguration, configuration_from_dict, load_configuration
from depmap.constants import ConfigurationError, DEFAULT_BLOCK_LIST


class TestConfigurationFromDict:
    """Tests for configuration parsing."""

    def test_empty_document_uses_defaults(self) -> None:
        """Omitted sections keep their defaults."""
        config = configuration_from_dict({})

        assert config == AnalysisConfiguration()
        assert config.filters.block_list == DEFAULT_BLOCK_LIST
        assert config.weights.coupling == 0.40

    def test_pascal_case_sections(self) -> None:
        """PascalCase keys map onto the configuration fields."""
        config = configuration_from_dict(
            {
                "FrameworkFilters": {"BlockList": ["System.*"], "AllowList": ["System.Utilities"]},
                "ScoringWeights": {"Coupling": 0.25, "Complexity": 0.25, "TechDebt": 0.25, "ExternalExposure": 0.25},
                "Recommendations": {"CriticalCycleThreshold": 12, "LargeCycleThreshold": 8},
                "Visualization": {"MaxBreakPoints": 3, "ShowScoreLabels": False},
            }
        )

        assert config.filters.allow_list == ("System.Utilities",)
        assert config.weights.tech_debt == 0.25
        assert config.recommendations.critical_cycle_threshold == 12
        assert config.visualization.max_break_points == 3
        assert config.visualization.show_score_labels is False

    def test_snake_case_sections(self) -> None:
        """snake_case keys are accepted as well."""
        config = configuration_from_dict({"framework_filters": {"block_list": []}})

        assert config.filters.block_list == ()

    def test_invalid_weights(self) -> None:
        """Weights that do not sum to 1.0 fail at load time."""
        with pytest.raises(ConfigurationError, match="sum to 1.0"):
            configuration_from_dict({"ScoringWeights": {"Coupling": 0.9}})

    def test_unknown_key(self) -> None:
        """Unknown keys name their section."""
        with pytest.raises(ConfigurationError, match="FrameworkFilters"):
            configuration_from_dict({"FrameworkFilters": {"DenyList": ["x"]}})

    def test_section_must_be_object(self) -> None:
        """A section given as a list is rejected."""
        with pytest.raises(ConfigurationError):
            configuration_from_dict({"Visualization": [1, 2]})

    def test_malformed_pattern(self) -> None:
        """Non-string patterns are rejected."""
        with pytest.raises(ConfigurationError):
            configuration_from_dict({"FrameworkFilters": {"BlockList": [1]}})


class TestLoadConfiguration:
    """Tests for loading configuration files."""

    def test_none_path_gives_defaults(self) -> None:
        """No file means default configuration."""
        assert load_configuration(None) == AnalysisConfiguration()

    def test_load_file(self, write_json: Callable[[str, Any], str]) -> None:
        """Configuration is read from JSON."""
        path = write_json("depmap-config.json", {"Visualization": {"MaxBreakPoints": 5}})

        assert load_configuration(path).visualization.max_break_points == 5

    def test_missing_file(self, temp_dir: str) -> None:
        """A missing file raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="not found"):
            load_configuration(f"{temp_dir}/missing.json")

    def test_invalid_json(self, temp_dir: str) -> None:
        """Malformed JSON raises ConfigurationError."""
        path = f"{temp_dir}/bad.json"
        with open(path, "w", encoding="utf-8") as f:
            f.write("{")

        with pytest.raises(ConfigurationError, match="not valid JSON"):
            load_configuration(path)
