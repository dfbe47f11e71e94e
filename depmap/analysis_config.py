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
"""Analysis configuration loading.

Configuration is one explicit, validated value handed to the pipeline. It can
be read from JSON::

    {
      "FrameworkFilters": {"BlockList": ["System.*"], "AllowList": ["System.Utilities"]},
      "ScoringWeights": {"Coupling": 0.4, "Complexity": 0.3, "TechDebt": 0.2, "ExternalExposure": 0.1},
      "Recommendations": {"CriticalCycleThreshold": 10, "LargeCycleThreshold": 6},
      "Visualization": {"MaxBreakPoints": 10, "ShowScoreLabels": true}
    }

snake_case keys (``framework_filters``, ``block_list``, ...) are accepted too.
Omitted sections keep their defaults.
"""

import os
import re
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from depmap.constants import ConfigurationError
from depmap.dot_generator import VisualizationConfiguration
from depmap.extraction_scoring import ScoringWeights
from depmap.framework_filter import FilterConfiguration
from depmap.recommendations import RecommendationConfiguration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisConfiguration:
    filters: FilterConfiguration = field(default_factory=FilterConfiguration)
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    recommendations: RecommendationConfiguration = field(default_factory=RecommendationConfiguration)
    visualization: VisualizationConfiguration = field(default_factory=VisualizationConfiguration)


def _snake(key: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _normalize_keys(section: Any, section_name: str) -> Dict[str, Any]:
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"Configuration section '{section_name}' must be an object")
    return {_snake(key): value for key, value in section.items()}


def _build(cls: Any, section: Dict[str, Any], section_name: str) -> Any:
    try:
        return cls(**section)
    except TypeError as e:
        raise ConfigurationError(f"Invalid keys in configuration section '{section_name}': {e}") from e


def configuration_from_dict(data: Dict[str, Any]) -> AnalysisConfiguration:
    """Validate a decoded configuration document.

    Raises:
        ConfigurationError: On unknown keys or invalid values
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a JSON object")
    sections = _normalize_keys(data, "root")

    filters = _normalize_keys(sections.get("framework_filters"), "FrameworkFilters")
    weights = _normalize_keys(sections.get("scoring_weights"), "ScoringWeights")
    recommendations = _normalize_keys(sections.get("recommendations"), "Recommendations")
    visualization = _normalize_keys(sections.get("visualization"), "Visualization")

    return AnalysisConfiguration(
        filters=_build(FilterConfiguration, filters, "FrameworkFilters"),
        weights=_build(ScoringWeights, weights, "ScoringWeights"),
        recommendations=_build(RecommendationConfiguration, recommendations, "Recommendations"),
        visualization=_build(VisualizationConfiguration, visualization, "Visualization"),
    )


def load_configuration(path: Optional[str]) -> AnalysisConfiguration:
    """Load configuration from a JSON file, or defaults when path is None.

    Raises:
        ConfigurationError: If the file is missing, not JSON or invalid
    """
    if path is None:
        return AnalysisConfiguration()
    if not os.path.isfile(path):
        raise ConfigurationError(f"Configuration file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Configuration file {path} is not valid JSON: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e

    config = configuration_from_dict(data)
    logger.info("Loaded configuration from %s", path)
    return config
