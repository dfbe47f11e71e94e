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
"""Extraction difficulty scoring.

Combines four normalized metrics into one 0-100 score per project:

    final = coupling * w_c + complexity * w_x + tech_debt * w_t + exposure * w_e

When a project's coupling metric is unavailable the remaining weights are
rescaled so they sum to 1.0 again, which keeps the score on the same 0-100
scale instead of silently deflating it.
"""

import math
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

import numpy as np

from depmap.cancellation import CancellationToken, check_cancelled
from depmap.constants import (
    DEFAULT_TOP_CANDIDATES,
    EASY_SCORE_MAX,
    MAX_SCORE,
    MEDIUM_SCORE_MAX,
    MIN_SCORE,
    WEIGHT_SUM_TOLERANCE,
    ConfigurationError,
    ValidationError,
)
from depmap.metric_utils import ProjectMetrics
from depmap.project_graph import ProjectNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringWeights:
    """Weights of the four extraction metrics.

    Each weight must lie in [0, 1] and together they must sum to 1.0
    (within 0.01).

    Raises:
        ConfigurationError: On construction with invalid weights
    """

    coupling: float = 0.40
    complexity: float = 0.30
    tech_debt: float = 0.20
    external_exposure: float = 0.10

    def __post_init__(self) -> None:
        for name, value in self.as_dict().items():
            if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
                raise ConfigurationError(f"Scoring weight '{name}' must be numeric, got {value!r}")
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"Scoring weight '{name}' must be between 0.0 and 1.0, got {value}")
        if abs(self.total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise ConfigurationError(f"Scoring weights must sum to 1.0 (±{WEIGHT_SUM_TOLERANCE}), got {self.total:.3f}")

    @property
    def total(self) -> float:
        return self.coupling + self.complexity + self.tech_debt + self.external_exposure

    def as_dict(self) -> Dict[str, float]:
        return {
            "coupling": self.coupling,
            "complexity": self.complexity,
            "tech_debt": self.tech_debt,
            "external_exposure": self.external_exposure,
        }


class DifficultyCategory(Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


def classify_difficulty(score: float) -> DifficultyCategory:
    """Easy up to 33, Medium up to 66, Hard above."""
    if score <= EASY_SCORE_MAX:
        return DifficultyCategory.EASY
    if score <= MEDIUM_SCORE_MAX:
        return DifficultyCategory.MEDIUM
    return DifficultyCategory.HARD


@dataclass(frozen=True)
class ExtractionScore:
    """Extraction difficulty of one project.

    Attributes:
        project: Scored project
        final_score: Weighted 0-100 score (higher = harder to extract)
        coupling_metric: 0-100, None when coupling was unavailable
        complexity_metric: 0-100
        tech_debt_score: 0-100
        external_api_metric: 0-100
        external_api_count: Raw number of externally callable endpoints
        weights: Weights used for the final score
    """

    project: ProjectNode
    final_score: float
    coupling_metric: Optional[float]
    complexity_metric: float
    tech_debt_score: float
    external_api_metric: float
    external_api_count: int = 0
    weights: ScoringWeights = field(default_factory=ScoringWeights)

    @property
    def project_name(self) -> str:
        return self.project.name

    @property
    def platform(self) -> str:
        return self.project.platform

    @property
    def difficulty(self) -> DifficultyCategory:
        return classify_difficulty(self.final_score)


@dataclass(frozen=True)
class ExtractionStatistics:
    total_projects: int
    easy_count: int
    medium_count: int
    hard_count: int
    mean_score: float
    median_score: float
    p90_score: float

    @property
    def is_valid(self) -> bool:
        return self.easy_count + self.medium_count + self.hard_count == self.total_projects


@dataclass(frozen=True)
class RankedExtractionCandidates:
    """Scores ranked for migration planning.

    Attributes:
        all_scores: Every score, easiest first
        easiest: Up to N easy candidates, easiest first
        hardest: Up to N hard candidates, hardest first
        statistics: Counts per difficulty band and score distribution
    """

    all_scores: List[ExtractionScore]
    easiest: List[ExtractionScore]
    hardest: List[ExtractionScore]
    statistics: ExtractionStatistics


def _validate_metric(name: str, value: Optional[float], project: ProjectNode) -> None:
    if value is None:
        return
    if math.isnan(value) or not MIN_SCORE <= value <= MAX_SCORE:
        raise ValidationError(f"{name} metric for '{project.name}' must be within 0-100, got {value}")


def calculate_final_score(metrics: ProjectMetrics, weights: ScoringWeights) -> float:
    """Weighted sum of the available metrics, clamped to 0-100.

    A None coupling metric drops that term and divides by the sum of the
    remaining weights. If no weight remains the score is 0.
    """
    terms: List[Tuple[float, float]] = [
        (weights.complexity, metrics.complexity),
        (weights.tech_debt, metrics.tech_debt),
        (weights.external_exposure, metrics.external_exposure),
    ]
    if metrics.coupling is not None:
        terms.append((weights.coupling, metrics.coupling))

    weight_sum = sum(weight for weight, _ in terms)
    if weight_sum <= 0.0:
        return MIN_SCORE

    score = sum(weight * value for weight, value in terms)
    if metrics.coupling is None:
        score /= weight_sum
    return max(MIN_SCORE, min(MAX_SCORE, score))


def _score_sort_key(score: ExtractionScore) -> Tuple[float, str, str]:
    return (score.final_score, score.project.name.lower(), score.project.key)


class ExtractionScoreCalculator:
    """Scores projects with a fixed set of validated weights."""

    def __init__(self, weights: Optional[ScoringWeights] = None) -> None:
        self.weights = weights or ScoringWeights()

    def calculate(self, project: ProjectNode, metrics: ProjectMetrics) -> ExtractionScore:
        """Score a single project.

        Raises:
            ValidationError: If an argument is None or a metric is outside 0-100
        """
        if project is None or metrics is None:
            raise ValidationError("Project and metrics must not be null")
        _validate_metric("Coupling", metrics.coupling, project)
        _validate_metric("Complexity", metrics.complexity, project)
        _validate_metric("Tech debt", metrics.tech_debt, project)
        _validate_metric("External exposure", metrics.external_exposure, project)

        if metrics.coupling is None:
            logger.debug("Coupling unavailable for %s, rescaling remaining weights", project.name)

        return ExtractionScore(
            project=project,
            final_score=calculate_final_score(metrics, self.weights),
            coupling_metric=metrics.coupling,
            complexity_metric=metrics.complexity,
            tech_debt_score=metrics.tech_debt,
            external_api_metric=metrics.external_exposure,
            external_api_count=metrics.external_api_count,
            weights=self.weights,
        )

    def calculate_all(self, metrics_by_project: Dict[ProjectNode, ProjectMetrics], cancel_token: Optional[CancellationToken] = None) -> List[ExtractionScore]:
        """Score every project and sort easiest first.

        Ties on score are broken by project name, then path.
        """
        if metrics_by_project is None:
            raise ValidationError("Metrics mapping must not be null")

        scores = []
        for project, metrics in metrics_by_project.items():
            check_cancelled(cancel_token, "extraction scoring")
            scores.append(self.calculate(project, metrics))

        scores.sort(key=_score_sort_key)
        logger.info("Calculated extraction scores for %d projects", len(scores))
        return scores


def generate_ranked_candidates(scores: List[ExtractionScore], top_n: int = DEFAULT_TOP_CANDIDATES) -> RankedExtractionCandidates:
    """Split scores into easiest and hardest candidate lists with statistics.

    Args:
        scores: Extraction scores in any order
        top_n: Maximum entries in the easiest and hardest lists

    Returns:
        RankedExtractionCandidates
    """
    if scores is None:
        raise ValidationError("Score list must not be null")
    if top_n < 0:
        raise ValidationError(f"top_n must be non-negative, got {top_n}")

    ordered = sorted(scores, key=_score_sort_key)
    easy = [s for s in ordered if s.difficulty is DifficultyCategory.EASY]
    medium = [s for s in ordered if s.difficulty is DifficultyCategory.MEDIUM]
    hard = [s for s in ordered if s.difficulty is DifficultyCategory.HARD]
    hardest = sorted(hard, key=lambda s: (-s.final_score, s.project.name.lower(), s.project.key))

    if ordered:
        values = np.array([s.final_score for s in ordered], dtype=float)
        mean_score = float(np.mean(values))
        median_score = float(np.median(values))
        p90_score = float(np.percentile(values, 90))
    else:
        mean_score = median_score = p90_score = 0.0

    statistics = ExtractionStatistics(
        total_projects=len(ordered),
        easy_count=len(easy),
        medium_count=len(medium),
        hard_count=len(hard),
        mean_score=mean_score,
        median_score=median_score,
        p90_score=p90_score,
    )
    logger.debug("Extraction difficulty: %d easy, %d medium, %d hard", len(easy), len(medium), len(hard))
    return RankedExtractionCandidates(all_scores=ordered, easiest=easy[:top_n], hardest=hardest[:top_n], statistics=statistics)
