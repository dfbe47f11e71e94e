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
"""Rank cycle-breaking suggestions across all cycles.

Every weak edge becomes one suggestion. Suggestions are ordered by coupling
weight (ascending), then cycle size (descending), then source and target name,
and ranked 1..N over the full list.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from depmap.cancellation import CancellationToken, check_cancelled
from depmap.constants import (
    CRITICAL_CYCLE_THRESHOLD,
    LARGE_CYCLE_THRESHOLD,
    MEDIUM_CYCLE_THRESHOLD,
    ConfigurationError,
    ValidationError,
)
from depmap.cycle_detection import CycleInfo
from depmap.project_graph import DependencyEdge, ProjectNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecommendationConfiguration:
    """Cycle-size thresholds that change the urgency of the rationale text."""

    critical_cycle_threshold: int = CRITICAL_CYCLE_THRESHOLD
    large_cycle_threshold: int = LARGE_CYCLE_THRESHOLD
    medium_cycle_threshold: int = MEDIUM_CYCLE_THRESHOLD

    def __post_init__(self) -> None:
        for name in ("critical_cycle_threshold", "large_cycle_threshold", "medium_cycle_threshold"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 2:
                raise ConfigurationError(f"{name} must be an integer >= 2, got {value!r}")
        if not self.critical_cycle_threshold >= self.large_cycle_threshold >= self.medium_cycle_threshold:
            raise ConfigurationError("Cycle thresholds must satisfy critical >= large >= medium")


@dataclass(frozen=True)
class CycleBreakingSuggestion:
    """One edge proposed for removal to break a cycle."""

    cycle_id: int
    source: ProjectNode
    target: ProjectNode
    coupling_score: int
    cycle_size: int
    rank: int
    rationale: str

    @property
    def break_point(self) -> str:
        return f"{self.source.name} → {self.target.name}"


def describe_cycle(cycle_size: int, config: RecommendationConfiguration) -> str:
    if cycle_size >= config.critical_cycle_threshold:
        return f"critical {cycle_size}-project cycle"
    if cycle_size >= config.large_cycle_threshold:
        return f"large {cycle_size}-project cycle"
    if cycle_size >= config.medium_cycle_threshold:
        return f"{cycle_size}-project cycle"
    return f"small {cycle_size}-project cycle"


def describe_coupling(coupling: int) -> str:
    if coupling == 1:
        return "only 1 method call"
    if coupling == 2:
        return "just 2 method calls"
    if coupling <= 5:
        return f"only {coupling} method calls"
    return f"{coupling} method calls"


def build_rationale(cycle_size: int, coupling: int, config: Optional[RecommendationConfiguration] = None) -> str:
    """Human-readable reason for a suggestion.

    Example:
        >>> build_rationale(8, 3)
        'Weakest link in large 8-project cycle, only 3 method calls'
    """
    config = config or RecommendationConfiguration()
    return f"Weakest link in {describe_cycle(cycle_size, config)}, {describe_coupling(coupling)}"


def _sort_key(item: Tuple[CycleInfo, DependencyEdge]) -> Tuple[int, int, str, str, str, str]:
    cycle, edge = item
    return (edge.weight, -cycle.size, edge.source.name.lower(), edge.target.name.lower(), edge.source.key, edge.target.key)


def generate_recommendations(
    cycles: List[CycleInfo],
    config: Optional[RecommendationConfiguration] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> List[CycleBreakingSuggestion]:
    """Build the globally ranked list of cycle-breaking suggestions.

    Cycles without weak edges contribute nothing. The list is never truncated;
    callers slice it for display.

    Args:
        cycles: Cycles annotated by identify_weak_edges()
        config: Rationale thresholds (defaults if None)
        cancel_token: Optional cancellation token

    Returns:
        Suggestions ordered by rank (1 = most recommended)

    Raises:
        ValidationError: If cycles is None
        OperationCancelledError: If cancelled before ranking completes
    """
    if cycles is None:
        raise ValidationError("Cycle list must not be null")
    config = config or RecommendationConfiguration()

    candidates: List[Tuple[CycleInfo, DependencyEdge]] = []
    for cycle in cycles:
        check_cancelled(cancel_token, "recommendation generation")
        for edge in cycle.weak_edges or []:
            candidates.append((cycle, edge))

    check_cancelled(cancel_token, "recommendation generation")
    candidates.sort(key=_sort_key)

    suggestions = [
        CycleBreakingSuggestion(
            cycle_id=cycle.cycle_id,
            source=edge.source,
            target=edge.target,
            coupling_score=edge.weight,
            cycle_size=cycle.size,
            rank=rank,
            rationale=build_rationale(cycle.size, edge.weight, config),
        )
        for rank, (cycle, edge) in enumerate(candidates, 1)
    ]

    logger.info("Generated %d cycle-breaking suggestions from %d cycles", len(suggestions), len(cycles))
    return suggestions
