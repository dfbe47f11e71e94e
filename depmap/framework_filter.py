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
"""Remove framework noise edges from a dependency graph.

References to platform assemblies (System.*, Microsoft.*, ...) dominate raw
reference data and hide the project-to-project structure. The filter drops
edges whose target name matches a block pattern unless an allow pattern
matches first. Vertices are always kept.

Pattern syntax: a trailing ``*`` means prefix match, anything else is an exact
match. All matching is case-insensitive.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from depmap.cancellation import CancellationToken, check_cancelled
from depmap.constants import DEFAULT_BLOCK_LIST, ConfigurationError, ValidationError
from depmap.project_graph import DependencyGraph

logger = logging.getLogger(__name__)


def _normalize_patterns(patterns: Optional[Iterable[Optional[str]]], label: str) -> Tuple[str, ...]:
    if patterns is None:
        return ()
    if isinstance(patterns, str):
        raise ConfigurationError(f"{label} must be a list of patterns, not a single string")
    normalized = []
    for pattern in patterns:
        if pattern is None:
            continue
        if not isinstance(pattern, str):
            raise ConfigurationError(f"{label} contains a non-string pattern: {pattern!r}")
        if pattern.strip():
            normalized.append(pattern.strip())
    return tuple(normalized)


@dataclass(frozen=True)
class FilterConfiguration:
    """Block and allow patterns for framework filtering.

    Attributes:
        block_list: Patterns whose matching targets are removed
        allow_list: Patterns that override the block list
    """

    block_list: Sequence[str] = DEFAULT_BLOCK_LIST
    allow_list: Sequence[str] = ()

    def __post_init__(self) -> None:
        # Null and blank entries are dropped so they can never match
        object.__setattr__(self, "block_list", _normalize_patterns(self.block_list, "Block list"))
        object.__setattr__(self, "allow_list", _normalize_patterns(self.allow_list, "Allow list"))


def matches_pattern(name: str, pattern: Optional[str]) -> bool:
    """Check a name against one pattern.

    Examples:
        >>> matches_pattern("System.Core", "System.*")
        True
        >>> matches_pattern("Xylophone", "X")
        False
    """
    if not pattern or name is None:
        return False
    name_lower = name.lower()
    pattern_lower = pattern.lower()
    if pattern_lower.endswith("*"):
        return name_lower.startswith(pattern_lower[:-1])
    return name_lower == pattern_lower


def is_framework_reference(name: str, config: FilterConfiguration) -> bool:
    """True if name is blocked by the configuration. Allow patterns win."""
    if any(matches_pattern(name, pattern) for pattern in config.allow_list):
        return False
    return any(matches_pattern(name, pattern) for pattern in config.block_list)


def filter_graph(graph: DependencyGraph, config: FilterConfiguration, cancel_token: Optional[CancellationToken] = None) -> DependencyGraph:
    """Return a copy of graph without edges pointing at framework references.

    Args:
        graph: Graph to filter (not modified)
        config: Block and allow patterns
        cancel_token: Optional cancellation token

    Returns:
        New graph with every vertex of the input and the retained edges

    Raises:
        ValidationError: If graph or config is None
        OperationCancelledError: If cancelled before completion
    """
    if graph is None:
        raise ValidationError("Graph must not be null")
    if config is None:
        raise ValidationError("Filter configuration must not be null")

    check_cancelled(cancel_token, "framework filtering")

    filtered = graph.copy_vertices()
    total = graph.edge_count
    blocked = 0

    for edge in graph.edges:
        if config.block_list and is_framework_reference(edge.target.name, config):
            blocked += 1
            continue
        filtered.add_edge(edge)

    check_cancelled(cancel_token, "framework filtering")

    retained = total - blocked
    if total > 0:
        logger.info(
            "Framework filter: blocked %d of %d references (%.1f%%), retained %d (%.1f%%)",
            blocked,
            total,
            blocked * 100.0 / total,
            retained,
            retained * 100.0 / total,
        )
    else:
        logger.info("Framework filter: graph has no references to filter")
    return filtered
