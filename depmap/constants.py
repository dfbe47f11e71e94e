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
"""Shared constants for depmap tools.

This module provides centralized constants used across the analysis pipeline
to ensure consistency and make it easy to adjust thresholds and defaults.
"""

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_INVALID_ARGS = 1
EXIT_RUNTIME_ERROR = 2
EXIT_CANCELLED = 3
EXIT_KEYBOARD_INTERRUPT = 130

# =============================================================================
# Coupling Classification
# =============================================================================

# Coupling bands (method-call counts across a reference)
WEAK_COUPLING_MAX = 5  # 1-5 calls (and 0) classify as weak
MEDIUM_COUPLING_MAX = 20  # 6-20 calls classify as medium, above is strong
DEFAULT_COUPLING_WEIGHT = 1  # Used when semantic coupling analysis is unavailable

# =============================================================================
# Extraction Difficulty
# =============================================================================

EASY_SCORE_MAX = 33.0  # Scores at or below this are easy to extract
MEDIUM_SCORE_MAX = 66.0  # Scores above this are hard to extract
MIN_SCORE = 0.0
MAX_SCORE = 100.0
NEUTRAL_METRIC_SCORE = 50.0  # Used when a metric input is unknown
WEIGHT_SUM_TOLERANCE = 0.01
DEFAULT_TOP_CANDIDATES = 10

# =============================================================================
# Cycle-Breaking Recommendations
# =============================================================================

CRITICAL_CYCLE_THRESHOLD = 10  # Cycles this large are flagged as critical
LARGE_CYCLE_THRESHOLD = 6  # Cycles this large are flagged as large
MEDIUM_CYCLE_THRESHOLD = 4  # Smaller cycles are described as small
DEFAULT_MAX_BREAK_POINTS = 10  # Suggested break points highlighted in visualizations

# =============================================================================
# Framework Filtering
# =============================================================================

DEFAULT_BLOCK_LIST = ("Microsoft.*", "System.*", "mscorlib", "netstandard")

# =============================================================================
# External Tools
# =============================================================================

GRAPHVIZ_DETECTION_TIMEOUT = 5  # Seconds allowed for `dot -V`
GRAPHVIZ_RENDER_TIMEOUT = 30  # Seconds allowed for a single render

# =============================================================================
# Output Files
# =============================================================================

DOT_FILE_SUFFIX = "-dependencies.dot"
EXTRACTION_SCORES_SUFFIX = "-extraction-scores.csv"
CYCLE_ANALYSIS_SUFFIX = "-cycle-analysis.csv"
DEPENDENCY_MATRIX_SUFFIX = "-dependency-matrix.csv"
TEXT_REPORT_SUFFIX = "-analysis-report.txt"
SUPPORTED_GRAPH_FORMATS = [".graphml", ".json"]

REPORT_WIDTH = 80
MAX_RECOMMENDATIONS_DISPLAY = 10

# =============================================================================
# Exception Classes
# =============================================================================


class DepMapError(Exception):
    """Base exception for all depmap errors.

    All depmap exceptions carry an exit_code attribute that indicates
    what exit code the program should use when this error is caught at the
    main entry point.
    """

    def __init__(self, message: str, exit_code: int = EXIT_RUNTIME_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


# Validation errors (EXIT_INVALID_ARGS)
class ValidationError(DepMapError):
    """Raised when input validation fails (missing arguments, bad values, etc)."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)


class ConfigurationError(ValidationError):
    """Raised when analysis configuration is malformed (weights, patterns, thresholds)."""


class DatasetError(ValidationError):
    """Raised when the project dataset cannot be read or is malformed."""


# Cancellation (EXIT_CANCELLED)
class OperationCancelledError(DepMapError):
    """Raised when a long-running operation observes a cancellation request."""

    def __init__(self, message: str = "Operation was cancelled"):
        super().__init__(message, EXIT_CANCELLED)


# Analysis/processing errors (EXIT_RUNTIME_ERROR)
class AnalysisError(DepMapError):
    """Raised when analysis or processing operations fail."""


class GraphIntegrityError(AnalysisError):
    """Raised when an edge refers to a vertex that is not part of the graph."""


class InconsistentDataError(AnalysisError):
    """Raised when counts derived from the same graph do not reconcile."""


class DotGenerationError(AnalysisError):
    """Raised when a DOT file cannot be written."""


class ExportError(AnalysisError):
    """Raised when a CSV, report or graph export cannot be written."""


# External tool errors
class ExternalToolError(DepMapError):
    """Raised when external tools (Graphviz) fail."""

    def __init__(self, message: str, exit_code: int = EXIT_RUNTIME_ERROR):  # pylint: disable=useless-parent-delegation
        super().__init__(message, exit_code)


class GraphvizNotFoundError(ExternalToolError):
    """Raised when the Graphviz `dot` executable is not on PATH."""


class GraphvizRenderError(ExternalToolError):
    """Raised when `dot` exits with a failure status."""


class GraphvizTimeoutError(ExternalToolError):
    """Raised when `dot` does not finish within the allowed time."""
