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
"""Render DOT files with the Graphviz `dot` executable."""

import os
import shutil
import logging
import subprocess
from enum import Enum
from typing import Optional

from depmap.constants import (
    GRAPHVIZ_DETECTION_TIMEOUT,
    GRAPHVIZ_RENDER_TIMEOUT,
    GraphvizNotFoundError,
    GraphvizRenderError,
    GraphvizTimeoutError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class OutputFormat(Enum):
    PNG = "png"
    SVG = "svg"
    PDF = "pdf"


def find_graphviz(timeout: int = GRAPHVIZ_DETECTION_TIMEOUT) -> Optional[str]:
    """Return the Graphviz version line, or None if `dot` is unavailable.

    `dot -V` writes its version to stderr.
    """
    if shutil.which("dot") is None:
        logger.debug("Graphviz 'dot' not found on PATH")
        return None
    try:
        result = subprocess.run(["dot", "-V"], capture_output=True, text=True, check=True, timeout=timeout)
    except (subprocess.CalledProcessError, FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("Graphviz detection failed: %s", e)
        return None
    output = (result.stderr or result.stdout).strip()
    return output.splitlines()[0] if output else "dot"


def is_graphviz_installed() -> bool:
    return find_graphviz() is not None


def render_dot_file(
    dot_path: str,
    output_format: OutputFormat = OutputFormat.PNG,
    output_path: Optional[str] = None,
    timeout: int = GRAPHVIZ_RENDER_TIMEOUT,
) -> str:
    """Render a DOT file to an image.

    Args:
        dot_path: DOT file to render
        output_format: Image format
        output_path: Destination, defaults to dot_path with the format extension
        timeout: Seconds before the render is abandoned

    Returns:
        Path of the rendered image

    Raises:
        ValidationError: If dot_path does not exist
        GraphvizNotFoundError: If `dot` is not installed
        GraphvizTimeoutError: If rendering takes longer than timeout
        GraphvizRenderError: If `dot` fails
    """
    if not os.path.isfile(dot_path):
        raise ValidationError(f"DOT file not found: {dot_path}")
    if output_path is None:
        output_path = os.path.splitext(dot_path)[0] + "." + output_format.value

    cmd = ["dot", f"-T{output_format.value}", dot_path, "-o", output_path]
    logger.debug("Running: %s", " ".join(cmd))
    try:
        subprocess.run(cmd, capture_output=True, text=True, check=True, timeout=timeout)
    except FileNotFoundError as e:
        raise GraphvizNotFoundError("Graphviz 'dot' executable not found. Install Graphviz (e.g., apt-get install graphviz)") from e
    except subprocess.TimeoutExpired as e:
        raise GraphvizTimeoutError(f"Graphviz rendering of {dot_path} exceeded {timeout} seconds") from e
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"exit code {e.returncode}"
        raise GraphvizRenderError(f"Graphviz failed to render {dot_path}: {detail}") from e

    logger.info("Rendered %s to %s", dot_path, output_path)
    return output_path
