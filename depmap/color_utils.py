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
"""Terminal coloring for analysis summaries, built on colorama.

Difficulty bands and coupling strengths each map to one color so the
console summary reads the same way as the DOT heat map.
"""

import sys
import logging
from typing import Optional, TextIO

logger = logging.getLogger(__name__)

try:
    from colorama import Fore, Style, init

    # Keep escape codes when output is piped, e.g. into `less -R`
    init(autoreset=False, strip=False)
    COLORAMA_AVAILABLE = True
except ImportError:
    COLORAMA_AVAILABLE = False
    logger.debug("colorama not installed, summaries will be uncolored")


if COLORAMA_AVAILABLE:

    class Colors:
        """ANSI codes used by the console summary."""

        RED = Fore.RED
        GREEN = Fore.GREEN
        YELLOW = Fore.YELLOW
        CYAN = Fore.CYAN
        WHITE = Fore.WHITE
        RESET = Style.RESET_ALL
        BRIGHT = Style.BRIGHT

else:

    class ColorsNoColor:
        """Empty codes when colorama is missing."""

        RED = ""
        GREEN = ""
        YELLOW = ""
        CYAN = ""
        WHITE = ""
        RESET = ""
        BRIGHT = ""

    Colors = ColorsNoColor  # type: ignore[misc,assignment]


_DIFFICULTY_COLORS = {"Easy": "GREEN", "Medium": "YELLOW", "Hard": "RED"}
_COUPLING_COLORS = {"weak": "GREEN", "medium": "YELLOW", "strong": "RED"}


def colored(text: str, color: str = "", style: str = "") -> str:
    """Wrap text in color codes; plain text when no color applies."""
    if not COLORAMA_AVAILABLE or not color:
        return text
    return f"{style}{color}{text}{Colors.RESET}"


def difficulty_color(difficulty: str) -> str:
    """Console color for an extraction difficulty label (Easy/Medium/Hard)."""
    return str(getattr(Colors, _DIFFICULTY_COLORS.get(difficulty, "WHITE")))


def coupling_color(strength: str) -> str:
    """Console color for a coupling strength (weak/medium/strong)."""
    return str(getattr(Colors, _COUPLING_COLORS.get(strength, "WHITE")))


def print_colored(text: str, color: str = "", style: str = "", file: Optional[TextIO] = None) -> None:
    print(colored(text, color, style), file=file or sys.stdout)


def print_success(text: str, file: Optional[TextIO] = None, prefix: bool = False) -> None:
    """Green message on stdout, optionally prefixed with "Success: "."""
    print_colored(f"Success: {text}" if prefix else text, Colors.GREEN, file=file)


def print_error(text: str, file: Optional[TextIO] = None, prefix: bool = True) -> None:
    """Red message on stderr, prefixed with "Error: " unless prefix is False."""
    print_colored(f"Error: {text}" if prefix else text, Colors.RED, file=file or sys.stderr)


def print_warning(text: str, file: Optional[TextIO] = None, prefix: bool = True) -> None:
    """Yellow message on stderr, prefixed with "Warning: " unless prefix is False."""
    print_colored(f"Warning: {text}" if prefix else text, Colors.YELLOW, file=file or sys.stderr)


def print_info(text: str, file: Optional[TextIO] = None) -> None:
    print_colored(text, Colors.CYAN, file=file)


def print_header(text: str, width: int = 80, file: Optional[TextIO] = None) -> None:
    """Print text between two bright separator lines."""
    separator = "=" * width
    for line in (f"\n{separator}", text, separator):
        print_colored(line, Colors.WHITE, Colors.BRIGHT, file=file)


def is_color_supported() -> bool:
    return COLORAMA_AVAILABLE
