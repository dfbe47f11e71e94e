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
"""Cooperative cancellation for long-running analysis steps.

Cycle detection and recommendation ranking can run over tens of thousands of
projects when several solutions are merged. Callers hand a CancellationToken
to those steps, which check it at safe points and raise
OperationCancelledError instead of returning partial results.
"""

import threading
import time
import logging
from typing import Optional

from depmap.constants import OperationCancelledError, ValidationError

logger = logging.getLogger(__name__)


class CancellationToken:
    """Thread-safe cancellation flag with an optional deadline.

    Example:
        token = CancellationToken(timeout=30.0)
        cycles = detect_cycles(graph, token)
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        if timeout is not None and timeout < 0:
            raise ValidationError(f"Cancellation timeout must be non-negative, got {timeout}")
        self._event = threading.Event()
        self._deadline = time.monotonic() + timeout if timeout is not None else None

    def cancel(self) -> None:
        """Request cancellation. Safe to call from any thread."""
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._event.set()
            return True
        return False

    def raise_if_cancelled(self, operation: str = "operation") -> None:
        """Raise OperationCancelledError if cancellation was requested.

        Args:
            operation: Name of the step being checked, used in the error message

        Raises:
            OperationCancelledError: If the token is cancelled or its deadline passed
        """
        if self.is_cancelled:
            logger.info("Cancellation observed during %s", operation)
            raise OperationCancelledError(f"{operation} was cancelled")


def check_cancelled(token: Optional[CancellationToken], operation: str) -> None:
    """Check an optional token; a missing token never cancels."""
    if token is not None:
        token.raise_if_cancelled(operation)
