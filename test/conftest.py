#!/usr/bin/env python3
#****************************************************************************************************************************************************
#* BSD 3-Clause License
#*
#* Copyright (c) 2025, Mana Battery
#* All rights reserved.
#*
#* Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
#*
#* 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
#* 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
#*    documentation and/or other materials provided with the distribution.
#* 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
#*    software without specific prior written permission.
#*
#* THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
#* THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
#* CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
#* PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
#* LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
#* EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#****************************************************************************************************************************************************
"""Pytest configuration and shared base fixtures for depmap tests.

This module provides base fixtures used across all tests. Specialized fixtures
are organized in separate conftest files:
- conftest_graph.py: Project graph and dataset fixtures

Fixture Scopes:
- function: Default, recreated for each test
- module: Shared across tests in one file, use for immutable data
"""

import sys
import json
import tempfile
import shutil
from pathlib import Path
from typing import Any, Callable, Dict, Generator

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Import specialized fixture modules
pytest_plugins = [
    'test.conftest_graph',
]


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for tests.

    Scope: function (default)
    Use for: File I/O operations that need isolation
    """
    tmpdir = tempfile.mkdtemp(prefix="depmap_test_")
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def write_json(temp_dir: str) -> Callable[[str, Any], str]:
    """Return a helper that writes a JSON document into temp_dir.

    Scope: function
    Dependencies: temp_dir
    Use for: Dataset and configuration loading tests
    """
    def _write(filename: str, data: Any) -> str:
        path = Path(temp_dir) / filename
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        return str(path)

    return _write


@pytest.fixture
def sample_dataset_dict() -> Dict[str, Any]:
    """Small two-solution dataset with one cycle and framework references.

    Layout:
        Billing -> Core (12 calls), Core -> Billing (3 calls)   cycle
        Billing -> Shared (other solution)
        Reporting -> Core, Reporting -> System.Data (framework)
        Reporting -> Ghost (unknown project)
    """
    return {
        "name": "Contoso",
        "coupling_available": True,
        "projects": [
            {
                "name": "Contoso.Billing",
                "path": "src/Billing/Contoso.Billing.csproj",
                "platform": "net48",
                "collection": "Contoso",
                "complexity": 12.0,
                "external_endpoints": 4,
                "references": [
                    {"target": "Contoso.Core", "kind": "project", "coupling": 12},
                    {"target": "src/Shared/Fabrikam.Shared.csproj", "kind": "project", "coupling": 2},
                ],
            },
            {
                "name": "Contoso.Core",
                "path": "src/Core/Contoso.Core.csproj",
                "platform": "netstandard2.0",
                "collection": "Contoso",
                "complexity": 5.0,
                "external_endpoints": 0,
                "references": [
                    {"target": "Contoso.Billing", "kind": "project", "coupling": 3},
                    {"target": "mscorlib", "kind": "binary"},
                ],
            },
            {
                "name": "Contoso.Reporting",
                "path": "src/Reporting/Contoso.Reporting.csproj",
                "platform": "net8.0",
                "collection": "Contoso",
                "complexity": 30.0,
                "external_endpoints": 20,
                "references": [
                    {"target": "Contoso.Core", "kind": "project", "coupling": 7},
                    {"target": "System.Data", "kind": "binary"},
                    {"target": "Contoso.Ghost", "kind": "project"},
                ],
            },
            {
                "name": "Fabrikam.Shared",
                "path": "src/Shared/Fabrikam.Shared.csproj",
                "platform": "v4.7.2",
                "collection": "Fabrikam",
                "references": [],
            },
        ],
    }
