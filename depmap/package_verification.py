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
"""Runtime dependency checks for depmap.

depMapAnalyze.py calls require_package() before it imports any analysis
module, so a missing or outdated networkx/numpy ends the run with an install
hint instead of an ImportError traceback. Run this module with --check-all to
audit the environment.

Minimum versions follow Ubuntu 24.04 LTS unless the code needs newer.
"""

import sys
import logging
import argparse
from typing import Dict, List, Optional, Tuple

# numpy 1.26 is the floor below, and it needs Python 3.9
if sys.version_info < (3, 9):
    print(f"Error: depmap needs Python 3.9 or newer, found {sys.version.split()[0]}", file=sys.stderr)
    sys.exit(1)

# packaging is needed to compare versions at all
try:
    from importlib.metadata import version, PackageNotFoundError
    from packaging.version import parse
except ImportError as e:
    print(f"Error: the 'packaging' library is missing ({e}).", file=sys.stderr)
    print("Install with: pip install 'packaging>=24.0'", file=sys.stderr)
    sys.exit(1)

from depmap.color_utils import print_error, print_success, print_warning
from depmap.constants import EXIT_RUNTIME_ERROR

logger = logging.getLogger(__name__)

PACKAGE_REQUIREMENTS: Dict[str, str] = {
    "networkx": "2.8.8",  # strongly_connected_components, write_graphml, node_link_data
    "numpy": "1.26.4",  # score mean/median/percentile
    "packaging": "24.0",  # version comparison in this module
    "colorama": "0.4.6",  # optional, console colors
}

REQUIRED_PACKAGES: List[str] = ["networkx", "numpy"]
OPTIONAL_PACKAGES: List[str] = ["colorama"]


def _install_hint(package_name: str, min_version: str, upgrade: bool = False) -> str:
    flag = "--upgrade " if upgrade else ""
    return f"pip install {flag}'{package_name}>={min_version}'"


def check_package_version(package_name: str, min_version: Optional[str] = None, raise_on_error: bool = True) -> Tuple[bool, bool, Optional[str]]:
    """Look up the installed version of a distribution and compare it.

    Args:
        package_name: Distribution name on PyPI
        min_version: Required minimum, defaults to PACKAGE_REQUIREMENTS
        raise_on_error: Raise instead of returning a failed result

    Returns:
        (installed, new_enough, installed_version or None)

    Raises:
        ImportError: Missing or too old, when raise_on_error is set
        ValueError: No minimum version given or registered
    """
    min_version = min_version or PACKAGE_REQUIREMENTS.get(package_name)
    if min_version is None:
        raise ValueError(f"No version requirement specified for {package_name}")

    try:
        installed_version = version(package_name)
    except PackageNotFoundError as exc:
        if raise_on_error:
            raise ImportError(f"{package_name} is not installed. Install with: {_install_hint(package_name, min_version)}") from exc
        return False, False, None

    new_enough = parse(installed_version) >= parse(min_version)
    if not new_enough and raise_on_error:
        raise ImportError(
            f"{package_name} {installed_version} is too old, >={min_version} is required. "
            f"Upgrade with: {_install_hint(package_name, min_version, upgrade=True)}"
        )
    return True, new_enough, installed_version


def require_package(package_name: str, context: str = "this tool") -> None:
    """Exit with EXIT_RUNTIME_ERROR unless package_name is usable.

    Args:
        package_name: Distribution name registered in PACKAGE_REQUIREMENTS
        context: What the package is needed for, shown in the message
    """
    if package_name not in PACKAGE_REQUIREMENTS:
        print_error(f"Unknown package '{package_name}' - no version requirement defined")
        sys.exit(EXIT_RUNTIME_ERROR)

    try:
        check_package_version(package_name)
    except ImportError as e:
        print_error(f"{package_name} is required for {context}.")
        print(str(e), file=sys.stderr)
        sys.exit(EXIT_RUNTIME_ERROR)


def _report(package_name: str, optional: bool) -> bool:
    minimum = PACKAGE_REQUIREMENTS[package_name]
    installed, new_enough, installed_version = check_package_version(package_name, minimum, raise_on_error=False)
    if installed and new_enough:
        print_success(f"  {package_name} {installed_version}")
        return True

    if installed:
        message = f"  {package_name} {installed_version} (need >={minimum})"
    else:
        message = f"  {package_name} not installed"
    if optional:
        print_warning(f"{message}, optional", prefix=False)
        return True
    print_error(message, prefix=False)
    return False


def check_all_packages() -> bool:
    """Print the status of every registered package.

    Returns:
        True when all required packages are installed and new enough
    """
    print("depmap Package Verification")
    print("=" * 40)

    results = [_report(name, optional=False) for name in ["packaging"] + REQUIRED_PACKAGES]
    results += [_report(name, optional=True) for name in OPTIONAL_PACKAGES]

    print("=" * 40)
    if all(results):
        print_success("All required packages are available")
        return True

    print_error("Some required packages are missing or too old", prefix=False)
    needed = " ".join(f"'{name}>={PACKAGE_REQUIREMENTS[name]}'" for name in ["packaging"] + REQUIRED_PACKAGES)
    print(f"Install with: pip install {needed}")
    return False


def main() -> int:
    parser = argparse.ArgumentParser(description="Verify depmap runtime dependencies")
    parser.add_argument("--check-all", action="store_true", help="Check every registered package")
    args = parser.parse_args()

    if not args.check_all:
        parser.print_help()
        return 0
    return 0 if check_all_packages() else 1


if __name__ == "__main__":
    sys.exit(main())
