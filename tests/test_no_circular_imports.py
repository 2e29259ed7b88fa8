"""Tests to ensure no circular import dependencies exist in the codebase."""

import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent

MODULES = [
    "routestack",
    "routestack.exceptions",
    "routestack.protocols",
    "routestack.routing",
    "routestack.routing.route",
    "routestack.routing.duplicates",
    "routestack.routing.collection",
    "routestack.routing.group",
    "routestack.routing.collector",
    "routestack.middleware",
    "routestack.middleware.stack",
    "routestack.middleware.prefix",
    "routestack.middleware.pipeline",
    "routestack.resolvers",
    "routestack.requests",
    "routestack.config",
]


@pytest.mark.parametrize("module", MODULES)
def test_module_imports_in_fresh_interpreter(module):
    """Each module must be importable first, before anything else in the package."""
    result = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
    )

    assert result.returncode == 0, result.stderr
