"""Pytest configuration for the `tests/` suite.

CI installs the package in editable mode. When running straight from a
checkout the repository root is added to `sys.path` so `ensure_access`
imports without an install.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]

if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))


def _make_chain(root: Path, depth: int) -> Path:
    """Create root/d/d/... depth levels deep without recursion."""
    path = root
    path.mkdir()
    for _ in range(depth):
        path = path / "d"
        path.mkdir()
    return path


@pytest.fixture
def deep_chain(tmp_path):
    """A chain of nested directories deeper than the interpreter recursion limit."""
    depth = sys.getrecursionlimit() + 100
    root = tmp_path / "r"
    if len(str(root)) + 2 * depth > 4000:
        pytest.skip("chain would exceed PATH_MAX")

    deepest = _make_chain(root, depth)
    yield root, depth

    # shutil.rmtree may recurse per level, remove bottom-up instead
    path = deepest
    while path != root:
        path.rmdir()
        path = path.parent
    root.rmdir()
