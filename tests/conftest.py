"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path


def pytest_sessionstart() -> None:
    """Put src packages and the tests helpers on sys.path."""
    project_root = Path(__file__).resolve().parent.parent
    for import_root in (project_root / "src", project_root):
        if str(import_root) not in sys.path:
            sys.path.insert(0, str(import_root))
