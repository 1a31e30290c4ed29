"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def config(tmp_path: Path):
    """Runtime config rooted in a per-test temporary directory."""
    from core.config import EtymologConfig

    return replace(EtymologConfig.from_env(), data_root=tmp_path / "data")
