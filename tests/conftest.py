# tests/conftest.py
"""Shared fixtures for nicuvitals tests."""
from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest


def pytest_configure() -> None:
    # Ensure nicuvitals package is importable when running tests from repo root.
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


@pytest.fixture
def vitals_df() -> pd.DataFrame:
    """Small deterministic vitals table: 100 rows at 1 Hz."""
    rng = np.random.default_rng(42)
    n = 100
    t = np.arange(n, dtype=float)
    return pd.DataFrame({
        "TIME": t,
        "HR": 150.0 + 10.0 * np.sin(t / 10.0) + rng.normal(0, 2, n),
        "SPO2.PCT": np.clip(93.0 + rng.normal(0, 3, n), 0, 100),
    })


@pytest.fixture
def vitals_feather(tmp_path: Path, vitals_df: pd.DataFrame) -> Path:
    """vitals_df written as a feather file."""
    path = tmp_path / "vitals.feather"
    vitals_df.to_feather(path)
    return path
