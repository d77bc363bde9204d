"""Pytest configuration for test isolation.

The saved-dataset store defaults to ``./.tencents`` under the working
directory. Tests running in the same tree would otherwise read each other's
saved files, so every test gets its own store root via ``TENCENTS_STORE_DIR``.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(autouse=True)
def _isolate_store_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    store_root = tmp_path / "store"
    store_root.mkdir(parents=True, exist_ok=True)
    monkeypatch.setenv("TENCENTS_STORE_DIR", os.fspath(store_root))
    return store_root


@pytest.fixture
def legacy_csv() -> Path:
    return DATA_DIR / "legacy_export.csv"


@pytest.fixture
def destination_csv() -> Path:
    return DATA_DIR / "destination_export.csv"
