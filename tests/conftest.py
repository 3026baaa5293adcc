from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_ordertrack_dirs(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ORDERTRACK_CONFIG", str(tmp_path / "config.json"))
    monkeypatch.setenv("ORDERTRACK_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("ORDERTRACK_SESSION", "test-session")
    for name in ("ORDERTRACK_LOG_LEVEL", "ORDERTRACK_WARN_ON_PREVIEW_SAVE", "ORDERTRACK_DEFAULT_CATEGORY"):
        monkeypatch.delenv(name, raising=False)
