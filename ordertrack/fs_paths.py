from __future__ import annotations

from pathlib import Path

LOCAL_DOCUMENT = "local.json"
SESSIONS_DIR = "sessions"


def ensure_parent(path: str | Path) -> Path:
    resolved = Path(path).expanduser()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    return resolved


def local_storage_path(data_dir: Path | str) -> Path:
    return Path(data_dir).expanduser() / LOCAL_DOCUMENT


def session_storage_path(data_dir: Path | str, session_id: str) -> Path:
    """One document per terminal session; the id is reduced to a safe file name."""
    safe = "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in session_id) or "default"
    return Path(data_dir).expanduser() / SESSIONS_DIR / f"{safe}.json"
