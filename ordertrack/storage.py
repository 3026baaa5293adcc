from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from .fs_paths import ensure_parent

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """String key/value slots, the shape of browser local/session storage."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


class MemoryStorage:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class JsonFileStorage:
    """All slots live in one JSON object on disk.

    The document is re-read on every access so separate CLI invocations see
    each other's writes. Writes go through a temp file and ``os.replace``.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()

    def _read(self) -> dict[str, str]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except UnicodeDecodeError as exc:
            backup = self._set_aside()
            logger.warning(
                "storage document %s is not utf-8 text, moved to %s", self.path, backup, exc_info=exc
            )
            return {}
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            backup = self._set_aside()
            logger.warning(
                "storage document %s is not valid json, moved to %s", self.path, backup, exc_info=exc
            )
            return {}
        if not isinstance(data, dict):
            backup = self._set_aside()
            logger.warning("storage document %s is not an object, moved to %s", self.path, backup)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _set_aside(self) -> Path:
        # keep the unreadable document so later writes cannot destroy its other slots
        backup = self.path.with_suffix(".corrupt.json")
        os.replace(self.path, backup)
        return backup

    def _write(self, items: dict[str, str]) -> None:
        target = ensure_parent(self.path)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(items, handle, ensure_ascii=False, indent=2)
                handle.write("\n")
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_item(self, key: str) -> str | None:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = str(value)
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if key not in items:
            return
        del items[key]
        if items:
            self._write(items)
        else:
            self.path.unlink(missing_ok=True)

    def keys(self) -> list[str]:
        return list(self._read())
