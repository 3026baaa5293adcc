from __future__ import annotations

import json
import logging
from collections.abc import Callable
from typing import Protocol

from .context import AppContext
from .defaults import default_state
from .normalize import normalize_data
from .storage import KeyValueStorage
from .types import AppState

logger = logging.getLogger(__name__)

STATE_KEY_PREFIX = "state-for-"
USERS_KEY = "users"
CURRENT_USER_KEY = "current-user"


def state_key(username: str) -> str:
    return f"{STATE_KEY_PREFIX}{username}"


class StateRepository(Protocol):
    def load(self, username: str) -> AppState: ...

    def save(self, ctx: AppContext) -> bool: ...


class UserStateRepository:
    """Per-user state slots plus the known-users and current-user slots."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    def load(self, username: str) -> AppState:
        raw = self.storage.get_item(state_key(username))
        if raw is None:
            state = default_state()
            self._write(username, state)
            return state
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("stored state for %s is corrupt, using defaults", username, exc_info=exc)
            return default_state()
        return normalize_data(data)

    def save(self, ctx: AppContext) -> bool:
        if not ctx.user:
            return False
        self._write(ctx.user, ctx.data)
        return True

    def _write(self, username: str, state: AppState) -> None:
        self.storage.set_item(state_key(username), json.dumps(state, ensure_ascii=False))

    def list_users(self) -> list[str]:
        raw = self.storage.get_item(USERS_KEY)
        if not raw:
            return []
        try:
            users = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("users list is corrupt, ignoring", exc_info=exc)
            return []
        if not isinstance(users, list):
            return []
        return [u for u in users if isinstance(u, str) and u]

    def add_user(self, username: str) -> list[str]:
        name = username.strip()
        if not name:
            raise ValueError("username must not be empty")
        users = self.list_users()
        if name not in users:
            users.append(name)
            self.storage.set_item(USERS_KEY, json.dumps(users, ensure_ascii=False))
        return users

    def remove_user(self, username: str) -> list[str]:
        users = [u for u in self.list_users() if u != username]
        self.storage.set_item(USERS_KEY, json.dumps(users, ensure_ascii=False))
        self.storage.remove_item(state_key(username))
        if self.current_user() == username:
            self.storage.remove_item(CURRENT_USER_KEY)
        return users

    def current_user(self) -> str | None:
        return self.storage.get_item(CURRENT_USER_KEY) or None

    def set_current_user(self, username: str) -> None:
        self.storage.set_item(CURRENT_USER_KEY, username)


class PreviewGuard:
    """Wraps a repository and refuses to write while a preview is shown."""

    def __init__(
        self,
        inner: StateRepository,
        on_blocked: Callable[[AppContext], None] | None = None,
    ) -> None:
        self.inner = inner
        self.on_blocked = on_blocked

    def load(self, username: str) -> AppState:
        return self.inner.load(username)

    def save(self, ctx: AppContext) -> bool:
        if ctx.preview:
            logger.info("save skipped: preview mode is active")
            if self.on_blocked is not None:
                self.on_blocked(ctx)
            return False
        return self.inner.save(ctx)
