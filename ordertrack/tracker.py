from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from .config import OrderTrackConfig, load_config
from .context import AppContext
from .defaults import default_state
from .fs_paths import local_storage_path, session_storage_path
from .persistence import PreviewGuard, UserStateRepository
from .preview import PreviewController
from .storage import JsonFileStorage, KeyValueStorage
from .types import AppState

logger = logging.getLogger(__name__)


class OrderTracker:
    """Wires storage, persistence and preview around one owned context.

    Construction performs the start-up sequence: the current user (if any) is
    loaded, then a cached preview from this session is re-activated.
    """

    def __init__(
        self,
        local: KeyValueStorage,
        session: KeyValueStorage,
        *,
        on_save_blocked: Callable[[AppContext], None] | None = None,
    ) -> None:
        self.users = UserStateRepository(local)
        self.repository = PreviewGuard(self.users, on_blocked=on_save_blocked)
        self.preview = PreviewController(self.repository, session)
        self.ctx = AppContext()
        user = self.users.current_user()
        if user:
            self.ctx.user = user
            self.ctx.data = self.repository.load(user)
        self.preview.activate_cached(self.ctx)

    @classmethod
    def from_config(
        cls,
        cfg: OrderTrackConfig | None = None,
        *,
        on_save_blocked: Callable[[AppContext], None] | None = None,
    ) -> OrderTracker:
        cfg = cfg or load_config()
        data_dir = Path(cfg.data_dir).expanduser()
        logger.debug("data dir %s, session %s", data_dir, cfg.resolved_session_id())
        return cls(
            JsonFileStorage(local_storage_path(data_dir)),
            JsonFileStorage(session_storage_path(data_dir, cfg.resolved_session_id())),
            on_save_blocked=on_save_blocked,
        )

    @property
    def state(self) -> AppState:
        return self.ctx.data

    def switch_user(self, username: str) -> AppState:
        """Select (and register) a user; an active preview ends."""

        self.users.add_user(username)
        name = username.strip()
        self.users.set_current_user(name)
        self.ctx.user = name
        if self.ctx.preview or self.preview.is_previewing():
            return self.preview.restore(self.ctx)
        self.ctx.data = self.repository.load(name)
        return self.ctx.data

    def remove_user(self, username: str) -> list[str]:
        users = self.users.remove_user(username)
        if self.ctx.user == username:
            self.ctx.user = None
            if not self.ctx.preview:
                self.ctx.data = default_state()
        return users

    def save(self) -> bool:
        return self.repository.save(self.ctx)

    def enter_preview(self, key: str) -> AppState:
        return self.preview.enter(self.ctx, key)

    def restore(self) -> AppState:
        return self.preview.restore(self.ctx)

    def share_key(self) -> str:
        return self.preview.share_key(self.ctx)

    def replace_state(self, state: AppState) -> bool:
        """Overwrite the current user's state, e.g. after an import."""

        if self.ctx.preview:
            raise ValueError("cannot import while preview mode is active")
        if not self.ctx.user:
            raise ValueError("no user selected")
        self.ctx.data = state
        return self.save()
