"""Preview mode: show someone else's shared state without persisting it.

Normal -> Previewing happens by submitting a share key. The decoded payload is
normalized, becomes the in-memory state and is cached in session storage so
later commands in the same session keep showing it. Previewing -> Normal is an
explicit restore, which drops the cache and reloads the user's own state.
"""

from __future__ import annotations

import json
import logging

from .codec import decode_key, encode_key
from .context import AppContext
from .defaults import default_state
from .normalize import normalize_data
from .persistence import StateRepository
from .storage import KeyValueStorage
from .types import AppState

logger = logging.getLogger(__name__)

PREVIEW_STORAGE_KEY = "preview-payload-v1"


class PreviewController:
    def __init__(self, repository: StateRepository, session: KeyValueStorage) -> None:
        self.repository = repository
        self.session = session

    def is_previewing(self) -> bool:
        return self.session.get_item(PREVIEW_STORAGE_KEY) is not None

    def enter(self, ctx: AppContext, key: str) -> AppState:
        # decode first: an invalid key must leave ctx and the cache untouched
        payload = normalize_data(decode_key(key))
        self.session.set_item(PREVIEW_STORAGE_KEY, json.dumps(payload, ensure_ascii=False))
        ctx.data = payload
        ctx.preview = True
        logger.info("preview mode enabled")
        return payload

    def restore(self, ctx: AppContext) -> AppState:
        self.session.remove_item(PREVIEW_STORAGE_KEY)
        ctx.preview = False
        ctx.data = self.repository.load(ctx.user) if ctx.user else default_state()
        logger.info("preview mode disabled")
        return ctx.data

    def activate_cached(self, ctx: AppContext) -> bool:
        raw = self.session.get_item(PREVIEW_STORAGE_KEY)
        if raw is None:
            return False
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("cached preview payload is corrupt, dropping it", exc_info=exc)
            self.session.remove_item(PREVIEW_STORAGE_KEY)
            return False
        if not isinstance(payload, dict):
            logger.warning("cached preview payload is not an object, dropping it")
            self.session.remove_item(PREVIEW_STORAGE_KEY)
            return False
        ctx.data = normalize_data(payload)
        ctx.preview = True
        return True

    @staticmethod
    def share_key(ctx: AppContext) -> str:
        return encode_key(ctx.data)
