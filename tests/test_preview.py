import json

import pytest

from ordertrack import orders
from ordertrack.codec import ShareKeyError, encode_key
from ordertrack.context import AppContext
from ordertrack.normalize import normalize_data
from ordertrack.preview import PREVIEW_STORAGE_KEY
from ordertrack.storage import MemoryStorage
from ordertrack.tracker import OrderTracker

SHARED = {
    "open": [{"id": 42, "name": "Shared order", "category": "Other"}],
    "categories": [{"name": "Other", "tasks": ["CALL"]}],
    "theme": "light",
}


def _tracker_with_user(
    local: MemoryStorage | None = None, session: MemoryStorage | None = None
) -> OrderTracker:
    tracker = OrderTracker(local or MemoryStorage(), session or MemoryStorage())
    tracker.switch_user("alice")
    state = tracker.state
    orders.add_order(state, orders.make_order(state, name="Mine"))
    assert tracker.save()
    return tracker


def test_enter_preview_replaces_state_and_caches_payload() -> None:
    session = MemoryStorage()
    tracker = _tracker_with_user(session=session)

    tracker.enter_preview(encode_key(SHARED))

    assert tracker.ctx.preview is True
    assert tracker.ctx.display_user == "PREVIEW MODE"
    assert [o["name"] for o in tracker.state["open"]] == ["Shared order"]
    assert tracker.state["open"][0]["tasks"] == [{"name": "CALL", "done": False}]
    assert json.loads(session.get_item(PREVIEW_STORAGE_KEY)) == normalize_data(SHARED)


def test_save_in_preview_does_not_touch_persisted_slot() -> None:
    local = MemoryStorage()
    tracker = _tracker_with_user(local=local)
    before = local.get_item("state-for-alice")

    tracker.enter_preview(encode_key(SHARED))
    orders.add_order(tracker.state, orders.make_order(tracker.state, name="Sneaky"))
    assert tracker.save() is False

    assert local.get_item("state-for-alice") == before


def test_restore_returns_last_persisted_state() -> None:
    tracker = _tracker_with_user()
    persisted = tracker.users.load("alice")

    tracker.enter_preview(encode_key(SHARED))
    tracker.state["open"].clear()
    restored = tracker.restore()

    assert tracker.ctx.preview is False
    assert restored == persisted
    assert tracker.state == persisted
    assert tracker.preview.is_previewing() is False


def test_invalid_key_leaves_state_and_cache_untouched() -> None:
    session = MemoryStorage()
    tracker = _tracker_with_user(session=session)
    snapshot = json.dumps(tracker.state)

    with pytest.raises(ShareKeyError):
        tracker.enter_preview("this is not a key")

    assert tracker.ctx.preview is False
    assert json.dumps(tracker.state) == snapshot
    assert session.get_item(PREVIEW_STORAGE_KEY) is None


def test_cached_preview_reactivates_on_start() -> None:
    local, session = MemoryStorage(), MemoryStorage()
    _tracker_with_user(local, session).enter_preview(encode_key(SHARED))

    reopened = OrderTracker(local, session)

    assert reopened.ctx.preview is True
    assert reopened.ctx.user == "alice"
    assert reopened.state == normalize_data(SHARED)


def test_new_session_starts_in_normal_mode() -> None:
    local = MemoryStorage()
    _tracker_with_user(local, MemoryStorage()).enter_preview(encode_key(SHARED))

    other = OrderTracker(local, MemoryStorage())

    assert other.ctx.preview is False
    assert [o["name"] for o in other.state["open"]] == ["Mine"]


@pytest.mark.parametrize("cached", ["{corrupt", "[1, 2, 3]", '"text"'])
def test_malformed_cache_is_dropped(cached: str) -> None:
    local = MemoryStorage()
    _tracker_with_user(local)
    session = MemoryStorage({PREVIEW_STORAGE_KEY: cached})

    tracker = OrderTracker(local, session)

    assert tracker.ctx.preview is False
    assert session.get_item(PREVIEW_STORAGE_KEY) is None
    assert [o["name"] for o in tracker.state["open"]] == ["Mine"]


def test_save_blocked_callback_fires() -> None:
    calls: list[AppContext] = []
    tracker = OrderTracker(MemoryStorage(), MemoryStorage(), on_save_blocked=calls.append)
    tracker.switch_user("alice")
    tracker.enter_preview(encode_key(SHARED))
    tracker.save()
    assert calls == [tracker.ctx]


def test_switch_user_ends_preview() -> None:
    session = MemoryStorage()
    tracker = _tracker_with_user(session=session)
    tracker.enter_preview(encode_key(SHARED))

    tracker.switch_user("bob")

    assert tracker.ctx.preview is False
    assert tracker.ctx.user == "bob"
    assert tracker.state["open"] == []
    assert session.get_item(PREVIEW_STORAGE_KEY) is None


def test_restore_without_user_gives_defaults() -> None:
    tracker = OrderTracker(MemoryStorage(), MemoryStorage())
    tracker.enter_preview(encode_key(SHARED))
    state = tracker.restore()
    assert state["open"] == []
    assert tracker.ctx.preview is False


def test_share_key_reflects_preview_data() -> None:
    tracker = _tracker_with_user()
    tracker.enter_preview(encode_key(SHARED))
    other = OrderTracker(MemoryStorage(), MemoryStorage())
    other.enter_preview(tracker.share_key())
    assert other.state == tracker.state


def test_replace_state_refused_in_preview() -> None:
    tracker = _tracker_with_user()
    tracker.enter_preview(encode_key(SHARED))
    with pytest.raises(ValueError, match="preview"):
        tracker.replace_state(normalize_data({}))


def test_replace_state_requires_user() -> None:
    tracker = OrderTracker(MemoryStorage(), MemoryStorage())
    with pytest.raises(ValueError, match="no user"):
        tracker.replace_state(normalize_data({}))
