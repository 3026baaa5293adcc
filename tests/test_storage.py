import json
from pathlib import Path

from ordertrack.fs_paths import local_storage_path, session_storage_path
from ordertrack.storage import JsonFileStorage, MemoryStorage
from ordertrack.tracker import OrderTracker


def test_memory_storage_basic_ops() -> None:
    storage = MemoryStorage({"a": "1"})
    assert storage.get_item("a") == "1"
    storage.set_item("b", "2")
    storage.remove_item("a")
    storage.remove_item("missing")
    assert storage.keys() == ["b"]
    assert storage.get_item("a") is None


def test_json_file_storage_persists_between_instances(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "local.json"
    JsonFileStorage(path).set_item("state-for-alice", '{"open": []}')
    assert JsonFileStorage(path).get_item("state-for-alice") == '{"open": []}'
    assert json.loads(path.read_text()) == {"state-for-alice": '{"open": []}'}


def test_json_file_storage_missing_or_corrupt_document(tmp_path: Path) -> None:
    path = tmp_path / "local.json"
    storage = JsonFileStorage(path)
    assert storage.get_item("x") is None
    path.write_text("{broken")
    assert storage.get_item("x") is None
    path.write_text("[1, 2]")
    assert storage.keys() == []
    storage.set_item("x", "1")
    assert storage.get_item("x") == "1"


def test_corrupt_document_is_kept_aside_before_writes(tmp_path: Path) -> None:
    path = tmp_path / "local.json"
    broken = '{"state-for-bob": "{\\"open\\": [{\\"id\\": 1}]}", "users": '
    path.write_text(broken)
    storage = JsonFileStorage(path)

    storage.set_item("current-user", "alice")

    assert (tmp_path / "local.corrupt.json").read_text() == broken
    assert json.loads(path.read_text()) == {"current-user": "alice"}


def test_switching_user_does_not_destroy_a_corrupt_document(tmp_path: Path) -> None:
    path = local_storage_path(tmp_path)
    path.write_text('{"state-for-bob": "{}", "users": ["bob"')

    tracker = OrderTracker(JsonFileStorage(path), MemoryStorage())
    tracker.switch_user("alice")

    assert "state-for-bob" in (tmp_path / "local.corrupt.json").read_text()
    assert tracker.users.list_users() == ["alice"]


def test_non_utf8_document_is_kept_aside(tmp_path: Path) -> None:
    path = tmp_path / "local.json"
    path.write_bytes(b"\xff\xfe{}")
    assert JsonFileStorage(path).keys() == []
    assert (tmp_path / "local.corrupt.json").read_bytes() == b"\xff\xfe{}"
    assert not path.exists()


def test_json_file_storage_ignores_non_string_values(tmp_path: Path) -> None:
    path = tmp_path / "local.json"
    path.write_text(json.dumps({"ok": "yes", "bad": 3}))
    assert JsonFileStorage(path).keys() == ["ok"]


def test_json_file_storage_remove_last_key_deletes_document(tmp_path: Path) -> None:
    path = tmp_path / "session.json"
    storage = JsonFileStorage(path)
    storage.set_item("preview-payload-v1", "{}")
    storage.remove_item("preview-payload-v1")
    assert not path.exists()
    assert storage.get_item("preview-payload-v1") is None


def test_json_file_storage_leaves_no_temp_files(tmp_path: Path) -> None:
    storage = JsonFileStorage(tmp_path / "local.json")
    storage.set_item("a", "1")
    storage.set_item("b", "2")
    assert sorted(p.name for p in tmp_path.iterdir()) == ["local.json"]


def test_storage_paths(tmp_path: Path) -> None:
    assert local_storage_path(tmp_path) == tmp_path / "local.json"
    assert session_storage_path(tmp_path, "123") == tmp_path / "sessions" / "123.json"
    assert session_storage_path(tmp_path, "../evil") == tmp_path / "sessions" / ".._evil.json"
    assert session_storage_path(tmp_path, "") == tmp_path / "sessions" / "default.json"
