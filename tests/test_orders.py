import pytest

from ordertrack import orders
from ordertrack.defaults import DEFAULT_TASKS, default_state
from ordertrack.normalize import normalize_data


@pytest.fixture
def state():
    return normalize_data(
        {"categories": [{"name": "Default", "tasks": ["A", "B"]}, {"name": "Rush", "tasks": ["GO"]}]}
    )


def _new(state, **kwargs):
    kwargs.setdefault("name", "Order")
    return orders.add_order(state, orders.make_order(state, **kwargs))


def test_make_order_stamps_category_template(state) -> None:
    order = orders.make_order(state, name="X", val310="1", val42="2", category="Rush")
    assert order["category"] == "Rush"
    assert order["tasks"] == [{"name": "GO", "done": False}]
    assert order["val23"] == ""
    assert order["notes"] == [] and order["files"] == []


def test_make_order_unknown_category_uses_first(state) -> None:
    order = orders.make_order(state, name="X", category="Nope")
    assert order["category"] == "Default"
    assert [t["name"] for t in order["tasks"]] == ["A", "B"]


def test_make_order_restores_missing_categories() -> None:
    state = default_state()
    state["categories"] = []
    order = orders.make_order(state, name="X")
    assert [t["name"] for t in order["tasks"]] == list(DEFAULT_TASKS)
    assert state["categories"]


def test_add_order_keeps_ids_unique(state) -> None:
    first = orders.make_order(state, name="a")
    second = orders.make_order(state, name="b")
    second["id"] = first["id"]
    orders.add_order(state, first)
    orders.add_order(state, second)
    assert first["id"] != second["id"]


def test_toggle_task(state) -> None:
    order = _new(state)
    task = orders.toggle_task(state, order["id"], 1)
    assert task == {"name": "B", "done": True}
    assert orders.progress(order) == (1, 2)
    orders.toggle_task(state, order["id"], 1)
    assert orders.progress(order) == (0, 2)


def test_toggle_task_out_of_range(state) -> None:
    order = _new(state)
    with pytest.raises(ValueError, match="no task #3"):
        orders.toggle_task(state, order["id"], 2)


def test_unknown_order_raises(state) -> None:
    with pytest.raises(ValueError, match="not found"):
        orders.get_order(state, 123)


def test_finish_and_reopen_move_between_collections(state) -> None:
    order = _new(state)
    orders.finish_order(state, order["id"])
    assert state["open"] == [] and state["finished"] == [order]
    with pytest.raises(ValueError, match="already finished"):
        orders.finish_order(state, order["id"])
    orders.reopen_order(state, order["id"])
    assert state["open"] == [order] and state["finished"] == []


def test_remove_order(state) -> None:
    order = _new(state)
    orders.remove_order(state, order["id"])
    assert orders.counts(state) == {"open": 0, "finished": 0}


def test_notes_and_files(state) -> None:
    order = _new(state)
    note = orders.add_note(state, order["id"], "called supplier")
    assert note.endswith("] called supplier") and note.startswith("[")
    assert orders.add_note(state, order["id"], "plain", stamped=False) == "plain"
    with pytest.raises(ValueError):
        orders.add_note(state, order["id"], "  ")
    entry = orders.add_file(state, order["id"], "C:\\share\\offer.pdf")
    assert entry == {"name": "offer.pdf", "url": "C:\\share\\offer.pdf"}
    assert orders.add_file(state, order["id"], "https://x.example/doc", "Doc")["name"] == "Doc"
    assert len(order["notes"]) == 2 and len(order["files"]) == 2


def test_update_order_fields(state) -> None:
    order = _new(state)
    orders.update_order(state, order["id"], val23="23-9", name="Renamed")
    assert order["val23"] == "23-9" and order["name"] == "Renamed"
    with pytest.raises(ValueError, match="unknown order field"):
        orders.update_order(state, order["id"], tasks="x")


def test_reset_tasks_uses_current_template(state) -> None:
    order = _new(state, category="Rush")
    orders.toggle_task(state, order["id"], 0)
    state["categories"][1]["tasks"] = ["GO", "CHECK"]
    orders.reset_tasks(state, order["id"])
    assert order["tasks"] == [{"name": "GO", "done": False}, {"name": "CHECK", "done": False}]


def test_categories(state) -> None:
    added = orders.add_category(state, " Slow ", tasks=[])
    assert added["name"] == "Slow" and added["tasks"] == list(DEFAULT_TASKS)
    with pytest.raises(ValueError, match="already exists"):
        orders.add_category(state, "Slow")
    orders.remove_category(state, "Slow")
    orders.remove_category(state, "Rush")
    with pytest.raises(ValueError, match="last category"):
        orders.remove_category(state, "Default")
    with pytest.raises(ValueError, match="not found"):
        orders.remove_category(state, "Ghost")


def test_links(state) -> None:
    orders.add_link(state, "https://a.example")
    orders.add_link(state, "https://b.example", "B")
    assert orders.remove_link(state, 0) == {"name": "Link", "link": "https://a.example"}
    assert state["links"] == [{"name": "B", "link": "https://b.example"}]
    with pytest.raises(ValueError):
        orders.remove_link(state, 5)


def test_kb(state) -> None:
    orders.add_kb_tab(state, "Vendors", color="#f00")
    orders.add_kb_row(state, "Vendors", "Cisco", "0800-123")
    assert orders.find_kb_tab(state, "Vendors")["rows"] == [{"name": "Cisco", "value": "0800-123"}]
    with pytest.raises(ValueError):
        orders.add_kb_tab(state, "General")
    with pytest.raises(ValueError):
        orders.add_kb_row(state, "Missing", "a", "b")
    assert orders.add_kb_text(state, " greeting ") == "greeting"
    assert state["kb_texts"] == ["greeting"]


def test_theme(state) -> None:
    assert orders.toggle_theme(state) == "light"
    assert orders.toggle_theme(state) == "dark"
    with pytest.raises(ValueError):
        orders.set_theme(state, "blue")


def test_mutated_state_stays_normalized(state) -> None:
    order = _new(state, category="Rush")
    orders.add_note(state, order["id"], "n")
    orders.add_file(state, order["id"], "/a/b.txt")
    orders.finish_order(state, order["id"])
    orders.add_link(state, "https://x.example")
    assert normalize_data(state) == state
