from __future__ import annotations

from typing import Literal

from .defaults import DEFAULT_COLOR, DEFAULT_TASKS, THEMES, default_categories, now_id, now_ts
from .normalize import template_for
from .types import AppState, Category, KbTab, Link, Order, Task

Collection = Literal["open", "finished"]

ORDER_TEXT_FIELDS = ("name", "val310", "val42", "val23")


def ensure_categories(state: AppState) -> list[Category]:
    if not isinstance(state.get("categories"), list) or not state["categories"]:
        state["categories"] = default_categories()
    return state["categories"]


def category_names(state: AppState) -> list[str]:
    return [c["name"] for c in ensure_categories(state)]


def category_by_name(state: AppState, name: str | None) -> Category:
    """The named category, or the first one when the name is unknown."""

    categories = ensure_categories(state)
    for category in categories:
        if category["name"] == name:
            return category
    return categories[0]


def make_order(
    state: AppState,
    *,
    name: str,
    val310: str = "",
    val42: str = "",
    category: str | None = None,
) -> Order:
    cat = category_by_name(state, category or "Default")
    return {
        "id": now_id(),
        "name": name,
        "val310": val310,
        "val42": val42,
        "val23": "",
        "category": cat["name"],
        "tasks": [{"name": t, "done": False} for t in (cat["tasks"] or DEFAULT_TASKS)],
        "notes": [],
        "files": [],
    }


def add_order(state: AppState, order: Order) -> Order:
    existing = {o["id"] for o in state["open"]} | {o["id"] for o in state["finished"]}
    while order["id"] in existing:
        order["id"] += 1
    state["open"].append(order)
    return order


def find_order(state: AppState, order_id: int) -> tuple[Collection, Order]:
    for collection in ("open", "finished"):
        for order in state[collection]:
            if order["id"] == order_id:
                return collection, order
    raise ValueError(f"order {order_id} not found")


def get_order(state: AppState, order_id: int) -> Order:
    return find_order(state, order_id)[1]


def update_order(state: AppState, order_id: int, **fields: str) -> Order:
    order = get_order(state, order_id)
    for key, value in fields.items():
        if key not in ORDER_TEXT_FIELDS:
            raise ValueError(f"unknown order field: {key}")
        order[key] = value  # type: ignore[literal-required]
    return order


def toggle_task(state: AppState, order_id: int, index: int) -> Task:
    order = get_order(state, order_id)
    if index < 0 or index >= len(order["tasks"]):
        raise ValueError(f"order {order_id} has no task #{index + 1}")
    task = order["tasks"][index]
    task["done"] = not task["done"]
    return task


def reset_tasks(state: AppState, order_id: int) -> Order:
    """Re-stamp an order's checklist from its category template."""

    order = get_order(state, order_id)
    order["tasks"] = [
        {"name": t, "done": False} for t in template_for(order["category"], ensure_categories(state))
    ]
    return order


def add_note(state: AppState, order_id: int, text: str, *, stamped: bool = True) -> str:
    text = text.strip()
    if not text:
        raise ValueError("note must not be empty")
    note = f"[{now_ts()}] {text}" if stamped else text
    get_order(state, order_id)["notes"].append(note)
    return note


def add_file(state: AppState, order_id: int, url: str, name: str | None = None) -> dict[str, str]:
    url = url.strip()
    if not url:
        raise ValueError("file url must not be empty")
    display = name or url.replace("\\", "/").rstrip("/").split("/")[-1] or "link"
    entry = {"name": display, "url": url}
    get_order(state, order_id)["files"].append(entry)  # type: ignore[arg-type]
    return entry


def _move(state: AppState, order_id: int, target: Collection) -> Order:
    collection, order = find_order(state, order_id)
    if collection == target:
        raise ValueError(f"order {order_id} is already {target}")
    state[collection].remove(order)
    state[target].append(order)
    return order


def finish_order(state: AppState, order_id: int) -> Order:
    return _move(state, order_id, "finished")


def reopen_order(state: AppState, order_id: int) -> Order:
    return _move(state, order_id, "open")


def remove_order(state: AppState, order_id: int) -> Order:
    collection, order = find_order(state, order_id)
    state[collection].remove(order)
    return order


def add_category(
    state: AppState, name: str, *, color: str = DEFAULT_COLOR, tasks: list[str] | None = None
) -> Category:
    name = name.strip()
    if not name:
        raise ValueError("category name must not be empty")
    if name in category_names(state):
        raise ValueError(f"category {name!r} already exists")
    category: Category = {
        "name": name,
        "color": color or DEFAULT_COLOR,
        "tasks": [t for t in (tasks or []) if t] or list(DEFAULT_TASKS),
    }
    state["categories"].append(category)
    return category


def remove_category(state: AppState, name: str) -> Category:
    categories = ensure_categories(state)
    for category in categories:
        if category["name"] == name:
            if len(categories) == 1:
                raise ValueError("cannot remove the last category")
            categories.remove(category)
            return category
    raise ValueError(f"category {name!r} not found")


def add_link(state: AppState, link: str, name: str | None = None) -> Link:
    link = link.strip()
    if not link:
        raise ValueError("link must not be empty")
    entry: Link = {"name": name or "Link", "link": link}
    state["links"].append(entry)
    return entry


def remove_link(state: AppState, index: int) -> Link:
    if index < 0 or index >= len(state["links"]):
        raise ValueError(f"no link #{index + 1}")
    return state["links"].pop(index)


def find_kb_tab(state: AppState, name: str) -> KbTab:
    for tab in state["kb_tabs"]:
        if tab["name"] == name:
            return tab
    raise ValueError(f"knowledge base tab {name!r} not found")


def add_kb_tab(state: AppState, name: str, *, color: str = DEFAULT_COLOR) -> KbTab:
    name = name.strip()
    if not name:
        raise ValueError("tab name must not be empty")
    if any(t["name"] == name for t in state["kb_tabs"]):
        raise ValueError(f"knowledge base tab {name!r} already exists")
    tab: KbTab = {"name": name, "color": color or DEFAULT_COLOR, "rows": []}
    state["kb_tabs"].append(tab)
    return tab


def add_kb_row(state: AppState, tab_name: str, name: str, value: str) -> KbTab:
    tab = find_kb_tab(state, tab_name)
    tab["rows"].append({"name": name, "value": value})
    return tab


def add_kb_text(state: AppState, text: str) -> str:
    text = text.strip()
    if not text:
        raise ValueError("text must not be empty")
    state["kb_texts"].append(text)
    return text


def set_theme(state: AppState, theme: str) -> str:
    if theme not in THEMES:
        raise ValueError(f"theme must be one of: {', '.join(THEMES)}")
    state["theme"] = theme
    return theme


def toggle_theme(state: AppState) -> str:
    return set_theme(state, "light" if state.get("theme") == "dark" else "dark")


def counts(state: AppState) -> dict[str, int]:
    return {"open": len(state["open"]), "finished": len(state["finished"])}


def progress(order: Order) -> tuple[int, int]:
    done = sum(1 for t in order["tasks"] if t["done"])
    return done, len(order["tasks"])
