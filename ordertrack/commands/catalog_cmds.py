from __future__ import annotations

from rich import print
from rich.markup import escape

from ordertrack import orders
from ordertrack.tracker import OrderTracker

from .common import fail, persist, preview_banner, require_user


def category_list_cmd(tracker: OrderTracker) -> None:
    preview_banner(tracker)
    for category in orders.ensure_categories(tracker.state):
        print(f"[bold]{escape(category['name'])}[/bold] [dim]{category['color']}[/dim]")
        for label in category["tasks"]:
            print(f"  - {escape(label)}")


def category_add_cmd(
    tracker: OrderTracker, *, name: str, color: str, tasks: list[str] | None
) -> None:
    require_user(tracker)
    try:
        orders.add_category(tracker.state, name, color=color, tasks=tasks)
    except ValueError as exc:
        fail(str(exc))
    persist(tracker, f"Added category {name.strip()}")


def category_remove_cmd(tracker: OrderTracker, *, name: str) -> None:
    require_user(tracker)
    try:
        orders.remove_category(tracker.state, name)
    except ValueError as exc:
        fail(str(exc))
    persist(tracker, f"Removed category {name}")


def link_list_cmd(tracker: OrderTracker) -> None:
    preview_banner(tracker)
    links = tracker.state["links"]
    if not links:
        print("No links")
        return
    for idx, entry in enumerate(links, start=1):
        print(f"{idx}. {escape(entry['name'])}: {escape(entry['link'])}")


def link_add_cmd(tracker: OrderTracker, *, link: str, name: str | None) -> None:
    require_user(tracker)
    try:
        orders.add_link(tracker.state, link, name)
    except ValueError as exc:
        fail(str(exc))
    persist(tracker, "Added link")


def link_remove_cmd(tracker: OrderTracker, *, number: int) -> None:
    require_user(tracker)
    try:
        orders.remove_link(tracker.state, number - 1)
    except ValueError as exc:
        fail(str(exc))
    persist(tracker, f"Removed link #{number}")


def kb_show_cmd(tracker: OrderTracker, *, tab: str | None) -> None:
    preview_banner(tracker)
    state = tracker.state
    tabs = state["kb_tabs"]
    if tab is not None:
        try:
            tabs = [orders.find_kb_tab(state, tab)]
        except ValueError as exc:
            fail(str(exc))
    for entry in tabs:
        print(f"[bold]{escape(entry['name'])}[/bold] [dim]{entry['color']}[/dim]")
        if not entry["rows"]:
            print("  (empty)")
        for row in entry["rows"]:
            print(f"  {escape(row['name'])}: {escape(row['value'])}")
    if tab is None and state["kb_texts"]:
        print("[bold]Texts[/bold]")
        for text in state["kb_texts"]:
            print(f"  - {escape(str(text))}")


def kb_add_tab_cmd(tracker: OrderTracker, *, name: str, color: str) -> None:
    require_user(tracker)
    try:
        orders.add_kb_tab(tracker.state, name, color=color)
    except ValueError as exc:
        fail(str(exc))
    persist(tracker, f"Added tab {name.strip()}")


def kb_add_row_cmd(tracker: OrderTracker, *, tab: str, name: str, value: str) -> None:
    require_user(tracker)
    try:
        orders.add_kb_row(tracker.state, tab, name, value)
    except ValueError as exc:
        fail(str(exc))
    persist(tracker, f"Added row to {tab}")


def kb_add_text_cmd(tracker: OrderTracker, *, text: str) -> None:
    require_user(tracker)
    try:
        orders.add_kb_text(tracker.state, text)
    except ValueError as exc:
        fail(str(exc))
    persist(tracker, "Added text")


def theme_cmd(tracker: OrderTracker, *, theme: str | None) -> None:
    if theme is None:
        print(f"Theme: {tracker.state['theme']}")
        return
    require_user(tracker)
    try:
        if theme == "toggle":
            theme = orders.toggle_theme(tracker.state)
        else:
            orders.set_theme(tracker.state, theme)
    except ValueError as exc:
        fail(str(exc))
    persist(tracker, f"Theme set to {theme}")
