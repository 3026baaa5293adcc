from __future__ import annotations

from rich import print
from rich.markup import escape

from ordertrack import orders
from ordertrack.tracker import OrderTracker
from ordertrack.types import Order

from .common import fail, persist, preview_banner, require_user, topbar


def _summary_line(order: Order) -> str:
    done, total = orders.progress(order)
    return (
        f"{order['id']}  {escape(order['name']) or '<unnamed>'}  "
        f"[dim]{escape(order['category'])}[/dim]  {done}/{total}"
    )


def order_new_cmd(
    tracker: OrderTracker,
    *,
    name: str,
    val310: str,
    val42: str,
    category: str | None,
    default_category: str,
) -> None:
    require_user(tracker)
    if not name.strip():
        fail("Order name must not be empty")
    state = tracker.state
    if category and category not in orders.category_names(state):
        print(f"[yellow]Unknown category {escape(category)!r}, using the first one[/yellow]")
    order = orders.add_order(
        state,
        orders.make_order(
            state,
            name=name.strip(),
            val310=val310,
            val42=val42,
            category=category or default_category,
        ),
    )
    persist(tracker, f"Created order {order['id']}")


def order_list_cmd(tracker: OrderTracker, *, finished: bool) -> None:
    preview_banner(tracker)
    print(topbar(tracker))
    collection = "finished" if finished else "open"
    items = tracker.state[collection]
    if not items:
        print(f"No {collection} orders")
        return
    for order in items:
        print(_summary_line(order))


def order_show_cmd(tracker: OrderTracker, *, order_id: int) -> None:
    preview_banner(tracker)
    try:
        collection, order = orders.find_order(tracker.state, order_id)
    except ValueError as exc:
        fail(str(exc))
    print(f"[bold]{escape(order['name']) or '<unnamed>'}[/bold] ({collection})")
    print(f"  id: {order['id']}")
    print(f"  category: {escape(order['category'])}")
    print(f"  310: {escape(order['val310'])}  42: {escape(order['val42'])}  23: {escape(order['val23'])}")
    print("  tasks:")
    for idx, task in enumerate(order["tasks"], start=1):
        mark = "[green]x[/green]" if task["done"] else " "
        print(f"    {idx}. \\[{mark}] {escape(task['name'])}")
    if order["notes"]:
        print("  notes:")
        for note in order["notes"]:
            print(f"    - {escape(note)}")
    if order["files"]:
        print("  files:")
        for entry in order["files"]:
            print(f"    - {escape(entry['name'])}: {escape(entry['url'])}")


def order_toggle_cmd(tracker: OrderTracker, *, order_id: int, task_number: int) -> None:
    require_user(tracker)
    try:
        task = orders.toggle_task(tracker.state, order_id, task_number - 1)
    except ValueError as exc:
        fail(str(exc))
    state_label = "done" if task["done"] else "not done"
    persist(tracker, f"Marked {task['name']!r} {state_label}")


def order_set_cmd(
    tracker: OrderTracker,
    *,
    order_id: int,
    name: str | None,
    val310: str | None,
    val42: str | None,
    val23: str | None,
) -> None:
    require_user(tracker)
    fields = {
        key: value
        for key, value in (("name", name), ("val310", val310), ("val42", val42), ("val23", val23))
        if value is not None
    }
    if not fields:
        fail("Nothing to update")
    try:
        orders.update_order(tracker.state, order_id, **fields)
    except ValueError as exc:
        fail(str(exc))
    persist(tracker, f"Updated order {order_id}")


def order_note_cmd(tracker: OrderTracker, *, order_id: int, text: str, stamped: bool) -> None:
    require_user(tracker)
    try:
        orders.add_note(tracker.state, order_id, text, stamped=stamped)
    except ValueError as exc:
        fail(str(exc))
    persist(tracker, f"Added note to order {order_id}")


def order_file_cmd(tracker: OrderTracker, *, order_id: int, url: str, name: str | None) -> None:
    require_user(tracker)
    try:
        entry = orders.add_file(tracker.state, order_id, url, name)
    except ValueError as exc:
        fail(str(exc))
    persist(tracker, f"Attached {entry['name']} to order {order_id}")


def order_reset_tasks_cmd(tracker: OrderTracker, *, order_id: int) -> None:
    require_user(tracker)
    try:
        orders.reset_tasks(tracker.state, order_id)
    except ValueError as exc:
        fail(str(exc))
    persist(tracker, f"Reset tasks of order {order_id}")


def order_finish_cmd(tracker: OrderTracker, *, order_id: int) -> None:
    require_user(tracker)
    try:
        orders.finish_order(tracker.state, order_id)
    except ValueError as exc:
        fail(str(exc))
    persist(tracker, f"Finished order {order_id}")


def order_reopen_cmd(tracker: OrderTracker, *, order_id: int) -> None:
    require_user(tracker)
    try:
        orders.reopen_order(tracker.state, order_id)
    except ValueError as exc:
        fail(str(exc))
    persist(tracker, f"Reopened order {order_id}")


def order_remove_cmd(tracker: OrderTracker, *, order_id: int) -> None:
    require_user(tracker)
    try:
        orders.remove_order(tracker.state, order_id)
    except ValueError as exc:
        fail(str(exc))
    persist(tracker, f"Removed order {order_id}")
