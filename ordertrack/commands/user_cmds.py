from __future__ import annotations

from rich import print

from ordertrack.tracker import OrderTracker

from .common import fail, preview_banner, topbar


def users_list_cmd(tracker: OrderTracker) -> None:
    users = tracker.users.list_users()
    if not users:
        print("No users yet. Run `ordertrack users add NAME`.")
        return
    current = tracker.users.current_user()
    for name in users:
        marker = "*" if name == current else " "
        print(f"{marker} {name}")


def users_add_cmd(tracker: OrderTracker, *, name: str, switch: bool) -> None:
    try:
        tracker.users.add_user(name)
    except ValueError as exc:
        fail(str(exc))
    print(f"[green]✓ Added user {name.strip()}[/green]")
    if switch:
        users_switch_cmd(tracker, name=name)


def users_switch_cmd(tracker: OrderTracker, *, name: str) -> None:
    was_previewing = tracker.ctx.preview
    try:
        tracker.switch_user(name)
    except ValueError as exc:
        fail(str(exc))
    if was_previewing:
        print("[yellow]Preview mode ended[/yellow]")
    print(f"[green]✓ Switched to {tracker.ctx.user}[/green]")


def users_remove_cmd(tracker: OrderTracker, *, name: str) -> None:
    if name not in tracker.users.list_users():
        fail(f"Unknown user: {name}")
    tracker.remove_user(name)
    print(f"[green]✓ Removed user {name} and their data[/green]")


def status_cmd(tracker: OrderTracker) -> None:
    preview_banner(tracker)
    print(topbar(tracker))
    print(f"Theme: {tracker.state['theme']}")
