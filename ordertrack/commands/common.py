from __future__ import annotations

from typing import Any, NoReturn

import typer
from rich import print

from ordertrack.config import load_config, read_config_file, write_config_file
from ordertrack.context import AppContext
from ordertrack.orders import counts
from ordertrack.tracker import OrderTracker


def fail(message: str) -> NoReturn:
    print(f"[red]{message}[/red]")
    raise typer.Exit(code=1)


def _warn_save_blocked(ctx: AppContext) -> None:
    print("[yellow]Preview mode: saving disabled[/yellow]")


def open_tracker() -> OrderTracker:
    cfg = load_config()
    on_blocked = _warn_save_blocked if cfg.warn_on_preview_save else None
    return OrderTracker.from_config(cfg, on_save_blocked=on_blocked)


def require_user(tracker: OrderTracker) -> None:
    if tracker.ctx.user or tracker.ctx.preview:
        return
    fail("No user selected. Run `ordertrack users switch NAME` first.")


def persist(tracker: OrderTracker, message: str) -> None:
    """Save and report; in preview the change only lives for this command."""

    if tracker.save():
        print(f"[green]✓ {message}[/green]")
    else:
        print(f"[dim]{message} (not saved)[/dim]")


def preview_banner(tracker: OrderTracker) -> None:
    if tracker.ctx.preview:
        print(
            "[bold yellow]PREVIEW MODE[/bold yellow] showing shared data, changes are not saved. "
            "Run `ordertrack restore` to go back."
        )


def topbar(tracker: OrderTracker) -> str:
    totals = counts(tracker.state)
    return f"{tracker.ctx.display_user} | Open: {totals['open']} | Finished: {totals['finished']}"


def read_config_or_exit() -> dict[str, Any]:
    try:
        return read_config_file()
    except ValueError as exc:
        fail(f"Invalid config file: {exc}")


def write_config_or_exit(data: dict[str, Any]) -> None:
    try:
        write_config_file(data)
    except OSError as exc:
        fail(f"Failed to write config: {exc}")
