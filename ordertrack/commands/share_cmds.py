from __future__ import annotations

import sys

from rich import print

from ordertrack.codec import ShareKeyError
from ordertrack.tracker import OrderTracker

from .common import fail, topbar


def share_cmd(tracker: OrderTracker) -> None:
    """Print the share key for the data currently shown."""

    # plain stdout: rich would wrap a long key over several lines
    sys.stdout.write(tracker.share_key() + "\n")


def preview_cmd(tracker: OrderTracker, *, key: str) -> None:
    if key == "-":
        key = sys.stdin.read()
    try:
        tracker.enter_preview(key)
    except ShareKeyError as exc:
        fail(f"Invalid key: {exc}")
    print("[green]✓ Preview mode enabled[/green]")
    print(topbar(tracker))


def restore_cmd(tracker: OrderTracker) -> None:
    if not tracker.ctx.preview:
        print("Not in preview mode")
        return
    tracker.restore()
    print("[green]✓ Restored your data[/green]")
    print(topbar(tracker))
