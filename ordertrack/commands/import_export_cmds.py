from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import typer
from rich import print

from ordertrack.normalize import merge_legacy_export, normalize_data
from ordertrack.orders import counts
from ordertrack.tracker import OrderTracker

from .common import fail, require_user


def _read_json_document(path_text: str, *, label: str) -> Any:
    if path_text == "-":
        raw = sys.stdin.read()
    else:
        path = Path(path_text).expanduser()
        if not path.exists():
            fail(f"{label} file not found: {path}")
        raw = path.read_text(encoding="utf-8")
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        print(f"[red]Invalid JSON in {label} file: {e}[/red]")
        raise typer.Exit(code=1) from None


def export_cmd(tracker: OrderTracker, *, output: str) -> None:
    """Write the normalized state shown right now as JSON."""

    output_json = json.dumps(tracker.state, ensure_ascii=False, indent=2)
    if output == "-":
        sys.stdout.write(output_json + "\n")
        return
    output_path = Path(output).expanduser()
    output_path.write_text(output_json + "\n", encoding="utf-8")
    totals = counts(tracker.state)
    print(f"[green]✓ Exported to {output_path}[/green]")
    print(f"  Open: {totals['open']}")
    print(f"  Finished: {totals['finished']}")


def _import_state(tracker: OrderTracker, raw: Any, *, dry_run: bool) -> None:
    state = normalize_data(raw)
    totals = counts(state)
    print("[bold]Import Preview[/bold]")
    print(f"- Open orders: {totals['open']}")
    print(f"- Finished orders: {totals['finished']}")
    print(f"- Links: {len(state['links'])}")
    print(f"- Knowledge base tabs: {len(state['kb_tabs'])}")
    print(f"- Categories: {', '.join(c['name'] for c in state['categories'])}")
    print(f"- Theme: {state['theme']}")
    if dry_run:
        print("\n[yellow]Dry run - no data will be imported[/yellow]")
        return
    try:
        tracker.replace_state(state)
    except ValueError as exc:
        fail(str(exc))
    print(f"[green]✓ Imported into {tracker.ctx.user}[/green]")


def import_cmd(tracker: OrderTracker, *, input_file: str, dry_run: bool) -> None:
    """Replace the current user's data with a JSON document of any known shape."""

    require_user(tracker)
    raw = _read_json_document(input_file, label="input")
    _import_state(tracker, raw, dry_run=dry_run)


def import_legacy_cmd(
    tracker: OrderTracker,
    *,
    orders_file: str | None,
    settings_file: str | None,
    dry_run: bool,
) -> None:
    """Import the two-file export of the desktop app."""

    require_user(tracker)
    if orders_file is None and settings_file is None:
        fail("Pass --orders and/or --settings")
    if orders_file == "-" and settings_file == "-":
        fail("Only one document can be read from stdin")
    orders_doc = _read_json_document(orders_file, label="orders") if orders_file else None
    settings_doc = _read_json_document(settings_file, label="settings") if settings_file else None
    for label, doc in (("orders", orders_doc), ("settings", settings_doc)):
        if doc is not None and not isinstance(doc, dict):
            fail(f"The {label} document must be a JSON object")
    _import_state(tracker, merge_legacy_export(orders_doc, settings_doc), dry_run=dry_run)
