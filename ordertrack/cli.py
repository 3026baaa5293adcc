from __future__ import annotations

import logging

import typer

from . import __version__
from .commands.catalog_cmds import (
    category_add_cmd,
    category_list_cmd,
    category_remove_cmd,
    kb_add_row_cmd,
    kb_add_tab_cmd,
    kb_add_text_cmd,
    kb_show_cmd,
    link_add_cmd,
    link_list_cmd,
    link_remove_cmd,
    theme_cmd,
)
from .commands.common import open_tracker
from .commands.config_cmds import config_set_cmd, config_show_cmd
from .commands.import_export_cmds import export_cmd, import_cmd, import_legacy_cmd
from .commands.order_cmds import (
    order_file_cmd,
    order_finish_cmd,
    order_list_cmd,
    order_new_cmd,
    order_note_cmd,
    order_remove_cmd,
    order_reopen_cmd,
    order_reset_tasks_cmd,
    order_set_cmd,
    order_show_cmd,
    order_toggle_cmd,
)
from .commands.share_cmds import preview_cmd, restore_cmd, share_cmd
from .commands.user_cmds import (
    status_cmd,
    users_add_cmd,
    users_list_cmd,
    users_remove_cmd,
    users_switch_cmd,
)
from .config import load_config
from .tracker import OrderTracker

app = typer.Typer(help="ordertrack: track orders and their checklists")
users_app = typer.Typer(help="Manage local users")
order_app = typer.Typer(help="Create and work on orders")
category_app = typer.Typer(help="Manage order categories (task templates)")
link_app = typer.Typer(help="Manage bookmarks")
kb_app = typer.Typer(help="Knowledge base tabs and texts")
config_app = typer.Typer(help="Show or change configuration")
app.add_typer(users_app, name="users")
app.add_typer(order_app, name="order")
app.add_typer(category_app, name="category")
app.add_typer(link_app, name="link")
app.add_typer(kb_app, name="kb")
app.add_typer(config_app, name="config")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output"),
) -> None:
    level = "DEBUG" if verbose else load_config().log_level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _tracker() -> OrderTracker:
    return open_tracker()


@app.command("status")
def status() -> None:
    """Show the current user, order counters and preview state."""

    status_cmd(_tracker())


@users_app.command("list")
def users_list() -> None:
    """List known users (* marks the current one)."""

    users_list_cmd(_tracker())


@users_app.command("add")
def users_add(
    name: str = typer.Argument(..., help="Username"),
    switch: bool = typer.Option(True, help="Switch to the new user"),
) -> None:
    """Register a user."""

    users_add_cmd(_tracker(), name=name, switch=switch)


@users_app.command("switch")
def users_switch(name: str = typer.Argument(..., help="Username")) -> None:
    """Switch to a user, creating it when unknown. Ends preview mode."""

    users_switch_cmd(_tracker(), name=name)


@users_app.command("remove")
def users_remove(
    name: str = typer.Argument(..., help="Username"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
) -> None:
    """Remove a user and delete their data."""

    if not yes:
        typer.confirm(f"Delete {name} and all of their orders?", abort=True)
    users_remove_cmd(_tracker(), name=name)


@order_app.command("new")
def order_new(
    name: str = typer.Argument(..., help="Order name"),
    val310: str = typer.Option("", "--v310", help="310 value"),
    val42: str = typer.Option("", "--v42", help="42 value"),
    category: str | None = typer.Option(None, help="Category (task template)"),
) -> None:
    """Create an order with the category's task checklist."""

    order_new_cmd(
        _tracker(),
        name=name,
        val310=val310,
        val42=val42,
        category=category,
        default_category=load_config().default_category,
    )


@order_app.command("list")
def order_list(finished: bool = typer.Option(False, help="List finished orders")) -> None:
    """List open (or finished) orders."""

    order_list_cmd(_tracker(), finished=finished)


@order_app.command("show")
def order_show(order_id: int = typer.Argument(..., help="Order id")) -> None:
    """Show an order with its tasks, notes and files."""

    order_show_cmd(_tracker(), order_id=order_id)


@order_app.command("toggle")
def order_toggle(
    order_id: int = typer.Argument(..., help="Order id"),
    task_number: int = typer.Argument(..., min=1, help="Task number as shown by `order show`"),
) -> None:
    """Flip a task between done and not done."""

    order_toggle_cmd(_tracker(), order_id=order_id, task_number=task_number)


@order_app.command("set")
def order_set(
    order_id: int = typer.Argument(..., help="Order id"),
    name: str | None = typer.Option(None, help="New name"),
    val310: str | None = typer.Option(None, "--v310", help="310 value"),
    val42: str | None = typer.Option(None, "--v42", help="42 value"),
    val23: str | None = typer.Option(None, "--v23", help="23 value"),
) -> None:
    """Update an order's text fields."""

    order_set_cmd(
        _tracker(), order_id=order_id, name=name, val310=val310, val42=val42, val23=val23
    )


@order_app.command("note")
def order_note(
    order_id: int = typer.Argument(..., help="Order id"),
    text: str = typer.Argument(..., help="Note text"),
    stamp: bool = typer.Option(True, help="Prefix the note with the current time"),
) -> None:
    """Append a note to an order."""

    order_note_cmd(_tracker(), order_id=order_id, text=text, stamped=stamp)


@order_app.command("file")
def order_file(
    order_id: int = typer.Argument(..., help="Order id"),
    url: str = typer.Argument(..., help="URL or path"),
    name: str | None = typer.Option(None, help="Display name (defaults to the basename)"),
) -> None:
    """Attach a file reference to an order."""

    order_file_cmd(_tracker(), order_id=order_id, url=url, name=name)


@order_app.command("reset-tasks")
def order_reset_tasks(order_id: int = typer.Argument(..., help="Order id")) -> None:
    """Replace an order's tasks with its category template."""

    order_reset_tasks_cmd(_tracker(), order_id=order_id)


@order_app.command("finish")
def order_finish(order_id: int = typer.Argument(..., help="Order id")) -> None:
    """Move an order to the finished list."""

    order_finish_cmd(_tracker(), order_id=order_id)


@order_app.command("reopen")
def order_reopen(order_id: int = typer.Argument(..., help="Order id")) -> None:
    """Move a finished order back to the open list."""

    order_reopen_cmd(_tracker(), order_id=order_id)


@order_app.command("remove")
def order_remove(order_id: int = typer.Argument(..., help="Order id")) -> None:
    """Delete an order."""

    order_remove_cmd(_tracker(), order_id=order_id)


@category_app.command("list")
def category_list() -> None:
    """List categories and their task templates."""

    category_list_cmd(_tracker())


@category_app.command("add")
def category_add(
    name: str = typer.Argument(..., help="Category name"),
    color: str = typer.Option("#3b82f6", help="Display color"),
    task: list[str] | None = typer.Option(
        None, "--task", "-t", help="Task label (repeat; defaults to the built-in template)"
    ),
) -> None:
    """Add a category."""

    category_add_cmd(_tracker(), name=name, color=color, tasks=task)


@category_app.command("remove")
def category_remove(name: str = typer.Argument(..., help="Category name")) -> None:
    """Remove a category (the last one cannot be removed)."""

    category_remove_cmd(_tracker(), name=name)


@link_app.command("list")
def link_list() -> None:
    """List bookmarks."""

    link_list_cmd(_tracker())


@link_app.command("add")
def link_add(
    link: str = typer.Argument(..., help="URL"),
    name: str | None = typer.Option(None, help="Display name"),
) -> None:
    """Add a bookmark."""

    link_add_cmd(_tracker(), link=link, name=name)


@link_app.command("remove")
def link_remove(number: int = typer.Argument(..., min=1, help="Number from `link list`")) -> None:
    """Remove a bookmark."""

    link_remove_cmd(_tracker(), number=number)


@kb_app.command("show")
def kb_show(tab: str | None = typer.Option(None, help="Only show this tab")) -> None:
    """Show knowledge base tabs and texts."""

    kb_show_cmd(_tracker(), tab=tab)


@kb_app.command("add-tab")
def kb_add_tab(
    name: str = typer.Argument(..., help="Tab name"),
    color: str = typer.Option("#3b82f6", help="Display color"),
) -> None:
    """Add a knowledge base tab."""

    kb_add_tab_cmd(_tracker(), name=name, color=color)


@kb_app.command("add-row")
def kb_add_row(
    tab: str = typer.Argument(..., help="Tab name"),
    name: str = typer.Argument(..., help="Row label"),
    value: str = typer.Argument(..., help="Row value"),
) -> None:
    """Add a row to a knowledge base tab."""

    kb_add_row_cmd(_tracker(), tab=tab, name=name, value=value)


@kb_app.command("add-text")
def kb_add_text(text: str = typer.Argument(..., help="Text snippet")) -> None:
    """Add a common text snippet."""

    kb_add_text_cmd(_tracker(), text=text)


@app.command("theme")
def theme(
    value: str | None = typer.Argument(None, help="light, dark or toggle"),
) -> None:
    """Show or change the theme."""

    theme_cmd(_tracker(), theme=value)


@app.command("share")
def share() -> None:
    """Print a share key for the data currently shown."""

    share_cmd(_tracker())


@app.command("preview")
def preview(key: str = typer.Argument(..., help="Share key, or - to read stdin")) -> None:
    """View shared data without saving it (until `restore`)."""

    preview_cmd(_tracker(), key=key)


@app.command("restore")
def restore() -> None:
    """Leave preview mode and show your own data again."""

    restore_cmd(_tracker())


@app.command("export")
def export(
    output: str = typer.Option("-", "--output", "-o", help="Output file (- for stdout)"),
) -> None:
    """Export the data currently shown as JSON."""

    export_cmd(_tracker(), output=output)


@app.command("import")
def import_data(
    input_file: str = typer.Argument(..., help="JSON file (- for stdin)"),
    dry_run: bool = typer.Option(False, help="Only show what would be imported"),
) -> None:
    """Replace your data with an exported JSON document."""

    import_cmd(_tracker(), input_file=input_file, dry_run=dry_run)


@app.command("import-legacy")
def import_legacy(
    orders_file: str | None = typer.Option(None, "--orders", help="orders.json from the desktop app"),
    settings_file: str | None = typer.Option(
        None, "--settings", help="settings.json from the desktop app"
    ),
    dry_run: bool = typer.Option(False, help="Only show what would be imported"),
) -> None:
    """Import the desktop app's orders.json / settings.json."""

    import_legacy_cmd(
        _tracker(), orders_file=orders_file, settings_file=settings_file, dry_run=dry_run
    )


@config_app.command("show")
def config_show() -> None:
    """Show the effective configuration."""

    config_show_cmd()


@config_app.command("set")
def config_set(
    key: str = typer.Argument(..., help="Config key"),
    value: str = typer.Argument(..., help="Value (empty string removes the key)"),
) -> None:
    """Write a value to the config file."""

    config_set_cmd(key=key, value=value)


if __name__ == "__main__":
    app()
