"""Map any known state shape onto the canonical app state.

Accepted inputs:

- the current schema (open/finished/links/kb_texts/kb_tabs/categories/theme)
- the desktop exports: ``orders.json`` (open/finished/links/kb_texts/kb_chart/
  kb_tabs) and ``settings.json`` (theme/categories/default_tasks), usually
  combined with :func:`merge_legacy_export`

The input is never mutated and ``normalize_data`` is idempotent.
"""

from __future__ import annotations

import copy
import re
import itertools
from collections.abc import Callable, Mapping
from typing import Any

from .defaults import (
    DEFAULT_COLOR,
    DEFAULT_TASKS,
    DEFAULT_THEME,
    THEMES,
    default_categories,
    default_kb_tabs,
    now_id,
)
from .types import AppState, Category, FileRef, KbRow, KbTab, Link, Order, Task

_PATH_SEP_RE = re.compile(r"[\\/]")

SETTINGS_KEYS = ("theme", "categories", "default_tasks")


def _list_or_none(value: Any) -> list[Any] | None:
    return value if isinstance(value, list) else None


def _falsy(value: Any) -> bool:
    # same notion of "empty" the web client used: None, False, 0 and ""
    if value is None or value is False:
        return True
    if isinstance(value, (int, float, str)):
        return not value
    return False


def _text(value: Any, default: str = "") -> str:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (str, int, float)):
        return str(value)
    return default


def _normalize_category(raw: Any) -> Category | None:
    if isinstance(raw, str):
        name = raw.strip()
        return {"name": name, "color": DEFAULT_COLOR, "tasks": list(DEFAULT_TASKS)} if name else None
    if not isinstance(raw, Mapping):
        return None
    name = _text(raw.get("name")).strip()
    if not name:
        return None
    tasks = [t for t in (_list_or_none(raw.get("tasks")) or []) if isinstance(t, str) and t]
    return {"name": name, "color": _text(raw.get("color")) or DEFAULT_COLOR, "tasks": tasks}


def _normalize_categories(src: Mapping[str, Any]) -> list[Category]:
    candidates = _list_or_none(src.get("categories"))
    if candidates:
        raw_categories: list[Any] = candidates
    else:
        legacy = _list_or_none(src.get("default_tasks"))
        if legacy:
            raw_categories = [{"name": "Default", "color": DEFAULT_COLOR, "tasks": legacy}]
        else:
            return default_categories()
    seen: set[str] = set()
    categories: list[Category] = []
    for raw in raw_categories:
        category = _normalize_category(raw)
        if category is None or category["name"] in seen:
            continue
        seen.add(category["name"])
        categories.append(category)
    return categories or default_categories()


def template_for(category_name: str | None, categories: list[Category]) -> list[str]:
    """Task labels for a category, falling back to the built-in template."""

    for category in categories:
        if category["name"] == category_name:
            return list(category["tasks"]) if category["tasks"] else list(DEFAULT_TASKS)
    return list(DEFAULT_TASKS)


def _normalize_task(raw: Any) -> Task | None:
    if isinstance(raw, str):
        return {"name": raw, "done": False}
    if isinstance(raw, Mapping):
        return {"name": _text(raw.get("name")), "done": bool(raw.get("done"))}
    return None


def _normalize_file(raw: Any) -> FileRef | None:
    if _falsy(raw):
        return None
    if isinstance(raw, str):
        return {"name": _PATH_SEP_RE.split(raw)[-1] or "link", "url": raw}
    if isinstance(raw, Mapping):
        url = _text(raw.get("url")) or _text(raw.get("path")) or _text(raw.get("link"))
        return {"name": _text(raw.get("name")) or "link", "url": url}
    return None


def _coerce_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _normalize_order(
    raw: Any, categories: list[Category], next_id: Callable[[], int]
) -> Order | None:
    if not isinstance(raw, Mapping):
        return None
    order_id = _coerce_id(raw.get("id"))
    if order_id is None:
        order_id = next_id()
    category = _text(raw.get("category")) or categories[0]["name"]

    raw_tasks = _list_or_none(raw.get("tasks"))
    tasks: list[Task] = []
    if raw_tasks:
        tasks = [t for t in (_normalize_task(item) for item in raw_tasks) if t]
    if not tasks:
        tasks = [{"name": name, "done": False} for name in template_for(category, categories)]

    notes = [n for n in (_list_or_none(raw.get("notes")) or []) if isinstance(n, str)]
    files = [f for f in (_normalize_file(item) for item in _list_or_none(raw.get("files")) or []) if f]
    return {
        "id": order_id,
        "name": _text(raw.get("name")),
        "val310": _text(raw.get("val310")),
        "val42": _text(raw.get("val42")),
        "val23": _text(raw.get("val23")),
        "category": category,
        "tasks": tasks,
        "notes": notes,
        "files": files,
    }


def _normalize_row(raw: Any) -> KbRow | None:
    if _falsy(raw):
        return None
    if isinstance(raw, str):
        return {"name": "", "value": raw}
    if isinstance(raw, Mapping):
        return {"name": _text(raw.get("name")), "value": _text(raw.get("value"))}
    return None


def _normalize_tab(raw: Any) -> KbTab:
    tab = raw if isinstance(raw, Mapping) else {}
    rows = [r for r in (_normalize_row(item) for item in _list_or_none(tab.get("rows")) or []) if r]
    return {
        "name": _text(tab.get("name")) or "Tab",
        "color": _text(tab.get("color")) or DEFAULT_COLOR,
        "rows": rows,
    }


def _normalize_kb_tabs(src: Mapping[str, Any]) -> list[KbTab]:
    tabs = _list_or_none(src.get("kb_tabs"))
    if tabs:
        return [_normalize_tab(t) for t in tabs]
    chart = _list_or_none(src.get("kb_chart"))
    if chart is not None:
        return [_normalize_tab({"name": "General", "color": DEFAULT_COLOR, "rows": chart})]
    return default_kb_tabs()


def _normalize_link(raw: Any) -> Link | None:
    if _falsy(raw):
        return None
    if isinstance(raw, str):
        return {"name": "Link", "link": raw}
    if isinstance(raw, Mapping):
        return {
            "name": _text(raw.get("name")) or "Link",
            "link": _text(raw.get("link")) or _text(raw.get("url")),
        }
    return None


def normalize_data(obj: Any) -> AppState:
    src: Mapping[str, Any] = obj if isinstance(obj, Mapping) else {}
    categories = _normalize_categories(src)
    # orders stamped in the same call must not share a millisecond id
    stamps = itertools.count(now_id())

    def orders(key: str) -> list[Order]:
        items = _list_or_none(src.get(key)) or []
        normalized = (_normalize_order(item, categories, stamps.__next__) for item in items)
        return [o for o in normalized if o]

    theme = src.get("theme")
    return {
        "open": orders("open"),
        "finished": orders("finished"),
        "links": [l for l in (_normalize_link(i) for i in _list_or_none(src.get("links")) or []) if l],
        "kb_texts": copy.deepcopy(_list_or_none(src.get("kb_texts")) or []),
        "kb_tabs": _normalize_kb_tabs(src),
        "categories": categories,
        "theme": theme if theme in THEMES else DEFAULT_THEME,
    }


def merge_legacy_export(
    orders_doc: Mapping[str, Any] | None, settings_doc: Mapping[str, Any] | None
) -> dict[str, Any]:
    """Combine the two desktop export documents into one raw mapping."""

    merged: dict[str, Any] = {}
    if isinstance(orders_doc, Mapping):
        merged.update(orders_doc)
    if isinstance(settings_doc, Mapping):
        for key in SETTINGS_KEYS:
            if key in settings_doc:
                merged[key] = settings_doc[key]
    return merged
