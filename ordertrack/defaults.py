from __future__ import annotations

import datetime as dt
import time

from .types import AppState, Category, KbTab

DEFAULT_COLOR = "#3b82f6"
DEFAULT_THEME = "dark"
THEMES = ("light", "dark")

DEFAULT_TASKS: tuple[str, ...] = (
    "MATERIAL LIST",
    "BUSINESS WEB ORDER",
    "SAP AUFTRAG",
    "SAP VERKNÜPFUNG",
    "CISCO ORDER FINISHED",
    "WARENEINGANG GEBUCHT",
    "SAP EFLOW",
)


def default_categories() -> list[Category]:
    return [{"name": "Default", "color": DEFAULT_COLOR, "tasks": list(DEFAULT_TASKS)}]


def default_kb_tabs() -> list[KbTab]:
    return [{"name": "General", "color": DEFAULT_COLOR, "rows": []}]


def default_state() -> AppState:
    return {
        "open": [],
        "finished": [],
        "links": [],
        "kb_texts": [],
        "kb_tabs": default_kb_tabs(),
        "categories": default_categories(),
        "theme": DEFAULT_THEME,
    }


def now_id() -> int:
    """Millisecond timestamp used as an order id."""
    return int(time.time() * 1000)


def now_ts() -> str:
    return dt.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
