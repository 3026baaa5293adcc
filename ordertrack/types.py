from __future__ import annotations

from typing import TypedDict


class Task(TypedDict):
    name: str
    done: bool


class FileRef(TypedDict):
    name: str
    url: str


class Order(TypedDict):
    id: int
    name: str
    val310: str
    val42: str
    val23: str
    category: str
    tasks: list[Task]
    notes: list[str]
    files: list[FileRef]


class Category(TypedDict):
    name: str
    color: str
    tasks: list[str]


class KbRow(TypedDict):
    name: str
    value: str


class KbTab(TypedDict):
    name: str
    color: str
    rows: list[KbRow]


class Link(TypedDict):
    name: str
    link: str


class AppState(TypedDict):
    open: list[Order]
    finished: list[Order]
    links: list[Link]
    kb_texts: list[str]
    kb_tabs: list[KbTab]
    categories: list[Category]
    theme: str
