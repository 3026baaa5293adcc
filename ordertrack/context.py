from __future__ import annotations

from dataclasses import dataclass, field

from .defaults import default_state
from .types import AppState


@dataclass
class AppContext:
    """The state one command works on; passed explicitly, never global."""

    user: str | None = None
    preview: bool = False
    data: AppState = field(default_factory=default_state)

    @property
    def display_user(self) -> str:
        if self.preview:
            return "PREVIEW MODE"
        return self.user or "No user"
