"""Mutable loop-owned state wrapped around the pure pagination state."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..pagination.machine import PaginationState, initial_state
from ..ui_theme import DEFAULT_THEME, UITheme


@dataclass
class BrowserState:
    pagination: PaginationState = field(default_factory=initial_state)
    theme: UITheme = DEFAULT_THEME
    table_start: int = 0
    status_message: str = ""
    status_message_until: float = 0.0
    skip_next_lf: bool = False
    dirty: bool = True
