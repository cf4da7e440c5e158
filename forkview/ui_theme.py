"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the header, help line, table, and status line.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    header: str
    help_key: str
    help_text: str
    table_header: str
    selected_row: str
    spinner: str
    status_error: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    header="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
    help_text="\033[2;38;5;250m",
    table_header="\033[1;38;5;252m",
    selected_row="\033[1;38;5;229;48;5;57m",
    spinner="\033[38;5;205m",
    status_error="\033[38;5;203m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    header="",
    help_key="",
    help_text="",
    table_header="",
    selected_row="",
    spinner="",
    status_error="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    PLAIN_THEME.name: PLAIN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    return tuple(_THEMES)


def resolve_theme(name: str | None, no_color: bool = False) -> UITheme:
    """Return theme ``name``; unknown names fall back to the default palette."""
    if no_color:
        return PLAIN_THEME
    if name is None:
        return DEFAULT_THEME
    return _THEMES.get(name.strip().lower(), DEFAULT_THEME)
