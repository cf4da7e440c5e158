"""Help-line content for the fork browser."""

from __future__ import annotations

from ..ui_theme import DEFAULT_THEME, UITheme

HELP_BINDINGS: tuple[tuple[str, str], ...] = (
    ("↑/k", "Up"),
    ("↓/j", "Down"),
    ("←/h", "Prev Page"),
    ("→/l", "Next Page"),
    ("s", "Sort by Stars"),
    ("u", "Sort by Updated"),
    ("Enter", "Open Repo"),
    ("q", "Quit"),
)


def help_line(theme: UITheme = DEFAULT_THEME) -> str:
    """Return the single-line key summary shown under the header."""
    parts = [
        f"{theme.help_key}[{keys}]{theme.reset} {theme.help_text}{label}{theme.reset}"
        for keys, label in HELP_BINDINGS
    ]
    return " " + "  ".join(parts)
