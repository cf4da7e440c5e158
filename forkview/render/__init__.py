"""Frame rendering for the fork browser.

``build_frame`` composes the full screen as a list of lines without touching
the terminal; ``render_frame`` writes it. Neither mutates runtime state.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from datetime import tzinfo

from ..ansi import clip_ansi_line, fit_cell
from ..pagination.machine import PaginationState
from ..pagination.projector import COLUMNS, Row, project
from ..ui_theme import DEFAULT_THEME, UITheme
from .help import help_line

SPINNER_FRAMES: tuple[str, ...] = ("|", "/", "-", "\\")
SELECTED_MARKER = "> "
UNSELECTED_MARKER = "  "
# Blank line, title, help, column header, divider.
CHROME_ROWS = 5


@dataclass
class RenderContext:
    state: PaginationState
    width: int
    max_lines: int
    table_start: int = 0
    spinner_frame: int = 0
    status_message: str = ""
    theme: UITheme = DEFAULT_THEME
    tz: tzinfo | None = field(default=None)


def table_view_rows(max_lines: int) -> int:
    """Rows available for table body given the terminal height."""
    return max(1, max_lines - CHROME_ROWS - 1)


def clamp_table_start(table_start: int, selected_row: int, row_count: int, view_rows: int) -> int:
    """Scroll the table window so ``selected_row`` stays visible."""
    if selected_row < table_start:
        table_start = selected_row
    elif selected_row >= table_start + view_rows:
        table_start = selected_row - view_rows + 1
    return max(0, min(table_start, max(0, row_count - view_rows)))


def title_line(state: PaginationState) -> str:
    return (
        f" GitHub Forks (Page {state.page + 1}, Sort: {state.sort_mode.value})"
        f"  Total Forks: {state.total_count}"
    )


def _table_line(cells: Row, marker: str) -> str:
    return marker + " ".join(fit_cell(cell, column.width) for cell, column in zip(cells, COLUMNS))


def build_frame(context: RenderContext) -> list[str]:
    """Return the screen lines for ``context``."""
    state = context.state
    theme = context.theme
    width = max(1, context.width - 1)

    if state.loading:
        spinner = SPINNER_FRAMES[context.spinner_frame % len(SPINNER_FRAMES)]
        lines = ["", f" Loading... {theme.spinner}{spinner}{theme.reset}"]
    else:
        rows = project(state.current_page, context.tz)
        view_rows = table_view_rows(context.max_lines)
        start = clamp_table_start(context.table_start, state.selected_row, len(rows), view_rows)
        header = _table_line(tuple(column.title for column in COLUMNS), UNSELECTED_MARKER)
        divider = UNSELECTED_MARKER + "─" * (sum(column.width for column in COLUMNS) + len(COLUMNS) - 1)
        lines = [
            "",
            f"{theme.header}{title_line(state)}{theme.reset}",
            help_line(theme),
            f"{theme.table_header}{header}{theme.reset}",
            divider,
        ]
        for index in range(start, min(len(rows), start + view_rows)):
            if index == state.selected_row:
                lines.append(f"{theme.selected_row}{_table_line(rows[index], SELECTED_MARKER)}{theme.reset}")
            else:
                lines.append(_table_line(rows[index], UNSELECTED_MARKER))

    if context.status_message:
        lines.append(f" {theme.status_error}{context.status_message}{theme.reset}")
    return [clip_ansi_line(line, width) + (theme.reset if "\033" in line else "") for line in lines[: context.max_lines]]


def render_frame(context: RenderContext) -> None:
    """Clear the screen and write the composed frame to stdout."""
    out = ["\033[H\033[J", "\r\n".join(build_frame(context))]
    os.write(sys.stdout.fileno(), "".join(out).encode("utf-8", errors="replace"))


__all__ = [
    "SPINNER_FRAMES",
    "RenderContext",
    "table_view_rows",
    "clamp_table_start",
    "title_line",
    "build_frame",
    "render_frame",
]
