"""ANSI-aware text measurement and cell fitting.

Keeps table columns aligned when names contain wide characters and when
rows carry color escape sequences.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
ELLIPSIS = "…"


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks and control characters consume no columns and East Asian
    wide/fullwidth characters consume two.
    """
    if unicodedata.combining(ch) or unicodedata.category(ch) == "Cc":
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Visible column width of ``text`` ignoring ANSI escape sequences."""
    return sum(char_display_width(ch) for ch in ANSI_ESCAPE_RE.sub("", text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
        i += 1

    return "".join(out)


def fit_cell(text: str, width: int) -> str:
    """Pad or truncate plain ``text`` to exactly ``width`` columns.

    Truncated text ends in an ellipsis, matching how the table widget marks
    overflowing cells.
    """
    if width <= 0:
        return ""
    text_width = display_width(text)
    if text_width > width:
        clipped = clip_ansi_line(text, width - 1) + ELLIPSIS
        text_width = display_width(clipped)
        text = clipped
    return text + " " * max(0, width - text_width)
