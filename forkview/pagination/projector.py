"""Projection of a cached page into table rows.

Pure: the same page always yields the same rows for a given time zone.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo

from ..models import Fork, Page


@dataclass(frozen=True)
class TableColumn:
    title: str
    width: int


COLUMNS: tuple[TableColumn, ...] = (
    TableColumn("Repo", 30),
    TableColumn("Stars", 10),
    TableColumn("Ahead", 10),
    TableColumn("Behind", 10),
    TableColumn("Updated", 15),
    TableColumn("Forks", 10),
)

Row = tuple[str, ...]


def format_updated(fork: Fork, tz: tzinfo | None = None) -> str:
    """Return the fork's last update as ``YYYY-MM-DD`` in ``tz`` (local by default)."""
    return fork.updated_at.astimezone(tz).strftime("%Y-%m-%d")


def project_fork(fork: Fork, tz: tzinfo | None = None) -> Row:
    return (
        fork.name_with_owner,
        str(fork.stargazer_count),
        str(fork.ahead_by),
        str(fork.behind_by),
        format_updated(fork, tz),
        str(fork.fork_count),
    )


def project(page: Page, tz: tzinfo | None = None) -> list[Row]:
    """Return one display row per fork, in page order."""
    return [project_fork(fork, tz) for fork in page]


__all__ = ["TableColumn", "COLUMNS", "Row", "format_updated", "project_fork", "project"]
