"""Domain models for forks, repositories, and sort modes.

Every model here is immutable. ``Fork`` values are produced only by the
gateway response mapping and shared by reference between cached pages.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

PAGE_SIZE = 10
DEFAULT_HOST = "github.com"


class SortMode(Enum):
    """Remote ordering field; direction is always descending."""

    CREATED_AT = "CREATED_AT"
    UPDATED_AT = "UPDATED_AT"
    PUSHED_AT = "PUSHED_AT"
    NAME = "NAME"
    STARGAZERS = "STARGAZERS"


DEFAULT_SORT_MODE = SortMode.UPDATED_AT


def coerce_sort_mode(value: object) -> SortMode:
    """Map any value onto a ``SortMode``.

    Unknown, missing, or malformed values fall back to ``DEFAULT_SORT_MODE``
    (most recently updated first). This never raises.
    """
    if isinstance(value, SortMode):
        return value
    if isinstance(value, str):
        normalized = value.strip().upper().replace("-", "_")
        for mode in SortMode:
            if mode.value == normalized:
                return mode
    return DEFAULT_SORT_MODE


def order_field(value: object) -> str:
    """Return the wire-level ``RepositoryOrderField`` identifier for ``value``."""
    return coerce_sort_mode(value).value


@dataclass(frozen=True)
class Fork:
    """One fork row as returned by the paginated fork query."""

    name_with_owner: str
    stargazer_count: int
    fork_count: int
    updated_at: datetime
    url: str
    ahead_by: int
    behind_by: int


Page = tuple[Fork, ...]


@dataclass(frozen=True)
class ForksPage:
    """Result bundle for one successful page fetch."""

    forks: Page
    total_count: int
    end_cursor: str | None
    has_next_page: bool


@dataclass(frozen=True)
class RepositoryRef:
    """Host-qualified repository identifier."""

    owner: str
    name: str
    host: str = DEFAULT_HOST

    def __post_init__(self) -> None:
        if not self.owner or not self.name:
            raise ValueError("Repository owner and name are required")

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class RepositoryMetadata:
    """Default branch and fork count resolved once before the loop starts."""

    default_branch: str
    fork_count: int


__all__ = [
    "PAGE_SIZE",
    "DEFAULT_HOST",
    "SortMode",
    "DEFAULT_SORT_MODE",
    "coerce_sort_mode",
    "order_field",
    "Fork",
    "Page",
    "ForksPage",
    "RepositoryRef",
    "RepositoryMetadata",
]
