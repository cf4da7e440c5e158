"""Page cache scoped to a single sort mode.

The cache is a value object: ``put`` and ``clear`` return new caches so the
state machine can keep its transition function pure. Entries are only ever
added on fetch completion and dropped all at once on sort change.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from ..models import Page


class PageCache(Mapping[int, Page]):
    """Immutable mapping from zero-based page index to fetched page."""

    __slots__ = ("_pages",)

    def __init__(self, pages: Mapping[int, Page] | None = None) -> None:
        self._pages: Mapping[int, Page] = MappingProxyType(dict(pages or {}))

    def __getitem__(self, index: int) -> Page:
        return self._pages[index]

    def __iter__(self) -> Iterator[int]:
        return iter(sorted(self._pages))

    def __len__(self) -> int:
        return len(self._pages)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PageCache):
            return NotImplemented
        return dict(self._pages) == dict(other._pages)

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._pages.items())))

    def __repr__(self) -> str:
        return f"PageCache(pages={sorted(self._pages)})"

    def get(self, index: int, default: Page | None = None) -> Page | None:
        return self._pages.get(index, default)

    def put(self, index: int, page: Page) -> PageCache:
        """Return a cache that also holds ``page`` at ``index``."""
        if index < 0:
            raise ValueError(f"page index must be >= 0, got {index}")
        pages = dict(self._pages)
        pages[index] = tuple(page)
        return PageCache(pages)

    def clear(self) -> PageCache:
        """Return an empty cache."""
        return EMPTY_CACHE


EMPTY_CACHE = PageCache()


__all__ = ["PageCache", "EMPTY_CACHE"]
