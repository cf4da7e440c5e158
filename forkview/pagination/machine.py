"""Pagination state machine for the fork browser.

``transition(state, event)`` is a pure function returning the next state and
the effects the host loop must execute. The machine is either idle on
``state.page`` or loading ``state.loading_page``; while loading, navigation
and sort requests are swallowed so at most one fetch is ever outstanding.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from ..models import DEFAULT_SORT_MODE, ForksPage, Fork, Page, SortMode
from .cache import EMPTY_CACHE, PageCache

logger = logging.getLogger(__name__)

NO_LAST_PAGE = -1


@dataclass(frozen=True)
class FetchRequest:
    """Parameters for one page fetch, tagged with its dispatch generation."""

    generation: int
    page: int
    sort_mode: SortMode
    cursor: str | None = None


@dataclass(frozen=True)
class PaginationState:
    """Everything the loop needs to render and to decide the next fetch."""

    page: int = 0
    sort_mode: SortMode = DEFAULT_SORT_MODE
    cache: PageCache = EMPTY_CACHE
    cursor: str | None = None
    last_page: int = NO_LAST_PAGE
    loading_page: int | None = 0
    total_count: int = 0
    selected_row: int = 0
    generation: int = 0

    @property
    def loading(self) -> bool:
        return self.loading_page is not None

    @property
    def current_page(self) -> Page:
        return self.cache.get(self.page) or ()

    @property
    def selected_fork(self) -> Fork | None:
        rows = self.current_page
        if 0 <= self.selected_row < len(rows):
            return rows[self.selected_row]
        return None

    @property
    def on_last_page(self) -> bool:
        return self.last_page != NO_LAST_PAGE and self.page == self.last_page

    def pending_request(self) -> FetchRequest | None:
        """Return the request currently in flight, if any."""
        if self.loading_page is None:
            return None
        return FetchRequest(
            generation=self.generation,
            page=self.loading_page,
            sort_mode=self.sort_mode,
            cursor=None if self.loading_page == 0 else self.cursor,
        )


# Events


@dataclass(frozen=True)
class NavigateForward:
    pass


@dataclass(frozen=True)
class NavigateBackward:
    pass


@dataclass(frozen=True)
class MoveSelection:
    """Move the highlighted row; spills over to the adjacent page at the edges."""

    delta: int


@dataclass(frozen=True)
class ChangeSort:
    mode: SortMode


@dataclass(frozen=True)
class FetchCompleted:
    request: FetchRequest
    result: ForksPage


@dataclass(frozen=True)
class FetchFailed:
    request: FetchRequest
    error: BaseException


@dataclass(frozen=True)
class OpenSelected:
    pass


@dataclass(frozen=True)
class Quit:
    pass


Event = (
    NavigateForward
    | NavigateBackward
    | MoveSelection
    | ChangeSort
    | FetchCompleted
    | FetchFailed
    | OpenSelected
    | Quit
)


# Effects


@dataclass(frozen=True)
class FetchPage:
    request: FetchRequest


@dataclass(frozen=True)
class OpenUrl:
    url: str


@dataclass(frozen=True)
class Terminate:
    """Abort the session because the in-flight fetch failed."""

    error: BaseException


@dataclass(frozen=True)
class Exit:
    pass


Effect = FetchPage | OpenUrl | Terminate | Exit

Transition = tuple[PaginationState, tuple[Effect, ...]]


def initial_state(sort_mode: SortMode = DEFAULT_SORT_MODE, total_count: int = 0) -> PaginationState:
    """Return the startup state: loading page 0 with an empty cache."""
    return PaginationState(sort_mode=sort_mode, total_count=max(0, total_count), loading_page=0)


def start(state: PaginationState) -> tuple[Effect, ...]:
    """Effects needed to kick off the fetch implied by ``state``."""
    request = state.pending_request()
    if request is None:
        return ()
    return (FetchPage(request),)


def _dispatch(state: PaginationState, target: int, cursor: str | None, /, **changes) -> Transition:
    generation = state.generation + 1
    next_state = replace(state, loading_page=target, generation=generation, **changes)
    request = FetchRequest(
        generation=generation,
        page=target,
        sort_mode=next_state.sort_mode,
        cursor=cursor,
    )
    logger.debug("dispatch fetch page=%d sort=%s cursor=%r", target, request.sort_mode.value, cursor)
    return next_state, (FetchPage(request),)


def navigate_forward(state: PaginationState) -> Transition:
    if state.loading:
        return state, ()
    target = state.page + 1
    if target in state.cache:
        return replace(state, page=target, selected_row=0), ()
    if state.on_last_page or state.cursor is None:
        return state, ()
    return _dispatch(state, target, state.cursor)


def navigate_backward(state: PaginationState, *, select_last_row: bool = False) -> Transition:
    if state.loading or state.page <= 0:
        return state, ()
    target = state.page - 1
    rows = state.cache.get(target)
    if rows is None:
        return state, ()
    selected_row = max(0, len(rows) - 1) if select_last_row else 0
    return replace(state, page=target, selected_row=selected_row), ()


def move_selection(state: PaginationState, delta: int) -> Transition:
    if state.loading or delta == 0:
        return state, ()
    row_count = len(state.current_page)
    target_row = state.selected_row + delta
    if target_row >= row_count:
        return navigate_forward(state)
    if target_row < 0:
        return navigate_backward(state, select_last_row=True)
    return replace(state, selected_row=target_row), ()


def change_sort(state: PaginationState, mode: SortMode) -> Transition:
    if state.loading:
        return state, ()
    return _dispatch(
        state,
        0,
        None,
        sort_mode=mode,
        page=0,
        cache=state.cache.clear(),
        cursor=None,
        last_page=NO_LAST_PAGE,
        selected_row=0,
    )


def _is_in_flight(state: PaginationState, request: FetchRequest) -> bool:
    return (
        state.loading_page is not None
        and request.generation == state.generation
        and request.page == state.loading_page
        and request.sort_mode == state.sort_mode
    )


def fetch_completed(state: PaginationState, request: FetchRequest, result: ForksPage) -> Transition:
    if not _is_in_flight(state, request):
        logger.debug("dropping stale completion for page=%d generation=%d", request.page, request.generation)
        return state, ()
    page = request.page
    last_page = state.last_page if result.has_next_page else page
    next_state = replace(
        state,
        page=page,
        cache=state.cache.put(page, result.forks),
        cursor=result.end_cursor,
        total_count=result.total_count,
        last_page=last_page,
        loading_page=None,
        selected_row=0,
    )
    logger.debug(
        "loaded page=%d rows=%d has_next=%s total=%d",
        page,
        len(result.forks),
        result.has_next_page,
        result.total_count,
    )
    return next_state, ()


def fetch_failed(state: PaginationState, request: FetchRequest, error: BaseException) -> Transition:
    if not _is_in_flight(state, request):
        logger.debug("dropping stale failure for page=%d generation=%d", request.page, request.generation)
        return state, ()
    return state, (Terminate(error),)


def open_selected(state: PaginationState) -> Transition:
    if state.loading:
        return state, ()
    fork = state.selected_fork
    if fork is None:
        return state, ()
    return state, (OpenUrl(fork.url),)


def transition(state: PaginationState, event: Event) -> Transition:
    """Apply ``event`` to ``state`` and return ``(next_state, effects)``."""
    if isinstance(event, Quit):
        return state, (Exit(),)
    if isinstance(event, NavigateForward):
        return navigate_forward(state)
    if isinstance(event, NavigateBackward):
        return navigate_backward(state)
    if isinstance(event, MoveSelection):
        return move_selection(state, event.delta)
    if isinstance(event, ChangeSort):
        return change_sort(state, event.mode)
    if isinstance(event, FetchCompleted):
        return fetch_completed(state, event.request, event.result)
    if isinstance(event, FetchFailed):
        return fetch_failed(state, event.request, event.error)
    if isinstance(event, OpenSelected):
        return open_selected(state)
    raise TypeError(f"unsupported event: {event!r}")


__all__ = [
    "NO_LAST_PAGE",
    "FetchRequest",
    "PaginationState",
    "NavigateForward",
    "NavigateBackward",
    "MoveSelection",
    "ChangeSort",
    "FetchCompleted",
    "FetchFailed",
    "OpenSelected",
    "Quit",
    "Event",
    "FetchPage",
    "OpenUrl",
    "Terminate",
    "Exit",
    "Effect",
    "initial_state",
    "start",
    "transition",
]
