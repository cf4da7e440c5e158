"""Pagination core: page cache, state machine, and row projection."""

from .cache import EMPTY_CACHE, PageCache
from .machine import (
    ChangeSort,
    Exit,
    FetchCompleted,
    FetchFailed,
    FetchPage,
    FetchRequest,
    MoveSelection,
    NavigateBackward,
    NavigateForward,
    OpenSelected,
    OpenUrl,
    PaginationState,
    Quit,
    Terminate,
    initial_state,
    start,
    transition,
)
from .projector import COLUMNS, project

__all__ = [
    "EMPTY_CACHE",
    "PageCache",
    "ChangeSort",
    "Exit",
    "FetchCompleted",
    "FetchFailed",
    "FetchPage",
    "FetchRequest",
    "MoveSelection",
    "NavigateBackward",
    "NavigateForward",
    "OpenSelected",
    "OpenUrl",
    "PaginationState",
    "Quit",
    "Terminate",
    "initial_state",
    "start",
    "transition",
    "COLUMNS",
    "project",
]
