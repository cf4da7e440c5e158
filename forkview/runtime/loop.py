"""Main interactive event loop for the fork browser.

Serializes three event sources into the pagination state machine: keyboard
input, fetch outcomes drained from the worker queue, and animation ticks.
The loop only blocks in ``read_key``; its timeout doubles as the tick.
"""

from __future__ import annotations

import logging
import shutil
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..errors import BrowserLaunchError, ForkviewError, GatewayError
from ..input import read_key
from ..keys import KeyComboRegistry, default_key_registry
from ..models import SortMode
from ..pagination.machine import (
    Effect,
    Event,
    Exit,
    FetchPage,
    FetchRequest,
    OpenUrl,
    Terminate,
    start,
    transition,
)
from ..render import RenderContext, clamp_table_start, table_view_rows
from .fetch_worker import FetchOutcome
from .state import BrowserState
from .terminal import TerminalController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_poll_ms: int = 120
    spinner_frame_seconds: float = 0.1
    status_message_seconds: float = 3.0


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected operations used by ``run_main_loop``.

    Effects of the state machine are executed through these so the loop can
    be driven in tests without a network or a real terminal.
    """

    dispatch_fetch: Callable[[FetchRequest], object]
    drain_fetch_results: Callable[[], list[FetchOutcome]]
    open_url: Callable[[str], None]
    render_frame: Callable[[RenderContext], None]
    save_sort_mode: Callable[[SortMode], None] = lambda _mode: None
    key_registry: KeyComboRegistry | None = None


def _fatal_error(error: BaseException) -> ForkviewError:
    if isinstance(error, ForkviewError):
        return error
    wrapped = GatewayError(str(error) or type(error).__name__)
    wrapped.__cause__ = error
    return wrapped


def run_main_loop(
    state: BrowserState,
    terminal: TerminalController,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Run the browser until a quit action occurs.

    A failed in-flight fetch raises out of the loop after the terminal has
    been restored.
    """
    registry = callbacks.key_registry or default_key_registry()

    def set_status_message(message: str) -> None:
        state.status_message = message
        state.status_message_until = time.monotonic() + timing.status_message_seconds
        state.dirty = True

    def execute(effects: tuple[Effect, ...]) -> bool:
        """Run effects in order and return ``True`` when the loop should exit."""
        should_exit = False
        for effect in effects:
            if isinstance(effect, FetchPage):
                callbacks.dispatch_fetch(effect.request)
            elif isinstance(effect, OpenUrl):
                try:
                    callbacks.open_url(effect.url)
                except BrowserLaunchError as exc:
                    logger.warning("browser launch failed for %s: %s", effect.url, exc)
                    set_status_message(f"Failed to open browser: {exc}")
            elif isinstance(effect, Terminate):
                raise _fatal_error(effect.error)
            elif isinstance(effect, Exit):
                should_exit = True
        return should_exit

    def apply(event: Event) -> bool:
        previous = state.pagination
        next_state, effects = transition(previous, event)
        if next_state != previous:
            state.pagination = next_state
            state.dirty = True
        if next_state.sort_mode != previous.sort_mode:
            callbacks.save_sort_mode(next_state.sort_mode)
        return execute(effects)

    def drive() -> None:
        spinner_frame = 0
        last_size: tuple[int, int] | None = None
        if execute(start(state.pagination)):
            return
        while True:
            term = shutil.get_terminal_size((80, 24))
            now = time.monotonic()
            if (term.columns, term.lines) != last_size:
                last_size = (term.columns, term.lines)
                state.dirty = True
            if state.status_message and now >= state.status_message_until:
                state.status_message = ""
                state.status_message_until = 0.0
                state.dirty = True

            for outcome in callbacks.drain_fetch_results():
                if apply(outcome.to_event()):
                    return

            pagination = state.pagination
            if pagination.loading:
                next_spinner_frame = int(now / timing.spinner_frame_seconds)
                if next_spinner_frame != spinner_frame:
                    spinner_frame = next_spinner_frame
                    state.dirty = True
            else:
                table_start = clamp_table_start(
                    state.table_start,
                    pagination.selected_row,
                    len(pagination.current_page),
                    table_view_rows(term.lines),
                )
                if table_start != state.table_start:
                    state.table_start = table_start
                    state.dirty = True

            if state.dirty:
                callbacks.render_frame(
                    RenderContext(
                        state=pagination,
                        width=term.columns,
                        max_lines=max(1, term.lines),
                        table_start=state.table_start,
                        spinner_frame=spinner_frame,
                        status_message=state.status_message,
                        theme=state.theme,
                    )
                )
                state.dirty = False

            key = read_key(stdin_fd, timeout_ms=timing.key_poll_ms)
            if key == "":
                continue
            if state.skip_next_lf and key == "ENTER_LF":
                state.skip_next_lf = False
                continue
            if key == "ENTER_CR":
                key = "ENTER"
                state.skip_next_lf = True
            elif key == "ENTER_LF":
                key = "ENTER"
                state.skip_next_lf = False
            else:
                state.skip_next_lf = False

            event = registry.dispatch(key)
            if event is None:
                continue
            if apply(event):
                return

    with terminal.raw_mode():
        try:
            drive()
        except KeyboardInterrupt:
            logger.debug("interrupted; leaving the browser")


__all__ = ["RuntimeLoopTiming", "RuntimeLoopCallbacks", "run_main_loop"]
