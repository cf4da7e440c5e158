"""Compose the interactive fork browser and run it.

Wires the gateway into a background fetch worker, builds the initial state,
and hands everything to ``run_main_loop``.
"""

from __future__ import annotations

import logging
import sys

from ..browser import open_url
from ..github.gateway import ForkGateway
from ..models import SortMode
from ..pagination.machine import initial_state
from ..render import render_frame
from ..ui_theme import UITheme
from . import config
from .fetch_worker import FetchWorker
from .loop import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from .state import BrowserState
from .terminal import TerminalController

logger = logging.getLogger(__name__)


def run_browser(
    gateway: ForkGateway,
    sort_mode: SortMode,
    theme: UITheme,
    total_count: int = 0,
) -> None:
    """Run the browser for ``gateway``'s repository until the user quits."""
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    terminal = TerminalController(stdin_fd, stdout_fd)
    worker = FetchWorker(gateway.fetch_page)
    state = BrowserState(
        pagination=initial_state(sort_mode, total_count=total_count),
        theme=theme,
    )
    logger.info("starting browser for %s sorted by %s", gateway.repository.full_name, sort_mode.value)
    run_main_loop(
        state=state,
        terminal=terminal,
        stdin_fd=stdin_fd,
        timing=RuntimeLoopTiming(),
        callbacks=RuntimeLoopCallbacks(
            dispatch_fetch=worker.submit,
            drain_fetch_results=worker.drain_results,
            open_url=open_url,
            render_frame=render_frame,
            save_sort_mode=config.save_sort_mode,
        ),
    )
