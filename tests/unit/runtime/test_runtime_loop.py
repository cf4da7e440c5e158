"""Integration-style tests for the interactive loop.

Keys, terminal size, and fetch outcomes are faked so the loop runs without a
tty or a network.
"""

from __future__ import annotations

import os
import unittest
from contextlib import contextmanager
from datetime import datetime, timezone
from unittest import mock

from forkview.errors import BrowserLaunchError, GatewayError
from forkview.models import Fork, ForksPage, SortMode
from forkview.pagination.machine import FetchRequest, initial_state
from forkview.runtime import RuntimeLoopCallbacks, RuntimeLoopTiming, run_main_loop
from forkview.runtime.fetch_worker import FetchOutcome
from forkview.runtime.state import BrowserState


def _forks_page(prefix: str = "a", count: int = 3, has_next: bool = True) -> ForksPage:
    forks = tuple(
        Fork(
            name_with_owner=f"{prefix}/repo{i}",
            stargazer_count=i,
            fork_count=0,
            updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            url=f"https://github.com/{prefix}/repo{i}",
            ahead_by=0,
            behind_by=0,
        )
        for i in range(count)
    )
    return ForksPage(forks=forks, total_count=count, end_cursor=f"{prefix}-end", has_next_page=has_next)


class _FakeTerminal:
    def __init__(self) -> None:
        self.entered = 0
        self.exited = 0

    @contextmanager
    def raw_mode(self):
        self.entered += 1
        try:
            yield
        finally:
            self.exited += 1


class _FakeFetcher:
    """Answers each dispatched request on the next drain."""

    def __init__(self, respond) -> None:
        self.respond = respond
        self.requests: list[FetchRequest] = []
        self._ready: list[FetchOutcome] = []

    def dispatch(self, request: FetchRequest) -> None:
        self.requests.append(request)
        self._ready.append(self.respond(request))

    def drain(self) -> list[FetchOutcome]:
        out, self._ready = self._ready, []
        return out


def _ok(request: FetchRequest) -> FetchOutcome:
    return FetchOutcome(request=request, result=_forks_page(request.sort_mode.value.lower()))


class RuntimeLoopTests(unittest.TestCase):
    def _run(self, keys, *, respond=_ok, open_url=None, sort_mode=SortMode.UPDATED_AT):
        terminal = _FakeTerminal()
        fetcher = _FakeFetcher(respond)
        state = BrowserState(pagination=initial_state(sort_mode))
        frames = []
        opened: list[str] = []
        saved: list[SortMode] = []
        callbacks = RuntimeLoopCallbacks(
            dispatch_fetch=fetcher.dispatch,
            drain_fetch_results=fetcher.drain,
            open_url=open_url or opened.append,
            render_frame=frames.append,
            save_sort_mode=saved.append,
        )
        with mock.patch(
            "forkview.runtime.loop.shutil.get_terminal_size", return_value=os.terminal_size((120, 30))
        ), mock.patch("forkview.runtime.loop.read_key", side_effect=list(keys)):
            run_main_loop(
                state=state,
                terminal=terminal,
                stdin_fd=0,
                timing=RuntimeLoopTiming(key_poll_ms=0),
                callbacks=callbacks,
            )
        return state, terminal, fetcher, frames, opened, saved

    def test_initial_fetch_is_dispatched_and_quit_exits(self) -> None:
        state, terminal, fetcher, frames, _, _ = self._run(["", "q"])

        self.assertEqual(len(fetcher.requests), 1)
        first = fetcher.requests[0]
        self.assertEqual((first.page, first.cursor, first.sort_mode), (0, None, SortMode.UPDATED_AT))
        self.assertFalse(state.pagination.loading)
        self.assertEqual(len(state.pagination.current_page), 3)
        self.assertEqual((terminal.entered, terminal.exited), (1, 1))
        self.assertTrue(frames)
        self.assertEqual(frames[-1].width, 120)

    def test_enter_opens_selected_fork_once_for_crlf(self) -> None:
        _, _, _, _, opened, _ = self._run(["", "j", "ENTER_CR", "ENTER_LF", "q"])
        self.assertEqual(opened, ["https://github.com/updated_at/repo1"])

    def test_browser_failure_sets_status_message(self) -> None:
        def failing_open(_url: str) -> None:
            raise BrowserLaunchError("no supported browser launcher found")

        _, _, _, frames, _, _ = self._run(["", "ENTER_LF", "", "q"], open_url=failing_open)
        self.assertEqual(
            frames[-1].status_message,
            "Failed to open browser: no supported browser launcher found",
        )

    def test_sort_change_refetches_and_persists(self) -> None:
        state, _, fetcher, _, _, saved = self._run(["", "s", "", "q"])

        self.assertEqual([request.sort_mode for request in fetcher.requests], [SortMode.UPDATED_AT, SortMode.STARGAZERS])
        self.assertIsNone(fetcher.requests[1].cursor)
        self.assertEqual(saved, [SortMode.STARGAZERS])
        self.assertEqual(state.pagination.current_page[0].name_with_owner, "stargazers/repo0")

    def test_forward_navigation_uses_cursor(self) -> None:
        state, _, fetcher, _, _, _ = self._run(["", "l", "", "q"])

        self.assertEqual(fetcher.requests[1].page, 1)
        self.assertEqual(fetcher.requests[1].cursor, "updated_at-end")
        self.assertEqual(state.pagination.page, 1)

    def test_failed_fetch_raises_after_restoring_terminal(self) -> None:
        def failing(request: FetchRequest) -> FetchOutcome:
            return FetchOutcome(request=request, error=GatewayError("Forks request failed: HTTP 502"))

        terminal = _FakeTerminal()
        with self.assertRaises(GatewayError) as exc_info:
            fetcher = _FakeFetcher(failing)
            callbacks = RuntimeLoopCallbacks(
                dispatch_fetch=fetcher.dispatch,
                drain_fetch_results=fetcher.drain,
                open_url=lambda _url: None,
                render_frame=lambda _context: None,
            )
            with mock.patch(
                "forkview.runtime.loop.shutil.get_terminal_size", return_value=os.terminal_size((80, 24))
            ), mock.patch("forkview.runtime.loop.read_key", side_effect=["q"]):
                run_main_loop(BrowserState(), terminal, 0, RuntimeLoopTiming(key_poll_ms=0), callbacks)
        self.assertIn("HTTP 502", str(exc_info.exception))
        self.assertEqual(terminal.exited, 1)

    def test_non_gateway_failure_is_wrapped(self) -> None:
        def failing(request: FetchRequest) -> FetchOutcome:
            return FetchOutcome(request=request, error=RuntimeError("boom"))

        with self.assertRaises(GatewayError) as exc_info:
            self._run(["q"], respond=failing)
        self.assertIsInstance(exc_info.exception.__cause__, RuntimeError)

    def test_keyboard_interrupt_exits_cleanly(self) -> None:
        state, terminal, _, _, _, _ = self._run([KeyboardInterrupt()])
        self.assertEqual(terminal.exited, 1)
        self.assertFalse(state.pagination.loading)

    def test_interrupt_while_rendering_exits_cleanly(self) -> None:
        def interrupted_render(_context) -> None:
            raise KeyboardInterrupt

        terminal = _FakeTerminal()
        fetcher = _FakeFetcher(_ok)
        callbacks = RuntimeLoopCallbacks(
            dispatch_fetch=fetcher.dispatch,
            drain_fetch_results=fetcher.drain,
            open_url=lambda _url: None,
            render_frame=interrupted_render,
        )
        with mock.patch(
            "forkview.runtime.loop.shutil.get_terminal_size", return_value=os.terminal_size((80, 24))
        ), mock.patch("forkview.runtime.loop.read_key") as read_key_mock:
            run_main_loop(BrowserState(), terminal, 0, RuntimeLoopTiming(key_poll_ms=0), callbacks)

        read_key_mock.assert_not_called()
        self.assertEqual((terminal.entered, terminal.exited), (1, 1))

    def test_keys_while_loading_are_ignored(self) -> None:
        held: list[FetchRequest] = []

        class _SlowFetcher(_FakeFetcher):
            def drain(self) -> list[FetchOutcome]:
                return []

        terminal = _FakeTerminal()
        fetcher = _SlowFetcher(_ok)
        state = BrowserState()
        callbacks = RuntimeLoopCallbacks(
            dispatch_fetch=lambda request: held.append(request),
            drain_fetch_results=fetcher.drain,
            open_url=lambda _url: self.fail("nothing to open while loading"),
            render_frame=lambda _context: None,
        )
        with mock.patch(
            "forkview.runtime.loop.shutil.get_terminal_size", return_value=os.terminal_size((80, 24))
        ), mock.patch("forkview.runtime.loop.read_key", side_effect=["l", "s", "j", "ENTER_CR", "q"]):
            run_main_loop(state, terminal, 0, RuntimeLoopTiming(key_poll_ms=0), callbacks)

        self.assertEqual(len(held), 1)
        self.assertTrue(state.pagination.loading)


if __name__ == "__main__":
    unittest.main()
