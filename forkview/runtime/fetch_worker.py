"""Background fetch worker for page requests.

Each submitted request runs on its own daemon thread; outcomes are handed
back to the loop thread through a queue and never touch loop state directly.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from queue import Empty, Queue

from ..models import ForksPage, SortMode
from ..pagination.machine import FetchCompleted, FetchFailed, FetchRequest

logger = logging.getLogger(__name__)

FetchPageFn = Callable[[int, SortMode, str | None], ForksPage]


@dataclass(frozen=True)
class FetchOutcome:
    """Completed fetch: exactly one of ``result`` or ``error`` is set."""

    request: FetchRequest
    result: ForksPage | None = None
    error: BaseException | None = None

    def to_event(self) -> FetchCompleted | FetchFailed:
        if self.error is not None or self.result is None:
            return FetchFailed(self.request, self.error or RuntimeError("fetch returned no result"))
        return FetchCompleted(self.request, self.result)


class FetchWorker:
    """Run page fetches off the loop thread and queue their outcomes."""

    def __init__(self, fetch_page: FetchPageFn) -> None:
        self._fetch_page = fetch_page
        self._results: Queue[FetchOutcome] = Queue()

    def _run(self, request: FetchRequest) -> None:
        try:
            result = self._fetch_page(request.page, request.sort_mode, request.cursor)
        except Exception as exc:
            logger.exception("fetch for page %d failed", request.page)
            self._results.put(FetchOutcome(request=request, error=exc))
            return
        self._results.put(FetchOutcome(request=request, result=result))

    def submit(self, request: FetchRequest) -> threading.Thread:
        """Start fetching ``request`` in the background."""
        worker = threading.Thread(
            target=self._run,
            args=(request,),
            name=f"forkview-fetch-{request.generation}",
            daemon=True,
        )
        worker.start()
        return worker

    def drain_results(self) -> list[FetchOutcome]:
        """Drain all completed fetch outcomes."""
        out: list[FetchOutcome] = []
        while True:
            try:
                out.append(self._results.get_nowait())
            except Empty:
                break
        return out


__all__ = ["FetchOutcome", "FetchWorker"]
