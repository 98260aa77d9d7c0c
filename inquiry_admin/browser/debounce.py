from __future__ import annotations

import asyncio
import inspect
from typing import Awaitable, Callable, Optional, Union

CommitCallback = Callable[[str], Union[Awaitable[None], None]]

DEFAULT_QUIET_MS = 500


class DebouncedSearch:
    """
    Trailing debounce for the search box.

    `push()` records the raw value and (re)schedules a commit `quiet_ms` later.
    Each push bumps a generation token, so a timer from an older push can never
    commit. `on_commit` runs only when the committed value actually changes,
    which keeps the start-up empty term from triggering a second load.
    """

    def __init__(
        self,
        on_commit: CommitCallback,
        *,
        quiet_ms: int = DEFAULT_QUIET_MS,
        initial: str = "",
    ):
        self._on_commit = on_commit
        self.quiet_ms = quiet_ms
        self.value = initial
        self.committed = initial
        self._generation = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def is_searching(self) -> bool:
        return self.pending and self.value != self.committed

    def push(self, value: str) -> None:
        self.value = value
        self._generation += 1
        self._cancel_task()
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._fire(self._generation))

    def cancel(self) -> None:
        """Drop the pending commit; the raw value stays as typed."""
        self._generation += 1
        self._cancel_task()

    async def wait(self) -> None:
        """Wait for the pending commit (if any) to finish."""
        task = self._task
        if task is not None:
            await asyncio.wait({task})

    def _cancel_task(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _fire(self, generation: int) -> None:
        await asyncio.sleep(self.quiet_ms / 1000)
        if generation != self._generation:
            return
        value = self.value
        if value == self.committed:
            return
        self.committed = value
        # detach first: a later push must not cancel the commit work itself
        self._task = None
        result = self._on_commit(value)
        if inspect.isawaitable(result):
            await result
