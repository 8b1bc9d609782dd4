import asyncio
from collections.abc import Coroutine
from typing import Any


class TimerSlot:
    """Holds the single authoritative task for one kind of timer.

    Scheduling always cancels the task currently in the slot first, so at most
    one timer of each kind is alive at any moment.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def schedule(self, coro: Coroutine[Any, Any, None]) -> None:
        self.cancel()
        self._task = asyncio.create_task(coro, name=self.name)

    def cancel(self) -> None:
        task, self._task = self._task, None
        # A timer may clear its own slot; it then finishes on its own
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
