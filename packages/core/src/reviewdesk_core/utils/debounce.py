"""Cancelable delayed call for search-as-you-type.

Every submit() cancels the pending call and schedules a new one `delay`
seconds later, so a burst of edits produces a single call with the last
value. Submitting an empty value fires immediately: clearing a search
should restore the full listing without waiting.

The scheduler defaults to the running event loop's call_later; tests inject
a fake one with the same (delay, callback, *args) -> handle signature.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Protocol


class Handle(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[..., Handle]


class Debouncer:
    def __init__(self, delay: float, callback: Callable[[str], Any], scheduler: Scheduler | None = None):
        self.delay = delay
        self._callback = callback
        self._scheduler = scheduler
        self._handle: Handle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def submit(self, value: str) -> None:
        self.cancel()
        if not value:
            self._callback(value)
            return
        schedule = self._scheduler or asyncio.get_running_loop().call_later
        self._handle = schedule(self.delay, self._fire, value)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self, value: str) -> None:
        self._handle = None
        self._callback(value)
