# expense_import/controllers/request_tracker.py
"""
Generation-tagged request tokens for the import session's async calls.

Every file load and batch submission is started through ``RequestTracker.begin``.
Starting a new request (or calling ``invalidate``) cancels whatever was in
flight; when an awaited call resolves, the caller asks ``is_current(token)``
before applying the result, so a late answer from an abandoned call is dropped.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

log = logging.getLogger(__name__)


@dataclass
class RequestToken:
    """Cancellation handle for one asynchronous call."""

    generation: int
    kind: str
    _cancelled: bool = False
    _task: Optional[asyncio.Future] = field(default=None, repr=False)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def bind(self, task: asyncio.Future) -> None:
        """Attach the task doing the work so ``cancel`` can interrupt it."""
        self._task = task
        if self._cancelled:
            task.cancel()

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()
        log.debug("Cancelled %s request (generation %d)", self.kind, self.generation)


class RequestTracker:
    """Issues tokens with increasing generations; only the newest token is current."""

    def __init__(self) -> None:
        self._generation = 0
        self._active: Optional[RequestToken] = None

    @property
    def generation(self) -> int:
        return self._generation

    def begin(self, kind: str) -> RequestToken:
        self.invalidate()
        self._active = RequestToken(generation=self._generation, kind=kind)
        return self._active

    def invalidate(self) -> None:
        """Cancel the in-flight request, if any, and move to a new generation."""
        if self._active is not None:
            self._active.cancel()
            self._active = None
        self._generation += 1

    def is_current(self, token: RequestToken) -> bool:
        return not token.cancelled and token.generation == self._generation

    def finish(self, token: RequestToken) -> None:
        """Forget ``token`` once its result has been applied (or discarded)."""
        if self._active is token:
            self._active = None
