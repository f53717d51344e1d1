"""Cancellation handle shared by a caller and a controlled connection."""

from __future__ import annotations

import asyncio
from collections.abc import Callable


class AbortControl:
    """One-shot cancellation handle.

    ``abort()`` signals intent and runs the closer that tears the connection
    down. ``on_abort`` completes exactly once, when the controlled connection
    has actually closed, whatever the reason (abort, server close, failure).
    Must be created while an event loop is running.
    """

    def __init__(self, closer: Callable[[], object] | None = None) -> None:
        self._closer = closer
        self._aborted = False
        self.on_abort: asyncio.Future[None] = asyncio.get_running_loop().create_future()

    @property
    def aborted(self) -> bool:
        """True once ``abort()`` has been called."""
        return self._aborted

    @property
    def closed(self) -> bool:
        """True once the controlled connection has closed."""
        return self.on_abort.done()

    def bind(self, closer: Callable[[], object]) -> None:
        self._closer = closer

    def abort(self) -> None:
        """Request cancellation. Repeated calls are no-ops."""
        if self._aborted or self.closed:
            return
        self._aborted = True
        if self._closer is not None:
            self._closer()

    def settle(self) -> None:
        """Mark the connection closed; only the first call has an effect."""
        if not self.on_abort.done():
            self.on_abort.set_result(None)

    async def wait(self) -> None:
        """Wait until the controlled connection has closed."""
        await asyncio.shield(self.on_abort)
