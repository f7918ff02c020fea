"""
Settlement - Awaitable Completion Handle

A Settlement is a two-state signal: pending or fulfilled. Counters hand
them out so callers can ``await`` the moment a count returns to zero.
A fulfilled handle stays fulfilled; the ledger replaces it with a fresh
pending one instead of resetting it.
"""

import asyncio
from typing import Optional


class Settlement:
    """
    Awaitable that completes once ``resolve()`` has been called.

    Backed by an ``asyncio.Event`` so it can be created outside a running
    event loop. Waiters resume on the loop after the resolving call has
    returned.
    """

    __slots__ = ("_event",)

    def __init__(self, done: bool = False):
        self._event = asyncio.Event()
        if done:
            self._event.set()

    @classmethod
    def resolved(cls) -> "Settlement":
        """Create an already fulfilled settlement."""
        return cls(done=True)

    @property
    def done(self) -> bool:
        return self._event.is_set()

    def resolve(self) -> None:
        """Fulfill the handle. Calling it again has no effect."""
        self._event.set()

    async def wait(self, timeout: Optional[float] = None) -> None:
        """
        Wait for the handle to be fulfilled.

        Args:
            timeout: Seconds to wait before raising ``asyncio.TimeoutError``.
                ``None`` waits forever.
        """
        if self._event.is_set():
            return
        if timeout is None:
            await self._event.wait()
        else:
            await asyncio.wait_for(self._event.wait(), timeout)

    def __await__(self):
        return self.wait().__await__()

    def __repr__(self) -> str:
        state = "fulfilled" if self.done else "pending"
        return f"Settlement({state})"


__all__ = ["Settlement"]
