"""Pending operations of one actor host, in arrival order."""

import asyncio
from typing import List

from ..messaging.message import Envelope


class Mailbox:
    """Bounded FIFO of envelopes; ``put`` waits while it is full."""

    def __init__(self, maxsize: int = 1000):
        """
        Initialize mailbox.

        Args:
            maxsize: Maximum number of queued envelopes (0 = unbounded)
        """
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=max(maxsize, 0))

    async def put(self, envelope: Envelope) -> None:
        await self._queue.put(envelope)

    async def get(self) -> Envelope:
        return await self._queue.get()

    def drain(self) -> List[Envelope]:
        """Remove and return every queued envelope, oldest first."""
        drained = []
        while not self._queue.empty():
            drained.append(self._queue.get_nowait())
        return drained

    def empty(self) -> bool:
        return self._queue.empty()

    def qsize(self) -> int:
        return self._queue.qsize()
