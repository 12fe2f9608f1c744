"""In-process queue of pending thumbnail jobs."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional

logger = logging.getLogger(__name__)

GALLERY_KIND = "gallery"
BUCKET_KIND = "bucket"
MEDIA_KINDS = (GALLERY_KIND, BUCKET_KIND)


@dataclass(frozen=True)
class ThumbnailWorkItem:
    kind: str
    record_id: str
    absolute_path: str
    file_name: str


class ThumbnailQueue:
    """Unbounded FIFO with many producers and a single consumer.

    ``enqueue`` never blocks. ``dequeue`` yields items until the consuming task
    is cancelled; items still queued at that point are dropped and picked up by
    the next backfill pass.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[ThumbnailWorkItem] = asyncio.Queue()
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    def enqueue(self, item: ThumbnailWorkItem) -> None:
        if item.kind not in MEDIA_KINDS:
            raise ValueError(f"Unknown media kind: {item.kind}")
        self._queue.put_nowait(item)
        logger.debug("Queued %s thumbnail for %s", item.kind, item.record_id)

    def pending(self) -> int:
        return self._queue.qsize()

    def drain(self) -> List[ThumbnailWorkItem]:
        """Remove and return every queued item without waiting."""
        items: List[ThumbnailWorkItem] = []
        while True:
            try:
                items.append(self._queue.get_nowait())
            except asyncio.QueueEmpty:
                return items

    def _attach(self) -> None:
        # asyncio.Queue binds to the loop that first waits on it.
        loop = asyncio.get_running_loop()
        if self._loop is loop:
            return
        if self._loop is not None:
            carried = self.drain()
            self._queue = asyncio.Queue()
            for item in carried:
                self._queue.put_nowait(item)
        self._loop = loop

    async def dequeue(self) -> AsyncIterator[ThumbnailWorkItem]:
        self._attach()
        while True:
            item = await self._queue.get()
            try:
                yield item
            finally:
                self._queue.task_done()


thumbnail_queue = ThumbnailQueue()
