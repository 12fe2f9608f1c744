import asyncio

import pytest

from services.thumbnail_queue import BUCKET_KIND, GALLERY_KIND, ThumbnailQueue, ThumbnailWorkItem


def _item(record_id: str, kind: str = GALLERY_KIND) -> ThumbnailWorkItem:
    return ThumbnailWorkItem(kind=kind, record_id=record_id, absolute_path=f"/tmp/{record_id}.jpg", file_name=f"{record_id}.jpg")


def test_enqueue_rejects_unknown_kind():
    queue = ThumbnailQueue()
    with pytest.raises(ValueError):
        queue.enqueue(_item("x", kind="poster"))
    assert queue.pending() == 0


def test_drain_returns_items_in_fifo_order():
    queue = ThumbnailQueue()
    queue.enqueue(_item("a"))
    queue.enqueue(_item("b", kind=BUCKET_KIND))
    queue.enqueue(_item("c"))

    assert [item.record_id for item in queue.drain()] == ["a", "b", "c"]
    assert queue.pending() == 0


@pytest.mark.asyncio
async def test_dequeue_yields_in_order_and_waits_for_more():
    queue = ThumbnailQueue()
    queue.enqueue(_item("first"))
    queue.enqueue(_item("second"))
    seen = []

    async def consume():
        async for item in queue.dequeue():
            seen.append(item.record_id)

    task = asyncio.create_task(consume())
    await asyncio.sleep(0.01)
    queue.enqueue(_item("third"))
    await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert seen == ["first", "second", "third"]
