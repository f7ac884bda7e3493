"""Bounded event channel between the orchestrator and the HTTP transport."""

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Final, cast

from .constants import EVENT_CHANNEL_SIZE
from .errors import SinkClosedError
from .schemas import StreamEvent

_DONE: Final = object()


def format_sse(event: StreamEvent) -> str:
    payload = event.model_dump(mode="json", by_alias=True)
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


class EventChannel:
    """Producer pushes events with ``send``; the consumer iterates the channel.

    ``complete`` is called by the producer after its last event. ``close`` is
    called by the consumer when the remote peer went away; pending events are
    dropped and further sends fail.
    """

    def __init__(self, maxsize: int = EVENT_CHANNEL_SIZE) -> None:
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=maxsize)
        self._closed = False
        self._completed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, event: StreamEvent) -> None:
        if self._closed or self._completed:
            raise SinkClosedError("Cannot send on a closed event channel")
        await self._queue.put(event)

    async def complete(self) -> None:
        if self._closed or self._completed:
            return
        self._completed = True
        await self._queue.put(_DONE)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(_DONE)

    async def __aiter__(self) -> AsyncIterator[StreamEvent]:
        while True:
            item = await self._queue.get()
            if item is _DONE:
                return
            yield cast(StreamEvent, item)
