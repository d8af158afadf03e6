"""
Outbound SSE stream

One SseStream backs one SSE connection. Writers queue named events, and the HTTP
layer drains them through events(), which is handed to EventSourceResponse.
"""
import asyncio
from typing import Any, AsyncGenerator, Callable, Dict, List
from loguru import logger

_CLOSE = object()


class StreamClosedError(Exception):
    """Raised when writing to a stream that was aborted."""


class SseStream:
    """
    Ordered, exclusively owned event channel for a single SSE connection.

    The stream is closed exactly once, by abort(). Abort callbacks run synchronously
    at that moment, so anything registered with on_abort observes the close before
    the next scheduling turn.
    """

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self._closed_event = asyncio.Event()
        self._abort_callbacks: List[Callable[[], None]] = []

    @property
    def closed(self) -> bool:
        return self._closed

    def on_abort(self, callback: Callable[[], None]) -> None:
        """Register a callback fired once when the stream is aborted."""
        self._abort_callbacks.append(callback)

    async def write_sse(self, event: str, data: str) -> None:
        """
        Queue one named event.

        Raises:
            StreamClosedError: if the stream has already been aborted
        """
        if self._closed:
            raise StreamClosedError(f"Cannot write '{event}' event, stream is closed")
        await self._queue.put({"event": event, "data": data})

    def abort(self) -> None:
        """Close the stream and fire the abort callbacks. Subsequent calls do nothing."""
        if self._closed:
            return
        self._closed = True
        self._closed_event.set()
        # Wake up the reader; events queued before the abort are still delivered
        self._queue.put_nowait(_CLOSE)

        callbacks, self._abort_callbacks = self._abort_callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.error(f"Error in SSE stream abort callback: {str(e)}")

    async def wait_closed(self) -> None:
        """Block until the stream is aborted."""
        await self._closed_event.wait()

    async def events(self) -> AsyncGenerator[Dict[str, Any], None]:
        """
        Yield queued events until the stream is aborted.

        When the consumer goes away (client disconnect cancels the response task),
        the generator is closed and the stream aborted with it.
        """
        try:
            while True:
                item = await self._queue.get()
                if item is _CLOSE:
                    break
                yield item
        finally:
            self.abort()
