"""
Session-bound SSE response

Ties the lifetime of an SseTransport to the HTTP response serving its stream.
"""
from typing import Any
from sse_starlette.sse import EventSourceResponse
from loguru import logger
from mcp_sse_bridge.services.sse_transport.transport import SseTransport


class SessionEventSourceResponse(EventSourceResponse):
    """
    EventSourceResponse that closes its session when the response ends.

    The stream is aborted however the response finishes: normal end, client
    disconnect, cancellation, or a send error. This also covers a client that
    goes away before the first event is pulled from the stream.
    """

    def __init__(self, transport: SseTransport, **kwargs: Any):
        super().__init__(transport.stream.events(), **kwargs)
        self.transport = transport

    async def __call__(self, scope, receive, send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            if not self.transport.stream.closed:
                logger.info(f"SSE response finished for session {self.transport.session_id}")
            self.transport.stream.abort()
