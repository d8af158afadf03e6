"""
SSE Transport Layer

Server-Sent Events push stream plus POST-based inbound delivery, correlated by
session ID.
"""

from mcp_sse_bridge.services.sse_transport.errors import (
    TransportError,
    AlreadyClosedError,
    AlreadyStartedError,
    NotConnectedError,
    MalformedMessageError,
    NoHandlerError,
    MissingSessionIdError,
    UnknownSessionError,
)
from mcp_sse_bridge.services.sse_transport.stream import SseStream, StreamClosedError
from mcp_sse_bridge.services.sse_transport.transport import SseTransport
from mcp_sse_bridge.services.sse_transport.registry import SessionRegistry
from mcp_sse_bridge.services.sse_transport.peer import Peer
from mcp_sse_bridge.services.sse_transport.sessions import SessionRouter
from mcp_sse_bridge.services.sse_transport.response import SessionEventSourceResponse

__all__ = [
    "TransportError",
    "AlreadyClosedError",
    "AlreadyStartedError",
    "NotConnectedError",
    "MalformedMessageError",
    "NoHandlerError",
    "MissingSessionIdError",
    "UnknownSessionError",
    "SseStream",
    "StreamClosedError",
    "SseTransport",
    "SessionRegistry",
    "Peer",
    "SessionRouter",
    "SessionEventSourceResponse",
]
