"""
Peer interface

The upstream protocol engine the transport talks to. It is only known through
this interface so any engine, or a fake in tests, can be plugged in.
"""
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from mcp_sse_bridge.services.sse_transport.transport import SseTransport


class Peer(Protocol):
    """
    Something that consumes and produces messages over a transport.

    connect() is called once per session, before the transport is started. It is
    expected to install transport.on_message (and optionally transport.on_error) and
    to push messages with transport.send().

    on_message may be a plain function or a coroutine function. A coroutine is awaited
    before the POST that delivered the message is acknowledged, so long-running work
    belongs on a separate task.
    """

    async def connect(self, transport: "SseTransport") -> None:
        ...
