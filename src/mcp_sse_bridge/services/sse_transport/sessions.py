"""
Session router

Owns the session registry and dispatches the two HTTP interactions of the SSE
transport: opening a stream and posting a message to it.
"""
from typing import Any, Dict, List, Optional
from loguru import logger
from fastapi import Request
from fastapi.responses import Response
from mcp_sse_bridge.config import APP_NAME, APP_VERSION, MESSAGE_URL
from mcp_sse_bridge.services.sse_transport.errors import (
    AlreadyClosedError,
    MissingSessionIdError,
    UnknownSessionError,
)
from mcp_sse_bridge.services.sse_transport.peer import Peer
from mcp_sse_bridge.services.sse_transport.registry import SessionRegistry
from mcp_sse_bridge.services.sse_transport.stream import SseStream
from mcp_sse_bridge.services.sse_transport.transport import SseTransport


class SessionRouter:
    """Creates, registers and looks up SSE transports."""

    def __init__(self, registry: SessionRegistry, peer: Optional[Peer] = None, message_url: str = MESSAGE_URL,
                 server_name: str = APP_NAME, server_version: str = APP_VERSION):
        self.registry = registry
        self.peer = peer
        self.message_url = message_url
        self.server_name = server_name
        self.server_version = server_version

    async def open_stream(self) -> SseTransport:
        """
        Accept a new SSE connection.

        Builds the transport, registers it, wires its close hook to unregister it,
        connects the peer and starts the transport. The caller serves
        transport.stream.events() until the stream closes.
        """
        stream = SseStream()
        transport = SseTransport(self.message_url, stream, server_name=self.server_name, server_version=self.server_version)
        session_id = transport.session_id

        logger.info(f"New SSE connection established: {session_id}")
        self.registry.add(transport)

        def remove_session() -> None:
            logger.info(f"SSE connection closed for session {session_id}")
            self.registry.remove(session_id)

        transport.on_close = remove_session

        if self.peer is not None:
            try:
                await self.peer.connect(transport)
            except Exception as e:
                logger.error(f"Error connecting transport for session {session_id}: {str(e)}")
        else:
            logger.warning(f"No peer configured, session {session_id} cannot process messages")

        try:
            await transport.start()
        except AlreadyClosedError:
            logger.warning(f"SSE connection {session_id} closed before it could be started")
            await transport.close()

        return transport

    async def post_message(self, session_id: Optional[str], request: Request) -> Response:
        """
        Route a POSTed message to the transport of its session.

        Raises:
            MissingSessionIdError: if no session ID was given
            UnknownSessionError: if no open session has that ID
        """
        if not session_id:
            logger.warning("Message posted without sessionId")
            raise MissingSessionIdError()

        transport = self.registry.get(session_id)
        if transport is None:
            logger.warning(f"Message posted to unknown session: {session_id}")
            raise UnknownSessionError(session_id)

        logger.debug(f"Received message for session {session_id}")
        return await transport.handle_post_message(request)

    def list_sessions(self) -> List[Dict[str, Any]]:
        return [
            {
                "session_id": transport.session_id,
                "started": transport.started,
                "created_at": transport.created_at
            }
            for transport in self.registry
        ]
