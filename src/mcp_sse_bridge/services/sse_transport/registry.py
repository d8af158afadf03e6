"""
Session registry

Maps session IDs to the live SseTransport of each open SSE connection. One instance
is created per application and passed to whoever needs it.
"""
from typing import Dict, Iterator, List, Optional
from loguru import logger
from mcp_sse_bridge.services.sse_transport.transport import SseTransport


class SessionRegistry:
    """
    Process-wide store of open sessions.

    A session ID is present while its transport is started or active, and is removed
    in the same step that closes the transport.
    """

    def __init__(self):
        self._transports: Dict[str, SseTransport] = {}

    def add(self, transport: SseTransport) -> None:
        if transport.session_id in self._transports:
            raise ValueError(f"Session {transport.session_id} is already registered")
        self._transports[transport.session_id] = transport
        logger.debug(f"Registered session {transport.session_id} ({len(self._transports)} active)")

    def remove(self, session_id: str) -> Optional[SseTransport]:
        transport = self._transports.pop(session_id, None)
        if transport is not None:
            logger.debug(f"Removed session {session_id} ({len(self._transports)} active)")
        return transport

    def get(self, session_id: str) -> Optional[SseTransport]:
        return self._transports.get(session_id)

    def session_ids(self) -> List[str]:
        return list(self._transports.keys())

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._transports

    def __len__(self) -> int:
        return len(self._transports)

    def __iter__(self) -> Iterator[SseTransport]:
        return iter(list(self._transports.values()))

    async def close_all(self) -> None:
        """Close every open session, e.g. on server shutdown."""
        transports = list(self._transports.values())
        if not transports:
            logger.info("No active SSE connections to terminate")
            return

        logger.warning(f"Terminating {len(transports)} active SSE connections")
        for transport in transports:
            try:
                await transport.close()
            except Exception as e:
                logger.error(f"Error closing session {transport.session_id}: {str(e)}")
        # Transports without the router's close hook are dropped here
        self._transports.clear()
