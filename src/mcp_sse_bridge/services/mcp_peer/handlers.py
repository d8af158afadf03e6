"""
MCP Message Handlers

Each handler processes one method and returns the JSON-RPC result object. For
notifications the return value is ignored.
"""
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, Union
from loguru import logger
from mcp_sse_bridge.models.jsonrpc import JSONRPCNotification, JSONRPCRequest
from mcp_sse_bridge.services.mcp_peer.utils import InvalidParamsError

if TYPE_CHECKING:
    from mcp_sse_bridge.services.mcp_peer.peer import McpPeer

MCP_PROTOCOL_VERSION = "2024-11-05"

IncomingMessage = Union[JSONRPCRequest, JSONRPCNotification]


async def handle_initialize(session_id: str, message: IncomingMessage, peer: "McpPeer") -> Dict[str, Any]:
    """
    Handle the 'initialize' request from a client.

    This is the first message sent by a client to establish capabilities
    and protocol version.

    Args:
        session_id: The session ID for the client
        message: The JSON-RPC message from the client
        peer: The peer holding per-session client state

    Returns:
        The result object of the initialize response
    """
    logger.info(f"Handling initialize request from client {session_id}")

    params = message.params or {}
    client_protocol_version = params.get("protocolVersion", MCP_PROTOCOL_VERSION)
    client_capabilities = params.get("capabilities", {})
    client_info = params.get("clientInfo", {})

    if not isinstance(client_protocol_version, str):
        raise InvalidParamsError("protocolVersion must be a string")
    if not isinstance(client_capabilities, dict) or not isinstance(client_info, dict):
        raise InvalidParamsError("capabilities and clientInfo must be objects")

    peer.client_info[session_id] = {
        "protocolVersion": client_protocol_version,
        "capabilities": client_capabilities,
        "clientInfo": client_info,
        "initialized": False,
        "connected_at": datetime.now().isoformat()
    }
    logger.info(f"Client {session_id} requested protocol version: {client_protocol_version}")

    # The client confirms with an 'initialized' notification
    return {
        "protocolVersion": MCP_PROTOCOL_VERSION,
        "serverInfo": {
            "name": peer.server_name,
            "version": peer.server_version
        },
        "capabilities": {}
    }


async def handle_initialized(session_id: str, message: IncomingMessage, peer: "McpPeer") -> Dict[str, Any]:
    """Mark the client as initialized once it confirms the handshake."""
    logger.info(f"Client {session_id} initialized")
    peer.client_info.setdefault(session_id, {})["initialized"] = True
    return {}


async def handle_cancelled(session_id: str, message: IncomingMessage, peer: "McpPeer") -> Dict[str, Any]:
    """
    Handle the 'cancelled' notification from a client.

    Requests are answered as soon as they are dispatched, so there is nothing to
    abort; the cancellation is only logged.
    """
    params = message.params or {}
    request_id = params.get("requestId")
    reason = params.get("reason", "Unknown reason")

    logger.info(f"Client {session_id} cancelled request {request_id}: {reason}")
    return {}


async def handle_ping(session_id: str, message: IncomingMessage, peer: "McpPeer") -> Dict[str, Any]:
    logger.debug(f"Ping from client {session_id}")
    return {}
