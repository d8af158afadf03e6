"""
Default MCP peer

A minimal protocol engine that answers the MCP handshake and ping over an
SseTransport. Replies are pushed over the SSE stream with transport.send().
"""
import asyncio
from typing import Any, Awaitable, Callable, Dict, Set
from loguru import logger
from mcp_sse_bridge.config import APP_NAME, APP_VERSION
from mcp_sse_bridge.models.jsonrpc import (
    JSONRPCError,
    JSONRPCMessage,
    JSONRPCRequest,
    JSONRPCResponse,
)
from mcp_sse_bridge.services.mcp_peer.handlers import (
    IncomingMessage,
    handle_cancelled,
    handle_initialize,
    handle_initialized,
    handle_ping,
)
from mcp_sse_bridge.services.mcp_peer.utils import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    InvalidParamsError,
    METHOD_NOT_FOUND,
    create_error_response,
    create_result_response,
)
from mcp_sse_bridge.services.sse_transport.errors import NotConnectedError
from mcp_sse_bridge.services.sse_transport.transport import SseTransport

Handler = Callable[[str, IncomingMessage, "McpPeer"], Awaitable[Dict[str, Any]]]


class McpPeer:
    """
    Dispatches incoming JSON-RPC messages to method handlers.

    Each message is processed on its own task so the POST that delivered it is
    acknowledged immediately.
    """

    def __init__(self, server_name: str = APP_NAME, server_version: str = APP_VERSION):
        self.server_name = server_name
        self.server_version = server_version
        # Per-session client state, keyed by session ID
        self.client_info: Dict[str, Dict[str, Any]] = {}
        self.handlers: Dict[str, Handler] = {
            "initialize": handle_initialize,
            "initialized": handle_initialized,
            "notifications/initialized": handle_initialized,
            "notifications/cancelled": handle_cancelled,
            "ping": handle_ping,
        }
        self._tasks: Set[asyncio.Task] = set()

    async def connect(self, transport: SseTransport) -> None:
        session_id = transport.session_id
        self.client_info[session_id] = {"initialized": False}

        def on_message(message: JSONRPCMessage) -> None:
            task = asyncio.create_task(self.dispatch(transport, message.root))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        def on_error(error: Exception) -> None:
            logger.warning(f"Transport error for session {session_id}: {str(error)}")

        transport.on_message = on_message
        transport.on_error = on_error
        transport.stream.on_abort(lambda: self.client_info.pop(session_id, None))
        logger.debug(f"Peer connected to session {session_id}")

    async def dispatch(self, transport: SseTransport, message: Any) -> None:
        """Run the handler for one message and push the reply, if any."""
        session_id = transport.session_id

        if isinstance(message, (JSONRPCResponse, JSONRPCError)):
            logger.debug(f"Received response for request {message.id} from client {session_id}")
            return

        is_request = isinstance(message, JSONRPCRequest)
        handler = self.handlers.get(message.method)

        if handler is None:
            if not is_request:
                logger.warning(f"Unknown notification '{message.method}' from client {session_id}")
                return
            logger.warning(f"Unknown method '{message.method}' from client {session_id}")
            reply: Any = create_error_response(METHOD_NOT_FOUND, f"Method not found: {message.method}", message.id)
        else:
            try:
                result = await handler(session_id, message, self)
            except InvalidParamsError as e:
                logger.warning(f"Invalid params for '{message.method}' from client {session_id}: {str(e)}")
                if not is_request:
                    return
                reply = create_error_response(INVALID_PARAMS, f"Invalid params: {str(e)}", message.id)
            except Exception as e:
                logger.error(f"Error processing message with method '{message.method}': {str(e)}")
                if not is_request:
                    return
                reply = create_error_response(INTERNAL_ERROR, f"Internal error: {str(e)}", message.id)
            else:
                if not is_request:
                    return
                reply = create_result_response(result, message.id)

        try:
            await transport.send(reply)
        except NotConnectedError:
            logger.warning(f"Cannot reply to '{message.method}', connection {session_id} is closed")

    def is_initialized(self, session_id: str) -> bool:
        return self.client_info.get(session_id, {}).get("initialized", False)
