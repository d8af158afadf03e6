"""
Data models shared across the server.
"""
from mcp_sse_bridge.models.jsonrpc import (
    JSONRPC_VERSION,
    RequestId,
    ErrorData,
    JSONRPCRequest,
    JSONRPCNotification,
    JSONRPCResponse,
    JSONRPCError,
    JSONRPCMessage,
    parse_message,
    serialize_message,
)

__all__ = [
    "JSONRPC_VERSION",
    "RequestId",
    "ErrorData",
    "JSONRPCRequest",
    "JSONRPCNotification",
    "JSONRPCResponse",
    "JSONRPCError",
    "JSONRPCMessage",
    "parse_message",
    "serialize_message",
]
