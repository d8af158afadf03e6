"""
MCP Peer Utilities

Helpers shared by the message handlers of the default peer.
"""
from typing import Any, Dict
from mcp_sse_bridge.models.jsonrpc import JSONRPC_VERSION, ErrorData, JSONRPCError, JSONRPCResponse, RequestId

METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


def create_error_response(error_code: int, error_message: str, request_id: RequestId) -> JSONRPCError:
    """
    Create a JSON-RPC error response.

    Args:
        error_code: The JSON-RPC error code
        error_message: The error message
        request_id: The request ID from the client message

    Returns:
        A JSON-RPC error response
    """
    return JSONRPCError(
        jsonrpc=JSONRPC_VERSION,
        id=request_id,
        error=ErrorData(code=error_code, message=error_message)
    )


def create_result_response(result: Dict[str, Any], request_id: RequestId) -> JSONRPCResponse:
    return JSONRPCResponse(jsonrpc=JSONRPC_VERSION, id=request_id, result=result)


class InvalidParamsError(ValueError):
    """Raised by a handler when the request params have the wrong shape."""
