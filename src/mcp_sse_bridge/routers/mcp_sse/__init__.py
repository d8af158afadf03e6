"""
MCP SSE Router package.
"""
from mcp_sse_bridge.routers.mcp_sse.handlers import router, get_session_router

__all__ = ["router", "get_session_router"]
