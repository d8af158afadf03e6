"""
Default MCP peer.
"""
from mcp_sse_bridge.services.mcp_peer.peer import McpPeer

__all__ = ["McpPeer"]
