"""
mcp-sse-bridge - duplex JSON-RPC transport over Server-Sent Events

A single long-lived SSE stream carries server-to-client push while one HTTP
POST per message carries client-to-server delivery, correlated by a session ID.
"""

from mcp_sse_bridge._version import __version__

__all__ = ['__version__']
