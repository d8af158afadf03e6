"""
Router package.

This package contains the FastAPI routers for the server.
"""

__all__ = ['mcp_sse_router']

from .mcp_sse import router as mcp_sse_router
