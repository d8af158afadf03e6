"""
Middleware package.
"""
from typing import List, Optional
from fastapi import FastAPI
from mcp_sse_bridge.middleware.cors import add_cors_middleware
from mcp_sse_bridge.middleware.logging import add_logging_middleware


def setup_middleware(app: FastAPI, cors_origins: Optional[List[str]] = None) -> None:
    add_logging_middleware(app)
    add_cors_middleware(app, allow_origins=cors_origins)


__all__ = ["setup_middleware", "add_cors_middleware", "add_logging_middleware"]
