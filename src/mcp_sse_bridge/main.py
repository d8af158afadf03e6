"""
Application factory.

Builds the FastAPI app serving the SSE transport. The session registry and peer
are created here once and shared through app.state.
"""
from contextlib import asynccontextmanager
from typing import List, Optional
from fastapi import FastAPI
from pydantic import BaseModel
from mcp_sse_bridge.logger import logger
from mcp_sse_bridge.config import APP_NAME, APP_VERSION, CORS_ORIGINS, KEEPALIVE_INTERVAL, MESSAGE_URL, SSE_PATH
from mcp_sse_bridge.middleware import setup_middleware
from mcp_sse_bridge.routers import mcp_sse_router
from mcp_sse_bridge.services.mcp_peer import McpPeer
from mcp_sse_bridge.services.sse_transport import Peer, SessionRegistry, SessionRouter


class HealthResponse(BaseModel):
    status: str
    server: str
    version: str


def create_app(
    registry: Optional[SessionRegistry] = None,
    peer: Optional[Peer] = None,
    server_name: str = APP_NAME,
    server_version: str = APP_VERSION,
    keepalive_interval: int = KEEPALIVE_INTERVAL,
    cors_origins: Optional[List[str]] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        registry: Session store, a new one is created if not given
        peer: Protocol engine connected to every session, defaults to McpPeer
        server_name: Name announced in the welcome notification and /health
        server_version: Version announced in the welcome notification and /health
        keepalive_interval: Seconds between keep-alive comments on SSE streams
        cors_origins: Allowed CORS origins, defaults to CORS_ORIGINS
    """
    if registry is None:
        registry = SessionRegistry()
    if peer is None:
        peer = McpPeer(server_name=server_name, server_version=server_version)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{server_name} {server_version} ready")
        logger.info(f"- SSE Endpoint: {SSE_PATH}")
        logger.info(f"- Messages Endpoint: {MESSAGE_URL}?sessionId=YOUR_SESSION_ID")
        yield
        logger.info("Shutting down SSE transport...")
        await app.state.session_registry.close_all()
        logger.info("SSE transport shutdown complete")

    app = FastAPI(
        title=server_name,
        description="JSON-RPC over Server-Sent Events with POST-based inbound delivery",
        version=str(server_version),
        lifespan=lifespan
    )

    setup_middleware(app, cors_origins=cors_origins if cors_origins is not None else CORS_ORIGINS)

    app.state.session_registry = registry
    app.state.session_router = SessionRouter(
        registry,
        peer=peer,
        message_url=MESSAGE_URL,
        server_name=server_name,
        server_version=server_version
    )
    app.state.keepalive_interval = keepalive_interval

    app.include_router(mcp_sse_router)

    @app.get("/health", response_model=HealthResponse, include_in_schema=False)
    async def handle_health():
        return {"status": "OK", "server": server_name, "version": server_version}

    return app


fastapi = create_app()
