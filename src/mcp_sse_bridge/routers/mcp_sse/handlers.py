"""
MCP SSE Router

This module exposes the SSE transport over HTTP: one endpoint opens the event
stream, another accepts the messages a client posts to its session.
"""
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, Response
from sse_starlette.sse import EventSourceResponse
from loguru import logger
from mcp_sse_bridge.config import MESSAGE_URL, SSE_PATH
from mcp_sse_bridge.services.sse_transport import (
    MissingSessionIdError,
    SessionEventSourceResponse,
    SessionRouter,
    UnknownSessionError,
)

router = APIRouter(
    tags=["MCP-SSE"],
)


def get_session_router(request: Request) -> SessionRouter:
    """
    Get the session router of the running application for dependency injection.
    """
    return request.app.state.session_router


@router.get(SSE_PATH, response_class=EventSourceResponse)
async def handle_sse_connection(request: Request, session_router: SessionRouter = Depends(get_session_router)):
    """
    Open an SSE stream for a new session.

    The first events are 'endpoint' (the URI to POST messages to), 'session' (the
    session ID) and a welcome 'message'. The stream stays open until the client
    disconnects or the session is closed.
    """
    client_host = request.client.host if request.client else "unknown"
    client_port = request.client.port if request.client else "unknown"
    logger.info(f"Handling SSE connection request from {client_host}:{client_port}")

    transport = await session_router.open_stream()
    try:
        return SessionEventSourceResponse(transport, ping=request.app.state.keepalive_interval)
    except Exception:
        transport.stream.abort()
        raise


@router.post(MESSAGE_URL)
async def message_endpoint(
    request: Request,
    session_id: Optional[str] = Query(None, alias="sessionId", description="Session ID announced on the SSE stream"),
    session_router: SessionRouter = Depends(get_session_router)
) -> Response:
    """
    Deliver one JSON-RPC message to an open session.

    A 202 response only acknowledges delivery; any reply is pushed over the
    session's SSE stream.
    """
    try:
        return await session_router.post_message(session_id, request)
    except (MissingSessionIdError, UnknownSessionError) as e:
        return JSONResponse({"error": str(e)}, status_code=e.status_code)


@router.get("/sessions")
async def list_active_sessions(session_router: SessionRouter = Depends(get_session_router)) -> Dict[str, Any]:
    """
    List all active SSE sessions.
    """
    sessions = session_router.list_sessions()
    return {"total": len(sessions), "sessions": sessions}
