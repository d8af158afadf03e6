"""
SSE Transport

This module implements one logical duplex channel between a single client and the
peer protocol engine. Server-to-client traffic is pushed as events on an SseStream,
client-to-server traffic arrives as HTTP POSTs correlated by the session ID.
"""
import inspect
import json
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Union
from loguru import logger
from pydantic import ValidationError
from fastapi import Request
from fastapi.responses import PlainTextResponse, Response
from mcp_sse_bridge.config import APP_NAME, APP_VERSION
from mcp_sse_bridge.models.jsonrpc import (
    JSONRPC_VERSION,
    JSONRPCError,
    JSONRPCMessage,
    JSONRPCNotification,
    JSONRPCRequest,
    JSONRPCResponse,
    parse_message,
    serialize_message,
)
from mcp_sse_bridge.services.sse_transport.errors import (
    AlreadyClosedError,
    AlreadyStartedError,
    MalformedMessageError,
    NoHandlerError,
    NotConnectedError,
)
from mcp_sse_bridge.services.sse_transport.stream import SseStream, StreamClosedError

OutboundMessage = Union[JSONRPCMessage, JSONRPCRequest, JSONRPCNotification, JSONRPCResponse, JSONRPCError, Dict[str, Any]]


class SseTransport:
    """
    Server-Sent Events transport for a single session.

    Lifecycle: created -> started (start()) -> active -> closed (close() or stream abort).
    A closed transport is never reused; reconnecting clients get a new session.

    The peer installs on_message and on_error, the session router installs on_close.
    """

    def __init__(self, message_url: str, stream: SseStream,
                 server_name: str = APP_NAME, server_version: str = APP_VERSION):
        self._session_id = str(uuid.uuid4())
        self._stream = stream
        self.message_url = message_url
        self.server_name = server_name
        self.server_version = server_version
        self.created_at = datetime.now().isoformat()
        self._started = False
        self._closed = False

        self.on_message: Optional[Callable[[JSONRPCMessage], Any]] = None
        self.on_error: Optional[Callable[[Exception], Any]] = None
        self.on_close: Optional[Callable[[], Any]] = None

        # Client disconnects surface as a stream abort
        self._stream.on_abort(self._handle_abort)

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def stream(self) -> SseStream:
        return self._stream

    @property
    def started(self) -> bool:
        return self._started

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def endpoint_uri(self) -> str:
        return f"{self.message_url}?sessionId={self._session_id}"

    async def start(self) -> None:
        """
        Announce the session to the client.

        Emits, in order: the 'endpoint' event with the POST URI, the 'session' event
        with the session ID, and a welcome notification as the first 'message' event.

        Raises:
            AlreadyClosedError: if the stream is already closed
            AlreadyStartedError: if start() was called before
        """
        if self._stream.closed:
            raise AlreadyClosedError("SSE transport already closed!")
        if self._started:
            raise AlreadyStartedError(f"SSE transport for session {self._session_id} already started")
        self._started = True

        try:
            await self._stream.write_sse("endpoint", self.endpoint_uri)
            logger.debug(f"Sent endpoint event with URI: {self.endpoint_uri}")

            await self._stream.write_sse("session", json.dumps({
                "type": "session_id",
                "session_id": self._session_id
            }))
        except StreamClosedError as e:
            raise AlreadyClosedError("SSE transport already closed!") from e

        try:
            await self.send(JSONRPCNotification(
                jsonrpc=JSONRPC_VERSION,
                method="notification",
                params={
                    "type": "welcome",
                    "clientInfo": {
                        "sessionId": self._session_id,
                        "serverName": self.server_name,
                        "serverVersion": self.server_version
                    }
                }
            ))
        except NotConnectedError as e:
            raise AlreadyClosedError("SSE transport already closed!") from e

        logger.info(f"SSE transport started for session {self._session_id}")

    async def send(self, message: OutboundMessage) -> None:
        """
        Push one JSON-RPC message to the client as a 'message' event.

        Plain dicts are validated against the message schema first. Failed sends are
        not retried.

        Raises:
            NotConnectedError: if the stream is closed; nothing is written
            MalformedMessageError: if a dict message is not a valid envelope
        """
        if self._stream.closed:
            raise NotConnectedError("Not connected")

        if isinstance(message, dict):
            try:
                message = parse_message(message)
            except ValidationError as e:
                raise MalformedMessageError(f"Refusing to send invalid JSON-RPC message: {str(e)}") from e

        data = serialize_message(message)
        try:
            await self._stream.write_sse("message", data)
        except StreamClosedError as e:
            raise NotConnectedError("Not connected") from e

        logger.debug(f"Sending message to client {self._session_id}: {data}")

    async def handle_post_message(self, request: Request) -> Response:
        """
        Accept one inbound message POSTed for this session.

        The message is handed to on_message before the response is sent, and awaited
        if the hook returns an awaitable. The HTTP response is only an acknowledgement;
        any reply travels back over the SSE stream. Errors are turned into plain-text
        responses and never raised.
        """
        if self._stream.closed:
            logger.warning(f"Message posted to closed SSE connection {self._session_id}")
            return PlainTextResponse("SSE connection closed", status_code=400)

        try:
            body = await request.json()
        except Exception as e:
            logger.error(f"Error processing request for session {self._session_id}: {str(e)}")
            self._report_error(MalformedMessageError(f"Request body is not valid JSON: {str(e)}"))
            return PlainTextResponse("Error processing message", status_code=400)

        try:
            message = parse_message(body)
        except ValidationError as e:
            logger.error(f"Error parsing message for session {self._session_id}: {str(e)}")
            self._report_error(MalformedMessageError(f"Invalid JSON-RPC message: {str(e)}"))
            return PlainTextResponse("Invalid message format", status_code=400)

        if self.on_message is None:
            logger.error(f"No message handler defined for session {self._session_id}, message: {json.dumps(body)}")
            self._report_error(NoHandlerError(f"No message handler defined for session {self._session_id}"))
            return PlainTextResponse("No message handler defined", status_code=500)

        try:
            result = self.on_message(message)
            # Coroutine handlers are awaited so their errors surface here
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            logger.error(f"Message handler failed for session {self._session_id}: {str(e)}")
            self._report_error(e)
            return PlainTextResponse("Error processing message", status_code=500)

        return PlainTextResponse("Accepted", status_code=202)

    async def close(self) -> None:
        """Close the transport. Only the first call has an effect."""
        self._teardown()

    def _handle_abort(self) -> None:
        if not self._closed:
            logger.info(f"SSE connection aborted for session {self._session_id}")
        self._teardown()

    def _teardown(self) -> None:
        if self._closed:
            return
        self._closed = True

        if not self._stream.closed:
            self._stream.abort()

        if self.on_close is not None:
            try:
                self.on_close()
            except Exception as e:
                logger.error(f"Error in close handler for session {self._session_id}: {str(e)}")

    def _report_error(self, error: Exception) -> None:
        if self.on_error is None:
            return
        try:
            self.on_error(error)
        except Exception as e:
            logger.error(f"Error in error handler for session {self._session_id}: {str(e)}")
