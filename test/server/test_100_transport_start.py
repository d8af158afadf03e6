import json
import pytest
from mcp_sse_bridge.services.sse_transport import (
    AlreadyClosedError,
    AlreadyStartedError,
    SseStream,
    SseTransport,
)


@pytest.mark.asyncio
async def test_100_start_emits_endpoint_session_welcome(event_reader):
    """
    The first three events are endpoint, session and the welcome message,
    all carrying the same session ID.
    """
    transport = SseTransport("/api/messages", SseStream(), server_name="srv", server_version="1.2.3")
    await transport.start()

    endpoint, session, welcome = await event_reader.read(transport, 3)
    session_id = transport.session_id

    assert endpoint == {"event": "endpoint", "data": f"/api/messages?sessionId={session_id}"}

    assert session["event"] == "session"
    assert json.loads(session["data"]) == {"type": "session_id", "session_id": session_id}

    assert welcome["event"] == "message"
    assert json.loads(welcome["data"]) == {
        "jsonrpc": "2.0",
        "method": "notification",
        "params": {
            "type": "welcome",
            "clientInfo": {"sessionId": session_id, "serverName": "srv", "serverVersion": "1.2.3"}
        }
    }
    assert transport.started


@pytest.mark.asyncio
async def test_101_start_on_closed_stream_fails():
    stream = SseStream()
    transport = SseTransport("/api/messages", stream)
    stream.abort()

    with pytest.raises(AlreadyClosedError):
        await transport.start()
    assert not transport.started


@pytest.mark.asyncio
async def test_102_start_twice_fails():
    transport = SseTransport("/api/messages", SseStream())
    await transport.start()
    with pytest.raises(AlreadyStartedError):
        await transport.start()


def test_103_session_ids_are_unique_uuids():
    import uuid
    ids = {SseTransport("/api/messages", SseStream()).session_id for _ in range(100)}
    assert len(ids) == 100
    for session_id in ids:
        assert str(uuid.UUID(session_id)) == session_id
