import asyncio
import json
import pytest
import httpx
from mcp_sse_bridge.main import create_app
from mcp_sse_bridge.models import parse_message
from mcp_sse_bridge.services.mcp_peer import McpPeer
from mcp_sse_bridge.services.sse_transport import SessionRegistry, SseStream, SseTransport


@pytest.fixture
def mcp_peer():
    return McpPeer(server_name="mcp-test", server_version="0.0.1")


@pytest.fixture
def mcp_app(mcp_peer):
    return create_app(registry=SessionRegistry(), peer=mcp_peer, server_name="mcp-test", server_version="0.0.1")


async def open_session(app, event_reader):
    transport = await app.state.session_router.open_stream()
    # endpoint, session, welcome
    await event_reader.read(transport, 3)
    return transport


async def post(app, transport, message):
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        return await client.post("/api/messages", params={"sessionId": transport.session_id}, json=message)


@pytest.mark.asyncio
async def test_300_initialize_reply_travels_over_stream(mcp_app, mcp_peer, event_reader):
    transport = await open_session(mcp_app, event_reader)

    r = await post(mcp_app, transport, {
        "jsonrpc": "2.0",
        "id": 1,
        "method": "initialize",
        "params": {"protocolVersion": "2024-11-05", "capabilities": {}, "clientInfo": {"name": "pytest"}}
    })
    assert r.status_code == 202
    assert r.text == "Accepted"

    (event,) = await event_reader.read(transport, 1)
    reply = json.loads(event["data"])
    assert event["event"] == "message"
    assert reply["id"] == 1
    assert reply["result"]["serverInfo"] == {"name": "mcp-test", "version": "0.0.1"}
    assert reply["result"]["protocolVersion"] == "2024-11-05"
    assert mcp_peer.client_info[transport.session_id]["clientInfo"] == {"name": "pytest"}
    assert not mcp_peer.is_initialized(transport.session_id)

    r = await post(mcp_app, transport, {"jsonrpc": "2.0", "method": "notifications/initialized"})
    assert r.status_code == 202
    await asyncio.sleep(0.01)
    assert mcp_peer.is_initialized(transport.session_id)


@pytest.mark.asyncio
async def test_301_ping(mcp_app, event_reader):
    transport = await open_session(mcp_app, event_reader)

    await post(mcp_app, transport, {"jsonrpc": "2.0", "id": "p-1", "method": "ping"})

    (event,) = await event_reader.read(transport, 1)
    assert json.loads(event["data"]) == {"jsonrpc": "2.0", "id": "p-1", "result": {}}


@pytest.mark.asyncio
async def test_302_unknown_method(mcp_app, event_reader):
    transport = await open_session(mcp_app, event_reader)

    await post(mcp_app, transport, {"jsonrpc": "2.0", "id": 5, "method": "does/not/exist"})

    (event,) = await event_reader.read(transport, 1)
    reply = json.loads(event["data"])
    assert reply["id"] == 5
    assert reply["error"]["code"] == -32601


@pytest.mark.asyncio
async def test_303_notifications_and_responses_get_no_reply(mcp_app, event_reader):
    transport = await open_session(mcp_app, event_reader)

    await post(mcp_app, transport, {"jsonrpc": "2.0", "method": "notifications/cancelled", "params": {"requestId": 3}})
    await post(mcp_app, transport, {"jsonrpc": "2.0", "method": "notifications/unknown"})
    await post(mcp_app, transport, {"jsonrpc": "2.0", "id": 9, "result": {}})
    await post(mcp_app, transport, {"jsonrpc": "2.0", "id": 10, "method": "ping"})

    # The only reply is the one for the ping request
    (event,) = await event_reader.read(transport, 1)
    assert json.loads(event["data"])["id"] == 10


@pytest.mark.asyncio
async def test_304_handler_failure_becomes_internal_error(mcp_app, mcp_peer, event_reader):
    async def failing_handler(session_id, message, peer):
        raise RuntimeError("kaput")

    mcp_peer.handlers["tools/list"] = failing_handler
    transport = await open_session(mcp_app, event_reader)

    await post(mcp_app, transport, {"jsonrpc": "2.0", "id": 2, "method": "tools/list"})

    (event,) = await event_reader.read(transport, 1)
    reply = json.loads(event["data"])
    assert reply["error"]["code"] == -32603
    assert "kaput" in reply["error"]["message"]


@pytest.mark.asyncio
async def test_306_initialize_with_invalid_params(mcp_app, mcp_peer, event_reader):
    transport = await open_session(mcp_app, event_reader)

    await post(mcp_app, transport, {"jsonrpc": "2.0", "id": 4, "method": "initialize", "params": {"protocolVersion": 20241105}})
    await post(mcp_app, transport, {"jsonrpc": "2.0", "id": 5, "method": "initialize", "params": {"clientInfo": "pytest"}})

    first, second = await event_reader.read(transport, 2)
    for event, request_id in ((first, 4), (second, 5)):
        reply = json.loads(event["data"])
        assert reply["id"] == request_id
        assert reply["error"]["code"] == -32602
    assert "clientInfo" not in mcp_peer.client_info[transport.session_id]

@pytest.mark.asyncio
async def test_305_reply_after_close_is_dropped(mcp_peer):
    transport = SseTransport("/api/messages", SseStream())
    await mcp_peer.connect(transport)
    assert transport.session_id in mcp_peer.client_info

    await transport.close()
    assert transport.session_id not in mcp_peer.client_info

    message = parse_message({"jsonrpc": "2.0", "id": 1, "method": "ping"}).root
    # Must not raise even though the stream is gone
    await mcp_peer.dispatch(transport, message)
