import asyncio
import json

import pytest

from server.connection_registry import ConnectionRegistry


def decode_event(item: dict) -> dict:
    assert set(item) == {"data"}
    return json.loads(item["data"])


@pytest.mark.asyncio
async def test_stream_sends_connection_event_before_pings():
    registry = ConnectionRegistry(keepalive_interval=0.01)
    stream = registry.stream()

    first = decode_event(await stream.__anext__())
    assert first["type"] == "connection"
    assert first["message"] == "MCP Server connected"
    assert len(registry) == 1

    for _ in range(2):
        event = decode_event(await asyncio.wait_for(stream.__anext__(), 1))
        assert event["type"] == "ping"
        assert event["timestamp"].endswith("Z")

    await stream.aclose()
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_close_cancels_keepalive_immediately():
    registry = ConnectionRegistry(keepalive_interval=60)
    connection = registry.open()
    assert connection.connection_id in registry

    assert registry.close(connection.connection_id) is True
    await asyncio.gather(connection.keepalive, return_exceptions=True)

    assert connection.keepalive.cancelled()
    assert connection.connection_id not in registry
    assert registry.close(connection.connection_id) is False


@pytest.mark.asyncio
async def test_close_ends_open_stream():
    registry = ConnectionRegistry(keepalive_interval=60)
    stream = registry.stream()
    await stream.__anext__()

    assert registry.close_all() == 1
    with pytest.raises(StopAsyncIteration):
        await stream.__anext__()
    assert len(registry) == 0


@pytest.mark.asyncio
async def test_keepalive_stops_when_entry_missing():
    registry = ConnectionRegistry(keepalive_interval=0.01)
    connection = registry.open()

    # removed without going through close(): the next tick notices and exits
    registry._connections.pop(connection.connection_id)
    await asyncio.wait_for(connection.keepalive, 1)

    assert connection.keepalive.done() and not connection.keepalive.cancelled()
    assert registry.send(connection.connection_id, {"type": "ping"}) is False


@pytest.mark.asyncio
async def test_connection_ids_are_unique():
    registry = ConnectionRegistry(keepalive_interval=60)
    opened = [registry.open() for _ in range(5)]

    assert len({c.connection_id for c in opened}) == 5
    assert sorted(registry.connection_ids()) == sorted(c.connection_id for c in opened)
    assert registry.close_all() == 5
    assert len(registry) == 0
