# Airbnb MCP - SSE Connection Registry

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Any, AsyncIterator, List, Optional

from utils.time_util import utc_timestamp

logger = logging.getLogger(__name__)


@dataclass
class SSEConnection:
    connection_id: str
    queue: "asyncio.Queue[Optional[Dict[str, Any]]]" = field(default_factory=asyncio.Queue)
    keepalive: Optional["asyncio.Task[None]"] = None


class ConnectionRegistry:
    """開いている SSE ストリームの管理

    登録されている id は書き込み可能なストリームを表す。切断時は close() で
    エントリ削除と keep-alive タスクのキャンセルを同時に行う。
    """

    def __init__(self, keepalive_interval: float = 30.0):
        self.keepalive_interval = keepalive_interval
        self._connections: Dict[str, SSEConnection] = {}

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._connections

    def __len__(self) -> int:
        return len(self._connections)

    def connection_ids(self) -> List[str]:
        return list(self._connections)

    def _new_connection_id(self) -> str:
        connection_id = str(time.time_ns())
        while connection_id in self._connections:
            connection_id = str(int(connection_id) + 1)
        return connection_id

    def open(self) -> SSEConnection:
        """接続を登録し、初回イベントを積んでから keep-alive を開始する"""
        connection = SSEConnection(connection_id=self._new_connection_id())
        connection.queue.put_nowait({
            "type": "connection",
            "message": "MCP Server connected",
            "timestamp": utc_timestamp(),
        })
        self._connections[connection.connection_id] = connection
        connection.keepalive = asyncio.create_task(self._keepalive(connection.connection_id))
        logger.info(f"[ConnectionRegistry] SSE connection established: {connection.connection_id} (active={len(self)})")
        return connection

    def send(self, connection_id: str, event: Dict[str, Any]) -> bool:
        connection = self._connections.get(connection_id)
        if connection is None:
            return False
        connection.queue.put_nowait(event)
        return True

    def close(self, connection_id: str) -> bool:
        connection = self._connections.pop(connection_id, None)
        if connection is None:
            return False
        if connection.keepalive is not None and not connection.keepalive.done():
            connection.keepalive.cancel()
        # None はストリーム終端
        connection.queue.put_nowait(None)
        logger.info(f"[ConnectionRegistry] SSE connection closed: {connection_id} (active={len(self)})")
        return True

    def close_all(self) -> int:
        closed = 0
        for connection_id in self.connection_ids():
            if self.close(connection_id):
                closed += 1
        return closed

    async def _keepalive(self, connection_id: str) -> None:
        while True:
            await asyncio.sleep(self.keepalive_interval)
            if not self.send(connection_id, {"type": "ping", "timestamp": utc_timestamp()}):
                return

    async def stream(self) -> AsyncIterator[Dict[str, str]]:
        """GET /mcp の EventSourceResponse 用イベント列。クライアント切断でキャンセルされ finally で後始末する"""
        connection = self.open()
        try:
            while True:
                event = await connection.queue.get()
                if event is None:
                    break
                yield {"data": json.dumps(event)}
        finally:
            self.close(connection.connection_id)
