# =============================================================================
# app/websocket/manager.py - Change Stream Connection Manager
# =============================================================================
# Forwards change notifications to connected browsers so open pages can
# re-fetch whatever their cached queries depended on.
#
# Each connection gets:
# - one hub subscription per requested table (disposed on disconnect)
# - an asyncio.Queue filled from the hub (which may run in a worker thread)
# - a sender task draining the queue into the socket
#
# Usage:
#   connection = await manager.connect(websocket, hub, ["site_settings"])
#   ...
#   await manager.disconnect(connection)
# =============================================================================

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable

from fastapi import WebSocket

from lib.realtime import ChangeEvent, RealtimeHub, Subscription, keys_for_table

logger = logging.getLogger(__name__)


def invalidation_message(event: ChangeEvent) -> dict:
    """What a listener receives for one change."""
    return {
        "type": "invalidate",
        "event": event.event.value,
        "table": event.table,
        "keys": list(keys_for_table(event.table)),
    }


@dataclass(eq=False)
class ChangeConnection:
    """One connected listener and the subscriptions it owns."""

    websocket: WebSocket
    tables: list[str]
    queue: asyncio.Queue = field(default_factory=asyncio.Queue)
    subscriptions: list[Subscription] = field(default_factory=list)
    sender: asyncio.Task | None = None


class ConnectionManager:
    """
    Tracks change-stream connections.

    Subscriptions are opened on connect and disposed on disconnect, so a
    closed page never receives (or leaks) further events.
    """

    def __init__(self):
        self.connections: set[ChangeConnection] = set()

    async def connect(
        self,
        websocket: WebSocket,
        hub: RealtimeHub,
        tables: Iterable[str],
    ) -> ChangeConnection:
        """
        Accept the socket and subscribe it to tables.

        Args:
            websocket: The WebSocket connection
            hub: Hub to subscribe on
            tables: Table names to listen to
        """
        await websocket.accept()

        connection = ChangeConnection(websocket=websocket, tables=list(tables))
        loop = asyncio.get_running_loop()

        def enqueue(event: ChangeEvent) -> None:
            # Hub handlers may run outside the event loop thread
            loop.call_soon_threadsafe(connection.queue.put_nowait, invalidation_message(event))

        for table in connection.tables:
            connection.subscriptions.append(hub.subscribe(table, enqueue))

        connection.sender = asyncio.create_task(self._pump(connection))
        self.connections.add(connection)

        logger.info(
            f"Change stream connected for {connection.tables}. "
            f"Total connections: {len(self.connections)}"
        )
        return connection

    async def _pump(self, connection: ChangeConnection) -> None:
        while True:
            message = await connection.queue.get()
            try:
                await connection.websocket.send_json(message)
            except Exception as e:
                logger.warning(f"Failed to send to WebSocket: {e}")
                return
            logger.debug(f"Forwarded {message['event']} on {message['table']}")

    async def disconnect(self, connection: ChangeConnection) -> None:
        """Dispose the connection's subscriptions and stop its sender."""
        for subscription in connection.subscriptions:
            subscription.unsubscribe()
        connection.subscriptions.clear()

        if connection.sender is not None:
            connection.sender.cancel()
            try:
                await connection.sender
            except asyncio.CancelledError:
                pass
            connection.sender = None

        self.connections.discard(connection)
        logger.info(f"Change stream disconnected. Total connections: {len(self.connections)}")

    def get_connection_count(self, table: str | None = None) -> int:
        """
        Number of active connections, optionally only those watching table.
        """
        if table:
            return sum(1 for connection in self.connections if table in connection.tables)
        return len(self.connections)

    def get_watched_tables(self) -> list[str]:
        """Tables with at least one listener."""
        return sorted({table for connection in self.connections for table in connection.tables})


# Global singleton instance
websocket_manager = ConnectionManager()
