# =============================================================================
# app/websocket/routes.py - WebSocket Routes
# =============================================================================
# Change stream for open pages.
#
# Connect: ws://host/ws/changes?tables=site_settings,products
#
# Events:
#   - {"type": "connected", "tables": [...]}
#   - {"type": "invalidate", "event": "UPDATE", "table": "site_settings",
#      "keys": ["site-settings", "header-content", ...]}
# =============================================================================

import logging

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect

from app.dependencies import get_ws_services
from app.websocket.manager import websocket_manager
from core.services.container import ServiceContainer
from lib.realtime import WATCHED_TABLES

logger = logging.getLogger(__name__)

router = APIRouter()


def parse_tables(tables: str | None) -> list[str]:
    """Comma-separated table list; unknown names are dropped, empty = all."""
    if not tables:
        return list(WATCHED_TABLES)
    requested = [name.strip() for name in tables.split(",") if name.strip()]
    return [name for name in requested if name in WATCHED_TABLES]


@router.websocket("/ws/changes")
async def changes_websocket(
    websocket: WebSocket,
    tables: str | None = Query(default=None, description="Comma-separated table names"),
    services: ServiceContainer = Depends(get_ws_services),
):
    """
    Stream cache invalidations for the requested tables.

    Every change on a watched table arrives as an "invalidate" message
    naming the cache keys to re-fetch. Send "ping" to get "pong".
    """
    selected = parse_tables(tables)
    if not selected:
        logger.warning(f"Change stream rejected: no watched tables in {tables!r}")
        await websocket.close(code=4400, reason="No watched tables requested")
        return

    connection = await websocket_manager.connect(websocket, services.hub, selected)

    try:
        await websocket.send_json({"type": "connected", "tables": selected})

        # Keep connection alive and handle incoming messages
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text("pong")
            else:
                logger.debug(f"WebSocket received: {data[:100]}")

    except WebSocketDisconnect:
        logger.info(f"Change stream client disconnected ({selected})")
    finally:
        await websocket_manager.disconnect(connection)


@router.get("/ws/status")
async def websocket_status():
    """
    Get WebSocket connection statistics.

    Returns:
        dict: Connection counts and watched tables
    """
    return {
        "total_connections": websocket_manager.get_connection_count(),
        "watched_tables": websocket_manager.get_watched_tables(),
    }
