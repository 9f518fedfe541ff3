# =============================================================================
# app/websocket/__init__.py - WebSocket Module
# =============================================================================
# Pushes cache invalidations to open pages.
#
# Usage:
#   from app.websocket import websocket_manager
#
#   connection = await websocket_manager.connect(websocket, hub, ["products"])
#   ...
#   await websocket_manager.disconnect(connection)
# =============================================================================

from app.websocket.manager import ConnectionManager, invalidation_message, websocket_manager

__all__ = [
    "ConnectionManager",
    "invalidation_message",
    "websocket_manager",
]
