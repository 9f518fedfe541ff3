# =============================================================================
# tests/test_websocket.py - Change Stream Tests
# =============================================================================
# Tests for /ws/changes:
# - listeners receive an invalidate message for changes on their tables
# - subscriptions are released when the socket closes
# =============================================================================

import time

import pytest
from starlette.websockets import WebSocketDisconnect

from app.websocket.manager import invalidation_message
from app.websocket.routes import parse_tables
from lib.realtime import WATCHED_TABLES, ChangeEvent, ChangeType


def wait_for(condition, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


class TestParseTables:
    """Tests for the ?tables= parameter."""

    def test_empty_means_all(self):
        assert parse_tables(None) == list(WATCHED_TABLES)
        assert parse_tables("") == list(WATCHED_TABLES)

    def test_unknown_names_are_dropped(self):
        assert parse_tables("products, audit_log ,site_settings") == ["products", "site_settings"]

    def test_only_unknown_names(self):
        assert parse_tables("audit_log") == []


class TestInvalidationMessage:
    def test_message_lists_cache_keys(self):
        message = invalidation_message(ChangeEvent(event=ChangeType.DELETE, table="blog_posts"))

        assert message == {
            "type": "invalidate",
            "event": "DELETE",
            "table": "blog_posts",
            "keys": ["blog-posts", "admin-blog-posts", "admin-stats"],
        }


class TestChangeStream:
    """Tests for the websocket endpoint."""

    def test_receives_changes_for_subscribed_table(self, client, services):
        with client.websocket_connect("/ws/changes?tables=products") as websocket:
            assert websocket.receive_json() == {"type": "connected", "tables": ["products"]}

            services.notifier.publish_change("categories", ChangeType.UPDATE, new={"id": "c1"})
            services.notifier.publish_change("products", ChangeType.INSERT, new={"id": "p1"})

            message = websocket.receive_json()
            assert message["type"] == "invalidate"
            assert message["event"] == "INSERT"
            assert message["table"] == "products"
            assert "featured-products" in message["keys"]

    def test_admin_write_reaches_listener(self, client, services, admin_headers):
        with client.websocket_connect("/ws/changes?tables=testimonials") as websocket:
            websocket.receive_json()

            client.post(
                "/api/v1/admin/testimonials",
                json={"name": "Sita", "quote": "Lovely oils"},
                headers=admin_headers,
            )

            message = websocket.receive_json()
            assert message["table"] == "testimonials"
            assert message["event"] == "INSERT"

    def test_ping_pong(self, client):
        with client.websocket_connect("/ws/changes") as websocket:
            websocket.receive_json()
            websocket.send_text("ping")
            assert websocket.receive_text() == "pong"

    def test_unknown_tables_are_rejected(self, client):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect("/ws/changes?tables=audit_log") as websocket:
                websocket.receive_json()

        assert exc_info.value.code == 4400

    def test_subscriptions_released_on_close(self, client, services):
        baseline = services.hub.subscriber_count("site_settings")

        with client.websocket_connect("/ws/changes?tables=site_settings") as websocket:
            websocket.receive_json()
            assert services.hub.subscriber_count("site_settings") == baseline + 1
            assert client.get("/ws/status").json()["watched_tables"] == ["site_settings"]

        assert wait_for(lambda: services.hub.subscriber_count("site_settings") == baseline)
        assert wait_for(lambda: client.get("/ws/status").json()["total_connections"] == 0)
