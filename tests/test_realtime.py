# =============================================================================
# tests/test_realtime.py - Change Notification Tests
# =============================================================================
# Tests for lib/realtime.py:
# - ChangeEvent parsing from database webhooks
# - Hub subscribe / dispatch / unsubscribe lifecycle
# - Cache invalidation wiring
# - Notifier backends
# =============================================================================

import pytest

from lib.query_cache import QueryCache
from lib.realtime import (
    INVALIDATION_MAP,
    ChangeEvent,
    ChangeNotifier,
    ChangeType,
    RealtimeHub,
    keys_for_table,
    wire_cache_invalidation,
)


class TestChangeEvent:
    """Tests for ChangeEvent."""

    def test_from_webhook(self):
        event = ChangeEvent.from_webhook({
            "type": "UPDATE",
            "table": "site_settings",
            "schema": "public",
            "record": {"key": "footer"},
            "old_record": {"key": "footer"},
        })

        assert event.event == ChangeType.UPDATE
        assert event.schema_name == "public"
        assert event.new == {"key": "footer"}

    def test_payload_uses_schema_alias(self):
        event = ChangeEvent(event=ChangeType.DELETE, table="products", old={"id": "1"})
        payload = event.to_payload()

        assert payload["schema"] == "public"
        assert payload["event"] == "DELETE"
        assert ChangeEvent.model_validate(payload) == event

    def test_unknown_type_is_rejected(self):
        with pytest.raises(ValueError):
            ChangeEvent.from_webhook({"type": "TRUNCATE", "table": "products"})


class TestInvalidationMap:
    """Tests for the static table -> keys lookup."""

    def test_site_settings_covers_layout_keys(self):
        keys = keys_for_table("site_settings")
        for key in ("site-settings", "header-content", "footer-content", "company-branding", "social-media"):
            assert key in keys

    def test_every_table_drops_admin_stats(self):
        assert all("admin-stats" in keys for keys in INVALIDATION_MAP.values())

    def test_unknown_table(self):
        assert keys_for_table("audit_log") == ()


class TestRealtimeHub:
    """Tests for RealtimeHub subscriptions."""

    def test_dispatch_reaches_table_and_wildcard_handlers(self):
        hub = RealtimeHub()
        seen = []
        hub.subscribe("products", lambda e: seen.append(("products", e.table)))
        hub.subscribe("*", lambda e: seen.append(("*", e.table)))
        hub.subscribe("categories", lambda e: seen.append(("categories", e.table)))

        delivered = hub.dispatch(ChangeEvent(event=ChangeType.INSERT, table="products"))

        assert delivered == 2
        assert seen == [("products", "products"), ("*", "products")]

    def test_unsubscribe_is_idempotent(self):
        hub = RealtimeHub()
        seen = []
        subscription = hub.subscribe("products", seen.append)

        subscription.unsubscribe()
        subscription.unsubscribe()

        hub.dispatch(ChangeEvent(event=ChangeType.INSERT, table="products"))
        assert seen == []
        assert hub.subscriber_count() == 0
        assert not subscription.active

    def test_context_manager_disposes(self):
        hub = RealtimeHub()
        with hub.subscribe("products", lambda e: None):
            assert hub.subscriber_count("products") == 1
        assert hub.subscriber_count("products") == 0

    def test_failing_handler_does_not_stop_others(self):
        hub = RealtimeHub()
        seen = []

        def broken(event):
            raise RuntimeError("boom")

        hub.subscribe("products", broken)
        hub.subscribe("products", seen.append)

        assert hub.dispatch(ChangeEvent(event=ChangeType.UPDATE, table="products")) == 1
        assert len(seen) == 1


class TestCacheWiring:
    """Tests for wire_cache_invalidation."""

    def test_change_drops_mapped_keys_only(self):
        hub = RealtimeHub()
        cache = QueryCache()
        wire_cache_invalidation(hub, cache)
        for key in ("products", "featured-products", "blog-posts", "header-content"):
            cache.set(key, ["cached"])

        hub.dispatch(ChangeEvent(event=ChangeType.UPDATE, table="products"))

        assert "products" not in cache
        assert "featured-products" not in cache
        assert "blog-posts" in cache
        assert "header-content" in cache

    def test_subscriptions_can_be_disposed(self):
        hub = RealtimeHub()
        subscriptions = wire_cache_invalidation(hub, QueryCache())

        assert hub.subscriber_count() == len(INVALIDATION_MAP)
        for subscription in subscriptions:
            subscription.unsubscribe()
        assert hub.subscriber_count() == 0


class TestChangeNotifier:
    """Tests for ChangeNotifier backends."""

    def test_local_backend_dispatches_in_process(self):
        hub = RealtimeHub()
        seen = []
        hub.subscribe("blog_posts", seen.append)

        assert ChangeNotifier(hub).publish_change("blog_posts", ChangeType.INSERT, new={"id": "1"})
        assert seen[0].new == {"id": "1"}

    def test_redis_backend_publishes_json(self, monkeypatch):
        hub = RealtimeHub()
        published = []

        class FakeRedis:
            def publish(self, channel, message):
                published.append((channel, message))

        notifier = ChangeNotifier(hub, backend="redis", redis_url="redis://x", channel="test:changes")
        monkeypatch.setattr(notifier, "_get_redis_client", lambda: FakeRedis())

        assert notifier.publish_change("products", ChangeType.DELETE, old={"id": "9"})
        channel, message = published[0]
        assert channel == "test:changes"
        assert ChangeEvent.model_validate_json(message).old == {"id": "9"}

    def test_redis_failure_falls_back_to_local(self, monkeypatch):
        hub = RealtimeHub()
        seen = []
        hub.subscribe("products", seen.append)

        def unavailable():
            raise ConnectionError("redis down")

        notifier = ChangeNotifier(hub, backend="redis", redis_url="redis://x")
        monkeypatch.setattr(notifier, "_get_redis_client", unavailable)

        assert notifier.publish_change("products", ChangeType.INSERT) is False
        assert len(seen) == 1
