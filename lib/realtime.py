# =============================================================================
# lib/realtime.py - Change Notifications and Cache Invalidation
# =============================================================================
# A change notification is pushed whenever a watched table's rows are
# inserted, updated or deleted. This module provides:
# - ChangeEvent: the {event, schema, table, new, old} payload
# - INVALIDATION_MAP: static table -> cache keys lookup
# - RealtimeHub: subscribe(table, handler) returning a disposable handle
# - ChangeNotifier: publishes events in-process or over Redis pub/sub
#
# Usage:
#   hub = RealtimeHub()
#   subscription = hub.subscribe("site_settings", on_change)
#   ...
#   subscription.unsubscribe()
# =============================================================================

from __future__ import annotations

import itertools
import json
import logging
import threading
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

ALL_TABLES = "*"


class ChangeType(str, Enum):
    """Row-level change kinds delivered by the hosted store."""
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class ChangeEvent(BaseModel):
    """
    One row change on a watched table.

    Example:
        {
            "event": "UPDATE",
            "schema": "public",
            "table": "site_settings",
            "new": {"key": "footer", "value": {...}},
            "old": {"key": "footer", "value": {...}}
        }
    """

    event: ChangeType
    schema_name: str = Field(default="public", alias="schema")
    table: str
    new: dict[str, Any] | None = None
    old: dict[str, Any] | None = None

    model_config = {"populate_by_name": True}

    @classmethod
    def from_webhook(cls, payload: dict[str, Any]) -> "ChangeEvent":
        """
        Build an event from a Supabase database-webhook body.

        Webhooks send {type, table, schema, record, old_record}.
        """
        return cls(
            event=ChangeType(str(payload.get("type", "")).upper()),
            schema=payload.get("schema") or "public",
            table=payload["table"],
            new=payload.get("record"),
            old=payload.get("old_record"),
        )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# Table -> Cache Key Lookup
# =============================================================================
# A change on the table invalidates every listed key, unconditionally.

SITE_SETTING_CACHE_KEYS: dict[str, str] = {
    "header": "header-content",
    "footer": "footer-content",
    "company_branding": "company-branding",
    "social_media": "social-media",
    "logo_width": "logo-width",
    "colors": "theme-colors",
    "products_page": "products-page-content",
    "blog_page": "blog-page-content",
    "about_page": "about-page-content",
    "business_hours": "business-hours",
    "homepage_hero": "homepage-hero",
    "hero_background": "hero-background",
    "hero_section_colors": "hero-section-colors",
    "hero_section_height_percentage": "hero-section-height",
    "newsletter": "newsletter",
    "show_npr_price": "price-toggle",
}

INVALIDATION_MAP: dict[str, tuple[str, ...]] = {
    "products": (
        "products",
        "featured-products",
        "admin-products",
        "admin-stats",
    ),
    "categories": (
        "categories",
        "products",
        "featured-products",
        "admin-categories",
        "admin-products",
        "admin-stats",
    ),
    "blog_posts": (
        "blog-posts",
        "admin-blog-posts",
        "admin-stats",
    ),
    "testimonials": (
        "featured-testimonials",
        "admin-testimonials",
        "admin-stats",
    ),
    "contact_info": (
        "contact-info",
        "admin-contact-info",
        "admin-stats",
    ),
    "contact_submissions": (
        "admin-contact-submissions",
        "admin-stats",
    ),
    "about_content": (
        "about-content",
        "admin-about-content",
        "admin-stats",
    ),
    "site_settings": (
        "site-settings",
        *SITE_SETTING_CACHE_KEYS.values(),
        "admin-stats",
    ),
}

WATCHED_TABLES: tuple[str, ...] = tuple(INVALIDATION_MAP)


def keys_for_table(table: str) -> tuple[str, ...]:
    """Cache keys invalidated by a change on table (empty if unwatched)."""
    return INVALIDATION_MAP.get(table, ())


# =============================================================================
# Hub
# =============================================================================

ChangeHandler = Callable[[ChangeEvent], Any]


class Subscription:
    """
    Disposable handle returned by RealtimeHub.subscribe().

    unsubscribe() is idempotent. Also usable as a context manager.
    """

    def __init__(self, hub: "RealtimeHub", subscription_id: int, table: str):
        self._hub = hub
        self.id = subscription_id
        self.table = table
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self._hub._remove(self)
        self.active = False

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.unsubscribe()

    def __repr__(self) -> str:
        return f"Subscription(id={self.id}, table={self.table!r}, active={self.active})"


class RealtimeHub:
    """
    Per-table subscription registry.

    Subscribing to "*" delivers events for every table. Handlers run
    synchronously in dispatch order; a failing handler is logged and the
    remaining handlers still run.
    """

    def __init__(self):
        self._handlers: dict[str, dict[int, ChangeHandler]] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def subscribe(self, table: str, handler: ChangeHandler) -> Subscription:
        with self._lock:
            subscription_id = next(self._ids)
            self._handlers.setdefault(table, {})[subscription_id] = handler
        logger.debug(f"Subscribed #{subscription_id} to {table}")
        return Subscription(self, subscription_id, table)

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            handlers = self._handlers.get(subscription.table)
            if handlers is None:
                return
            handlers.pop(subscription.id, None)
            if not handlers:
                del self._handlers[subscription.table]
        logger.debug(f"Unsubscribed #{subscription.id} from {subscription.table}")

    def subscriber_count(self, table: str | None = None) -> int:
        with self._lock:
            if table is not None:
                return len(self._handlers.get(table, {}))
            return sum(len(handlers) for handlers in self._handlers.values())

    def dispatch(self, event: ChangeEvent) -> int:
        """
        Deliver event to the table's handlers and the "*" handlers.

        Returns:
            Number of handlers that ran without raising
        """
        with self._lock:
            targets = list(self._handlers.get(event.table, {}).values())
            targets += list(self._handlers.get(ALL_TABLES, {}).values())

        delivered = 0
        for handler in targets:
            try:
                handler(event)
                delivered += 1
            except Exception as e:
                logger.error(f"Change handler failed for {event.table}: {e}")

        logger.debug(f"Dispatched {event.event.value} on {event.table} to {delivered} handlers")
        return delivered


def wire_cache_invalidation(hub: RealtimeHub, cache: Any) -> list[Subscription]:
    """
    Subscribe cache invalidation for every watched table.

    Returns the subscriptions so the caller can dispose them on shutdown.
    """
    subscriptions = []
    for table in WATCHED_TABLES:
        keys = keys_for_table(table)
        subscriptions.append(
            hub.subscribe(table, lambda event, keys=keys: cache.invalidate(keys))
        )
    return subscriptions


# =============================================================================
# Notifier
# =============================================================================

class ChangeNotifier:
    """
    Publishes change events.

    - local: dispatch straight into the hub (single process)
    - redis: publish JSON to a pub/sub channel; every API process runs a
      listener (see app/main.py) that feeds the channel back into its hub
    """

    def __init__(
        self,
        hub: RealtimeHub,
        backend: str = "local",
        redis_url: str | None = None,
        channel: str = "storefront:changes",
    ):
        self.hub = hub
        self.backend = backend
        self.redis_url = redis_url
        self.channel = channel
        self._redis = None

    def _get_redis_client(self):
        """Get a Redis client for pub/sub operations."""
        if self._redis is None:
            import redis
            self._redis = redis.from_url(self.redis_url)
        return self._redis

    def publish(self, event: ChangeEvent) -> bool:
        """
        Publish an event.

        Returns:
            bool: True if the event was delivered or queued
        """
        if self.backend != "redis":
            self.hub.dispatch(event)
            return True

        try:
            client = self._get_redis_client()
            client.publish(self.channel, json.dumps(event.to_payload()))
            logger.debug(f"Published {event.event.value} on {event.table} to {self.channel}")
            return True
        except Exception as e:
            # The write already happened; fall back to invalidating this process
            logger.error(f"Failed to publish change event: {e}")
            self.hub.dispatch(event)
            return False

    def publish_change(
        self,
        table: str,
        event: ChangeType,
        new: dict[str, Any] | None = None,
        old: dict[str, Any] | None = None,
    ) -> bool:
        return self.publish(ChangeEvent(event=event, table=table, new=new, old=old))

    def close(self) -> None:
        if self._redis is not None:
            try:
                self._redis.close()
            except Exception as e:
                logger.warning(f"Error closing Redis client: {e}")
            self._redis = None
