# =============================================================================
# core/services/container.py - Service Wiring
# =============================================================================
# Builds every service once at startup. The API keeps the container on
# app.state and hands services to routes through Depends() (see
# app/dependencies.py); tests build a container around an in-memory store.
# =============================================================================

import logging
from dataclasses import dataclass, field

from core.services.catalog_service import CatalogService
from core.services.contact_service import ContactService
from core.services.content_service import ContentService
from core.services.crud_service import (
    ALL_RESOURCES,
    CONTACT_SUBMISSIONS,
    SITE_SETTINGS,
    CrudService,
)
from core.services.dashboard_service import DashboardService
from core.services.image_relay import FtpUploader, ImageRelay
from core.services.site_settings_service import SiteSettingsService
from lib.query_cache import QueryCache
from lib.realtime import ChangeNotifier, RealtimeHub, Subscription, wire_cache_invalidation
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Everything a request handler may need."""

    store: SupabaseClient
    cache: QueryCache
    hub: RealtimeHub
    notifier: ChangeNotifier
    relay: ImageRelay
    resources: dict[str, CrudService]
    catalog: CatalogService
    content: ContentService
    contact: ContactService
    site_settings: SiteSettingsService
    dashboard: DashboardService
    subscriptions: list[Subscription] = field(default_factory=list)

    def close(self) -> None:
        """Dispose cache subscriptions and the notifier's connections."""
        for subscription in self.subscriptions:
            subscription.unsubscribe()
        self.subscriptions.clear()
        self.notifier.close()
        logger.info("Services closed")


def build_services(
    settings,
    store: SupabaseClient | None = None,
    uploader: FtpUploader | None = None,
) -> ServiceContainer:
    """
    Wire the service graph.

    Args:
        settings: Application Settings
        store: Store client (defaults to one built from settings)
        uploader: FTP uploader (defaults to one built from settings)
    """
    store = store or SupabaseClient.from_settings(settings)
    cache = QueryCache(ttl_seconds=settings.QUERY_CACHE_TTL_SECONDS)
    hub = RealtimeHub()
    notifier = ChangeNotifier(
        hub,
        backend=settings.REALTIME_BACKEND,
        redis_url=settings.REDIS_URL,
        channel=settings.REALTIME_CHANNEL,
    )
    subscriptions = wire_cache_invalidation(hub, cache)

    resources = {
        spec.path: CrudService(spec, store, cache, notifier)
        for spec in ALL_RESOURCES
    }

    container = ServiceContainer(
        store=store,
        cache=cache,
        hub=hub,
        notifier=notifier,
        relay=ImageRelay.from_settings(settings, uploader=uploader),
        resources=resources,
        catalog=CatalogService(store, cache),
        content=ContentService(store, cache),
        contact=ContactService(resources[CONTACT_SUBMISSIONS.path]),
        site_settings=SiteSettingsService(resources[SITE_SETTINGS.path]),
        dashboard=DashboardService(resources, cache),
        subscriptions=subscriptions,
    )
    logger.info(f"Services ready (realtime backend: {settings.REALTIME_BACKEND})")
    return container
