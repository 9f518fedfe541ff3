# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# The service container is built once in the lifespan (app/main.py) and kept
# on app.state; these providers hand its parts to route handlers via Depends().
# Tests swap the container (or single providers) through dependency_overrides.
# =============================================================================

from typing import Annotated, Any

from fastapi import Depends, Request
from fastapi.websockets import WebSocket

from core.services.catalog_service import CatalogService
from core.services.contact_service import ContactService
from core.services.container import ServiceContainer
from core.services.content_service import ContentService
from core.services.dashboard_service import DashboardService
from core.services.image_relay import ImageRelay
from core.services.site_settings_service import SiteSettingsService
from lib.realtime import ChangeNotifier
from lib.supabase_client import SupabaseClient


def get_services(request: Request) -> ServiceContainer:
    """The container built at startup."""
    return request.app.state.services


def get_ws_services(websocket: WebSocket) -> ServiceContainer:
    """Same container, reached from a websocket scope."""
    return websocket.app.state.services


def get_auth_client(request: Request) -> Any:
    """Anon-key Supabase client used for password sign-in."""
    return request.app.state.auth_client


ServicesDep = Annotated[ServiceContainer, Depends(get_services)]


def get_store(services: ServicesDep) -> SupabaseClient:
    return services.store


def get_notifier(services: ServicesDep) -> ChangeNotifier:
    return services.notifier


def get_catalog(services: ServicesDep) -> CatalogService:
    return services.catalog


def get_content(services: ServicesDep) -> ContentService:
    return services.content


def get_contact(services: ServicesDep) -> ContactService:
    return services.contact


def get_site_settings(services: ServicesDep) -> SiteSettingsService:
    return services.site_settings


def get_dashboard(services: ServicesDep) -> DashboardService:
    return services.dashboard


def get_relay(services: ServicesDep) -> ImageRelay:
    return services.relay


# Type aliases for dependency injection
StoreDep = Annotated[SupabaseClient, Depends(get_store)]
NotifierDep = Annotated[ChangeNotifier, Depends(get_notifier)]
CatalogDep = Annotated[CatalogService, Depends(get_catalog)]
ContentDep = Annotated[ContentService, Depends(get_content)]
ContactDep = Annotated[ContactService, Depends(get_contact)]
SiteSettingsDep = Annotated[SiteSettingsService, Depends(get_site_settings)]
DashboardDep = Annotated[DashboardService, Depends(get_dashboard)]
RelayDep = Annotated[ImageRelay, Depends(get_relay)]
AuthClientDep = Annotated[Any, Depends(get_auth_client)]
