# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .catalog_service import CatalogService
from .contact_service import ContactService
from .container import ServiceContainer, build_services
from .content_service import ContentService
from .crud_service import CrudService, ResourceSpec
from .dashboard_service import DashboardService
from .image_relay import FtpUploader, ImageRelay
from .site_settings_service import SiteSettingsService

__all__ = [
    "CatalogService",
    "ContactService",
    "ContentService",
    "CrudService",
    "DashboardService",
    "FtpUploader",
    "ImageRelay",
    "ResourceSpec",
    "ServiceContainer",
    "SiteSettingsService",
    "build_services",
]
