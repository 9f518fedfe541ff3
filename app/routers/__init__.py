# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - catalog.py: Public products and categories
# - content.py: Public blog, testimonials, about, settings, layout
# - contact.py: Public contact form
# - admin.py: Admin CMS managers, CSV export, site settings, stats
# - realtime.py: Database change webhook
# - upload.py: Image upload relay
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import admin
from . import catalog
from . import contact
from . import content
from . import health
from . import realtime
from . import upload

__all__ = [
    "admin",
    "catalog",
    "contact",
    "content",
    "health",
    "realtime",
    "upload",
]
