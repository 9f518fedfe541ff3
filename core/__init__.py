# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the storefront's business logic:
# - models/: Pydantic schemas for data validation
# - services/: Catalog, content, contact, site settings, admin CRUD and
#   the image upload relay, wired together by services/container.py
#
# Routers only translate HTTP to service calls; the logic lives here.
# =============================================================================
