# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - catalog.py: Product and category schemas
# - content.py: Blog, testimonial, about and contact-info schemas
# - contact.py: Contact form submission schemas
# - site_setting.py: Site setting schemas (nested JSON values)
# - upload.py: Image relay response envelope
#
# These models define the "contract" between API and clients.
# =============================================================================

from .catalog import (
    CategoryCreate,
    CategoryRef,
    CategoryResponse,
    CategoryUpdate,
    ProductCreate,
    ProductDetailResponse,
    ProductResponse,
    ProductUpdate,
)
from .contact import (
    ContactSubmissionAck,
    ContactSubmissionCreate,
    ContactSubmissionResponse,
)
from .content import (
    AboutContentCreate,
    AboutContentResponse,
    AboutContentUpdate,
    BlogPostCreate,
    BlogPostResponse,
    BlogPostUpdate,
    ContactInfoCreate,
    ContactInfoResponse,
    ContactInfoUpdate,
    TestimonialCreate,
    TestimonialResponse,
    TestimonialUpdate,
)
from .site_setting import (
    SiteSettingCreate,
    SiteSettingFieldUpdate,
    SiteSettingResponse,
    SiteSettingValueUpdate,
)
from .upload import UploadError, UploadResult

__all__ = [
    # Catalog
    "CategoryCreate",
    "CategoryRef",
    "CategoryResponse",
    "CategoryUpdate",
    "ProductCreate",
    "ProductDetailResponse",
    "ProductResponse",
    "ProductUpdate",
    # Contact
    "ContactSubmissionAck",
    "ContactSubmissionCreate",
    "ContactSubmissionResponse",
    # Content
    "AboutContentCreate",
    "AboutContentResponse",
    "AboutContentUpdate",
    "BlogPostCreate",
    "BlogPostResponse",
    "BlogPostUpdate",
    "ContactInfoCreate",
    "ContactInfoResponse",
    "ContactInfoUpdate",
    "TestimonialCreate",
    "TestimonialResponse",
    "TestimonialUpdate",
    # Site settings
    "SiteSettingCreate",
    "SiteSettingFieldUpdate",
    "SiteSettingResponse",
    "SiteSettingValueUpdate",
    # Upload
    "UploadError",
    "UploadResult",
]
