# =============================================================================
# core/services/crud_service.py - Generic Admin CRUD
# =============================================================================
# Every admin manager (products, categories, blog posts, testimonials,
# contact info, about content, contact submissions, site settings) is the
# same shape: list -> optional search -> create/edit -> delete. One
# CrudService parameterised by a ResourceSpec handles all of them.
#
# Every mutation publishes a change event for its table, which invalidates
# the table's cached queries (see lib/realtime.py INVALIDATION_MAP).
# =============================================================================

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable
from uuid import UUID

from pydantic import BaseModel

from app.exceptions import RecordNotFoundError, StoreUnavailableError
from core.models.catalog import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ProductCreate,
    ProductResponse,
    ProductUpdate,
)
from core.models.contact import ContactSubmissionResponse
from core.models.content import (
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
from core.models.site_setting import SiteSettingCreate, SiteSettingResponse
from lib.query_cache import QueryCache
from lib.realtime import ChangeNotifier, ChangeType
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceSpec:
    """
    Static description of one admin-managed table.

    Attributes:
        path: URL segment under /admin (also names the cache key)
        table: Hosted store table
        label: Singular human name used in messages
        create_model / update_model: Request bodies (update_model None = no edit path)
        response_model: Row schema returned to clients
        order: (column, descending) list ordering
        search_fields: Columns searched by ?search=
        columns: Select string (embeds allowed)
        touch_column: Timestamp column refreshed on every write
    """

    path: str
    table: str
    label: str
    create_model: type[BaseModel] | None
    update_model: type[BaseModel] | None
    response_model: type[BaseModel]
    order: tuple[tuple[str, bool], ...]
    search_fields: tuple[str, ...]
    columns: str = "*"
    touch_column: str | None = None

    @property
    def cache_key(self) -> str:
        return f"admin-{self.path}"


# =============================================================================
# Resource Registry
# =============================================================================

PRODUCTS = ResourceSpec(
    path="products",
    table="products",
    label="product",
    create_model=ProductCreate,
    update_model=ProductUpdate,
    response_model=ProductResponse,
    order=(("display_order", False), ("name", False)),
    search_fields=("name", "description"),
    columns="*, categories(name)",
)

CATEGORIES = ResourceSpec(
    path="categories",
    table="categories",
    label="category",
    create_model=CategoryCreate,
    update_model=CategoryUpdate,
    response_model=CategoryResponse,
    order=(("display_order", False), ("name", False)),
    search_fields=("name", "description"),
)

BLOG_POSTS = ResourceSpec(
    path="blog-posts",
    table="blog_posts",
    label="blog post",
    create_model=BlogPostCreate,
    update_model=BlogPostUpdate,
    response_model=BlogPostResponse,
    order=(("created_at", True),),
    search_fields=("title", "content"),
)

TESTIMONIALS = ResourceSpec(
    path="testimonials",
    table="testimonials",
    label="testimonial",
    create_model=TestimonialCreate,
    update_model=TestimonialUpdate,
    response_model=TestimonialResponse,
    order=(("created_at", True),),
    search_fields=("name", "quote"),
)

CONTACT_INFO = ResourceSpec(
    path="contact-info",
    table="contact_info",
    label="contact info",
    create_model=ContactInfoCreate,
    update_model=ContactInfoUpdate,
    response_model=ContactInfoResponse,
    order=(("type", False),),
    search_fields=("type", "value", "label"),
    touch_column="updated_at",
)

ABOUT_CONTENT = ResourceSpec(
    path="about-content",
    table="about_content",
    label="about section",
    create_model=AboutContentCreate,
    update_model=AboutContentUpdate,
    response_model=AboutContentResponse,
    order=(("order_index", False), ("section", False)),
    search_fields=("section", "title", "content"),
    touch_column="updated_at",
)

# Append-only: created by the public contact form, never edited
CONTACT_SUBMISSIONS = ResourceSpec(
    path="contact-submissions",
    table="contact_submissions",
    label="contact submission",
    create_model=None,
    update_model=None,
    response_model=ContactSubmissionResponse,
    order=(("created_at", True),),
    search_fields=("name", "email", "message"),
)

# Value edits go through SiteSettingsService
SITE_SETTINGS = ResourceSpec(
    path="site-settings",
    table="site_settings",
    label="site setting",
    create_model=SiteSettingCreate,
    update_model=None,
    response_model=SiteSettingResponse,
    order=(("key", False),),
    search_fields=("key", "description"),
    touch_column="updated_at",
)

# Managers exposed through the generic admin router
CRUD_RESOURCES: tuple[ResourceSpec, ...] = (
    PRODUCTS,
    CATEGORIES,
    BLOG_POSTS,
    TESTIMONIALS,
    CONTACT_INFO,
    ABOUT_CONTENT,
)

ALL_RESOURCES: tuple[ResourceSpec, ...] = CRUD_RESOURCES + (CONTACT_SUBMISSIONS, SITE_SETTINGS)


# =============================================================================
# Helpers
# =============================================================================

def matches_search(row: dict[str, Any], term: str | None, fields: Iterable[str]) -> bool:
    """
    Case-insensitive substring match over the given text fields.

    An empty term matches everything; null fields never match.
    """
    needle = (term or "").strip().lower()
    if not needle:
        return True
    for field in fields:
        value = row.get(field)
        if isinstance(value, str) and needle in value.lower():
            return True
    return False


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Service
# =============================================================================

class CrudService:
    """
    List/get/create/update/delete for one ResourceSpec.

    Lists are cached under spec.cache_key; mutations publish a change
    event so every cache depending on the table is dropped.
    """

    def __init__(
        self,
        spec: ResourceSpec,
        store: SupabaseClient,
        cache: QueryCache,
        notifier: ChangeNotifier,
    ):
        self.spec = spec
        self.store = store
        self.cache = cache
        self.notifier = notifier

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def _fetch_all(self) -> list[dict[str, Any]]:
        try:
            return self.store.select(
                self.spec.table,
                columns=self.spec.columns,
                order=self.spec.order,
            )
        except SupabaseClientError as e:
            logger.error(f"Failed to list {self.spec.table}: {e}")
            raise StoreUnavailableError(f"load {self.spec.label} list", e.message)

    def list(self, search: str | None = None) -> list[dict[str, Any]]:
        """All rows in list order, optionally filtered by search term."""
        rows = self.cache.get_or_fetch(self.spec.cache_key, self._fetch_all)
        if search:
            rows = [row for row in rows if matches_search(row, search, self.spec.search_fields)]
        return rows

    def get(self, row_id: str | UUID) -> dict[str, Any]:
        """
        Fetch one row.

        Raises:
            RecordNotFoundError: If no row has that id
        """
        try:
            row = self.store.select_one(
                self.spec.table,
                columns=self.spec.columns,
                eq={"id": str(row_id)},
            )
        except SupabaseClientError as e:
            raise StoreUnavailableError(f"load {self.spec.label}", e.message)

        if not row:
            raise RecordNotFoundError(self.spec.table, str(row_id))
        return row

    def count(self) -> int:
        try:
            return self.store.count(self.spec.table)
        except SupabaseClientError as e:
            raise StoreUnavailableError(f"count {self.spec.table}", e.message)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(self, payload: BaseModel | dict[str, Any]) -> dict[str, Any]:
        """Insert a row from a validated create model."""
        data = payload.model_dump(mode="json") if isinstance(payload, BaseModel) else dict(payload)
        if self.spec.touch_column:
            data[self.spec.touch_column] = utc_now_iso()

        try:
            row = self.store.insert(self.spec.table, data)
        except SupabaseClientError as e:
            logger.error(f"Failed to create {self.spec.label}: {e}")
            raise StoreUnavailableError(f"create {self.spec.label}", e.message)

        logger.info(f"Created {self.spec.label}: {row.get('id')}")
        self.notifier.publish_change(self.spec.table, ChangeType.INSERT, new=row)
        return row

    def update(self, row_id: str | UUID, payload: BaseModel | dict[str, Any]) -> dict[str, Any]:
        """
        Apply a partial update - only fields the client sent are written.

        Raises:
            RecordNotFoundError: If no row has that id
        """
        if isinstance(payload, BaseModel):
            data = payload.model_dump(mode="json", exclude_unset=True)
        else:
            data = dict(payload)

        if not data:
            return self.get(row_id)  # Nothing to update

        if self.spec.touch_column:
            data[self.spec.touch_column] = utc_now_iso()

        try:
            row = self.store.update(self.spec.table, str(row_id), data)
        except SupabaseClientError as e:
            logger.error(f"Failed to update {self.spec.label} {row_id}: {e}")
            raise StoreUnavailableError(f"update {self.spec.label}", e.message)

        if row is None:
            raise RecordNotFoundError(self.spec.table, str(row_id))

        logger.info(f"Updated {self.spec.label}: {row_id}")
        self.notifier.publish_change(self.spec.table, ChangeType.UPDATE, new=row)
        return row

    def delete(self, row_id: str | UUID) -> dict[str, Any]:
        """
        Delete immediately; there is no undo at this layer.

        Raises:
            RecordNotFoundError: If no row has that id
        """
        try:
            row = self.store.delete(self.spec.table, str(row_id))
        except SupabaseClientError as e:
            logger.error(f"Failed to delete {self.spec.label} {row_id}: {e}")
            raise StoreUnavailableError(f"delete {self.spec.label}", e.message)

        if row is None:
            raise RecordNotFoundError(self.spec.table, str(row_id))

        logger.info(f"Deleted {self.spec.label}: {row_id}")
        self.notifier.publish_change(self.spec.table, ChangeType.DELETE, old=row)
        return row
