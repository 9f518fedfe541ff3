# =============================================================================
# core/services/content_service.py - Public Marketing Content
# =============================================================================
# Cached public reads for the marketing pages: blog, testimonials, about
# sections, primary contact details and individual site settings.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import RecordNotFoundError, SettingNotFoundError, StoreUnavailableError
from lib.query_cache import QueryCache
from lib.realtime import SITE_SETTING_CACHE_KEYS
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

FEATURED_TESTIMONIALS_LIMIT = 3

# Settings the shared page layout (header + footer) needs on every page
LAYOUT_SETTING_KEYS: tuple[str, ...] = (
    "header",
    "footer",
    "company_branding",
    "social_media",
    "logo_width",
)


class ContentService:
    """Cached reads of published marketing content."""

    def __init__(self, store: SupabaseClient, cache: QueryCache):
        self.store = store
        self.cache = cache

    def _select(self, operation: str, table: str, **kwargs) -> list[dict[str, Any]]:
        try:
            return self.store.select(table, **kwargs)
        except SupabaseClientError as e:
            logger.error(f"Failed to {operation}: {e}")
            raise StoreUnavailableError(operation, e.message)

    def _select_one(self, operation: str, table: str, **kwargs) -> dict[str, Any] | None:
        try:
            return self.store.select_one(table, **kwargs)
        except SupabaseClientError as e:
            logger.error(f"Failed to {operation}: {e}")
            raise StoreUnavailableError(operation, e.message)

    # -------------------------------------------------------------------------
    # Blog
    # -------------------------------------------------------------------------

    def published_posts(self) -> list[dict[str, Any]]:
        """Published posts, newest first."""
        return self.cache.get_or_fetch(
            "blog-posts",
            lambda: self._select(
                "load blog posts",
                "blog_posts",
                eq={"is_published": True},
                order=(("published_date", True),),
            ),
        )

    def get_post(self, post_id: str | UUID) -> dict[str, Any]:
        """
        One published post. Drafts are not found.

        Raises:
            RecordNotFoundError: If the post is missing or unpublished
        """
        post = self._select_one(
            "load blog post",
            "blog_posts",
            eq={"id": str(post_id), "is_published": True},
        )
        if not post:
            raise RecordNotFoundError("blog_posts", str(post_id))
        return post

    # -------------------------------------------------------------------------
    # Testimonials / About / Contact
    # -------------------------------------------------------------------------

    def featured_testimonials(self) -> list[dict[str, Any]]:
        return self.cache.get_or_fetch(
            "featured-testimonials",
            lambda: self._select(
                "load testimonials",
                "testimonials",
                eq={"is_featured": True},
                order=(("created_at", True),),
                limit=FEATURED_TESTIMONIALS_LIMIT,
            ),
        )

    def about_sections(self) -> list[dict[str, Any]]:
        return self.cache.get_or_fetch(
            "about-content",
            lambda: self._select(
                "load about content",
                "about_content",
                order=(("order_index", False),),
            ),
        )

    def primary_contact_info(self) -> list[dict[str, Any]]:
        """Primary contact entries shown in the footer and contact page."""
        return self.cache.get_or_fetch(
            "contact-info",
            lambda: self._select(
                "load contact info",
                "contact_info",
                columns="type, value, label",
                eq={"is_primary": True},
            ),
        )

    # -------------------------------------------------------------------------
    # Site Settings
    # -------------------------------------------------------------------------

    def _fetch_setting(self, key: str) -> Any:
        row = self._select_one(
            f"load setting {key}",
            "site_settings",
            columns="value",
            eq={"key": key},
        )
        if row is None:
            raise SettingNotFoundError(key)
        return {"key": key, "value": row.get("value")}

    def get_setting(self, key: str) -> dict[str, Any]:
        """
        {key, value} for one setting.

        Well-known keys are cached under their page-level cache key;
        other keys are read through on every call.

        Raises:
            SettingNotFoundError: If no row has that key
        """
        cache_key = SITE_SETTING_CACHE_KEYS.get(key)
        if cache_key is None:
            return self._fetch_setting(key)
        return self.cache.get_or_fetch(cache_key, lambda: self._fetch_setting(key))

    def layout(self) -> dict[str, Any]:
        """
        Values the page layout needs, keyed by setting key.

        A missing setting maps to None so the page renders its defaults.
        """
        bundle: dict[str, Any] = {}
        for key in LAYOUT_SETTING_KEYS:
            try:
                bundle[key] = self.get_setting(key)["value"]
            except SettingNotFoundError:
                bundle[key] = None
        return bundle
