# =============================================================================
# core/services/catalog_service.py - Public Product Catalog
# =============================================================================
# Read side of the storefront catalog:
# - categories with derived slugs
# - available products, filtered by ?category= / ?filter_by= and search
# - featured products for the homepage
# - product detail with related products from the same category
#
# Every list is cached under the key the change notifications invalidate
# (see lib/realtime.py INVALIDATION_MAP).
# =============================================================================

import logging
import re
from typing import Any
from uuid import UUID

from app.exceptions import RecordNotFoundError, StoreUnavailableError
from core.services.crud_service import matches_search
from lib.query_cache import QueryCache
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = "*, categories(name)"
PRODUCT_ORDER = (("display_order", False), ("is_featured", True), ("created_at", True))
FEATURED_LIMIT = 4
RELATED_LIMIT = 4

# Filter value meaning "no category filter"
ALL_CATEGORIES = "all"


# =============================================================================
# Category Filter
# =============================================================================

def slugify(name: str) -> str:
    """Essential Oils -> essential-oils."""
    return re.sub(r"\s+", "-", name.lower())


def resolve_category_filter(
    category: str | None,
    filter_by: str | None,
    categories: list[dict[str, Any]],
) -> str | None:
    """
    Work out the selected category from the query string.

    ?category= wins over ?filter_by=. The value is matched case-insensitively
    against each category's slug and name; a match selects that category's
    slug, otherwise the raw (lowercased) value is kept. "all" or an empty
    value means no filter.

    Returns:
        The selected category value, or None for "show everything"
    """
    param = (category or filter_by or "").strip()
    if not param:
        return None

    wanted = param.lower()
    if wanted == ALL_CATEGORIES:
        return None

    for row in categories:
        name = row.get("name") or ""
        if wanted in (slugify(name), name.lower()):
            return slugify(name)
    return wanted


def product_in_category(product: dict[str, Any], selected: str | None) -> bool:
    """
    Does product belong to the selected category?

    Matches the embedded category name by slug, lowercase name or exact
    name. Products with no category only show when nothing is selected.
    """
    if not selected or selected == ALL_CATEGORIES:
        return True

    category = product.get("categories") or {}
    name = category.get("name") if isinstance(category, dict) else None
    if not name:
        return False
    return selected in (slugify(name), name.lower(), name)


# =============================================================================
# Service
# =============================================================================

class CatalogService:
    """Cached public reads of categories and products."""

    def __init__(self, store: SupabaseClient, cache: QueryCache):
        self.store = store
        self.cache = cache

    def _select(self, operation: str, table: str, **kwargs) -> list[dict[str, Any]]:
        try:
            return self.store.select(table, **kwargs)
        except SupabaseClientError as e:
            logger.error(f"Failed to {operation}: {e}")
            raise StoreUnavailableError(operation, e.message)

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def list_categories(self) -> list[dict[str, Any]]:
        """All categories in display order, each with its slug."""

        def fetch():
            rows = self._select(
                "load categories",
                "categories",
                order=(("display_order", False), ("name", False)),
            )
            for row in rows:
                row["slug"] = slugify(row.get("name") or "")
            return rows

        return self.cache.get_or_fetch("categories", fetch)

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    def _available_products(self) -> list[dict[str, Any]]:
        return self.cache.get_or_fetch(
            "products",
            lambda: self._select(
                "load products",
                "products",
                columns=PRODUCT_COLUMNS,
                eq={"availability": True},
                order=PRODUCT_ORDER,
            ),
        )

    def list_products(
        self,
        category: str | None = None,
        filter_by: str | None = None,
        search: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Available products, optionally narrowed by category and search term.

        Args:
            category: ?category= value (slug or name)
            filter_by: ?filter_by= value, used when category is absent
            search: Case-insensitive match on name and description
        """
        products = self._available_products()

        selected = None
        if category or filter_by:
            selected = resolve_category_filter(category, filter_by, self.list_categories())

        results = [
            product for product in products
            if product_in_category(product, selected)
            and matches_search(product, search, ("name", "description"))
        ]
        logger.debug(f"Product listing: category={selected} search={search} -> {len(results)}")
        return results

    def featured_products(self) -> list[dict[str, Any]]:
        """Up to four featured products for the homepage, oldest first on ties."""
        return self.cache.get_or_fetch(
            "featured-products",
            lambda: self._select(
                "load featured products",
                "products",
                columns=PRODUCT_COLUMNS,
                eq={"is_featured": True},
                order=(("display_order", False), ("created_at", False)),
                limit=FEATURED_LIMIT,
            ),
        )

    def get_product(self, product_id: str | UUID) -> dict[str, Any]:
        """
        One product by id.

        Raises:
            RecordNotFoundError: If the product doesn't exist
        """
        try:
            product = self.store.select_one(
                "products",
                columns=PRODUCT_COLUMNS,
                eq={"id": str(product_id)},
            )
        except SupabaseClientError as e:
            raise StoreUnavailableError("load product", e.message)

        if not product:
            raise RecordNotFoundError("products", str(product_id))
        return product

    def related_products(self, product: dict[str, Any]) -> list[dict[str, Any]]:
        """Up to four other products from the same category."""
        category_id = product.get("category_id")
        if not category_id:
            return []

        return self._select(
            "load related products",
            "products",
            columns=PRODUCT_COLUMNS,
            eq={"category_id": category_id},
            neq={"id": product["id"]},
            limit=RELATED_LIMIT,
        )

    def product_detail(self, product_id: str | UUID) -> dict[str, Any]:
        product = self.get_product(product_id)
        return {"product": product, "related": self.related_products(product)}
