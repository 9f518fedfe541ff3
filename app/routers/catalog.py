# =============================================================================
# app/routers/catalog.py - Public Catalog Endpoints
# =============================================================================
# Storefront product browsing:
#   GET /products?category=&filter_by=&search=
#   GET /products/featured
#   GET /products/{product_id}
#   GET /categories
# =============================================================================

from uuid import UUID

from fastapi import APIRouter, Path, Query

from app.dependencies import CatalogDep
from core.models.catalog import CategoryResponse, ProductDetailResponse, ProductResponse

router = APIRouter()


@router.get("/products", response_model=list[ProductResponse])
async def list_products(
    catalog: CatalogDep,
    category: str | None = Query(default=None, description="Category slug or name"),
    filter_by: str | None = Query(default=None, description="Alias of category"),
    search: str | None = Query(default=None, description="Match on name or description"),
):
    """
    Available products.

    Deep links like /products?category=essential-oils select the matching
    category; "all" or no value shows everything.
    """
    return catalog.list_products(category=category, filter_by=filter_by, search=search)


@router.get("/products/featured", response_model=list[ProductResponse])
async def featured_products(catalog: CatalogDep):
    """Homepage featured products (at most four)."""
    return catalog.featured_products()


@router.get("/products/{product_id}", response_model=ProductDetailResponse)
async def get_product(
    catalog: CatalogDep,
    product_id: UUID = Path(..., description="Product ID"),
):
    """
    Product detail with up to four related products.

    Raises:
        404: If the product doesn't exist
    """
    return catalog.product_detail(product_id)


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(catalog: CatalogDep):
    """Categories in display order, each with its slug."""
    return catalog.list_categories()
