# =============================================================================
# core/models/catalog.py - Product and Category Schemas
# =============================================================================
# These models define the API contract for the product catalog:
# - CategoryCreate / CategoryUpdate / CategoryResponse
# - ProductCreate / ProductUpdate / ProductResponse
#
# A product may reference a category by id. Public listings embed the
# category name as `categories: {"name": ...}`.
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


# =============================================================================
# Categories
# =============================================================================

class CategoryCreate(BaseModel):
    """
    Schema for creating a category.

    Example:
        {"name": "Essential Oils", "display_order": 1}
    """

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Category name (its slug drives the ?category= filter)"
    )
    description: str | None = Field(default=None, description="Short blurb shown on the category card")
    image: str | None = Field(default=None, description="Image URL")
    display_order: int | None = Field(default=None, description="Ascending sort position")


class CategoryUpdate(BaseModel):
    """Partial category update - only provided fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    image: str | None = None
    display_order: int | None = None


class CategoryResponse(BaseModel):
    """Category row returned to clients."""

    id: UUID
    name: str
    description: str | None = None
    image: str | None = None
    display_order: int | None = None
    created_at: datetime | None = None
    slug: str | None = Field(default=None, description="lowercase name, whitespace -> '-'")


# =============================================================================
# Products
# =============================================================================

class ProductCreate(BaseModel):
    """
    Schema for creating a product.

    Example:
        {
            "name": "Lavender Oil",
            "price": 1200,
            "category_id": "550e8400-e29b-41d4-a716-446655440000",
            "is_featured": true
        }
    """

    name: str = Field(..., min_length=1, max_length=255, description="Product name")
    description: str | None = None
    image: str | None = Field(default=None, description="Image URL (usually from the upload relay)")
    price: float | None = Field(default=None, ge=0, description="Price; null hides it")
    availability: bool = Field(default=True, description="Unavailable products are hidden from the catalog")
    is_featured: bool = Field(default=False, description="Shown in the homepage featured section")
    category_id: UUID | None = Field(default=None, description="Owning category")
    display_order: int | None = None
    ingredients: str | None = None
    usage_instructions: str | None = None
    benefits: str | None = None


class ProductUpdate(BaseModel):
    """Partial product update - only provided fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    image: str | None = None
    price: float | None = Field(default=None, ge=0)
    availability: bool | None = None
    is_featured: bool | None = None
    category_id: UUID | None = None
    display_order: int | None = None
    ingredients: str | None = None
    usage_instructions: str | None = None
    benefits: str | None = None


class CategoryRef(BaseModel):
    """Embedded category name on product rows."""
    name: str


class ProductResponse(BaseModel):
    """Product row returned to clients."""

    id: UUID
    name: str
    description: str | None = None
    image: str | None = None
    price: float | None = None
    availability: bool | None = True
    is_featured: bool | None = False
    category_id: UUID | None = None
    display_order: int | None = None
    ingredients: str | None = None
    usage_instructions: str | None = None
    benefits: str | None = None
    created_at: datetime | None = None
    categories: CategoryRef | None = None


class ProductDetailResponse(BaseModel):
    """A product plus up to four others from the same category."""

    product: ProductResponse
    related: list[ProductResponse] = Field(default_factory=list)
