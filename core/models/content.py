# =============================================================================
# core/models/content.py - Marketing Content Schemas
# =============================================================================
# Blog posts, testimonials, about-page sections and contact details.
# Each entity has a Create (required fields enforced), an Update (all
# optional, partial) and a Response schema.
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


# =============================================================================
# Blog Posts
# =============================================================================

class BlogPostCreate(BaseModel):
    """
    Schema for creating a blog post.

    Example:
        {
            "title": "Five uses for tea tree oil",
            "content": "...",
            "tags": ["oils", "skincare"],
            "is_published": true
        }
    """

    title: str = Field(..., min_length=1, max_length=500)
    content: str = Field(..., min_length=1)
    summary: str | None = None
    cover_image: str | None = None
    author: str | None = None
    is_published: bool = Field(default=False, description="Only published posts are public")
    published_date: datetime | None = None
    tags: list[str] = Field(default_factory=list)


class BlogPostUpdate(BaseModel):
    """Partial blog post update."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    content: str | None = Field(default=None, min_length=1)
    summary: str | None = None
    cover_image: str | None = None
    author: str | None = None
    is_published: bool | None = None
    published_date: datetime | None = None
    tags: list[str] | None = None


class BlogPostResponse(BaseModel):
    id: UUID
    title: str
    content: str
    summary: str | None = None
    cover_image: str | None = None
    author: str | None = None
    is_published: bool | None = False
    published_date: datetime | None = None
    tags: list[str] | None = None
    created_at: datetime | None = None


# =============================================================================
# Testimonials
# =============================================================================

class TestimonialCreate(BaseModel):
    """Schema for creating a testimonial."""

    __test__ = False  # not a pytest class

    name: str = Field(..., min_length=1, max_length=255)
    quote: str = Field(..., min_length=1)
    rating: int | None = Field(default=5, ge=1, le=5, description="Star rating 1-5")
    location: str | None = None
    image: str | None = None
    is_featured: bool = False


class TestimonialUpdate(BaseModel):
    """Partial testimonial update."""

    __test__ = False

    name: str | None = Field(default=None, min_length=1, max_length=255)
    quote: str | None = Field(default=None, min_length=1)
    rating: int | None = Field(default=None, ge=1, le=5)
    location: str | None = None
    image: str | None = None
    is_featured: bool | None = None


class TestimonialResponse(BaseModel):
    __test__ = False

    id: UUID
    name: str
    quote: str
    rating: int | None = None
    location: str | None = None
    image: str | None = None
    is_featured: bool | None = False
    created_at: datetime | None = None


# =============================================================================
# About Content
# =============================================================================

class AboutContentCreate(BaseModel):
    """One section of the About page."""

    section: str = Field(..., min_length=1, max_length=255, description="Section identifier, e.g. 'story'")
    title: str | None = None
    content: str = Field(..., min_length=1)
    image: str | None = None
    order_index: int | None = None


class AboutContentUpdate(BaseModel):
    section: str | None = Field(default=None, min_length=1, max_length=255)
    title: str | None = None
    content: str | None = Field(default=None, min_length=1)
    image: str | None = None
    order_index: int | None = None


class AboutContentResponse(BaseModel):
    id: UUID
    section: str
    title: str | None = None
    content: str
    image: str | None = None
    order_index: int | None = None
    updated_at: datetime | None = None


# =============================================================================
# Contact Info
# =============================================================================

class ContactInfoCreate(BaseModel):
    """
    A piece of contact information.

    Example:
        {"type": "email", "value": "hello@example.com", "label": "Sales", "is_primary": true}
    """

    type: str = Field(..., min_length=1, max_length=50, description="email, phone, address, whatsapp, ...")
    value: str = Field(..., min_length=1)
    label: str | None = None
    is_primary: bool = Field(default=False, description="Primary entries are shown on public pages")


class ContactInfoUpdate(BaseModel):
    type: str | None = Field(default=None, min_length=1, max_length=50)
    value: str | None = Field(default=None, min_length=1)
    label: str | None = None
    is_primary: bool | None = None


class ContactInfoResponse(BaseModel):
    id: UUID | None = None
    type: str
    value: str
    label: str | None = None
    is_primary: bool | None = None
    updated_at: datetime | None = None
