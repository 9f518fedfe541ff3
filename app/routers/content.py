# =============================================================================
# app/routers/content.py - Public Content Endpoints
# =============================================================================
# Read-only marketing content for the public pages: blog, testimonials,
# about sections, contact details, site settings and the layout bundle.
# =============================================================================

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Path

from app.dependencies import ContentDep
from core.models.content import AboutContentResponse, BlogPostResponse, ContactInfoResponse, TestimonialResponse

router = APIRouter()


@router.get("/blog", response_model=list[BlogPostResponse])
async def list_blog_posts(content: ContentDep):
    """Published posts, newest first."""
    return content.published_posts()


@router.get("/blog/{post_id}", response_model=BlogPostResponse)
async def get_blog_post(
    content: ContentDep,
    post_id: UUID = Path(..., description="Blog post ID"),
):
    """
    One published post.

    Raises:
        404: If the post is missing or still a draft
    """
    return content.get_post(post_id)


@router.get("/testimonials/featured", response_model=list[TestimonialResponse])
async def featured_testimonials(content: ContentDep):
    return content.featured_testimonials()


@router.get("/about", response_model=list[AboutContentResponse])
async def about_sections(content: ContentDep):
    return content.about_sections()


@router.get("/contact-info", response_model=list[ContactInfoResponse])
async def contact_info(content: ContentDep):
    """Primary contact entries."""
    return content.primary_contact_info()


@router.get("/settings/{key}")
async def get_setting(
    content: ContentDep,
    key: str = Path(..., description="Setting key, e.g. 'footer'"),
) -> dict[str, Any]:
    """
    {key, value} for one site setting.

    Raises:
        404: If no setting has that key
    """
    return content.get_setting(key)


@router.get("/layout")
async def layout(content: ContentDep) -> dict[str, Any]:
    """
    Header, footer, branding, social links and logo width in one call.

    Missing settings come back as null.
    """
    return content.layout()
