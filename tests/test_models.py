# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the request/response models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Partial-update models only report the fields that were sent
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from uuid import uuid4

import pytest
from pydantic import ValidationError

from core.models import (
    BlogPostCreate,
    CategoryResponse,
    ContactSubmissionAck,
    ContactSubmissionCreate,
    ProductCreate,
    ProductDetailResponse,
    ProductUpdate,
    SiteSettingCreate,
    SiteSettingFieldUpdate,
    TestimonialCreate,
    UploadResult,
)


# =============================================================================
# Catalog
# =============================================================================

class TestProductModels:
    """Tests for product schemas."""

    def test_product_defaults(self):
        """Only name is required; new products are available, not featured."""
        product = ProductCreate(name="Lavender Oil")

        assert product.availability is True
        assert product.is_featured is False
        assert product.category_id is None

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            ProductCreate(name="Lavender Oil", price=-1)

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            ProductCreate(name="")

    def test_update_tracks_sent_fields(self):
        """Unsent fields must not be written as nulls."""
        update = ProductUpdate(price=12.5)

        assert update.model_dump(exclude_unset=True) == {"price": 12.5}

    def test_update_can_clear_category(self):
        update = ProductUpdate(category_id=None)
        assert update.model_dump(exclude_unset=True) == {"category_id": None}

    def test_detail_response_embeds_category(self):
        detail = ProductDetailResponse(
            product={"id": str(uuid4()), "name": "Oat Soap", "categories": {"name": "Handmade Soap"}},
        )

        assert detail.product.categories.name == "Handmade Soap"
        assert detail.related == []

    def test_category_response_slug_optional(self):
        category = CategoryResponse(id=uuid4(), name="Essential Oils")
        assert category.slug is None


# =============================================================================
# Content
# =============================================================================

class TestContentModels:
    """Tests for blog and testimonial schemas."""

    def test_blog_post_defaults_to_draft(self):
        post = BlogPostCreate(title="Hello", content="Body")

        assert post.is_published is False
        assert post.tags == []

    def test_blog_post_requires_content(self):
        with pytest.raises(ValidationError):
            BlogPostCreate(title="Hello")

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_range(self, rating):
        with pytest.raises(ValidationError):
            TestimonialCreate(name="Sita", quote="Lovely", rating=rating)

    def test_rating_default(self):
        assert TestimonialCreate(name="Sita", quote="Lovely").rating == 5


# =============================================================================
# Contact
# =============================================================================

class TestContactModels:
    """Tests for ContactSubmissionCreate."""

    def test_required_fields_are_stripped(self):
        submission = ContactSubmissionCreate(name="  Asha ", email=" asha@example.com ", message=" Hi ")

        assert submission.name == "Asha"
        assert submission.email == "asha@example.com"
        assert submission.message == "Hi"

    @pytest.mark.parametrize("email", ["", "   ", "not-an-email", "a@b"])
    def test_invalid_email_rejected(self, email):
        with pytest.raises(ValidationError):
            ContactSubmissionCreate(name="Asha", email=email, message="Hi")

    def test_row_drops_product_name(self):
        row = ContactSubmissionCreate(
            name="Asha",
            email="asha@example.com",
            message="Price?",
            product_name="Oat Soap",
            phone="",
        ).to_row()

        assert row == {
            "name": "Asha",
            "email": "asha@example.com",
            "phone": None,
            "subject": "Inquiry about Oat Soap",
            "message": "Price?",
        }

    def test_ack_message(self):
        assert ContactSubmissionAck().message == "Message sent successfully! We will get back to you soon."


# =============================================================================
# Site Settings / Upload
# =============================================================================

class TestSettingModels:
    """Tests for site setting schemas."""

    def test_value_can_be_any_json(self):
        for value in ({"a": 1}, [1, 2], "text", 3, True, None):
            assert SiteSettingCreate(key="k", value=value).value == value

    @pytest.mark.parametrize("key", ["", "has space", "slash/key"])
    def test_bad_keys_rejected(self, key):
        with pytest.raises(ValidationError):
            SiteSettingCreate(key=key, value=1)

    def test_field_update_accepts_dotted_or_list_path(self):
        assert SiteSettingFieldUpdate(path="a.b", value=1).path == "a.b"
        assert SiteSettingFieldUpdate(path=["links", 0, "url"], value="/").path == ["links", 0, "url"]


class TestUploadResult:
    def test_success_defaults(self):
        result = UploadResult(url="https://cdn.test/upload/x.webp", filename="x.webp")

        assert result.success is True
        assert result.model_dump() == {
            "success": True,
            "url": "https://cdn.test/upload/x.webp",
            "filename": "x.webp",
        }
