# =============================================================================
# core/models/contact.py - Contact Form Schemas
# =============================================================================
# Contact submissions are append-only: created from the public contact form
# or the product inquiry modal, read and exported by admins, never updated.
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class ContactSubmissionCreate(BaseModel):
    """
    Schema for the public contact form.

    name, email and message are required; a blank email is rejected before
    anything is written.

    When product_name is given (the product inquiry modal) and subject is
    empty, the subject becomes "Inquiry about {product_name}".

    Example:
        {
            "name": "Asha",
            "email": "asha@example.com",
            "message": "Do you ship to Pokhara?"
        }
    """

    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=320, pattern=EMAIL_PATTERN)
    phone: str | None = Field(default=None, max_length=50)
    subject: str | None = Field(default=None, max_length=500)
    message: str = Field(..., min_length=1)
    product_name: str | None = Field(
        default=None,
        description="Set by the product inquiry form; not stored"
    )

    @field_validator("name", "email", "message", mode="before")
    @classmethod
    def strip_required(cls, value):
        if isinstance(value, str):
            return value.strip()
        return value

    def resolved_subject(self) -> str | None:
        if self.subject:
            return self.subject
        if self.product_name:
            return f"Inquiry about {self.product_name}"
        return None

    def to_row(self) -> dict:
        """Columns written to contact_submissions."""
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone or None,
            "subject": self.resolved_subject(),
            "message": self.message,
        }


class ContactSubmissionResponse(BaseModel):
    id: UUID
    name: str
    email: str
    phone: str | None = None
    subject: str | None = None
    message: str
    created_at: datetime | None = None


class ContactSubmissionAck(BaseModel):
    """Returned to the visitor after a successful submission."""

    success: bool = True
    message: str = "Message sent successfully! We will get back to you soon."
    id: UUID | None = None
