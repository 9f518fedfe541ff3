# =============================================================================
# core/models/upload.py - Image Relay Schemas
# =============================================================================
# Response envelope of the image upload relay. The shape is fixed because
# the admin image fields read `success`, `url` and `error` directly.
# =============================================================================

from pydantic import BaseModel, Field


class UploadResult(BaseModel):
    """
    Successful relay.

    Example:
        {
            "success": true,
            "url": "https://cdn.example.com/upload/footer_logo_1718000000000.webp",
            "filename": "footer_logo_1718000000000.webp"
        }
    """

    success: bool = True
    url: str = Field(..., description="Public URL to store in the bound field")
    filename: str = Field(..., description="Generated {section}_{timestamp}.{ext} name")


class UploadError(BaseModel):
    """Failed relay."""

    success: bool = False
    error: str
