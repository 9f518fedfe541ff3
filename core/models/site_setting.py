# =============================================================================
# core/models/site_setting.py - Site Setting Schemas
# =============================================================================
# A site setting is a key/value row whose value is an arbitrary JSON
# document controlling page content or appearance (header, footer, hero...).
# =============================================================================

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


class SiteSettingCreate(BaseModel):
    """
    Schema for creating a setting.

    Example:
        {
            "key": "footer",
            "value": {"copyright": "(c) Shop", "social_links": {"facebook": "..."}},
            "description": "Footer links and text"
        }
    """

    key: str = Field(..., min_length=1, max_length=255, pattern=r"^[A-Za-z0-9_.-]+$")
    value: Any = Field(..., description="Any JSON value")
    description: str | None = None


class SiteSettingValueUpdate(BaseModel):
    """Replace a setting's whole value."""

    value: Any = Field(..., description="New JSON value")
    description: str | None = None


class SiteSettingFieldUpdate(BaseModel):
    """
    Edit one leaf of a nested setting value.

    path may be dotted ("social_links.facebook") or a list
    (["links", 0, "url"]).

    Example:
        {"path": "social_links.facebook", "value": "https://facebook.com/shop"}
    """

    path: str | list[str | int] = Field(..., description="Location of the leaf inside the value")
    value: Any = Field(..., description="New leaf value")


class SiteSettingResponse(BaseModel):
    id: UUID
    key: str
    value: Any = None
    description: str | None = None
    updated_at: datetime | None = None
    label: str | None = Field(default=None, description="Friendly title for the admin panel")
