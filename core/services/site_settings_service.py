# =============================================================================
# core/services/site_settings_service.py - Site Settings Admin
# =============================================================================
# Site settings are key/value rows whose values are nested JSON documents.
# On top of the generic CRUD this service:
# - labels each setting for the admin panel
# - describes the nested edit form for a setting (lib/settings_form.py)
# - replaces a whole value, or splices one edited leaf into it
#
# Every write refreshes updated_at and publishes a site_settings change,
# which drops "site-settings" and every per-key page cache.
# =============================================================================

import logging
from typing import Any
from uuid import UUID

from app.exceptions import InvalidSettingPathError, SettingNotFoundError, StoreUnavailableError
from core.models.site_setting import (
    SiteSettingCreate,
    SiteSettingFieldUpdate,
    SiteSettingValueUpdate,
)
from core.services.crud_service import CrudService
from lib.settings_form import FormNode, describe_setting, parse_path, set_at_path, setting_label
from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)


def with_label(row: dict[str, Any]) -> dict[str, Any]:
    return {**row, "label": setting_label(row.get("key") or "")}


class SiteSettingsService:
    """Admin operations on site_settings rows."""

    def __init__(self, crud: CrudService):
        self.crud = crud

    def list(self, search: str | None = None) -> list[dict[str, Any]]:
        """All settings ordered by key, each with a friendly label."""
        return [with_label(row) for row in self.crud.list(search)]

    def get(self, setting_id: str | UUID) -> dict[str, Any]:
        return with_label(self.crud.get(setting_id))

    def get_by_key(self, key: str) -> dict[str, Any]:
        """
        Raises:
            SettingNotFoundError: If no row has that key
        """
        try:
            row = self.crud.store.select_one("site_settings", eq={"key": key})
        except SupabaseClientError as e:
            raise StoreUnavailableError(f"load setting {key}", e.message)
        if row is None:
            raise SettingNotFoundError(key)
        return with_label(row)

    def form(self, setting_id: str | UUID) -> FormNode:
        """Describe the edit form for one setting's value."""
        return describe_setting(self.crud.get(setting_id))

    def create(self, payload: SiteSettingCreate) -> dict[str, Any]:
        return with_label(self.crud.create(payload))

    def replace_value(self, setting_id: str | UUID, payload: SiteSettingValueUpdate) -> dict[str, Any]:
        """Overwrite the whole value (and description, when sent)."""
        data: dict[str, Any] = {"value": payload.value}
        if "description" in payload.model_fields_set:
            data["description"] = payload.description
        return with_label(self.crud.update(setting_id, data))

    def update_field(self, setting_id: str | UUID, payload: SiteSettingFieldUpdate) -> dict[str, Any]:
        """
        Replace one leaf of the value, leaving every sibling untouched.

        Missing intermediate objects are created along the path.

        Raises:
            InvalidSettingPathError: If the path crosses a primitive or
                indexes past the end of an array
        """
        current = self.crud.get(setting_id)
        path = parse_path(payload.path)

        try:
            value = set_at_path(current.get("value"), path, payload.value)
        except (KeyError, IndexError) as e:
            raise InvalidSettingPathError(path, str(e))

        logger.info(f"Updating setting {current.get('key')} at {'.'.join(path) or '<root>'}")
        return with_label(self.crud.update(setting_id, {"value": value}))

    def delete(self, setting_id: str | UUID) -> dict[str, Any]:
        return self.crud.delete(setting_id)
