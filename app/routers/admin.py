# =============================================================================
# app/routers/admin.py - Admin CMS Endpoints
# =============================================================================
# Every route here requires a valid admin session (app/auth).
#
#   /admin/{resource}                  list (?search=) / create
#   /admin/{resource}/{id}             get / update (partial) / delete
#   /admin/contact-submissions         list / get / delete / export (CSV)
#   /admin/site-settings               list / create / get / PUT / PATCH / delete
#   /admin/site-settings/{id}/form     nested edit form description
#   /admin/stats                       row counts
#
# The six content managers share one route factory over ResourceSpec.
# =============================================================================

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from fastapi.responses import Response

from app.auth import get_current_user
from app.dependencies import ContactDep, DashboardDep, ServicesDep, SiteSettingsDep
from core.models.contact import ContactSubmissionResponse
from core.models.site_setting import (
    SiteSettingCreate,
    SiteSettingFieldUpdate,
    SiteSettingResponse,
    SiteSettingValueUpdate,
)
from core.services.contact_service import export_filename
from core.services.crud_service import CRUD_RESOURCES, CrudService, ResourceSpec
from lib.settings_form import FormNode

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(get_current_user)])


# =============================================================================
# Generic Managers
# =============================================================================

def _crud_dependency(spec: ResourceSpec):
    def get_crud(services: ServicesDep) -> CrudService:
        return services.resources[spec.path]
    return get_crud


def add_resource_routes(api: APIRouter, spec: ResourceSpec) -> None:
    """
    Register list/get/create/update/delete routes for one resource.

    Bodies are validated against the resource's create/update models before
    the handler runs, so a missing required field is a 422.
    """
    get_crud = _crud_dependency(spec)
    base = f"/{spec.path}"
    name = spec.path.replace("-", "_")
    create_model = spec.create_model
    update_model = spec.update_model

    async def list_rows(
        search: str | None = Query(default=None, description="Case-insensitive search"),
        crud: CrudService = Depends(get_crud),
    ):
        return crud.list(search)

    async def get_row(
        row_id: UUID = Path(..., description=f"{spec.label} ID"),
        crud: CrudService = Depends(get_crud),
    ):
        return crud.get(row_id)

    async def create_row(
        payload: create_model,  # type: ignore[valid-type]
        crud: CrudService = Depends(get_crud),
    ):
        return crud.create(payload)

    async def update_row(
        payload: update_model,  # type: ignore[valid-type]
        row_id: UUID = Path(..., description=f"{spec.label} ID"),
        crud: CrudService = Depends(get_crud),
    ):
        return crud.update(row_id, payload)

    async def delete_row(
        row_id: UUID = Path(..., description=f"{spec.label} ID"),
        crud: CrudService = Depends(get_crud),
    ):
        crud.delete(row_id)
        return {"success": True, "id": str(row_id)}

    api.add_api_route(
        base, list_rows, methods=["GET"],
        response_model=list[spec.response_model], name=f"list_{name}",
    )
    api.add_api_route(
        base, create_row, methods=["POST"], status_code=status.HTTP_201_CREATED,
        response_model=spec.response_model, name=f"create_{name}",
    )
    api.add_api_route(
        f"{base}/{{row_id}}", get_row, methods=["GET"],
        response_model=spec.response_model, name=f"get_{name}",
    )
    api.add_api_route(
        f"{base}/{{row_id}}", update_row, methods=["PATCH", "PUT"],
        response_model=spec.response_model, name=f"update_{name}",
    )
    api.add_api_route(
        f"{base}/{{row_id}}", delete_row, methods=["DELETE"], name=f"delete_{name}",
    )


# =============================================================================
# Dashboard
# =============================================================================

@router.get("/stats")
async def dashboard_stats(dashboard: DashboardDep) -> dict[str, int]:
    """Row counts per table for the dashboard tiles."""
    return dashboard.stats()


# =============================================================================
# Contact Submissions (read / export / delete only)
# =============================================================================

@router.get("/contact-submissions", response_model=list[ContactSubmissionResponse])
async def list_submissions(
    contact: ContactDep,
    search: str | None = Query(default=None, description="Match on name, email or message"),
):
    """Submissions, newest first."""
    return contact.list(search)


@router.get("/contact-submissions/export")
async def export_submissions(
    contact: ContactDep,
    search: str | None = Query(default=None),
) -> Response:
    """
    Download the (optionally filtered) submissions as CSV.

    Columns: Name, Email, Phone, Subject, Message, Date.
    """
    body = contact.export_csv(search)
    return Response(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.get("/contact-submissions/{submission_id}", response_model=ContactSubmissionResponse)
async def get_submission(
    contact: ContactDep,
    submission_id: UUID = Path(..., description="Submission ID"),
):
    return contact.submissions.get(submission_id)


@router.delete("/contact-submissions/{submission_id}")
async def delete_submission(
    contact: ContactDep,
    submission_id: UUID = Path(..., description="Submission ID"),
):
    contact.delete(str(submission_id))
    return {"success": True, "id": str(submission_id)}


# =============================================================================
# Site Settings
# =============================================================================

@router.get("/site-settings", response_model=list[SiteSettingResponse])
async def list_site_settings(
    site_settings: SiteSettingsDep,
    search: str | None = Query(default=None),
):
    """All settings ordered by key, labelled for display."""
    return site_settings.list(search)


@router.post(
    "/site-settings",
    response_model=SiteSettingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_site_setting(request: SiteSettingCreate, site_settings: SiteSettingsDep):
    return site_settings.create(request)


@router.get("/site-settings/{setting_id}", response_model=SiteSettingResponse)
async def get_site_setting(
    site_settings: SiteSettingsDep,
    setting_id: UUID = Path(..., description="Setting ID"),
):
    return site_settings.get(setting_id)


@router.get("/site-settings/{setting_id}/form", response_model=FormNode)
async def describe_site_setting_form(
    site_settings: SiteSettingsDep,
    setting_id: UUID = Path(..., description="Setting ID"),
):
    """
    Describe the nested edit form for a setting.

    Objects become groups, arrays of objects become "Item N" groups, and
    leaves become text, textarea or image controls.
    """
    return site_settings.form(setting_id)


@router.put("/site-settings/{setting_id}", response_model=SiteSettingResponse)
async def replace_site_setting(
    request: SiteSettingValueUpdate,
    site_settings: SiteSettingsDep,
    setting_id: UUID = Path(..., description="Setting ID"),
):
    """Replace the whole value."""
    return site_settings.replace_value(setting_id, request)


@router.patch("/site-settings/{setting_id}", response_model=SiteSettingResponse)
async def update_site_setting_field(
    request: SiteSettingFieldUpdate,
    site_settings: SiteSettingsDep,
    setting_id: UUID = Path(..., description="Setting ID"),
):
    """
    Edit one leaf of the value.

    Example request:
        {"path": "social_links.facebook", "value": "https://facebook.com/shop"}

    Raises:
        400: If the path runs through a primitive or past an array's end
    """
    return site_settings.update_field(setting_id, request)


@router.delete("/site-settings/{setting_id}")
async def delete_site_setting(
    site_settings: SiteSettingsDep,
    setting_id: UUID = Path(..., description="Setting ID"),
):
    site_settings.delete(setting_id)
    return {"success": True, "id": str(setting_id)}


for _spec in CRUD_RESOURCES:
    add_resource_routes(router, _spec)
