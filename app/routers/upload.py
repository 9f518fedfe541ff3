# =============================================================================
# app/routers/upload.py - Image Upload Relay Endpoint
# =============================================================================
# POST /functions/v1/upload-image   multipart {file, section?}
#
# Success: {"success": true, "url": "...", "filename": "..."}
# Failure: {"success": false, "error": "..."} with a non-2xx status
#
# The endpoint is called straight from the browser, so every response
# carries permissive CORS headers and OPTIONS answers the preflight.
# =============================================================================

import logging

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse, Response

from app.dependencies import RelayDep
from app.exceptions import StorefrontException
from core.models.upload import UploadError, UploadResult

logger = logging.getLogger(__name__)

router = APIRouter()

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


def _envelope(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=UploadError(error=error).model_dump(),
        headers=CORS_HEADERS,
    )


@router.options("/upload-image")
async def upload_image_preflight() -> Response:
    """CORS preflight."""
    return Response(status_code=200, content="ok", headers=CORS_HEADERS)


@router.post("/upload-image", response_model=UploadResult)
async def upload_image(
    relay: RelayDep,
    file: UploadFile | None = File(default=None, description="Image file"),
    section: str | None = Form(default=None, description="Names the stored file"),
):
    """
    Relay an image to the public file server.

    A request without a file part is rejected with 400. Non-images (400)
    and files over the size limit (413) are rejected before contacting
    the file server. Transfer failures return 500.

    Example response:
        {
            "success": true,
            "url": "https://cdn.example.com/upload/hero_1718000000000.webp",
            "filename": "hero_1718000000000.webp"
        }
    """
    if file is None:
        logger.warning("Upload rejected: no file part")
        return _envelope(400, "No file provided")

    filename = file.filename or "upload"
    data = await file.read()
    logger.info(f"Upload received: {filename} ({len(data)} bytes, section={section})")

    try:
        result = await run_in_threadpool(
            relay.relay, data, filename, file.content_type, section
        )
    except StorefrontException as e:
        logger.warning(f"Upload of {filename} rejected: {e.code} {e.message}")
        return _envelope(e.status_code, e.message)
    except Exception as e:
        logger.exception(f"Unexpected upload failure for {filename}: {e}")
        return _envelope(500, str(e) or "Upload failed")
    finally:
        await file.close()

    return JSONResponse(content=result.model_dump(), headers=CORS_HEADERS)
