# =============================================================================
# app/routers/realtime.py - Change Notification Ingress
# =============================================================================
# Supabase database webhooks POST row changes here. Each one is published
# as a ChangeEvent, which invalidates the matching cached queries in every
# API process and is forwarded to /ws/changes listeners.
#
# Webhook body:
#   {"type": "UPDATE", "table": "site_settings", "schema": "public",
#    "record": {...}, "old_record": {...}}
# =============================================================================

import hmac
import logging
from typing import Any

from fastapi import APIRouter, Header
from pydantic import ValidationError

from app.config import get_settings
from app.dependencies import NotifierDep
from app.exceptions import StorefrontException, WebhookAuthError
from lib.realtime import ChangeEvent, keys_for_table

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/realtime/webhook")
async def receive_change(
    payload: dict[str, Any],
    notifier: NotifierDep,
    x_webhook_secret: str | None = Header(default=None),
) -> dict[str, Any]:
    """
    Accept one database change notification.

    Raises:
        401: If X-Webhook-Secret doesn't match REALTIME_WEBHOOK_SECRET
        400: If the body isn't a change notification
    """
    expected = get_settings().REALTIME_WEBHOOK_SECRET
    if not expected or not hmac.compare_digest(x_webhook_secret or "", expected):
        logger.warning("Rejected change webhook with bad secret")
        raise WebhookAuthError()

    try:
        event = ChangeEvent.from_webhook(payload)
    except (KeyError, ValueError, ValidationError) as e:
        raise StorefrontException(
            message=f"Not a change notification: {e}",
            code="INVALID_CHANGE_EVENT",
            status_code=400,
            suggestion="Send {type, table, schema, record, old_record}",
        )

    notifier.publish(event)
    keys = keys_for_table(event.table)
    logger.info(f"Change webhook: {event.event.value} on {event.table} ({len(keys)} cache keys)")
    return {"success": True, "table": event.table, "invalidated": list(keys)}
