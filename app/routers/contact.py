# =============================================================================
# app/routers/contact.py - Public Contact Form
# =============================================================================

import logging

from fastapi import APIRouter, status

from app.dependencies import ContactDep
from core.models.contact import ContactSubmissionAck, ContactSubmissionCreate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/contact",
    response_model=ContactSubmissionAck,
    status_code=status.HTTP_201_CREATED,
)
async def submit_contact(request: ContactSubmissionCreate, contact: ContactDep):
    """
    Send a message from the contact page or a product inquiry.

    name, email and message are required; a missing field is rejected with
    422 and nothing is stored.

    Example request:
        {
            "name": "Asha",
            "email": "asha@example.com",
            "message": "Is this available in 50ml?",
            "product_name": "Lavender Oil"
        }
    """
    row = contact.submit(request)
    return ContactSubmissionAck(id=row.get("id"))
