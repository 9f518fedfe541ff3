# =============================================================================
# core/services/contact_service.py - Contact Form Submissions
# =============================================================================
# Public side: store a submission from the contact form or product inquiry.
# Admin side: list/search/delete (through CrudService) and CSV export.
# =============================================================================

import csv
import logging
from datetime import date
from typing import Any

import pandas as pd

from app.exceptions import StoreUnavailableError
from core.models.contact import ContactSubmissionCreate
from core.services.crud_service import CrudService
from lib.realtime import ChangeType
from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)

CSV_HEADERS: list[str] = ["Name", "Email", "Phone", "Subject", "Message", "Date"]

# Row field feeding each CSV column
CSV_FIELDS: dict[str, str] = {
    "Name": "name",
    "Email": "email",
    "Phone": "phone",
    "Subject": "subject",
    "Message": "message",
    "Date": "created_at",
}


def export_filename(today: date | None = None) -> str:
    """contact-submissions-YYYY-MM-DD.csv"""
    today = today or date.today()
    return f"contact-submissions-{today.isoformat()}.csv"


def submissions_to_csv(rows: list[dict[str, Any]]) -> str:
    """
    Render submissions as CSV.

    The header line is bare; every data field is double-quoted with
    embedded quotes doubled, so commas and newlines in messages survive.
    Missing values become empty strings and timestamps become YYYY-MM-DD.
    """
    header = ",".join(CSV_HEADERS) + "\n"
    if not rows:
        return header

    frame = pd.DataFrame(
        [{column: row.get(field) for column, field in CSV_FIELDS.items()} for row in rows],
        columns=CSV_HEADERS,
    )
    frame["Date"] = (
        pd.to_datetime(frame["Date"], utc=True, errors="coerce", format="ISO8601")
        .dt.strftime("%Y-%m-%d")
    )
    frame = frame.astype(object).where(frame.notna(), "")

    body = frame.to_csv(
        index=False,
        header=False,
        quoting=csv.QUOTE_ALL,
        lineterminator="\n",
    )
    return header + body


class ContactService:
    """
    Contact submissions.

    Reads, search and delete are delegated to the contact-submissions
    CrudService so they share its cache key and change notifications.
    """

    def __init__(self, submissions: CrudService):
        self.submissions = submissions

    def submit(self, payload: ContactSubmissionCreate) -> dict[str, Any]:
        """
        Store a submission.

        Returns:
            The inserted row

        Raises:
            StoreUnavailableError: If the insert fails
        """
        row = payload.to_row()
        try:
            created = self.submissions.store.insert("contact_submissions", row)
        except SupabaseClientError as e:
            logger.error(f"Failed to store contact submission: {e}")
            raise StoreUnavailableError("send message", e.message)

        logger.info(f"Contact submission received: {created.get('id')}")
        self.submissions.notifier.publish_change(
            "contact_submissions", ChangeType.INSERT, new=created
        )
        return created

    def list(self, search: str | None = None) -> list[dict[str, Any]]:
        return self.submissions.list(search)

    def delete(self, submission_id: str) -> dict[str, Any]:
        return self.submissions.delete(submission_id)

    def export_csv(self, search: str | None = None) -> str:
        """CSV of the (optionally filtered) submissions, newest first."""
        rows = self.list(search)
        logger.info(f"Exporting {len(rows)} contact submissions")
        return submissions_to_csv(rows)
