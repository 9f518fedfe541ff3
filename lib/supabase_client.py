# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for the hosted table API.
# Every read and write the storefront performs goes through one of five
# generic calls against a named table:
# - select / select_one: filtered, ordered, limited reads
# - insert / update / delete: single-row mutations keyed by id
# - count: exact row counts for the admin dashboard
#
# The wrapper is constructed once per application and handed to services
# explicitly (see core/services/container.py); there is no module-level client.
#
# Usage:
#   store = SupabaseClient.from_settings(settings)
#   rows = store.select("products", eq={"availability": True}, order=[("display_order", False)])
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Sequence
from uuid import UUID

from supabase import create_client, Client

# Set up logging for this module
logger = logging.getLogger(__name__)

# (column, descending) pairs
OrderSpec = Sequence[tuple[str, bool]]

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Errors tell HOW to fix, not just WHAT failed.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase table operations.

    Example:
        store = SupabaseClient.from_settings(settings)

        # Four featured products in display order
        featured = store.select(
            "products",
            eq={"is_featured": True},
            order=[("display_order", False), ("created_at", False)],
            limit=4,
        )

        # Edit one row
        store.update("categories", category_id, {"name": "Oils"})
    """

    def __init__(self, client: Client):
        self._client = client

    @classmethod
    def from_settings(cls, settings: Any) -> "SupabaseClient":
        """
        Build a wrapper around a service-role client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        try:
            client = create_client(
                settings.SUPABASE_URL,
                settings.SUPABASE_SERVICE_KEY
            )
            logger.info("Supabase client initialized successfully")
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase client: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
            )
        return cls(client)

    @property
    def raw(self) -> Client:
        """The underlying supabase-py client (auth, storage)."""
        return self._client

    @staticmethod
    def _normalize_id(value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(value) if isinstance(value, UUID) else value

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def select(
        self,
        table: str,
        columns: str = "*",
        eq: dict[str, Any] | None = None,
        neq: dict[str, Any] | None = None,
        order: OrderSpec | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch rows from a table.

        Args:
            table: Table name (e.g. "products")
            columns: PostgREST select string; embeds such as
                "*, categories(name)" follow foreign keys
            eq: column -> value equality filters
            neq: column -> value inequality filters
            order: (column, descending) pairs applied in sequence
            limit: Maximum number of rows

        Returns:
            List of row dicts (empty when nothing matches)

        Raises:
            SupabaseClientError: If the query fails
        """
        try:
            query = self._client.table(table).select(columns)

            for column, value in (eq or {}).items():
                query = query.eq(column, value)
            for column, value in (neq or {}).items():
                query = query.neq(column, value)
            for column, descending in (order or ()):
                query = query.order(column, desc=descending)
            if limit is not None:
                query = query.limit(limit)

            response = query.execute()
            rows = response.data or []

            logger.debug(f"Fetched {len(rows)} rows from {table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch {table}: {e}",
                code="SELECT_FAILED",
                suggestion=f"Check that the {table} table exists and is readable",
                details={"table": table, "eq": eq or {}, "neq": neq or {}}
            )

    def select_one(
        self,
        table: str,
        columns: str = "*",
        eq: dict[str, Any] | None = None,
    ) -> dict[str, Any] | None:
        """
        Fetch a single row, or None if no row matches.

        Raises:
            SupabaseClientError: If the query fails for another reason
        """
        try:
            query = self._client.table(table).select(columns)
            for column, value in (eq or {}).items():
                query = query.eq(column, value)

            response = query.single().execute()
            return response.data

        except Exception as e:
            # Check if it's a "not found" error
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch {table} row: {e}",
                code="SELECT_ONE_FAILED",
                details={"table": table, "eq": eq or {}}
            )

    def count(self, table: str) -> int:
        """
        Exact number of rows in a table.

        Raises:
            SupabaseClientError: If the query fails
        """
        try:
            response = (
                self._client.table(table)
                .select("id", count="exact")
                .limit(1)
                .execute()
            )
            return response.count or 0

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to count {table}: {e}",
                code="COUNT_FAILED",
                details={"table": table}
            )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def insert(self, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert one row.

        Returns:
            Inserted row dict with generated id and timestamps

        Raises:
            SupabaseClientError: If insert fails
        """
        try:
            response = (
                self._client.table(table)
                .insert(data)
                .execute()
            )

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
                details={"table": table}
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                suggestion="Check required columns and foreign keys",
                details={"table": table}
            )

    def update(
        self,
        table: str,
        row_id: str | UUID,
        data: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update one row by id.

        Returns:
            Updated row dict, or None if no row has that id

        Raises:
            SupabaseClientError: If update fails
        """
        row_id_str = self._normalize_id(row_id)

        try:
            response = (
                self._client.table(table)
                .update(data)
                .eq("id", row_id_str)
                .execute()
            )

            if response.data:
                return response.data[0]
            return None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table}: {e}",
                code="UPDATE_FAILED",
                details={"table": table, "id": row_id_str}
            )

    def delete(self, table: str, row_id: str | UUID) -> dict[str, Any] | None:
        """
        Delete one row by id.

        Returns:
            The deleted row, or None if no row had that id

        Raises:
            SupabaseClientError: If delete fails
        """
        row_id_str = self._normalize_id(row_id)

        try:
            response = (
                self._client.table(table)
                .delete()
                .eq("id", row_id_str)
                .execute()
            )

            if response.data:
                return response.data[0]
            return None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete from {table}: {e}",
                code="DELETE_FAILED",
                details={"table": table, "id": row_id_str}
            )
