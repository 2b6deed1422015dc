# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides generic table methods used by the resource services:
# - single row fetch / lookup by criteria
# - batch fetch by ids (reference population)
# - insert / update / delete
# - filtered, searched, sorted and paginated listing
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   row = SupabaseClient.fetch_row("indicators", indicator_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no rows match
NO_ROWS_CODE = "PGRST116"

# Postgres unique_violation
UNIQUE_VIOLATION_CODE = "23505"

# PostgREST code returned when a requested range starts past the last row
RANGE_NOT_SATISFIABLE_CODE = "PGRST103"


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
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


class DuplicateKeyError(SupabaseClientError):
    """Raised when a write violates a unique constraint."""

    def __init__(self, table: str, error: str):
        super().__init__(
            message=f"Duplicate record in {table}",
            code="DUPLICATE_KEY",
            suggestion="A record with the same unique fields already exists",
            details={"table": table, "error": error},
        )
        self.table = table


def _error_code(error: Exception) -> str:
    code = getattr(error, "code", None)
    return str(code) if code else str(error)


def _is_no_rows(error: Exception) -> bool:
    return NO_ROWS_CODE in _error_code(error) or NO_ROWS_CODE in str(error)


def _is_unique_violation(error: Exception) -> bool:
    return UNIQUE_VIOLATION_CODE in _error_code(error) or UNIQUE_VIOLATION_CODE in str(error)


def _is_range_not_satisfiable(error: Exception) -> bool:
    code = RANGE_NOT_SATISFIABLE_CODE
    return code in _error_code(error) or code in str(error)


def _quote(value: str) -> str:
    """Quote a value for use inside a PostgREST or=() filter."""
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation, so the class itself is handed to services as their store.

    Example:
        row = SupabaseClient.find_row("indicators", {"subject": "Water", "topic": "Water Supply"})
        rows, total = SupabaseClient.list_rows("questions", limit=10)
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
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
        return cls._instance

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_row(cls, table: str, row_id: str | UUID) -> dict[str, Any] | None:
        """
        Fetch a single row by id.

        Returns:
            Row dict, or None if not found

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()
        row_id_str = cls._normalize_uuid(row_id)

        try:
            response = (
                client.table(table)
                .select("*")
                .eq("id", row_id_str)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if _is_no_rows(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch {table} row: {e}",
                code="FETCH_ROW_FAILED",
                suggestion="Check that the id is a valid UUID and the table exists",
                details={"table": table, "id": row_id_str}
            )

    @classmethod
    def find_row(cls, table: str, criteria: dict[str, Any]) -> dict[str, Any] | None:
        """
        Find the first row matching all criteria (equality on each key).

        Returns:
            Row dict, or None if nothing matches
        """
        client = cls.get_client()

        try:
            query = client.table(table).select("*")
            for field, value in criteria.items():
                query = query.eq(field, cls._normalize_uuid(value))
            response = query.limit(1).execute()

            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to find {table} row: {e}",
                code="FIND_ROW_FAILED",
                details={"table": table, "criteria": criteria}
            )

    @classmethod
    def fetch_rows(
        cls,
        table: str,
        ids: list[str | UUID],
        columns: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch many rows by id in a single query.

        Used to populate references for a whole page of results at once.
        Row order is not guaranteed.
        """
        if not ids:
            return []

        client = cls.get_client()
        id_strs = list(dict.fromkeys(cls._normalize_uuid(i) for i in ids))
        select = ",".join(columns) if columns else "*"

        try:
            response = (
                client.table(table)
                .select(select)
                .in_("id", id_strs)
                .execute()
            )
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch {table} rows: {e}",
                code="FETCH_ROWS_FAILED",
                details={"table": table, "count": len(id_strs)}
            )

    @classmethod
    def list_rows(
        cls,
        table: str,
        *,
        filters: dict[str, list[Any]] | None = None,
        search: str | None = None,
        search_fields: list[str] | None = None,
        sort: list[tuple[str, bool]] | None = None,
        skip: int = 0,
        limit: int = 10,
        columns: list[str] | None = None,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List rows with filtering, search, sorting and pagination.

        Args:
            table: Table name
            filters: field -> accepted values (one value = eq, many = in)
            search: Case-insensitive text matched against search_fields
            search_fields: Columns searched with ilike
            sort: (field, descending) pairs in priority order
            skip: Rows to skip
            limit: Maximum rows to return
            columns: Projection (defaults to all columns)

        Returns:
            Tuple of (rows list, total matching count)
        """
        client = cls.get_client()
        select = ",".join(columns) if columns else "*"

        query = cls._apply_filters(
            client.table(table).select(select, count="exact"), filters, search, search_fields
        )

        for field, descending in sort or []:
            query = query.order(field, desc=descending)

        query = query.range(skip, skip + limit - 1)

        try:
            response = query.execute()
            return response.data or [], response.count or 0

        except Exception as e:
            if _is_range_not_satisfiable(e):
                # Page past the last row: empty page, total still reported
                return [], cls.count_rows(
                    table, filters=filters, search=search, search_fields=search_fields
                )
            logger.error(f"Failed to list {table}: {e}")
            raise SupabaseClientError(
                message=f"Failed to list {table}: {e}",
                code="LIST_ROWS_FAILED",
                details={"table": table}
            )

    @classmethod
    def count_rows(
        cls,
        table: str,
        *,
        filters: dict[str, list[Any]] | None = None,
        search: str | None = None,
        search_fields: list[str] | None = None,
    ) -> int:
        """Count rows matching the same filters and search as list_rows."""
        client = cls.get_client()
        query = cls._apply_filters(
            client.table(table).select("id", count="exact", head=True), filters, search, search_fields
        )

        try:
            return query.execute().count or 0

        except Exception as e:
            logger.error(f"Failed to count {table}: {e}")
            raise SupabaseClientError(
                message=f"Failed to count {table}: {e}",
                code="COUNT_ROWS_FAILED",
                details={"table": table}
            )

    @classmethod
    def _apply_filters(
        cls,
        query: Any,
        filters: dict[str, list[Any]] | None,
        search: str | None,
        search_fields: list[str] | None,
    ) -> Any:
        for field, values in (filters or {}).items():
            values = [cls._normalize_uuid(v) for v in values]
            if len(values) == 1:
                query = query.eq(field, values[0])
            else:
                query = query.in_(field, values)

        if search and search_fields:
            pattern = _quote(f"*{search}*")
            query = query.or_(",".join(f"{field}.ilike.{pattern}" for field in search_fields))

        return query

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @classmethod
    def insert_row(cls, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a row and return it as stored.

        Raises:
            DuplicateKeyError: If a unique constraint is violated
            SupabaseClientError: If insert fails
        """
        client = cls.get_client()

        try:
            response = client.table(table).insert(data).execute()
        except Exception as e:
            if _is_unique_violation(e):
                raise DuplicateKeyError(table, str(e))
            logger.error(f"Failed to insert into {table}: {e}")
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                details={"table": table}
            )

        if not response.data:
            raise SupabaseClientError(
                message=f"Insert into {table} returned no data",
                code="INSERT_FAILED",
                details={"table": table}
            )
        return response.data[0]

    @classmethod
    def update_row(
        cls,
        table: str,
        row_id: str | UUID,
        data: dict[str, Any],
    ) -> dict[str, Any] | None:
        """
        Update a row by id.

        Returns:
            Updated row, or None if no row has this id

        Raises:
            DuplicateKeyError: If a unique constraint is violated
        """
        client = cls.get_client()
        row_id_str = cls._normalize_uuid(row_id)

        try:
            response = (
                client.table(table)
                .update(data)
                .eq("id", row_id_str)
                .execute()
            )
        except Exception as e:
            if _is_unique_violation(e):
                raise DuplicateKeyError(table, str(e))
            logger.error(f"Failed to update {table} row {row_id_str}: {e}")
            raise SupabaseClientError(
                message=f"Failed to update {table} row: {e}",
                code="UPDATE_FAILED",
                details={"table": table, "id": row_id_str}
            )

        rows = response.data or []
        return rows[0] if rows else None

    @classmethod
    def delete_row(cls, table: str, row_id: str | UUID) -> dict[str, Any] | None:
        """
        Hard delete a row by id.

        Returns:
            The deleted row, or None if no row has this id
        """
        client = cls.get_client()
        row_id_str = cls._normalize_uuid(row_id)

        try:
            response = (
                client.table(table)
                .delete()
                .eq("id", row_id_str)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to delete {table} row {row_id_str}: {e}")
            raise SupabaseClientError(
                message=f"Failed to delete {table} row: {e}",
                code="DELETE_FAILED",
                details={"table": table, "id": row_id_str}
            )

        rows = response.data or []
        return rows[0] if rows else None

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    @classmethod
    def ping(cls, table: str) -> None:
        """
        Run a trivial query against a table.

        Raises:
            Exception: Whatever the client raises when the store is unreachable
        """
        cls.get_client().table(table).select("id").limit(1).execute()
