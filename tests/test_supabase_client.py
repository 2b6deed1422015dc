# =============================================================================
# tests/test_supabase_client.py - Supabase Wrapper Tests
# =============================================================================
# Tests list_rows against a mocked PostgREST query builder:
# - pages past the last row come back empty with the total still counted
# - other query failures become SupabaseClientError
# =============================================================================

from unittest.mock import MagicMock, patch

import pytest
from postgrest.exceptions import APIError

from lib.supabase_client import SupabaseClient, SupabaseClientError


def make_client(*results):
    """Mock client whose query builder chains and whose execute() yields results."""
    query = MagicMock()
    for method in ("select", "eq", "in_", "or_", "order", "range"):
        getattr(query, method).return_value = query
    query.execute.side_effect = list(results)

    client = MagicMock()
    client.table.return_value = query
    return client, query


class TestListRows:
    """Test SupabaseClient.list_rows."""

    def test_returns_rows_and_count(self):
        client, query = make_client(MagicMock(data=[{"id": "a"}], count=1))

        with patch.object(SupabaseClient, "get_client", return_value=client):
            rows, total = SupabaseClient.list_rows("indicators", skip=10, limit=10)

        assert rows == [{"id": "a"}]
        assert total == 1
        query.range.assert_called_once_with(10, 19)

    def test_page_past_last_row_is_empty(self):
        range_error = APIError({"code": "PGRST103", "message": "Requested range not satisfiable"})
        client, query = make_client(range_error, MagicMock(data=[], count=3))

        with patch.object(SupabaseClient, "get_client", return_value=client):
            rows, total = SupabaseClient.list_rows(
                "indicators",
                filters={"subject": ["Water"]},
                skip=980,
                limit=10,
            )

        assert rows == []
        assert total == 3
        query.select.assert_called_with("id", count="exact", head=True)
        assert query.eq.call_count == 2

    def test_other_errors_raise(self):
        client, _ = make_client(APIError({"code": "42P01", "message": "relation does not exist"}))

        with patch.object(SupabaseClient, "get_client", return_value=client):
            with pytest.raises(SupabaseClientError) as exc_info:
                SupabaseClient.list_rows("indicators")

        assert exc_info.value.code == "LIST_ROWS_FAILED"
