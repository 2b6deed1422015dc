# =============================================================================
# core/models/listing.py - List Query & Response Schemas
# =============================================================================
# These models define the contract shared by every list endpoint:
# - ListOptions: search, filters, projection, sorting and pagination parsed
#   from the request query string
# - ListResponse: the paginated envelope returned to clients
#
# Query string format:
#   ?q=water&filter[subject]=Water&select=subject,topic&sort=-updated_at&limit=10&page=2
# =============================================================================

import math
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
DEFAULT_SORT = "-updated_at"


class ListOptions(BaseModel):
    """
    Options for listing documents.

    `page` wins over `skip` when both are given.
    """

    q: str | None = Field(
        default=None,
        description="Case-insensitive search across searchable fields"
    )

    filters: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Equality filters (field -> accepted values)"
    )

    select: list[str] = Field(
        default_factory=list,
        description="Fields to return (id is always returned)"
    )

    sort: str = Field(
        default=DEFAULT_SORT,
        description="Comma-separated fields, '-' prefix for descending"
    )

    limit: int = Field(
        default=DEFAULT_LIMIT,
        ge=1,
        le=MAX_LIMIT,
        description="Maximum number of documents to return"
    )

    skip: int = Field(
        default=0,
        ge=0,
        description="Number of documents to skip"
    )

    page: int | None = Field(
        default=None,
        ge=1,
        description="Page number (1-indexed)"
    )

    @classmethod
    def from_query(cls, items: list[tuple[str, str]]) -> "ListOptions":
        """
        Build options from raw query string items.

        Args:
            items: (key, value) pairs, repeated keys allowed

        Raises:
            pydantic.ValidationError: If a numeric option is malformed
        """
        data: dict[str, Any] = {}
        filters: dict[str, list[str]] = {}

        for key, value in items:
            if key.startswith("filter[") and key.endswith("]"):
                field = key[len("filter["):-1].strip()
                if field:
                    filters.setdefault(field, []).append(value)
            elif key == "select":
                data["select"] = [f.strip() for f in value.split(",") if f.strip()]
            elif key in ("q", "sort", "limit", "skip", "page"):
                if value.strip():
                    data[key] = value.strip()

        data["filters"] = filters
        return cls(**data)

    @property
    def offset(self) -> int:
        """Rows to skip, derived from page when given."""
        if self.page is not None:
            return (self.page - 1) * self.limit
        return self.skip

    @property
    def sort_fields(self) -> list[tuple[str, bool]]:
        """Parse `sort` into (field, descending) pairs."""
        fields = []
        for part in self.sort.split(","):
            part = part.strip()
            if not part:
                continue
            if part.startswith("-"):
                fields.append((part[1:], True))
            else:
                fields.append((part.lstrip("+"), False))
        return fields


class ListResponse(BaseModel):
    """
    Paginated list envelope.

    Example:
        {
            "data": [...],
            "total": 42,
            "size": 10,
            "limit": 10,
            "skip": 10,
            "page": 2,
            "pages": 5,
            "lastModified": "2024-01-15T10:30:00+00:00"
        }
    """

    data: list[dict[str, Any]] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    size: int = Field(default=0, ge=0)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1)
    skip: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    pages: int = Field(default=0, ge=0)
    last_modified: str | None = Field(
        default=None,
        serialization_alias="lastModified",
        description="Latest updated_at among returned documents"
    )

    @classmethod
    def build(
        cls,
        data: list[dict[str, Any]],
        total: int,
        options: ListOptions,
    ) -> "ListResponse":
        """Compute the pagination envelope for one page of results."""
        skip = options.offset
        stamps = [row["updated_at"] for row in data if row.get("updated_at")]
        return cls(
            data=data,
            total=total,
            size=len(data),
            limit=options.limit,
            skip=skip,
            page=skip // options.limit + 1,
            pages=math.ceil(total / options.limit),
            last_modified=max(stamps) if stamps else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the public (camelCase) envelope keys."""
        return self.model_dump(by_alias=True)
