# =============================================================================
# app/routers/resource.py - Generic Resource Endpoints
# =============================================================================
# Builds the same set of endpoints for every resource:
#
#   GET    ""            list (search, filter, select, sort, paginate)
#   GET    "/schema"     JSON schema for form generation
#   POST   ""            create
#   GET    "/{id}"       read one (references populated)
#   PATCH  "/{id}"       partial update
#   PUT    "/{id}"       full replacement
#   DELETE "/{id}"       hard delete, returns the deleted document
#
# "/schema" is registered before "/{id}" so it isn't captured as an id.
# =============================================================================

from typing import Annotated, Any, Callable

from fastapi import APIRouter, Body, Depends, Path

from app.dependencies import ListOptionsDep
from core.services import ResourceService


def build_router(
    get_service: Callable[..., ResourceService],
    resource: str,
) -> APIRouter:
    """
    Create the CRUD router for one resource.

    Args:
        get_service: Dependency returning the resource service
        resource: Singular resource name used in docs ("indicator")

    Returns:
        APIRouter to mount under the resource's collection path
    """
    router = APIRouter()
    ServiceDep = Annotated[ResourceService, Depends(get_service)]
    RecordId = Annotated[str, Path(description=f"{resource.capitalize()} UUID")]

    @router.get("")
    async def list_documents(service: ServiceDep, options: ListOptionsDep):
        """
        List documents.

        Supports `q`, `filter[field]`, `select`, `sort`, `limit`, `skip`
        and `page` query parameters.
        """
        return service.list(options).to_dict()

    @router.get("/schema")
    @router.get("/schema/", include_in_schema=False)
    async def get_schema(service: ServiceDep):
        """Return the JSON schema used to build forms for this resource."""
        return service.get_schema()

    @router.post("", status_code=201)
    async def create_document(
        service: ServiceDep,
        body: Annotated[Any, Body()],
    ):
        """Create a document. Defaults (color, name, enums) are derived."""
        return service.create(body)

    @router.get("/{record_id}")
    async def get_document(record_id: RecordId, service: ServiceDep):
        """Get a document with its references populated."""
        return service.get_by_id(record_id)

    @router.patch("/{record_id}")
    async def patch_document(
        record_id: RecordId,
        service: ServiceDep,
        body: Annotated[Any, Body()],
    ):
        """Update only the given fields of a document."""
        return service.patch(record_id, body)

    @router.put("/{record_id}")
    async def put_document(
        record_id: RecordId,
        service: ServiceDep,
        body: Annotated[Any, Body()],
    ):
        """Replace a document, keeping its id and creation time."""
        return service.put(record_id, body)

    @router.delete("/{record_id}")
    async def delete_document(record_id: RecordId, service: ServiceDep):
        """Delete a document and return it as it was."""
        return service.delete(record_id)

    return router
