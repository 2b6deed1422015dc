# =============================================================================
# core/services/resource_service.py - Generic Document Service
# =============================================================================
# Shared business logic behind every resource (indicators, questions,
# questionnaires):
# - list / get / create / patch / put / delete
# - JSON schema with the configured enumerations
# - reference checks and one-level reference population
# - upsert by natural key and fan-out seeding
#
# Each resource subclass only declares its metadata (document model, natural
# key, searchable/filterable fields, references). Configuration is passed in
# explicitly; nothing here reads global settings.
# =============================================================================

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar
from uuid import UUID

from pydantic import ValidationError

from app.exceptions import (
    DocumentValidationError,
    DuplicateRecordError,
    InvalidQueryError,
    InvalidReferenceError,
    InvalidSeedFileError,
    RecordNotFoundError,
)
from core.models.common import AssessmentDocument
from core.models.listing import ListOptions, ListResponse
from core.models.options import AssessmentOptions
from lib.supabase_client import DuplicateKeyError, SupabaseClient
from lib.utils import normalize_uuid, unique_records, utc_now_iso

logger = logging.getLogger(__name__)

# References are expanded one level only; projections never include
# reference columns, so populated documents cannot expand further.
POPULATION_MAX_DEPTH = 1

TIMESTAMP_FIELDS = ("created_at", "updated_at")
ENUM_FIELDS = ("subject", "assess", "stage", "phase", "type")


@dataclass(frozen=True)
class Collections:
    """Table names of the three resources."""

    indicators: str = "indicators"
    questions: str = "questions"
    questionnaires: str = "questionnaires"


@dataclass(frozen=True)
class PopulateSpec:
    """
    How a reference field is checked and expanded.

    Attributes:
        field: Reference field on the owning document
        table: Table holding the referenced documents
        select: Fields of the referenced document shown when populated
        many: True when the field holds an ordered list of ids
    """

    field: str
    table: str
    select: tuple[str, ...]
    many: bool = False


class ResourceService:
    """
    CRUD, listing, population and seeding for one resource.

    Subclasses set the class-level metadata; instances carry configuration.

    Example:
        service = IndicatorService(options, SupabaseClient)
        created = service.create({"subject": "Water", "topic": "Water Supply"})
        page = service.list(ListOptions(q="water"))
    """

    resource: ClassVar[str] = "Document"
    document: ClassVar[type[AssessmentDocument]] = AssessmentDocument
    natural_key: ClassVar[tuple[str, ...]] = ()
    unique_fields: ClassVar[tuple[str, ...]] = ()
    searchable: ClassVar[tuple[str, ...]] = ()
    filterable: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        options: AssessmentOptions,
        store: Any = SupabaseClient,
        *,
        collections: Collections | None = None,
        seeds_dir: Path | None = None,
        seed_name: str | None = None,
    ):
        self.options = options
        self.store = store
        self.collections = collections or Collections()
        self.seeds_dir = seeds_dir
        self.seed_name = seed_name

    # -------------------------------------------------------------------------
    # Metadata
    # -------------------------------------------------------------------------

    @property
    def table(self) -> str:
        """Table holding this resource."""
        raise NotImplementedError

    @property
    def populates(self) -> tuple[PopulateSpec, ...]:
        """Reference fields of this resource."""
        return ()

    @property
    def fields(self) -> tuple[str, ...]:
        """All stored fields, including id and timestamps."""
        return tuple(self.document.model_fields) + TIMESTAMP_FIELDS

    # -------------------------------------------------------------------------
    # Schema
    # -------------------------------------------------------------------------

    def get_schema(self) -> dict[str, Any]:
        """
        JSON schema of the resource, for client-driven form generation.

        Enumerated fields list the configured values; reference fields name
        the table they point to.
        """
        schema = self.document.model_json_schema()
        schema["title"] = self.resource
        properties = schema.get("properties", {})

        for field in ENUM_FIELDS:
            if field in properties:
                properties[field]["enum"] = list(self.options.choices_for(field))
                default = self.options.default_for(field)
                if default is not None:
                    properties[field]["default"] = default

        for spec in self.populates:
            if spec.field in properties:
                properties[spec.field]["x-ref"] = spec.table

        return schema

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list(self, options: ListOptions) -> ListResponse:
        """
        List documents with search, filters, sorting and pagination.

        Raises:
            InvalidQueryError: If a filter, sort or select field is unknown
        """
        filters = self._check_query(options)

        rows, total = self.store.list_rows(
            self.table,
            filters=filters,
            search=options.q,
            search_fields=list(self.searchable),
            sort=options.sort_fields,
            skip=options.offset,
            limit=options.limit,
        )

        response = ListResponse.build(self.populate(rows), total, options)
        if options.select:
            keep = {"id", *options.select}
            response.data = [
                {key: value for key, value in row.items() if key in keep}
                for row in response.data
            ]
        return response

    def get_by_id(self, record_id: str | UUID) -> dict[str, Any]:
        """
        Get one populated document.

        Raises:
            RecordNotFoundError: If no document has this id
        """
        return self.populate([self._fetch_existing(record_id)])[0]

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create(self, body: dict[str, Any]) -> dict[str, Any]:
        """
        Validate and insert a new document.

        Raises:
            DocumentValidationError: If the body is invalid
            InvalidReferenceError: If a referenced id doesn't exist
            DuplicateRecordError: If the natural key is already taken
        """
        document = self.validate(body)
        row = self._insert(document)
        logger.info(f"Created {self.resource.lower()}: {row.get('id')}")
        return self.populate([row])[0]

    def patch(self, record_id: str | UUID, body: dict[str, Any]) -> dict[str, Any]:
        """
        Partially update a document; unspecified fields keep their values.
        """
        existing = self._fetch_existing(record_id)
        self._require_object(body)
        merged = {**existing, **body, "id": existing["id"]}
        document = self.validate(merged)
        row = self._update(existing, document)
        logger.info(f"Patched {self.resource.lower()}: {existing['id']}")
        return self.populate([row])[0]

    def put(self, record_id: str | UUID, body: dict[str, Any]) -> dict[str, Any]:
        """
        Replace a document; unspecified optional fields are reset to defaults.

        The id and creation time are preserved.
        """
        existing = self._fetch_existing(record_id)
        self._require_object(body)
        document = self.validate({**body, "id": existing["id"]})
        row = self._update(existing, document)
        logger.info(f"Replaced {self.resource.lower()}: {existing['id']}")
        return self.populate([row])[0]

    def delete(self, record_id: str | UUID) -> dict[str, Any]:
        """
        Hard delete a document and return it as it was.

        Dependent documents are not touched.
        """
        found = self.get_by_id(record_id)
        deleted = self.store.delete_row(self.table, found["id"])
        if deleted is None:
            raise RecordNotFoundError(self.resource, normalize_uuid(record_id))
        logger.info(f"Deleted {self.resource.lower()}: {found['id']}")
        return found

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(self, data: dict[str, Any]) -> AssessmentDocument:
        """
        Run schema validation, default derivation and reference checks.

        Raises:
            DocumentValidationError: If the data doesn't match the schema
            InvalidReferenceError: If a referenced id doesn't exist
        """
        self._require_object(data)
        try:
            document = self.document.validate_document(data, self.options)
        except ValidationError as e:
            raise DocumentValidationError.from_pydantic(self.resource, e)

        self.check_references(document)
        return document

    def _require_object(self, data: Any) -> None:
        if not isinstance(data, dict):
            raise DocumentValidationError(
                self.resource,
                [{"field": "__root__", "message": "Expected a JSON object", "type": "dict_type"}],
            )

    def check_references(self, document: AssessmentDocument) -> None:
        """Ensure every referenced id exists."""
        for spec in self.populates:
            value = getattr(document, spec.field)
            ids = [str(v) for v in value] if spec.many else ([str(value)] if value else [])
            if not ids:
                continue
            found = {str(row["id"]) for row in self.store.fetch_rows(spec.table, ids, ["id"])}
            missing = [i for i in dict.fromkeys(ids) if i not in found]
            if missing:
                raise InvalidReferenceError(self.resource, spec.field, missing)

    # -------------------------------------------------------------------------
    # Population
    # -------------------------------------------------------------------------

    def populate(self, rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """
        Replace reference ids with projections of the referenced documents.

        References are batch-fetched once per field for all rows. A dangling
        single reference becomes None; dangling list entries are dropped.
        """
        rows = [dict(row) for row in rows]

        for spec in self.populates:
            ids: list[str] = []
            for row in rows:
                value = row.get(spec.field)
                if spec.many:
                    ids.extend(str(v) for v in value or [])
                elif value:
                    ids.append(str(value))
            if not ids:
                continue

            fetched = self.store.fetch_rows(spec.table, ids, ["id", *spec.select])
            lookup = {
                str(ref["id"]): {key: ref.get(key) for key in ("id", *spec.select)}
                for ref in fetched
            }

            for row in rows:
                value = row.get(spec.field)
                if spec.many:
                    row[spec.field] = [lookup[str(v)] for v in value or [] if str(v) in lookup]
                elif value:
                    row[spec.field] = lookup.get(str(value))

        return rows

    # -------------------------------------------------------------------------
    # Upsert & Seeding
    # -------------------------------------------------------------------------

    def prepare_seed(self, seed: dict[str, Any]) -> dict[str, Any]:
        """Hook to complete a seed before its criteria are computed."""
        return dict(seed)

    def seed_criteria(self, seed: dict[str, Any]) -> dict[str, Any]:
        """
        Upsert criteria: the id when given, otherwise the natural key.

        Returns an empty dict when neither is complete (always inserts).
        """
        seed = self.prepare_seed(seed)
        if seed.get("id"):
            return {"id": str(seed["id"])}

        criteria = {}
        for field in self.natural_key:
            value = seed.get(field)
            if isinstance(value, str):
                value = value.strip()
            if value in (None, ""):
                return {}
            criteria[field] = value
        return criteria

    def upsert(self, seed: dict[str, Any]) -> dict[str, Any]:
        """
        Create or update the document matching a seed.

        When a document matches the seed criteria, its stored fields are the
        base and only the fields the seed supplies are laid over them (the
        seed wins). Values derived for matching, such as a question name
        computed from its label, are not written over stored ones.

        Returns:
            The persisted (unpopulated) row
        """
        criteria = self.seed_criteria(seed)
        found = self.store.find_row(self.table, criteria) if criteria else None

        if found is None:
            return self._insert(self.validate(self.prepare_seed(seed)))

        merged = {**found, **seed, "id": found["id"]}
        return self._update(found, self.validate(merged))

    def load_seeds(self) -> list[Any]:
        """
        Load seeds from `<seeds_dir>/<seed_name>.json`.

        A missing file (or unset location) yields no seeds.

        Raises:
            InvalidSeedFileError: If the file is not a JSON object or array
        """
        if not self.seeds_dir or not self.seed_name:
            return []

        path = Path(self.seeds_dir) / f"{self.seed_name}.json"
        if not path.is_file():
            logger.debug(f"No seed file for {self.resource.lower()} at {path}")
            return []

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise InvalidSeedFileError(str(path), str(e))

        if isinstance(data, dict):
            return [data]
        if isinstance(data, list):
            return data
        raise InvalidSeedFileError(str(path), "Expected a JSON object or array")

    async def seed(self, seeds: list[dict[str, Any]] | None = None) -> list[dict[str, Any]]:
        """
        Seed documents, idempotently.

        Explicit seeds and the seed file are merged, null entries and deep
        duplicates are dropped, then every seed is upserted. Upserts run
        concurrently; seeds sharing the same criteria run one after another
        within a single task so they can't race into a uniqueness conflict.

        Returns:
            Every persisted row

        Raises:
            The first upsert error. Rows already persisted are kept.
        """
        candidates = unique_records([*(seeds or []), *self.load_seeds()])
        if not candidates:
            return []

        for candidate in candidates:
            if not isinstance(candidate, dict):
                raise DocumentValidationError(
                    self.resource,
                    [{"field": "__root__", "message": "Seed must be a JSON object", "type": "dict_type"}],
                )

        seeded: list[dict[str, Any]] = []
        for stage in self.seed_stages(candidates):
            groups: dict[str, list[dict[str, Any]]] = {}
            for index, candidate in enumerate(stage):
                criteria = self.seed_criteria(candidate)
                key = json.dumps(criteria, sort_keys=True, default=str) if criteria else f"#{index}"
                groups.setdefault(key, []).append(candidate)

            results = await asyncio.gather(
                *(asyncio.to_thread(self._upsert_group, group) for group in groups.values())
            )
            seeded.extend(row for group in results for row in group)

        logger.info(f"Seeded {len(seeded)} {self.table}")
        return seeded

    def seed_stages(self, candidates: list[dict[str, Any]]) -> list[list[dict[str, Any]]]:
        """
        Split seeds into batches that must be persisted one after another.

        Seeds in one batch are upserted concurrently.
        """
        return [candidates]

    def _upsert_group(self, group: list[dict[str, Any]]) -> list[dict[str, Any]]:
        return [self.upsert(candidate) for candidate in group]

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _fetch_existing(self, record_id: str | UUID) -> dict[str, Any]:
        record_id_str = normalize_uuid(record_id)
        try:
            UUID(str(record_id_str))
        except ValueError:
            raise RecordNotFoundError(self.resource, str(record_id_str))

        row = self.store.fetch_row(self.table, record_id_str)
        if row is None:
            raise RecordNotFoundError(self.resource, str(record_id_str))
        return row

    def _insert(self, document: AssessmentDocument) -> dict[str, Any]:
        now = utc_now_iso()
        row = {**document.to_row(), "created_at": now, "updated_at": now}
        try:
            return self.store.insert_row(self.table, row)
        except DuplicateKeyError:
            raise DuplicateRecordError(self.resource, list(self.unique_fields) or ["id"])

    def _update(self, existing: dict[str, Any], document: AssessmentDocument) -> dict[str, Any]:
        row = document.to_row()
        row.pop("id", None)
        row["updated_at"] = utc_now_iso()
        try:
            updated = self.store.update_row(self.table, existing["id"], row)
        except DuplicateKeyError:
            raise DuplicateRecordError(self.resource, list(self.unique_fields) or ["id"])
        if updated is None:
            raise RecordNotFoundError(self.resource, str(existing["id"]))
        return updated

    def _check_query(self, options: ListOptions) -> dict[str, list[Any]]:
        unknown_filters = [f for f in options.filters if f not in self.filterable]
        if unknown_filters:
            raise InvalidQueryError(
                f"Cannot filter {self.table} by: {', '.join(unknown_filters)}",
                details={"allowed": list(self.filterable)},
            )

        unknown_sort = [f for f, _ in options.sort_fields if f not in self.fields]
        if unknown_sort:
            raise InvalidQueryError(
                f"Cannot sort {self.table} by: {', '.join(unknown_sort)}",
                details={"allowed": list(self.fields)},
            )

        unknown_select = [f for f in options.select if f not in self.fields]
        if unknown_select:
            raise InvalidQueryError(
                f"Cannot select from {self.table}: {', '.join(unknown_select)}",
                details={"allowed": list(self.fields)},
            )

        references = {"id", *(spec.field for spec in self.populates)}
        for field, values in options.filters.items():
            if field not in references:
                continue
            for value in values:
                try:
                    UUID(value)
                except ValueError:
                    raise InvalidQueryError(
                        f"Filter {field} expects ids, got: {value}",
                        details={"field": field},
                    )

        return dict(options.filters)
