# =============================================================================
# core/services/indicator_service.py - Indicator Business Logic
# =============================================================================
# Indicators are unique by (subject, topic) and may reference a base
# indicator, which is populated as {id, subject, topic, color}.
# =============================================================================

from __future__ import annotations

from typing import Any

from app.exceptions import DocumentValidationError
from core.models.common import AssessmentDocument
from core.models.indicator import IndicatorDocument

from .resource_service import PopulateSpec, ResourceService

# Fields shown wherever an indicator is populated
INDICATOR_PROJECTION = ("subject", "topic", "color")


class IndicatorService(ResourceService):
    """Service for indicator operations."""

    resource = "Indicator"
    document = IndicatorDocument
    natural_key = ("subject", "topic")
    unique_fields = ("subject", "topic")
    searchable = ("subject", "topic", "description")
    filterable = ("id", "base", "subject", "topic", "color")

    @property
    def table(self) -> str:
        return self.collections.indicators

    @property
    def populates(self) -> tuple[PopulateSpec, ...]:
        return (
            PopulateSpec(field="base", table=self.collections.indicators, select=INDICATOR_PROJECTION),
        )

    def check_references(self, document: AssessmentDocument) -> None:
        """An indicator can't be its own base."""
        if document.base is not None and document.id is not None and document.base == document.id:
            raise DocumentValidationError(
                self.resource,
                [{"field": "base", "message": "An indicator can't be its own base", "type": "value_error"}],
            )
        super().check_references(document)

    def seed_stages(self, candidates: list[dict[str, Any]]) -> list[list[dict[str, Any]]]:
        """
        Seed base indicators before the indicators derived from them.

        A seed is ready once its base is not among the pending seeds. Cycles
        (including self references) are left to validation to report.
        """
        stages = []
        pending = list(candidates)
        while pending:
            pending_ids = {str(seed["id"]) for seed in pending if seed.get("id")}
            ready = [seed for seed in pending if _base_id(seed) not in pending_ids]
            if not ready:
                ready = pending
            stages.append(ready)
            pending = [seed for seed in pending if not any(seed is r for r in ready)]
        return stages


def _base_id(seed: dict[str, Any]) -> str | None:
    base = seed.get("base")
    if isinstance(base, dict):
        base = base.get("id")
    return str(base) if base else None
