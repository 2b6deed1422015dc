# =============================================================================
# core/services/question_service.py - Question Business Logic
# =============================================================================
# Questions are unique by name and reference exactly one indicator, which is
# populated as {id, subject, topic, color}.
# =============================================================================

from __future__ import annotations

from typing import Any

from core.models.question import QuestionDocument, derive_name_from_label

from .indicator_service import INDICATOR_PROJECTION
from .resource_service import PopulateSpec, ResourceService

# Fields shown wherever a question is populated
QUESTION_PROJECTION = ("assess", "stage", "phase", "type", "name", "label")


class QuestionService(ResourceService):
    """Service for question operations."""

    resource = "Question"
    document = QuestionDocument
    natural_key = ("name",)
    unique_fields = ("name",)
    searchable = ("assess", "stage", "phase", "type", "name", "label", "help")
    filterable = ("id", "indicator", "assess", "stage", "phase", "type", "name")

    @property
    def table(self) -> str:
        return self.collections.questions

    @property
    def populates(self) -> tuple[PopulateSpec, ...]:
        return (
            PopulateSpec(field="indicator", table=self.collections.indicators, select=INDICATOR_PROJECTION),
        )

    def prepare_seed(self, seed: dict[str, Any]) -> dict[str, Any]:
        """Seeds without a name are matched on the name derived from their label."""
        return derive_name_from_label(dict(seed))
