# =============================================================================
# core/services/questionnaire_service.py - Questionnaire Business Logic
# =============================================================================
# Questionnaires hold an ordered list of question ids, populated as question
# projections in the same order. Seeds are matched by title.
# =============================================================================

from __future__ import annotations

from core.models.questionnaire import QuestionnaireDocument

from .question_service import QUESTION_PROJECTION
from .resource_service import PopulateSpec, ResourceService


class QuestionnaireService(ResourceService):
    """Service for questionnaire operations."""

    resource = "Questionnaire"
    document = QuestionnaireDocument
    natural_key = ("title",)
    searchable = ("assess", "stage", "phase", "type", "title", "label", "description")
    filterable = ("id", "assess", "stage", "phase", "type", "title")

    @property
    def table(self) -> str:
        return self.collections.questionnaires

    @property
    def populates(self) -> tuple[PopulateSpec, ...]:
        return (
            PopulateSpec(
                field="questions",
                table=self.collections.questions,
                select=QUESTION_PROJECTION,
                many=True,
            ),
        )
