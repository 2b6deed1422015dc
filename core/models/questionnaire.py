# =============================================================================
# core/models/questionnaire.py - Questionnaire Schemas
# =============================================================================
# A questionnaire is an ordered set of questions forming an assessment form.
# Questions are referenced by id; the order of `questions` is preserved.
# =============================================================================

from pydantic import Field

from .common import ClassifiedDocument, Reference


class QuestionnaireDocument(ClassifiedDocument):
    """
    Schema of a questionnaire as it is validated and stored.

    Example:
        {
            "assess": "Need",
            "stage": "During",
            "title": "Need Assessment",
            "questions": ["7d2f1c8b-4a2f-4d9b-8b3c-2e3f4a5b6c02"]
        }
    """

    title: str = Field(
        ...,
        min_length=1,
        description="Human readable title of the questionnaire"
    )

    label: str | None = Field(
        default=None,
        description="Human readable label of the questionnaire"
    )

    description: str | None = Field(
        default=None,
        description="Brief summary of the questionnaire"
    )

    questions: list[Reference] = Field(
        default_factory=list,
        description="Ordered ids of the questions in the questionnaire"
    )
