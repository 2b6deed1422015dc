# =============================================================================
# core/models/common.py - Shared Document Schema Pieces
# =============================================================================
# Building blocks shared by the Indicator, Question and Questionnaire models:
# - AssessmentDocument: base class for validated, persisted documents
# - ClassifiedDocument: adds assess/stage/phase/type with configurable enums
# - Reference: an id field that also accepts a populated {"id": ...} object
#
# Enumerated values are not hard-coded in the models. They are read from the
# AssessmentOptions object passed as pydantic validation context:
#
#   IndicatorDocument.validate_document(body, options)
# =============================================================================

from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationInfo, field_validator

from .options import AssessmentOptions

DEFAULT_OPTIONS = AssessmentOptions()


def _reference_id(value: Any) -> Any:
    """Accept a populated reference ({"id": ...}) wherever an id is expected."""
    if isinstance(value, dict):
        return value.get("id")
    if isinstance(value, str) and not value.strip():
        return None
    return value


# An id of another document; populated projections are reduced back to their id
Reference = Annotated[UUID, BeforeValidator(_reference_id)]


def options_from(info: ValidationInfo) -> AssessmentOptions:
    """Assessment options carried in the validation context (defaults if absent)."""
    context = info.context or {}
    return context.get("options") or DEFAULT_OPTIONS


def check_choice(field: str, value: str, options: AssessmentOptions) -> str:
    """Ensure an enumerated field holds one of its configured values."""
    allowed = options.choices_for(field)
    if value not in allowed:
        raise ValueError(
            f"'{value}' is not a valid {field}; expected one of: {', '.join(allowed)}"
        )
    return value


class AssessmentDocument(BaseModel):
    """
    Base class for persisted assessment documents.

    Strings are trimmed, unknown keys (timestamps, populated extras) are
    ignored, and the system-assigned id is optional so seeds may supply one.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    id: UUID | None = Field(
        default=None,
        description="Unique identifier (system-assigned when omitted)"
    )

    @classmethod
    def validate_document(
        cls,
        data: dict[str, Any],
        options: AssessmentOptions | None = None,
    ) -> "AssessmentDocument":
        """
        Validate raw input against this model and the given value sets.

        Raises:
            pydantic.ValidationError: If any field is missing or invalid
        """
        return cls.model_validate(data, context={"options": options or DEFAULT_OPTIONS})

    def to_row(self) -> dict[str, Any]:
        """
        Serialize to a JSON-compatible row for the store.

        All declared fields are included (None for unset optionals) so that a
        full update resets them; the id is left out when not assigned yet.
        """
        row = self.model_dump(mode="json")
        if row.get("id") is None:
            row.pop("id", None)
        return row


class ClassifiedDocument(AssessmentDocument):
    """
    Document classified by assessment kind, stage, disaster phase and entry type.

    Each field falls back to its configured default when empty.
    """

    assess: str | None = Field(
        default=None,
        validate_default=True,
        description="Type of assessment (e.g. Need, Situation)"
    )

    stage: str | None = Field(
        default=None,
        validate_default=True,
        description="Stage under which the assessment applies (e.g. Before, During)"
    )

    phase: str | None = Field(
        default=None,
        validate_default=True,
        description="Disaster management phase (e.g. Response)"
    )

    type: str | None = Field(
        default=None,
        validate_default=True,
        description="Entry type (e.g. text, integer, select_one)"
    )

    @field_validator("assess", "stage", "phase", "type", mode="after")
    @classmethod
    def _check_classification(cls, value: str | None, info: ValidationInfo) -> str:
        options = options_from(info)
        if not value:
            value = options.default_for(info.field_name)
        return check_choice(info.field_name, value, options)
