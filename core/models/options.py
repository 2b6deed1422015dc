# =============================================================================
# core/models/options.py - Assessment Value Sets
# =============================================================================
# Enumerated values accepted by indicators, questions and questionnaires.
#
# The defaults below can be overridden through environment variables (see
# app/config.py). The resulting AssessmentOptions object is immutable and is
# passed explicitly to models (as pydantic validation context) and services.
# =============================================================================

from dataclasses import dataclass

SUBJECTS = (
    "Population", "Geography", "Health", "Water",
    "Sanitation", "Food & Nutrition", "Shelter",
    "Livelihood", "Income", "Protection", "Education",
    "Basic Needs", "Transportation", "Communication", "Energy",
)

ASSESS_NEED = "Need"
ASSESS_SITUATION = "Situation"
DEFAULT_ASSESS = "Other"
ASSESS = (ASSESS_NEED, ASSESS_SITUATION, DEFAULT_ASSESS)

STAGE_BEFORE = "Before"
STAGE_DURING = "During"
STAGE_AFTER = "After"
DEFAULT_STAGE = "Other"
STAGES = (STAGE_BEFORE, STAGE_DURING, STAGE_AFTER, DEFAULT_STAGE)

DEFAULT_PHASE = "Response"
PHASES = ("Mitigation", "Preparedness", "Response", "Recovery")

DEFAULT_TYPE = "text"
QUESTION_TYPES = (
    "integer",
    "decimal",
    "text",
    "select_one",
    "select_multiple",
    "geopoint",
    "geotrace",
    "geoshape",
    "date",
    "time",
    "dateTime",
    "image",
    "audio",
    "video",
    "file",
)

# Entry types whose answers come from a question's choices
SELECT_TYPES = ("select_one", "select_multiple")


@dataclass(frozen=True)
class AssessmentOptions:
    """
    Allowed values and defaults for the enumerated assessment fields.

    Example:
        options = AssessmentOptions(subjects=("Water", "Health"))
        "Water" in options.subjects  # True
    """

    subjects: tuple[str, ...] = tuple(sorted(set(SUBJECTS)))
    assess: tuple[str, ...] = ASSESS
    stages: tuple[str, ...] = STAGES
    phases: tuple[str, ...] = PHASES
    types: tuple[str, ...] = QUESTION_TYPES

    default_assess: str = DEFAULT_ASSESS
    default_stage: str = DEFAULT_STAGE
    default_phase: str = DEFAULT_PHASE
    default_type: str = DEFAULT_TYPE

    def choices_for(self, field: str) -> tuple[str, ...]:
        """Allowed values for an enumerated document field."""
        return {
            "subject": self.subjects,
            "assess": self.assess,
            "stage": self.stages,
            "phase": self.phases,
            "type": self.types,
        }[field]

    def default_for(self, field: str) -> str | None:
        """Default value for an enumerated document field (None when required)."""
        return {
            "assess": self.default_assess,
            "stage": self.default_stage,
            "phase": self.default_phase,
            "type": self.default_type,
        }.get(field)
