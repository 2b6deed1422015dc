# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - options.py: Enumerated value sets (subjects, assess, stages, phases, types)
# - common.py: Shared document base classes and reference fields
# - indicator.py: Indicator documents
# - question.py: Question documents and their embedded choices
# - questionnaire.py: Questionnaire documents
# - listing.py: List query options and the paginated list envelope
#
# These models define the "contract" between API and clients.
# =============================================================================

from .options import AssessmentOptions
from .common import AssessmentDocument, ClassifiedDocument, Reference
from .indicator import IndicatorDocument
from .question import Choice, QuestionDocument
from .questionnaire import QuestionnaireDocument
from .listing import ListOptions, ListResponse

# -----------------------------------------------------------------------------
# __all__ - Explicit public API
# -----------------------------------------------------------------------------
__all__ = [
    # Options
    "AssessmentOptions",
    # Documents
    "AssessmentDocument",
    "ClassifiedDocument",
    "Reference",
    "IndicatorDocument",
    "Choice",
    "QuestionDocument",
    "QuestionnaireDocument",
    # Listing
    "ListOptions",
    "ListResponse",
]
