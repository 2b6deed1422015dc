# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .resource_service import Collections, PopulateSpec, ResourceService
from .indicator_service import IndicatorService
from .question_service import QuestionService
from .questionnaire_service import QuestionnaireService
from .seed_service import seed_all

__all__ = [
    "Collections",
    "PopulateSpec",
    "ResourceService",
    "IndicatorService",
    "QuestionService",
    "QuestionnaireService",
    "seed_all",
]
