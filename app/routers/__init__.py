# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by resource:
# - health.py: Health check endpoints
# - resource.py: Shared CRUD router factory
# - indicators.py: Indicator endpoints
# - questions.py: Question endpoints
# - questionnaires.py: Questionnaire endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import indicators
from . import questions
from . import questionnaires

__all__ = [
    "health",
    "indicators",
    "questions",
    "questionnaires",
]
